import logging
import re
from typing import Optional, Union

import aiohttp

from config.backend import BackendConfig
from persistence.registration_client import RegistrationClient
from registration.form import RegistrationFormController
from registration.listing import RegistrationListController

logger = logging.getLogger(__name__)

Controller = Union[RegistrationListController, RegistrationFormController]

_EDIT_ROUTE = re.compile(r"/edit/(?P<id>[^/]+)")


class NavigationShell:
    """
    Routes between the list view ("/"), the create form ("/create") and the
    edit form ("/edit/<id>"). Only one controller is live at a time.
    """

    def __init__(self, client, config: BackendConfig, session: Optional[aiohttp.ClientSession] = None):
        self.client = client
        self.config = config
        self.current_path: Optional[str] = None
        self.controller: Optional[Controller] = None
        self._session = session

    @classmethod
    def from_config(cls, config: BackendConfig) -> "NavigationShell":
        session = aiohttp.ClientSession()
        return cls(RegistrationClient(session, config), config, session=session)

    @property
    def view(self) -> Optional[str]:
        if isinstance(self.controller, RegistrationListController):
            return "list"
        if isinstance(self.controller, RegistrationFormController):
            return "form"
        return None

    async def start(self) -> None:
        await self.navigate("/")

    async def navigate(self, path: str) -> Controller:
        controller = self._route(path)

        if self.controller is not None:
            self.controller.close()
        self.controller = controller
        self.current_path = path
        logger.info(f"Navigated to {path}")

        if isinstance(controller, RegistrationListController):
            await controller.activate()
        else:
            await controller.open()
        return controller

    async def aclose(self) -> None:
        if self.controller is not None:
            self.controller.close()
            self.controller = None
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "NavigationShell":
        try:
            await self.start()
        except BaseException:
            await self.aclose()
            raise
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    def _route(self, path: str) -> Controller:
        if path == "/":
            return RegistrationListController(self.client, self.config, self.navigate)
        if path == "/create":
            return RegistrationFormController(self.client, self.config, self.navigate)
        match = _EDIT_ROUTE.fullmatch(path)
        if match:
            return RegistrationFormController(
                self.client, self.config, self.navigate, registration_id=match.group("id")
            )
        raise LookupError(f"No route for {path}")
