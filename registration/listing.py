import logging
from typing import Any, Awaitable, Callable, List, Optional, Protocol

from config.backend import BackendConfig
from registration.errors import RegistrationError, describe
from registration.schema import Registration

logger = logging.getLogger(__name__)


class RegistrationIndex(Protocol):
    async def list(self) -> List[Registration]: ...

    async def delete(self, registration_id: str) -> Any: ...


class RegistrationListController:
    """
    Owns the snapshot of registrations shown in the list view and the
    delete confirmation step.
    """

    def __init__(
        self,
        client: RegistrationIndex,
        config: BackendConfig,
        navigate: Callable[[str], Awaitable[None]],
    ):
        self.client = client
        self.config = config
        self.snapshot: List[Registration] = []
        self.pending: Optional[Registration] = None
        self.notice: Optional[str] = None
        self.deleting = False

        self._navigate = navigate
        self._active = True

    @property
    def confirming(self) -> bool:
        return self.pending is not None

    @property
    def confirmation_message(self) -> Optional[str]:
        if self.pending is None:
            return None
        return f"Are you sure you want to delete the registration for {self.pending.name}?"

    def photo_url(self, record: Registration) -> Optional[str]:
        return self.config.photo_url(record.photo)

    async def activate(self) -> None:
        try:
            records = await self.client.list()
        except RegistrationError as e:
            if self._active:
                self.snapshot = []
                self._report(e)
            return
        if not self._active:
            return
        self.snapshot = records
        logger.info(f"Loaded {len(records)} registrations")

    async def create(self) -> None:
        await self._navigate("/create")

    async def edit(self, record: Registration) -> None:
        if record.id is None:
            raise ValueError("Only persisted registrations can be edited")
        await self._navigate(f"/edit/{record.id}")

    def request_delete(self, record: Registration) -> None:
        if self.deleting:
            return
        self.pending = record

    def cancel_delete(self) -> None:
        if self.deleting:
            return
        self.pending = None

    async def confirm_delete(self) -> bool:
        if self.pending is None or self.deleting:
            return False

        target = self.pending
        self.deleting = True
        self.notice = None
        try:
            await self.client.delete(target.id)
        except RegistrationError as e:
            if self._active:
                self._report(e)
            return False
        finally:
            self.deleting = False

        if not self._active:
            return False
        self.snapshot = [r for r in self.snapshot if r.id != target.id]
        self.pending = None
        return True

    def close(self) -> None:
        self._active = False

    def _report(self, error: RegistrationError) -> None:
        self.notice = describe(error)
        logger.warning(f"Registration list: {self.notice}")
