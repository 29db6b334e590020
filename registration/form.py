import logging
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional, Protocol, Set

from config.backend import BackendConfig
from registration.errors import RegistrationError, ValidationError, describe
from registration.graph import RegistrationWriter, SubmissionGraphFactory, run_submission
from registration.photo import PhotoField
from registration.schema import (
    FORM_FIELDS,
    PHOTO_FIELD,
    PhotoUpload,
    Registration,
    RegistrationDraft,
    resolve_field,
)
from registration.validator import RegistrationValidator

logger = logging.getLogger(__name__)

Navigate = Callable[[str], Awaitable[None]]


class RegistrationSource(RegistrationWriter, Protocol):
    async def fetch_one(self, registration_id: str) -> Registration: ...


class FormState(str, Enum):
    EMPTY = "empty"
    HYDRATING = "hydrating"
    READY = "ready"
    SUBMITTING = "submitting"
    DONE = "done"
    UNAVAILABLE = "unavailable"


class RegistrationFormController:
    """
    Create/edit form for one registration.

    EMPTY -> READY in create mode, EMPTY -> HYDRATING -> READY in edit mode.
    A failed fetch leaves the form UNAVAILABLE. Submitting goes through the
    submission graph and ends in DONE (navigates to the list) or back in READY.
    """

    def __init__(
        self,
        client: RegistrationSource,
        config: BackendConfig,
        navigate: Navigate,
        registration_id: Optional[str] = None,
        validator: Optional[RegistrationValidator] = None,
    ):
        self.client = client
        self.config = config
        self.registration_id = registration_id
        self.validator = validator or RegistrationValidator()

        self.state = FormState.EMPTY
        self.draft = RegistrationDraft()
        self.initial = self.draft
        self.errors: Dict[str, str] = {}
        self.touched: Set[str] = set()
        self.notice: Optional[str] = None
        self.photo = PhotoField(config)

        self._navigate = navigate
        self._graph = SubmissionGraphFactory(self.validator, client).compile()
        self._active = True

    @property
    def is_edit_mode(self) -> bool:
        return self.registration_id is not None

    @property
    def title(self) -> str:
        return "Edit Registration" if self.is_edit_mode else "Create Registration"

    @property
    def submit_label(self) -> str:
        return "Update" if self.is_edit_mode else "Submit"

    @property
    def can_submit(self) -> bool:
        return self.state is FormState.READY

    @property
    def dirty(self) -> bool:
        return self.draft != self.initial

    @property
    def visible_errors(self) -> Dict[str, str]:
        return {f: m for f, m in self.errors.items() if f in self.touched}

    async def open(self) -> None:
        if not self.is_edit_mode:
            self._ready()
            return

        self.state = FormState.HYDRATING
        try:
            record = await self.client.fetch_one(self.registration_id)
        except RegistrationError as e:
            if self._active:
                self._report(e)
                self.state = FormState.UNAVAILABLE
            return

        if not self._active:
            logger.debug(f"Form for {self.registration_id} closed before fetch completed")
            return
        self.draft = RegistrationDraft.from_registration(record)
        self.photo.show_existing(record.photo)
        self._ready()

    def change(self, field: str, value: str) -> None:
        field = resolve_field(field)
        if field == PHOTO_FIELD:
            raise ValueError("Use select_photo()/clear_photo() for the photo field")
        self._require_editable()
        self.draft = self.draft.model_copy(update={field: value})
        self._revalidate(field)

    def blur(self, field: str) -> None:
        self.touched.add(resolve_field(field))

    def select_photo(self, upload: PhotoUpload) -> None:
        self._require_editable()
        self.photo.select(upload)
        self.draft = self.draft.model_copy(update={PHOTO_FIELD: upload})
        self._revalidate(PHOTO_FIELD)

    def clear_photo(self) -> None:
        self._require_editable()
        self.photo.clear()
        self.draft = self.draft.model_copy(update={PHOTO_FIELD: None})
        self._revalidate(PHOTO_FIELD)

    async def submit(self) -> bool:
        if not self.can_submit:
            logger.warning(f"Submit ignored while form is {self.state.value}")
            return False

        errors = self.validator.validate(self.draft)
        if errors:
            self._block(errors)
            return False

        self.state = FormState.SUBMITTING
        self.notice = None
        try:
            result = await run_submission(self._graph, self.draft, self.registration_id)
        except Exception:
            self.state = FormState.READY
            raise

        if not self._active:
            logger.debug("Form closed before submission completed")
            return False

        if result.outcome == "blocked":
            self.state = FormState.READY
            self._block(result.errors)
            return False

        if result.outcome == "failed":
            self._report(result.failure)
            self.state = FormState.READY
            return False

        self.state = FormState.DONE
        await self._navigate("/")
        return True

    async def cancel(self) -> None:
        await self._navigate("/")

    def close(self) -> None:
        self._active = False
        self.photo.close()

    def _ready(self) -> None:
        self.initial = self.draft
        self.state = FormState.READY

    def _block(self, errors: Dict[str, str]) -> None:
        self.errors = dict(errors)
        self.touched.update(FORM_FIELDS)
        logger.warning(f"Submission blocked by {len(self.errors)} invalid field(s)")

    def _require_editable(self) -> None:
        if self.state is not FormState.READY:
            raise RuntimeError(f"Form is not editable while {self.state.value}")

    def _revalidate(self, field: str) -> None:
        message = self.validator.validate_field(self.draft, field)
        if message is None:
            self.errors.pop(field, None)
        else:
            self.errors[field] = message
        self.touched.add(field)

    def _report(self, error: RegistrationError) -> None:
        self.notice = describe(error)
        logger.warning(f"Registration form: {self.notice}")
        if isinstance(error, ValidationError):
            for name, message in error.errors.items():
                try:
                    field = resolve_field(name)
                except KeyError:
                    continue
                self.errors[field] = message
                self.touched.add(field)
