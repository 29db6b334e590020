from typing import Dict, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from registration.errors import RegistrationError
from registration.schema import Registration, RegistrationDraft


class SubmissionState(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    draft: RegistrationDraft
    registration_id: Optional[str] = Field(default=None, description="Set in edit mode")

    errors: Dict[str, str] = Field(default_factory=dict)
    outcome: Optional[Literal["blocked", "saved", "failed"]] = None
    saved: Optional[Registration] = None
    failure: Optional[RegistrationError] = None
