import re
from datetime import date
from typing import Callable, Dict, Optional

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from registration.schema import FORM_FIELDS, Gender, MaritalStatus, PhotoUpload, RegistrationDraft

ALLOWED_PHOTO_TYPES = frozenset({"image/jpeg", "image/png", "image/gif"})

_AGE = re.compile(r"-?[0-9]+")
_MOBILE = re.compile(r"[0-9]{10}")
_PINCODE = re.compile(r"[0-9]{6}")
_EMAIL = TypeAdapter(EmailStr)


class RegistrationValidator:
    """
    Field-by-field rules for a registration draft. There are no cross-field
    rules, so any single field can be checked on its own.
    """

    def __init__(self, today: Optional[Callable[[], date]] = None):
        self.today = today or date.today

    def validate(self, draft: RegistrationDraft) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        for field in FORM_FIELDS:
            message = self.validate_field(draft, field)
            if message is not None:
                errors[field] = message
        return errors

    def validate_field(self, draft: RegistrationDraft, field: str) -> Optional[str]:
        check = getattr(self, f"_check_{field}", None)
        if check is None:
            raise KeyError(f"Unknown form field: {field}")
        return check(getattr(draft, field))

    @staticmethod
    def _text(value: str, label: str, limit: int) -> Optional[str]:
        if value is None or value.strip() == "":
            return f"{label} is required"
        if len(value) > limit:
            return f"{label} cannot exceed {limit} characters"
        return None

    def _check_name(self, value: str) -> Optional[str]:
        return self._text(value, "Name", 100)

    def _check_age(self, value: str) -> Optional[str]:
        if value is None or value.strip() == "":
            return "Age is required"
        if not _AGE.fullmatch(value.strip()):
            return "Age must be a whole number"
        age = int(value.strip())
        if age < 1:
            return "Age must be at least 1"
        if age > 120:
            return "Age cannot exceed 120"
        return None

    def _check_date_of_birth(self, value: str) -> Optional[str]:
        if value is None or value.strip() == "":
            return "Date of birth is required"
        try:
            born = date.fromisoformat(value.strip())
        except ValueError:
            return "Date of birth must be a valid date (YYYY-MM-DD)"
        if born > self.today():
            return "Date of birth must be in the past"
        return None

    def _check_gender(self, value: str) -> Optional[str]:
        if not value:
            return "Gender is required"
        if value not in {g.value for g in Gender}:
            return "Gender must be one of Male, Female, Other"
        return None

    def _check_mobile_number(self, value: str) -> Optional[str]:
        if not value:
            return "Mobile number is required"
        if not _MOBILE.fullmatch(value):
            return "Mobile number must be 10 digits"
        return None

    def _check_email(self, value: str) -> Optional[str]:
        if value is None or value.strip() == "":
            return "Email is required"
        try:
            _EMAIL.validate_python(value.strip())
        except PydanticValidationError:
            return "Invalid email"
        return None

    def _check_address(self, value: str) -> Optional[str]:
        return self._text(value, "Address", 500)

    def _check_state(self, value: str) -> Optional[str]:
        return self._text(value, "State", 50)

    def _check_pincode(self, value: str) -> Optional[str]:
        if not value:
            return "Pincode is required"
        if not _PINCODE.fullmatch(value):
            return "Pincode must be 6 digits"
        return None

    def _check_occupation(self, value: str) -> Optional[str]:
        return self._text(value, "Occupation", 100)

    def _check_marital_status(self, value: str) -> Optional[str]:
        if not value:
            return "Marital status is required"
        if value not in {m.value for m in MaritalStatus}:
            return "Marital status must be one of Single, Married, Divorced, Widowed"
        return None

    @staticmethod
    def _check_photo(value: Optional[PhotoUpload]) -> Optional[str]:
        if value is None:
            return None
        if value.content_type not in ALLOWED_PHOTO_TYPES:
            return "Only image files are allowed"
        return None
