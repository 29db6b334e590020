import mimetypes
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class MaritalStatus(str, Enum):
    SINGLE = "Single"
    MARRIED = "Married"
    DIVORCED = "Divorced"
    WIDOWED = "Widowed"


GENDER_OPTIONS: List[Dict[str, str]] = [{"value": g.value, "label": g.value} for g in Gender]
MARITAL_STATUS_OPTIONS: List[Dict[str, str]] = [
    {"value": m.value, "label": m.value} for m in MaritalStatus
]

# form field -> wire name, in submission order. Adding a field here is a schema change.
SUBMITTABLE_FIELDS: Dict[str, str] = {
    "name": "name",
    "age": "age",
    "date_of_birth": "dateOfBirth",
    "gender": "gender",
    "mobile_number": "mobileNumber",
    "email": "email",
    "address": "address",
    "state": "state",
    "pincode": "pincode",
    "occupation": "occupation",
    "marital_status": "maritalStatus",
}

PHOTO_FIELD = "photo"
FORM_FIELDS: Tuple[str, ...] = tuple(SUBMITTABLE_FIELDS) + (PHOTO_FIELD,)

_BY_WIRE_NAME = {wire: field for field, wire in SUBMITTABLE_FIELDS.items()}


def resolve_field(name: str) -> str:
    """Accept either the python or the wire spelling of a form field."""
    if name in FORM_FIELDS:
        return name
    if name in _BY_WIRE_NAME:
        return _BY_WIRE_NAME[name]
    raise KeyError(f"Unknown form field: {name}")


class PhotoUpload(BaseModel):
    """A file chosen by the user, held in memory until submission."""

    model_config = ConfigDict(frozen=True)

    filename: str
    content_type: str = Field(description="Declared media type, e.g. image/png")
    content: bytes = Field(repr=False)

    @classmethod
    def from_path(cls, path: "str | Path", content_type: Optional[str] = None) -> "PhotoUpload":
        p = Path(path)
        guessed, _ = mimetypes.guess_type(p.name)
        return cls(
            filename=p.name,
            content_type=content_type or guessed or "application/octet-stream",
            content=p.read_bytes(),
        )


class Registration(BaseModel):
    """A registration as the backend returns it."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    id: Optional[str] = Field(default=None, alias="_id")
    name: Optional[str] = None
    age: Optional[int] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    mobile_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    occupation: Optional[str] = None
    marital_status: Optional[str] = None
    photo: Optional[str] = Field(default=None, description="Backend-relative photo path")

    @property
    def is_persisted(self) -> bool:
        return self.id is not None


class RegistrationDraft(BaseModel):
    """
    The in-flight record edited by the form. Scalar fields hold the raw
    text the user typed; the validator decides whether it is acceptable.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = ""
    age: str = ""
    date_of_birth: str = ""
    gender: str = ""
    mobile_number: str = ""
    email: str = ""
    address: str = ""
    state: str = ""
    pincode: str = ""
    occupation: str = ""
    marital_status: str = ""
    photo: Optional[PhotoUpload] = None

    @classmethod
    def from_registration(cls, record: Registration) -> "RegistrationDraft":
        values: Dict[str, str] = {}
        for field in SUBMITTABLE_FIELDS:
            raw = getattr(record, field)
            if raw is None:
                continue
            text = str(raw)
            if field == "date_of_birth" and "T" in text:
                # backends commonly return midnight ISO datetimes
                text = text.split("T", 1)[0]
            values[field] = text
        return cls(**values)

    def scalar_items(self) -> List[Tuple[str, str]]:
        """(wire name, value) pairs for every submittable scalar field, surrounding whitespace removed."""
        return [(wire, getattr(self, field).strip()) for field, wire in SUBMITTABLE_FIELDS.items()]
