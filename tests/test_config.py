# tests/test_config.py

from config.backend import BackendConfig
from registration.schema import Registration, RegistrationDraft, resolve_field


def test_from_env(monkeypatch):
    monkeypatch.setenv("REGISTRATION_API_URL", "http://api.example:8000/")
    monkeypatch.setenv("REGISTRATION_STATIC_URL", "http://cdn.example")
    monkeypatch.setenv("REGISTRATION_API_TIMEOUT", "2.5")

    cfg = BackendConfig.from_env()

    assert cfg.registrations_url == "http://api.example:8000/api/registrations"
    assert cfg.static_url == "http://cdn.example"
    assert cfg.timeout == 2.5


def test_defaults(monkeypatch):
    for name in ("REGISTRATION_API_URL", "REGISTRATION_STATIC_URL", "REGISTRATION_API_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)

    cfg = BackendConfig.from_env()

    assert cfg.registrations_url == "http://localhost:8000/api/registrations"
    assert cfg.photo_url("uploads/a.png") == "http://localhost:8000/uploads/a.png"


def test_photo_url(config):
    assert config.photo_url("/uploads/a.png") == "http://static.test/uploads/a.png"
    assert config.photo_url("https://img.example/a.png") == "https://img.example/a.png"
    assert config.photo_url("") is None
    assert config.photo_url(None) is None


def test_registration_from_wire(stored_record):
    assert stored_record.id == "665f1c2e9b1d"
    assert stored_record.is_persisted
    assert stored_record.mobile_number == "9876543210"
    assert stored_record.marital_status == "Married"
    assert stored_record.age == 34


def test_unsaved_registration_has_no_id():
    assert not Registration(name="New").is_persisted


def test_numeric_wire_values_become_text():
    record = Registration.model_validate({"_id": 7, "mobileNumber": 9876543210, "pincode": 560038})
    assert record.id == "7"
    assert record.mobile_number == "9876543210"
    assert record.pincode == "560038"


def test_draft_from_registration(stored_record):
    draft = RegistrationDraft.from_registration(stored_record)

    assert draft.age == "34"
    assert draft.date_of_birth == "1990-05-14"
    assert draft.mobile_number == "9876543210"
    assert draft.photo is None


def test_scalar_items_follow_declared_order(valid_draft):
    names = [name for name, _ in valid_draft.scalar_items()]
    assert names == [
        "name", "age", "dateOfBirth", "gender", "mobileNumber", "email",
        "address", "state", "pincode", "occupation", "maritalStatus",
    ]


def test_scalar_items_trim_surrounding_whitespace(valid_draft):
    draft = valid_draft.model_copy(update={"age": " 34 ", "email": " priya.sharma@gmail.com "})
    items = dict(draft.scalar_items())
    assert items["age"] == "34"
    assert items["email"] == "priya.sharma@gmail.com"


def test_resolve_field_accepts_both_spellings():
    assert resolve_field("dateOfBirth") == "date_of_birth"
    assert resolve_field("date_of_birth") == "date_of_birth"
    assert resolve_field("photo") == "photo"
