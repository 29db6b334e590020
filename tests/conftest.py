import sys
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# allow running the suite from any working directory
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.backend import BackendConfig
from registration.errors import NotFound, RegistrationError
from registration.schema import Registration, RegistrationDraft
from registration.validator import RegistrationValidator

TODAY = date(2024, 6, 15)

VALID_VALUES: Dict[str, str] = {
    "name": "Priya Sharma",
    "age": "34",
    "date_of_birth": "1990-05-14",
    "gender": "Female",
    "mobile_number": "9876543210",
    "email": "priya.sharma@gmail.com",
    "address": "12 MG Road, Indiranagar",
    "state": "Karnataka",
    "pincode": "560038",
    "occupation": "Engineer",
    "marital_status": "Married",
}

STORED = {
    "_id": "665f1c2e9b1d",
    "name": "Priya Sharma",
    "age": 34,
    "dateOfBirth": "1990-05-14T00:00:00.000Z",
    "gender": "Female",
    "mobileNumber": "9876543210",
    "email": "priya.sharma@gmail.com",
    "address": "12 MG Road, Indiranagar",
    "state": "Karnataka",
    "pincode": "560038",
    "occupation": "Engineer",
    "maritalStatus": "Married",
    "photo": "uploads/priya.png",
    "__v": 0,
}


class FakeRegistrationClient:
    """In-memory stand-in for RegistrationClient that records every call."""

    def __init__(self, records: Optional[List[Registration]] = None):
        self.records = {r.id: r for r in (records or [])}
        self.calls: List[tuple] = []
        self.fail_with: Dict[str, RegistrationError] = {}
        self._next_id = 1

    def _maybe_fail(self, op: str):
        if op in self.fail_with:
            raise self.fail_with[op]

    async def list(self):
        self.calls.append(("list",))
        self._maybe_fail("list")
        return list(self.records.values())

    async def fetch_one(self, registration_id):
        self.calls.append(("fetch_one", registration_id))
        self._maybe_fail("fetch_one")
        if registration_id not in self.records:
            raise NotFound(f"No registration {registration_id}", status=404)
        return self.records[registration_id]

    async def create(self, draft):
        self.calls.append(("create", draft))
        self._maybe_fail("create")
        record = Registration(id=f"new-{self._next_id}", name=draft.name)
        self._next_id += 1
        self.records[record.id] = record
        return record

    async def update(self, registration_id, draft):
        self.calls.append(("update", registration_id, draft))
        self._maybe_fail("update")
        record = Registration(id=registration_id, name=draft.name)
        self.records[registration_id] = record
        return record

    async def delete(self, registration_id):
        self.calls.append(("delete", registration_id))
        self._maybe_fail("delete")
        if registration_id not in self.records:
            raise NotFound(f"No registration {registration_id}", status=404)
        del self.records[registration_id]
        return {"message": "Registration deleted"}

    def ops(self):
        return [c[0] for c in self.calls]


class RecordingNavigator:
    def __init__(self):
        self.paths: List[str] = []

    async def __call__(self, path: str) -> None:
        self.paths.append(path)


@pytest.fixture
def config():
    return BackendConfig(api_url="http://backend.test", static_url="http://static.test")


@pytest.fixture
def validator():
    return RegistrationValidator(today=lambda: TODAY)


@pytest.fixture
def valid_draft():
    return RegistrationDraft(**VALID_VALUES)


@pytest.fixture
def stored_record():
    return Registration.model_validate(STORED)


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest.fixture
def make_client():
    return FakeRegistrationClient


@pytest.fixture
def fake_client(stored_record):
    return FakeRegistrationClient([stored_record])
