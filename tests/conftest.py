import os

# Pas de Redis ni de vraie base pendant les tests
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")
os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import itertools
import pytest
from typing import Any, Dict, Generator, List, Optional
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from brave_backend.app import app as fastapi_app
from brave_backend.bkash.models import AccessToken, CreatedPayment, ExecutionResult
from brave_backend.bkash.service import pending_checkouts
from brave_backend.errors import DuplicateRegistrationError, GatewayAuthError, PersistenceError, UidCollisionError

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture(autouse=True)
def _no_real_supabase(monkeypatch):
    """Aucun test ne doit ouvrir de connexion Supabase réelle."""
    monkeypatch.setattr("brave_backend.infra.supabase_client.get_supabase", lambda: MagicMock())
    monkeypatch.setattr("brave_backend.infra.supabase_client.get_service_supabase", lambda: MagicMock())

@pytest.fixture(autouse=True)
def _clear_pending_checkouts():
    pending_checkouts.clear()
    yield
    pending_checkouts.clear()


class FakeStore:
    """Tables en mémoire qui remplacent les fonctions des repositories."""

    def __init__(self):
        self.courses: List[Dict[str, Any]] = []
        self.schedule: List[Dict[str, Any]] = []
        self.registrations: List[Dict[str, Any]] = []
        self.fail_inserts = False
        self.last_filters: Dict[str, Any] = {}
        self._ids = itertools.count(1)

    @staticmethod
    def _match(row: Dict[str, Any], filters: Optional[Dict[str, Any]]) -> bool:
        return all(row.get(k) == v for k, v in (filters or {}).items())

    def find_courses(self, filters=None):
        self.last_filters = dict(filters or {})
        return [dict(c) for c in self.courses if self._match(c, filters)]

    def find_schedule(self, filters=None):
        self.last_filters = dict(filters or {})
        return [dict(s) for s in self.schedule if self._match(s, filters)]

    def find_registration(self, course_id, name, phone):
        for r in self.registrations:
            if (r["course"], r["name"], r["phone"]) == (course_id, name, phone):
                return dict(r)
        return None

    def insert_registration(self, record):
        if self.fail_inserts:
            raise PersistenceError("Failed to insert in DB")
        if any(r.get("uid") == record["uid"] for r in self.registrations):
            raise UidCollisionError(record["uid"])
        if self.find_registration(record["course"], record["name"], record["phone"]):
            raise DuplicateRegistrationError()
        row = {**record, "id": next(self._ids)}
        self.registrations.append(row)
        return row["id"]


@pytest.fixture
def fake_store(monkeypatch) -> FakeStore:
    store = FakeStore()
    monkeypatch.setattr("brave_backend.catalog.repository.find_courses", store.find_courses)
    monkeypatch.setattr("brave_backend.catalog.repository.find_schedule", store.find_schedule)
    monkeypatch.setattr("brave_backend.registrations.repository.find_registration", store.find_registration)
    monkeypatch.setattr("brave_backend.registrations.repository.insert_registration", store.insert_registration)
    return store


class FakeBkash:
    """Passerelle bKash simulée: enregistre les appels, paymentID séquentiels P1, P2, ..."""

    def __init__(self):
        self.execute_status_code = "0000"
        self.execute_error: Optional[Exception] = None
        self.grant_error: Optional[Exception] = None
        self.granted: List[AccessToken] = []
        self.created: List[Dict[str, Any]] = []
        self.executed: List[Dict[str, Any]] = []
        self._seq = itertools.count(1)

    async def grant_token(self, credentials=None, **kwargs):
        if self.grant_error:
            raise self.grant_error
        token = AccessToken(id_token=f"token-{len(self.granted) + 1}", token_type="Bearer", expires_in=3600)
        self.granted.append(token)
        return token

    async def create_payment(self, token, amount, currency, callback_url, invoice_ref, **kwargs):
        payment_id = f"P{next(self._seq)}"
        self.created.append({
            "token": token,
            "amount": amount,
            "currency": currency,
            "callback_url": callback_url,
            "invoice_ref": invoice_ref,
            "payment_id": payment_id,
        })
        return CreatedPayment(payment_id=payment_id, bkash_url=f"https://sandbox.bka.sh/pay/{payment_id}")

    async def execute_payment(self, token, payment_id, **kwargs):
        self.executed.append({"token": token, "payment_id": payment_id})
        if self.execute_error:
            raise self.execute_error
        return ExecutionResult(
            status_code=self.execute_status_code,
            status_message="Successful" if self.execute_status_code == "0000" else "Declined",
            trx_id="TRX123",
        )


@pytest.fixture
def fake_bkash(monkeypatch) -> FakeBkash:
    gateway = FakeBkash()
    monkeypatch.setattr("brave_backend.bkash.client.grant_token", gateway.grant_token)
    monkeypatch.setattr("brave_backend.bkash.client.create_payment", gateway.create_payment)
    monkeypatch.setattr("brave_backend.bkash.client.execute_payment", gateway.execute_payment)
    return gateway


@pytest.fixture
def auth_failure():
    return GatewayAuthError("bKash token grant rejected (HTTP 401)", status_code=401)
