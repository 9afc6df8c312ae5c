"""
Shared fixtures: the app runs on the in-memory store, each test gets a fresh
service graph, tokens are signed the way the auth service signs them.
"""
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["STORE_BACKEND"] = "memory"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from leavedesk.config import settings
from leavedesk.main import app
from leavedesk.services import Services, get_services
from leavedesk.stores.memory_store import MemoryRecordStore


def make_token(user_id: str, role: str = "employee", expires_in: timedelta = timedelta(hours=1)) -> str:
    payload = {
        "data": {"sub": user_id, "role": role},
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


class FakeChannel:
    """Stands in for a websocket: records every pushed payload."""

    def __init__(self):
        self.sent = []

    async def send_json(self, payload):
        self.sent.append(payload)


class BrokenChannel:
    async def send_json(self, payload):
        raise ConnectionError("socket closed")


@pytest.fixture
def services():
    return Services(MemoryRecordStore(), settings.default_balances())


@pytest.fixture
def auth_headers():
    def _headers(user_id: str, role: str = "employee") -> dict:
        return {"Authorization": f"Bearer {make_token(user_id, role)}"}
    return _headers


@pytest.fixture
def client(services):
    app.dependency_overrides[get_services] = lambda: services
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def employee(client, auth_headers):
    headers = auth_headers("emp-1")
    r = client.post("/users", json={"name": "Ada Lovelace", "email": "ada@example.com"}, headers=headers)
    assert r.status_code == 201
    return headers


@pytest.fixture
def admin(client, auth_headers):
    headers = auth_headers("admin-1", role="admin")
    r = client.post("/users", json={"name": "Grace Hopper", "email": "grace@example.com"}, headers=headers)
    assert r.status_code == 201
    return headers


@pytest.fixture
def channel():
    return FakeChannel()


@pytest.fixture
def broken_channel():
    return BrokenChannel()
