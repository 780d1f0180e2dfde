from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from tasktracker import errors
from tasktracker.config import Settings
from tasktracker.main import create_app

# the session cookie is Secure, so the client has to speak https
BASE_URL = "https://testserver"


class FakeVerifier:
    """Maps known ID tokens to payloads; anything else fails verification."""

    def __init__(self):
        self.payloads: dict[str, dict] = {}

    def verify(self, token: str) -> dict:
        if token not in self.payloads:
            raise errors.ExternalVerificationFailure("Invalid Google Token")
        return self.payloads[token]


@pytest.fixture
def settings():
    return Settings(
        jwt_secret="test-secret",
        database_url="sqlite://",
        pbkdf2_iters=1000,
        log_level="WARNING",
    )


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield eng
    eng.dispose()


@pytest.fixture
def verifier():
    return FakeVerifier()


@pytest.fixture
def app(settings, engine, verifier):
    return create_app(settings=settings, engine=engine, verifier=verifier)


@pytest.fixture
def make_client(app):
    clients = []

    def _make():
        c = TestClient(app, base_url=BASE_URL)
        c.__enter__()
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()


def _register(client: TestClient, email: str, password: str = "secret123") -> dict:
    r = client.post("/api/auth/register", json={"email": email, "password": password})
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def register():
    return _register


@pytest.fixture
def alice(make_client):
    c = make_client()
    _register(c, "alice@example.com")
    return c


@pytest.fixture
def bob(make_client):
    c = make_client()
    _register(c, "bob@example.com")
    return c
