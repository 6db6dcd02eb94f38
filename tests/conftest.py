"""
tests/conftest.py -- Shared test fixtures for the auth API.

This module provides:
  - FakeUserStore: in-memory CredentialStore for service unit tests
  - hasher / issuer / fake_store / service: unit-level collaborators
  - _patch_lifespan(): wires test components into app.state, bypassing real startup
  - api_client: TestClient over the real app with an isolated SQLite store

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. The named URI shares one in-memory instance across all connections.

Environment must be set before any api/ or core/ import: DEBUG=true lets
Settings auto-generate secrets, rate limiting is switched off so scenario
tests can repeat requests, and bcrypt runs at its minimum cost.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

os.environ.setdefault("DEBUG", "true")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["FRONTEND_URL"] = "http://localhost:3000"

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.errors import DuplicateEmailError
from auth.models import User
from auth.passwords import PasswordHasher
from auth.service import AuthService
from auth.store import UserStore, normalize_email
from auth.tokens import TokenIssuer

ACCESS_SECRET = "access-secret-for-tests-0123456789abcdef"
REFRESH_SECRET = "refresh-secret-for-tests-0123456789abcdef"

# ---------------------------------------------------------------------------
# In-memory store
# ---------------------------------------------------------------------------


class FakeUserStore:
    """Dict-backed CredentialStore with the same contract as UserStore."""

    def __init__(self) -> None:
        self.users: dict[str, User] = {}

    def create_user(self, user: User) -> str:
        email = normalize_email(user.email)
        if any(u.email == email for u in self.users.values()):
            raise DuplicateEmailError(email)
        user_id = uuid.uuid4().hex
        self.users[user_id] = User(
            id=user_id,
            email=email,
            hashed_password=user.hashed_password,
            name=user.name,
            created_at="2026-01-01T00:00:00+00:00",
        )
        return user_id

    def get_by_email(self, email: str) -> User | None:
        email = normalize_email(email)
        return next((u for u in self.users.values() if u.email == email), None)

    def get_by_id(self, user_id: str) -> User | None:
        return self.users.get(user_id)


# ---------------------------------------------------------------------------
# Unit-level fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def issuer() -> TokenIssuer:
    return TokenIssuer(ACCESS_SECRET, REFRESH_SECRET, access_ttl=600, refresh_ttl=3600)


@pytest.fixture
def fake_store() -> FakeUserStore:
    return FakeUserStore()


@pytest.fixture
def service(fake_store: FakeUserStore, hasher: PasswordHasher, issuer: TokenIssuer) -> AuthService:
    return AuthService(store=fake_store, hasher=hasher, issuer=issuer)


# ---------------------------------------------------------------------------
# App fixtures
# ---------------------------------------------------------------------------


def _patch_lifespan(auth_service: AuthService, user_store: UserStore):
    """Return an async context manager that replaces the real lifespan.

    Publishes the test store and service on app.state so TestClient routes
    see an isolated database rather than DATABASE_URL.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.auth_service = auth_service
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, AuthService], None, None]:
    """Yield (client, service) for API integration tests.

    One isolated shared-memory database per test module, named after the
    module so state never leaks between files.
    """
    db_name = request.module.__name__.replace(".", "_")
    user_store = UserStore(f"sqlite:///file:{db_name}?mode=memory&cache=shared&uri=true")
    auth_service = AuthService(
        store=user_store,
        hasher=PasswordHasher(rounds=4),
        issuer=TokenIssuer(ACCESS_SECRET, REFRESH_SECRET, access_ttl=600, refresh_ttl=3600),
    )

    app.router.lifespan_context = _patch_lifespan(auth_service, user_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, auth_service

    user_store.close()
