"""Tests configuration and fixtures."""

import os

# Required before hervoice.main is imported anywhere: settings fail fast without it
os.environ.setdefault("HERVOICE_AUTH_TOKEN_SECRET", "test_secret_key_for_token_signing_min_32_chars")
os.environ.setdefault("HERVOICE_RATE_LIMIT_ENABLED", "false")

from datetime import datetime
from typing import Iterator, Optional
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import SecretStr

from hervoice.config.settings import AuthSettings, RateLimitSettings, Settings
from hervoice.domain.errors import DuplicateUserError
from hervoice.domain.models import Credential
from hervoice.services.auth import AuthService, CredentialStore, PasswordHasher, TokenCodec

TEST_SECRET = "test_secret_key_for_token_signing_min_32_chars"


class InMemoryCredentialStore(CredentialStore):
    """Dict-backed credential store enforcing email uniqueness."""

    def __init__(self) -> None:
        self.users: dict[str, Credential] = {}
        self.resets: list[tuple[str, str, datetime]] = []
        self.inserts = 0

    async def find_by_email(self, email: str) -> Optional[Credential]:
        for credential in self.users.values():
            if credential.email == email:
                return credential
        return None

    async def find_by_id(self, user_id: str) -> Optional[Credential]:
        return self.users.get(user_id)

    async def insert(self, email: str, name: str, password_hash: str) -> Credential:
        if any(c.email == email for c in self.users.values()):
            raise DuplicateUserError()
        credential = Credential(
            id=str(uuid4()),
            email=email,
            name=name,
            password_hash=password_hash,
            created_at=datetime.utcnow(),
        )
        self.users[credential.id] = credential
        self.inserts += 1
        return credential

    async def create_password_reset(self, email: str, token_digest: str, expires_at: datetime) -> None:
        self.resets.append((email, token_digest, expires_at))


class RecordingResetSender:
    """Captures reset links instead of delivering them."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    async def __call__(self, email: str, reset_link: str) -> None:
        self.sent.append((email, reset_link))


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with mock values."""
    return Settings(
        env="development",
        debug=True,
        auth=AuthSettings(token_secret=SecretStr(TEST_SECRET)),
        rate_limit=RateLimitSettings(enabled=False),
    )


@pytest.fixture
def hasher() -> Iterator[PasswordHasher]:
    """Baseline-cost hasher; pool released after the test."""
    hasher = PasswordHasher(max_workers=2)
    yield hasher
    hasher.shutdown()


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(TEST_SECRET)


@pytest.fixture
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def reset_sender() -> RecordingResetSender:
    return RecordingResetSender()


@pytest.fixture
def auth_service(
    store: InMemoryCredentialStore,
    hasher: PasswordHasher,
    codec: TokenCodec,
    reset_sender: RecordingResetSender,
) -> AuthService:
    return AuthService(
        store,
        hasher,
        codec,
        reset_link_base="https://app.example.test/",
        reset_link_sender=reset_sender,
    )


@pytest.fixture
def app(test_settings: Settings, store: InMemoryCredentialStore) -> Iterator[FastAPI]:
    """Application wired to the in-memory store (no database, no lifespan)."""
    from hervoice.api.dependencies import get_credential_store
    from hervoice.main import create_application

    application = create_application(test_settings)
    application.dependency_overrides[get_credential_store] = lambda: store
    yield application
    application.state.password_hasher.shutdown()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def db_session() -> MagicMock:
    """AsyncSession stand-in; refresh fills the server-side defaults."""

    async def refresh(entity) -> None:
        entity.id = uuid4()
        entity.created_at = datetime.utcnow()

    session = MagicMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock(side_effect=refresh)
    session.commit = AsyncMock()
    return session
