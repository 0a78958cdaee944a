"""Pytest configuration and fixtures for plotter-accounts.

Fixtures build the full service stack over InMemoryConfigStore so unit
tests need no Redis. Credential hashing uses the minimum bcrypt cost.
"""

import io

import bcrypt
import pytest

from plotter_accounts.application.services import (
    AccountService,
    PermissionResolver,
    TagDefinitionService,
)
from plotter_accounts.cli.context import CommandContext
from plotter_accounts.core.config import Settings
from plotter_accounts.infrastructure.persistence.repositories import (
    AccountRepository,
    TagDefinitionRepository,
)
from plotter_accounts.infrastructure.security import CredentialHasher
from plotter_accounts.infrastructure.store import InMemoryConfigStore, KeySpace


@pytest.fixture
def settings() -> Settings:
    """Settings for the in-memory backend (no .env lookup)."""
    return Settings(
        _env_file=None,
        store_backend="memory",
        bcrypt_rounds=4,
        command_timeout_seconds=5.0,
    )


@pytest.fixture
def hasher() -> CredentialHasher:
    return CredentialHasher(rounds=4)


@pytest.fixture
def store() -> InMemoryConfigStore:
    return InMemoryConfigStore()


@pytest.fixture
def keyspace() -> KeySpace:
    return KeySpace("test/")


@pytest.fixture
def account_repo(store, keyspace) -> AccountRepository:
    return AccountRepository(store, keyspace)


@pytest.fixture
def tag_repo(store, keyspace) -> TagDefinitionRepository:
    return TagDefinitionRepository(store, keyspace)


@pytest.fixture
def account_service(account_repo, hasher) -> AccountService:
    return AccountService(account_repo, hasher)


@pytest.fixture
def tag_service(tag_repo) -> TagDefinitionService:
    return TagDefinitionService(tag_repo)


@pytest.fixture
def resolver(tag_repo, account_repo) -> PermissionResolver:
    return PermissionResolver(tag_repo, account_repo)


@pytest.fixture
def ctx(store, keyspace, settings, hasher) -> CommandContext:
    """CommandContext wired over the in-memory store."""
    return CommandContext.build(store, keyspace, settings, hasher=hasher)


@pytest.fixture
def output() -> io.StringIO:
    """Captured command output."""
    return io.StringIO()


def _credential_matches(plaintext: str, credential: str) -> bool:
    """Check a credential the way the plotter server does at login."""
    return bcrypt.checkpw(CredentialHasher._digest(plaintext), credential.encode("ascii"))


@pytest.fixture
def credential_matches():
    return _credential_matches
