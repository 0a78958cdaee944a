"""Wiring for command execution: services built over one store and keyspace."""

from __future__ import annotations

from dataclasses import dataclass

from plotter_accounts.application.services import (
    AccountService,
    PermissionResolver,
    TagDefinitionService,
)
from plotter_accounts.core.config import Settings
from plotter_accounts.infrastructure.persistence.repositories import (
    AccountRepository,
    TagDefinitionRepository,
)
from plotter_accounts.infrastructure.security import CredentialHasher
from plotter_accounts.infrastructure.store.keys import KeySpace
from plotter_accounts.infrastructure.store.protocol import ConfigStoreProtocol


@dataclass
class CommandContext:
    """Everything a command needs. running goes False after exit/close."""

    accounts: AccountService
    tags: TagDefinitionService
    resolver: PermissionResolver
    timeout_seconds: float
    running: bool = True

    @classmethod
    def build(
        cls,
        store: ConfigStoreProtocol,
        keyspace: KeySpace,
        settings: Settings,
        hasher: CredentialHasher | None = None,
    ) -> CommandContext:
        account_repo = AccountRepository(store, keyspace)
        tag_repo = TagDefinitionRepository(store, keyspace)
        return cls(
            accounts=AccountService(
                account_repo, hasher or CredentialHasher(rounds=settings.bcrypt_rounds)
            ),
            tags=TagDefinitionService(tag_repo),
            resolver=PermissionResolver(tag_repo, account_repo),
            timeout_seconds=settings.command_timeout_seconds,
        )
