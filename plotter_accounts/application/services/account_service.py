"""Account application service: create, credential, grant/revoke, delete, list.

Every update is read-compare-write: load the record with its version,
change it locally, then write it back conditioned on that version. A lost
race raises ConflictException; nothing here retries.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from plotter_accounts.application.dtos.account import AccountResult
from plotter_accounts.domain.entities.account import Account, RevokeOutcome
from plotter_accounts.domain.exceptions import (
    AlreadyExistsException,
    ConflictException,
    NotFoundException,
    PlotterAccountsException,
    ValidationException,
)
from plotter_accounts.infrastructure.persistence.repositories import (
    AccountRepository,
    Versioned,
)
from plotter_accounts.infrastructure.security import CredentialHasher

logger = logging.getLogger(__name__)

RECORD_TYPE = "account"


class AccountService:
    """Mutations and queries on user accounts."""

    def __init__(self, account_repo: AccountRepository, hasher: CredentialHasher) -> None:
        self._account_repo = account_repo
        self._hasher = hasher

    async def _derive_credential(self, password: str) -> str:
        if not password:
            raise ValidationException("Password is required", field="password")
        return await asyncio.to_thread(self._hasher.derive, password)

    async def _load(self, username: str) -> Versioned[Account]:
        found = await self._account_repo.get(username)
        if found is None:
            raise NotFoundException(RECORD_TYPE, username)
        return found

    async def _commit(self, found: Versioned[Account]) -> None:
        if not await self._account_repo.update(found.entity, found.version):
            raise ConflictException(RECORD_TYPE, found.entity.username)

    async def create_account(
        self, username: str, password: str, tags: Iterable[str] = ()
    ) -> AccountResult:
        """Create an account holding tags plus the public tag.

        Raises:
            AlreadyExistsException: If the username is taken.
            ValidationException: If username, password, or a tag is malformed.
        """
        credential = await self._derive_credential(password)
        account = Account.new(username, credential, tags)
        if not await self._account_repo.create(account):
            raise AlreadyExistsException(RECORD_TYPE, username)
        return AccountResult.from_entity(account)

    async def set_password(self, username: str, password: str) -> None:
        """Replace the stored credential.

        Raises:
            NotFoundException: If the account does not exist.
            ConflictException: If the account changed since it was read.
        """
        credential = await self._derive_credential(password)
        found = await self._load(username)
        found.entity.set_credential(credential)
        await self._commit(found)

    async def grant_tags(self, username: str, tags: Iterable[str]) -> AccountResult:
        """Add tags to the account in one conditional write.

        Raises:
            NotFoundException: If the account does not exist.
            ConflictException: If the account changed since it was read.
        """
        found = await self._load(username)
        added = found.entity.grant(tags)
        if added:
            await self._commit(found)
        else:
            logger.debug("Grant on %s changed nothing", username)
        return AccountResult.from_entity(found.entity)

    async def revoke_tags(self, username: str, tags: Iterable[str]) -> RevokeOutcome:
        """Remove tags (never public) in one conditional write.

        Raises:
            NotFoundException: If the account does not exist.
            InvalidOperationException: If public is the only tag requested.
            ConflictException: If the account changed since it was read.
        """
        found = await self._load(username)
        outcome = found.entity.revoke(tags)
        if outcome.removed:
            await self._commit(found)
        else:
            logger.debug("Revoke on %s changed nothing", username)
        return outcome

    async def get_account(self, username: str) -> AccountResult:
        """Return the account's tags. Raises NotFoundException if absent."""
        found = await self._load(username)
        return AccountResult.from_entity(found.entity)

    async def delete_account(self, username: str) -> int:
        """Delete one account. Idempotent; returns 0 or 1."""
        return await self._account_repo.delete(username)

    async def delete_accounts(self, usernames: Iterable[str]) -> int:
        """Delete several accounts one by one; returns how many existed.

        A failure part-way is re-raised with details["deleted"] set to the
        number removed before it; those deletions stay in effect.
        """
        deleted = 0
        for username in usernames:
            try:
                deleted += await self.delete_account(username)
            except PlotterAccountsException as e:
                e.details["deleted"] = deleted
                raise
        return deleted

    async def delete_accounts_by_prefix(self, prefix: str) -> int:
        """Delete all accounts whose username starts with prefix. Returns count."""
        return await self._account_repo.delete_by_prefix(prefix)

    async def list_accounts(self, prefix: str = "") -> list[AccountResult]:
        """List accounts whose username starts with prefix (all when empty).

        Corrupt records appear with is_corrupt set.
        """
        return [
            AccountResult.from_entity(row.entity)
            if row.entity is not None
            else AccountResult.corrupt(row.name)
            for row in await self._account_repo.list_by_prefix(prefix)
        ]
