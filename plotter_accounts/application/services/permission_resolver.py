"""Resolves an account's tags into the stream-path prefixes it may view.

The "all" tag overrides everything and is checked before any lookup.
Otherwise each tag is resolved through a TagPrefixCache that the caller
owns and passes in, so a listing pass looks each distinct tag up once.
A tag that cannot be resolved aborts the resolution with the lookup error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from plotter_accounts.application.dtos.account import AccountResult
from plotter_accounts.core.constants import ALL_TAG, ALL_TAG_SYMBOL
from plotter_accounts.domain.entities.account import Account
from plotter_accounts.domain.exceptions import NotFoundException, PlotterAccountsException
from plotter_accounts.infrastructure.persistence.repositories import (
    AccountRepository,
    TagDefinitionRepository,
)
from plotter_accounts.shared.utils.sets import to_sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectivePermissions:
    """Prefixes an account may view, or universal access."""

    prefixes: frozenset[str] = frozenset()
    universal: bool = False

    @classmethod
    def universal_access(cls) -> EffectivePermissions:
        return cls(prefixes=frozenset(), universal=True)

    def display_items(self) -> list[str]:
        """Items to print: the all-streams symbol, or the sorted prefixes."""
        if self.universal:
            return [ALL_TAG_SYMBOL]
        return to_sequence(self.prefixes)


@dataclass(frozen=True)
class ResolvedAccount:
    """One row of a permissions listing. permissions is None for a corrupt account."""

    username: str
    permissions: EffectivePermissions | None

    @property
    def corrupt(self) -> bool:
        return self.permissions is None


class TagPrefixCache:
    """Tag name -> prefixes, scoped to one resolution pass.

    Create one per pass and drop it afterwards; it is never shared across
    passes, so definitions changed between passes are always re-read.
    """

    def __init__(self) -> None:
        self._prefixes: dict[str, frozenset[str]] = {}
        self.hits = 0
        self.misses = 0

    def get(self, tag: str) -> frozenset[str] | None:
        found = self._prefixes.get(tag)
        if found is None:
            self.misses += 1
        else:
            self.hits += 1
        return found

    def put(self, tag: str, prefixes: Iterable[str]) -> frozenset[str]:
        stored = frozenset(prefixes)
        self._prefixes[tag] = stored
        return stored

    def __contains__(self, tag: object) -> bool:
        return tag in self._prefixes

    def __len__(self) -> int:
        return len(self._prefixes)


class PermissionResolver:
    """Expands tag sets into effective permissions."""

    def __init__(
        self,
        tag_repo: TagDefinitionRepository,
        account_repo: AccountRepository | None = None,
    ) -> None:
        self._tag_repo = tag_repo
        self._account_repo = account_repo

    async def _lookup(self, tag: str, cache: TagPrefixCache) -> frozenset[str]:
        cached = cache.get(tag)
        if cached is not None:
            return cached
        found = await self._tag_repo.get(tag)
        if found is None:
            raise NotFoundException("tag definition", tag)
        return cache.put(tag, found.entity.prefixes)

    async def resolve_tags(
        self, tags: Iterable[str], cache: TagPrefixCache | None = None
    ) -> EffectivePermissions:
        """Resolve a tag set.

        Args:
            tags: Tag names granted to an account.
            cache: Lookup cache for this pass; a private one is used if None.

        Raises:
            NotFoundException: A tag has no definition.
            CorruptRecordException: A tag definition does not decode.
            StoreUnavailableException: On backend failure.
        """
        tag_set = set(tags)
        if ALL_TAG in tag_set:
            return EffectivePermissions.universal_access()
        if cache is None:
            cache = TagPrefixCache()
        prefixes: set[str] = set()
        for tag in to_sequence(tag_set):
            prefixes |= await self._lookup(tag, cache)
        return EffectivePermissions(prefixes=frozenset(prefixes))

    async def resolve(
        self, account: Account | AccountResult, cache: TagPrefixCache | None = None
    ) -> EffectivePermissions:
        """Resolve one account's effective permissions (see resolve_tags)."""
        return await self.resolve_tags(account.tags, cache)

    async def resolve_listing(self, prefix: str = "") -> list[ResolvedAccount]:
        """Resolve every account whose username starts with prefix.

        One TagPrefixCache serves the whole pass. Corrupt accounts are
        listed with permissions None. The first tag that fails to resolve
        aborts the listing and its error propagates.
        """
        if self._account_repo is None:
            raise RuntimeError("PermissionResolver needs an AccountRepository for listings")
        cache = TagPrefixCache()
        rows: list[ResolvedAccount] = []
        for row in await self._account_repo.list_by_prefix(prefix):
            if row.entity is None:
                rows.append(ResolvedAccount(username=row.name, permissions=None))
                continue
            try:
                permissions = await self.resolve(row.entity, cache)
            except PlotterAccountsException:
                logger.warning("Permission resolution aborted at account %s", row.name)
                raise
            rows.append(ResolvedAccount(username=row.name, permissions=permissions))
        logger.debug(
            "Resolved %s accounts (tag lookups: %s, cache hits: %s)",
            len(rows),
            cache.misses,
            cache.hits,
        )
        return rows
