"""Tag definition application service.

The reserved "all" tag is checked before any store access: it cannot be
defined, modified, or deleted, and listings synthesize it instead of
reading it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from plotter_accounts.application.dtos.tag_definition import (
    ALL_TAG_DEFINITION,
    TagDefinitionResult,
)
from plotter_accounts.core.constants import ALL_TAG
from plotter_accounts.domain.entities.tag_definition import TagDefinition
from plotter_accounts.domain.exceptions import (
    AlreadyExistsException,
    ConflictException,
    InvalidOperationException,
    NotFoundException,
)
from plotter_accounts.infrastructure.persistence.repositories import (
    TagDefinitionRepository,
    Versioned,
)

logger = logging.getLogger(__name__)

RECORD_TYPE = "tag definition"

CANNOT_MODIFY_ALL_MESSAGE = f'Cannot modify definition of "{ALL_TAG}" tag'
CANNOT_DELETE_ALL_MESSAGE = f'Tag "{ALL_TAG}" cannot be deleted'


class TagDefinitionService:
    """Mutations and queries on tag definitions."""

    def __init__(self, tag_repo: TagDefinitionRepository) -> None:
        self._tag_repo = tag_repo

    @staticmethod
    def _reject_all(tag: str) -> None:
        if tag == ALL_TAG:
            raise InvalidOperationException(CANNOT_MODIFY_ALL_MESSAGE, tag=tag)

    async def _load(self, tag: str) -> Versioned[TagDefinition]:
        found = await self._tag_repo.get(tag)
        if found is None:
            raise NotFoundException(RECORD_TYPE, tag)
        return found

    async def _commit(self, found: Versioned[TagDefinition]) -> None:
        if not await self._tag_repo.update(found.entity, found.version):
            raise ConflictException(RECORD_TYPE, found.entity.tag)

    async def define_tag(self, tag: str, prefixes: Iterable[str]) -> TagDefinitionResult:
        """Create a tag definition.

        Raises:
            AlreadyExistsException: If the tag exists or is the reserved "all".
            ValidationException: If the name is malformed or prefixes is empty.
        """
        if tag == ALL_TAG:
            raise AlreadyExistsException(RECORD_TYPE, tag)
        tagdef = TagDefinition(tag=tag, prefixes=set(prefixes))
        if not await self._tag_repo.create(tagdef):
            raise AlreadyExistsException(RECORD_TYPE, tag)
        return TagDefinitionResult.from_entity(tagdef)

    async def add_prefixes(self, tag: str, prefixes: Iterable[str]) -> TagDefinitionResult:
        """Add path prefixes in one conditional write.

        Raises:
            InvalidOperationException: If tag is "all".
            NotFoundException: If the tag is not defined.
            ConflictException: If the definition changed since it was read.
        """
        self._reject_all(tag)
        found = await self._load(tag)
        if found.entity.add_prefixes(prefixes):
            await self._commit(found)
        return TagDefinitionResult.from_entity(found.entity)

    async def remove_prefixes(self, tag: str, prefixes: Iterable[str]) -> TagDefinitionResult:
        """Remove path prefixes in one conditional write.

        Raises:
            InvalidOperationException: If tag is "all" or the removal would
                leave no prefixes (nothing is written).
            NotFoundException: If the tag is not defined.
            ConflictException: If the definition changed since it was read.
        """
        self._reject_all(tag)
        found = await self._load(tag)
        if found.entity.remove_prefixes(prefixes):
            await self._commit(found)
        return TagDefinitionResult.from_entity(found.entity)

    async def get_tag_definition(self, tag: str) -> TagDefinitionResult:
        """Return a tag's prefixes; "all" is answered without a store call.

        Raises:
            NotFoundException: If the tag is not defined.
        """
        if tag == ALL_TAG:
            return ALL_TAG_DEFINITION
        found = await self._load(tag)
        return TagDefinitionResult.from_entity(found.entity)

    async def delete_tag(self, tag: str) -> int:
        """Delete one tag definition. Idempotent; returns 0 or 1.

        Raises:
            InvalidOperationException: If tag is "all".
        """
        if tag == ALL_TAG:
            raise InvalidOperationException(CANNOT_DELETE_ALL_MESSAGE, tag=tag)
        return await self._tag_repo.delete(tag)

    async def delete_tags_by_prefix(self, prefix: str) -> int:
        """Delete all stored tag definitions whose name starts with prefix."""
        return await self._tag_repo.delete_by_prefix(prefix)

    async def list_tag_definitions(self, prefix: str = "") -> list[TagDefinitionResult]:
        """List tag definitions whose name starts with prefix (all when empty).

        The virtual "all" entry comes first when it matches prefix. A stored
        record named "all" is ignored. Corrupt records appear with
        is_corrupt set.
        """
        results: list[TagDefinitionResult] = []
        if ALL_TAG.startswith(prefix):
            results.append(ALL_TAG_DEFINITION)
        for row in await self._tag_repo.list_by_prefix(prefix):
            if row.name == ALL_TAG:
                logger.warning('Ignoring stored record for reserved tag "%s"', ALL_TAG)
                continue
            if row.entity is None:
                results.append(TagDefinitionResult.corrupt(row.name))
            else:
                results.append(TagDefinitionResult.from_entity(row.entity))
        return results
