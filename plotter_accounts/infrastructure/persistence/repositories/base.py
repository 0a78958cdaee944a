"""Base repository: versioned reads, conditional writes, prefix listing and deletes.

Every write goes through ConfigStoreProtocol.conditional_put. Repositories
report whether the write committed; turning a False into AlreadyExists or
Conflict is the caller's decision, since only the caller knows whether it
was creating or updating.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import ValidationError

from plotter_accounts.domain.exceptions import PlotterAccountsException
from plotter_accounts.infrastructure.exceptions import CorruptRecordException
from plotter_accounts.infrastructure.store.keys import KeySpace
from plotter_accounts.infrastructure.store.protocol import ConfigStoreProtocol

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT")


@dataclass(frozen=True)
class Versioned(Generic[EntityT]):
    """An entity together with the version token it was read at."""

    entity: EntityT
    version: int


@dataclass(frozen=True)
class ListedRecord(Generic[EntityT]):
    """One row of a prefix listing. entity is None when the payload is corrupt."""

    name: str
    entity: EntityT | None

    @property
    def corrupt(self) -> bool:
        return self.entity is None


class RecordRepository(Generic[EntityT]):
    """Shared store access for one record kind.

    Subclasses provide record_type, key builders, and payload codec
    (_encode/_decode). _decode raises ValidationError or a domain
    exception for payloads that do not match the record shape.
    """

    record_type: str = "record"

    def __init__(self, store: ConfigStoreProtocol, keyspace: KeySpace) -> None:
        self.store = store
        self.keyspace = keyspace

    def _key(self, name: str) -> str:
        raise NotImplementedError

    def _prefix(self, name_prefix: str) -> str:
        raise NotImplementedError

    def _name_from_key(self, key: str) -> str:
        raise NotImplementedError

    def _name_of(self, entity: EntityT) -> str:
        raise NotImplementedError

    def _encode(self, entity: EntityT) -> str:
        raise NotImplementedError

    def _decode(self, payload: str) -> EntityT:
        raise NotImplementedError

    def _try_decode(self, name: str, payload: str) -> EntityT:
        """Decode payload or raise CorruptRecordException naming the record."""
        try:
            return self._decode(payload)
        except ValidationError as e:
            raise CorruptRecordException(self.record_type, name, str(e)) from e
        except PlotterAccountsException as e:
            raise CorruptRecordException(self.record_type, name, e.message) from e

    async def get(self, name: str) -> Versioned[EntityT] | None:
        """Return the entity and its version, or None if absent.

        Raises:
            CorruptRecordException: If the stored payload does not decode.
            StoreUnavailableException: On backend failure.
        """
        found = await self.store.get(self._key(name))
        if found is None:
            return None
        return Versioned(entity=self._try_decode(name, found.value), version=found.version)

    async def create(self, entity: EntityT) -> bool:
        """Store a new record. Returns False if the key already exists."""
        name = self._name_of(entity)
        committed = await self.store.conditional_put(
            self._key(name), self._encode(entity), None
        )
        if committed:
            logger.info("%s created: %s", self.record_type.capitalize(), name)
        return committed

    async def update(self, entity: EntityT, version: int) -> bool:
        """Replace a record read at version. Returns False if it changed since."""
        name = self._name_of(entity)
        committed = await self.store.conditional_put(
            self._key(name), self._encode(entity), version
        )
        if committed:
            logger.info("%s updated: %s", self.record_type.capitalize(), name)
        else:
            logger.warning(
                "%s update lost a race: %s (read at version %s)",
                self.record_type.capitalize(),
                name,
                version,
            )
        return committed

    async def delete(self, name: str) -> int:
        """Delete one record. Idempotent; returns 0 when it did not exist."""
        removed = await self.store.delete(self._key(name))
        if removed:
            logger.info("%s deleted: %s", self.record_type.capitalize(), name)
        return removed

    async def delete_by_prefix(self, name_prefix: str) -> int:
        """Delete all records whose name starts with name_prefix. Returns count."""
        removed = await self.store.delete_prefix(self._prefix(name_prefix))
        logger.info(
            "%s records deleted by prefix %r: %s", self.record_type.capitalize(), name_prefix, removed
        )
        return removed

    async def list_by_prefix(self, name_prefix: str = "") -> list[ListedRecord[EntityT]]:
        """List records whose name starts with name_prefix, in key order.

        Corrupt payloads are listed with entity None rather than dropped.
        """
        rows: list[ListedRecord[EntityT]] = []
        for key, payload in await self.store.scan_prefix(self._prefix(name_prefix)):
            name = self._name_from_key(key)
            try:
                entity: EntityT | None = self._try_decode(name, payload)
            except CorruptRecordException as e:
                logger.warning("Corrupt %s record %s: %s", self.record_type, name, e.details["reason"])
                entity = None
            rows.append(ListedRecord(name=name, entity=entity))
        return rows
