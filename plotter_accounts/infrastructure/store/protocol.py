"""Config store protocol (DIP). Implementations: RedisConfigStore, InMemoryConfigStore."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class VersionedValue:
    """A stored value and the version token it was read at."""

    value: str
    version: int


class ConfigStoreProtocol(Protocol):
    """Key-value store with optimistic-concurrency writes and prefix scans.

    Version tokens are opaque to callers: pass back exactly what get()
    returned. No method retries; a lost race is reported, not hidden.
    """

    async def get(self, key: str) -> VersionedValue | None:
        """Return the value and its version, or None if absent."""
        ...

    async def conditional_put(
        self, key: str, value: str, expected_version: int | None
    ) -> bool:
        """Store value only if the key is still at expected_version.

        expected_version None means create-only: succeed only if the key is
        absent. Returns True when the write committed.
        """
        ...

    async def delete(self, key: str) -> int:
        """Delete key. Returns number of keys removed (0 if absent)."""
        ...

    async def delete_prefix(self, prefix: str) -> int:
        """Delete every key starting with prefix. Returns number removed."""
        ...

    async def scan_prefix(self, prefix: str) -> list[tuple[str, str]]:
        """Return (key, value) pairs for keys starting with prefix, sorted by key."""
        ...

    async def close(self) -> None:
        """Release connections."""
        ...
