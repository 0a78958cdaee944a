"""In-process config store with the same optimistic-concurrency contract as Redis.

Suitable for a single administrative process and for tests. Not shared
between processes.
"""

from __future__ import annotations

import logging

from plotter_accounts.infrastructure.store.protocol import VersionedValue

logger = logging.getLogger(__name__)


class InMemoryConfigStore:
    """Dict-backed store. Versions come from one monotonically increasing counter.

    Methods never await between read and write, so each call is atomic with
    respect to other coroutines on the same event loop.
    """

    def __init__(self) -> None:
        self._data: dict[str, VersionedValue] = {}
        self._revision = 0

    async def get(self, key: str) -> VersionedValue | None:
        return self._data.get(key)

    async def conditional_put(
        self, key: str, value: str, expected_version: int | None
    ) -> bool:
        current = self._data.get(key)
        if expected_version is None:
            if current is not None:
                logger.debug("Store CAS rejected (exists): %s", key)
                return False
        elif current is None or current.version != expected_version:
            logger.debug("Store CAS rejected (version): %s", key)
            return False
        self._revision += 1
        self._data[key] = VersionedValue(value=value, version=self._revision)
        logger.debug("Store PUT: %s (version %s)", key, self._revision)
        return True

    async def delete(self, key: str) -> int:
        if self._data.pop(key, None) is None:
            return 0
        logger.debug("Store DELETE: %s", key)
        return 1

    async def delete_prefix(self, prefix: str) -> int:
        keys = [k for k in self._data if k.startswith(prefix)]
        for key in keys:
            del self._data[key]
        if keys:
            logger.debug("Store DELETE prefix %s (%s keys)", prefix, len(keys))
        return len(keys)

    async def scan_prefix(self, prefix: str) -> list[tuple[str, str]]:
        return sorted(
            (k, v.value) for k, v in self._data.items() if k.startswith(prefix)
        )

    async def close(self) -> None:
        return None
