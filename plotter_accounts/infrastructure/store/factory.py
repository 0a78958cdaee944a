"""Config store factory: creates the Redis or in-memory backend from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from plotter_accounts.infrastructure.store.keys import KeySpace
from plotter_accounts.infrastructure.store.protocol import ConfigStoreProtocol

if TYPE_CHECKING:
    from plotter_accounts.core.config import Settings


class ConfigStoreFactory:
    """Factory for config store instances based on configuration."""

    @staticmethod
    def create_keyspace(settings: "Settings | None" = None) -> KeySpace:
        """Return the KeySpace for the configured namespace prefix."""
        from plotter_accounts.core.config import get_settings

        s = settings or get_settings()
        return KeySpace(s.config_key_prefix)

    @staticmethod
    async def create_store(settings: "Settings | None" = None) -> ConfigStoreProtocol:
        """Create and connect a store from settings.

        Args:
            settings: Settings; if None, uses get_settings().

        Returns:
            Connected RedisConfigStore or InMemoryConfigStore.

        Raises:
            ValueError: Unknown backend.
            StoreUnavailableException: Redis not reachable.
        """
        from plotter_accounts.core.config import get_settings

        s = settings or get_settings()
        backend = s.store_backend.lower()

        if backend == "memory":
            from plotter_accounts.infrastructure.store.memory_store import (
                InMemoryConfigStore,
            )

            return InMemoryConfigStore()
        if backend == "redis":
            from plotter_accounts.infrastructure.store.redis_store import (
                RedisConfigStore,
            )

            keyspace = ConfigStoreFactory.create_keyspace(s)
            store = RedisConfigStore(revision_key=keyspace.revision_key(), settings=s)
            await store.connect()
            return store
        raise ValueError(
            f"Unknown store backend: {backend}. Supported: 'redis', 'memory'"
        )
