"""Config store: protocol, key layout, Redis and in-memory backends.

ConfigStoreFactory creates the backend from plotter_accounts.core.config.
The Redis backend is imported lazily so the in-memory store works without
a Redis server.
"""

from plotter_accounts.infrastructure.store.factory import ConfigStoreFactory
from plotter_accounts.infrastructure.store.keys import KeySpace
from plotter_accounts.infrastructure.store.memory_store import InMemoryConfigStore
from plotter_accounts.infrastructure.store.protocol import (
    ConfigStoreProtocol,
    VersionedValue,
)

__all__ = [
    "ConfigStoreFactory",
    "ConfigStoreProtocol",
    "InMemoryConfigStore",
    "KeySpace",
    "VersionedValue",
]
