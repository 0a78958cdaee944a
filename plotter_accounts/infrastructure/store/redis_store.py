"""Redis-backed config store with compare-and-set writes.

Each record is a Redis hash with two fields: "data" (JSON payload) and
"version". Conditional writes run as a Lua script so the version check and
the write are one atomic step on the server. Versions are stamped from a
namespace-wide counter (KeySpace.revision_key), so a key that is deleted
and re-created never reuses a version a stale reader may still hold.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import redis.asyncio as redis

from plotter_accounts.core.config import Settings, get_settings
from plotter_accounts.infrastructure.exceptions import StoreUnavailableException
from plotter_accounts.infrastructure.store.protocol import VersionedValue

logger = logging.getLogger(__name__)

DATA_FIELD = "data"
VERSION_FIELD = "version"

# KEYS[1] record, KEYS[2] revision counter; ARGV[1] payload, ARGV[2] expected version ("" = absent)
CONDITIONAL_PUT_SCRIPT = """
local current = redis.call('HGET', KEYS[1], 'version')
if ARGV[2] == '' then
  if current then return 0 end
elseif current ~= ARGV[2] then
  return 0
end
local version = redis.call('INCR', KEYS[2])
redis.call('HSET', KEYS[1], 'data', ARGV[1], 'version', version)
return 1
"""

_GLOB_SPECIALS = frozenset("*?[]\\")


def escape_glob(value: str) -> str:
    """Escape Redis SCAN MATCH metacharacters so value matches literally."""
    return "".join(f"\\{ch}" if ch in _GLOB_SPECIALS else ch for ch in value)


def _text(raw: bytes | str) -> str:
    """Decode a reply field. Raises UnicodeDecodeError for non-UTF-8 bytes."""
    return raw.decode("utf-8") if isinstance(raw, bytes) else raw


@contextmanager
def _store_errors(operation: str, key: str) -> Iterator[None]:
    """Translate redis errors into StoreUnavailableException."""
    try:
        yield
    except (redis.ConnectionError, redis.TimeoutError) as e:
        logger.warning("Redis %s unavailable for %s: %s", operation, key, e)
        raise StoreUnavailableException(operation, str(e)) from e
    except redis.RedisError as e:
        logger.exception("Redis %s error for %s", operation, key)
        raise StoreUnavailableException(operation, str(e)) from e


class RedisConfigStore:
    """Async Redis config store.

    Uses plotter_accounts.core.config for connection settings. Call
    connect() before use and close() when done.
    """

    SCAN_CHUNK_SIZE = 500

    def __init__(
        self,
        revision_key: str,
        redis_client: redis.Redis | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            revision_key: Counter key used to stamp versions (KeySpace.revision_key()).
            redis_client: Optional Redis client for testing or DI.
            settings: Optional settings; defaults to get_settings().
        """
        self.redis = redis_client
        self.settings = settings or get_settings()
        self._revision_key = revision_key
        self._put_script = (
            redis_client.register_script(CONDITIONAL_PUT_SCRIPT)
            if redis_client is not None
            else None
        )

    async def connect(self) -> None:
        """Establish the Redis connection and verify it with PING.

        Raises:
            StoreUnavailableException: If Redis cannot be reached.
        """
        if self.redis is None:
            s = self.settings
            self.redis = redis.Redis(
                host=s.redis_host,
                port=s.redis_port,
                db=s.redis_db,
                password=s.redis_password.get_secret_value() if s.redis_password else None,
                decode_responses=False,
                socket_connect_timeout=s.redis_socket_timeout,
                socket_timeout=s.redis_socket_timeout,
                socket_keepalive=True,
            )
            self._put_script = self.redis.register_script(CONDITIONAL_PUT_SCRIPT)
        with _store_errors("connect", f"{self.settings.redis_host}:{self.settings.redis_port}"):
            await self.redis.ping()
        logger.info(
            "Redis config store connected: %s:%s",
            self.settings.redis_host,
            self.settings.redis_port,
        )

    async def close(self) -> None:
        """Close the Redis connection."""
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
            self._put_script = None
            logger.info("Redis config store disconnected")

    def _client(self) -> redis.Redis:
        if self.redis is None:
            raise StoreUnavailableException("request", "store is not connected")
        return self.redis

    async def get(self, key: str) -> VersionedValue | None:
        client = self._client()
        with _store_errors("get", key):
            data, version = await client.hmget(key, [DATA_FIELD, VERSION_FIELD])
        if data is None or version is None:
            return None
        logger.debug("Store GET: %s (version %s)", key, version)
        return VersionedValue(value=self._payload(key, data), version=int(version))

    @staticmethod
    def _payload(key: str, data: bytes | str) -> str:
        """Payload text, or "" (reported as corrupt upstream) when not UTF-8."""
        try:
            return _text(data)
        except UnicodeDecodeError as e:
            logger.warning("Store: %s holds a non-UTF-8 payload (%s)", key, e)
            return ""

    async def conditional_put(
        self, key: str, value: str, expected_version: int | None
    ) -> bool:
        client = self._client()
        if self._put_script is None:
            self._put_script = client.register_script(CONDITIONAL_PUT_SCRIPT)
        expected = "" if expected_version is None else str(expected_version)
        with _store_errors("conditional_put", key):
            committed = await self._put_script(
                keys=[key, self._revision_key], args=[value, expected]
            )
        if not int(committed):
            logger.debug("Store CAS rejected: %s (expected %r)", key, expected or None)
            return False
        logger.debug("Store PUT: %s", key)
        return True

    async def delete(self, key: str) -> int:
        client = self._client()
        with _store_errors("delete", key):
            removed = await client.unlink(key)
        logger.debug("Store DELETE: %s (%s)", key, removed)
        return int(removed)

    async def _scan_keys(self, prefix: str) -> list[bytes | str]:
        client = self._client()
        return [
            key
            async for key in client.scan_iter(
                match=f"{escape_glob(prefix)}*", count=self.SCAN_CHUNK_SIZE
            )
        ]

    async def delete_prefix(self, prefix: str) -> int:
        """Delete all keys under prefix using SCAN + batched UNLINK (non-blocking).

        Each chunk is removed independently; a failure after some chunks
        leaves the earlier deletions in place.
        """
        client = self._client()
        deleted = 0
        with _store_errors("delete_prefix", prefix):
            chunk: list[bytes | str] = []
            async for key in client.scan_iter(
                match=f"{escape_glob(prefix)}*", count=self.SCAN_CHUNK_SIZE
            ):
                chunk.append(key)
                if len(chunk) >= self.SCAN_CHUNK_SIZE:
                    deleted += await self._unlink_chunk(client, chunk)
                    chunk = []
            if chunk:
                deleted += await self._unlink_chunk(client, chunk)
        if deleted > 0:
            logger.info("Store DELETE prefix: %s (%s keys)", prefix, deleted)
        return deleted

    @staticmethod
    async def _unlink_chunk(client: redis.Redis, chunk: list[bytes | str]) -> int:
        async with client.pipeline(transaction=False) as pipe:
            pipe.unlink(*chunk)
            results = await pipe.execute()
        return sum(int(r or 0) for r in results)

    async def scan_prefix(self, prefix: str) -> list[tuple[str, str]]:
        """Return (key, payload) for keys under prefix, sorted by key.

        Keys removed between SCAN and HGET are skipped. A key holding a
        non-hash value or a non-UTF-8 payload is returned with an empty
        payload so callers report it as corrupt instead of failing the
        whole listing.
        """
        client = self._client()
        with _store_errors("scan_prefix", prefix):
            keys = sorted(await self._scan_keys(prefix))
            if not keys:
                return []
            async with client.pipeline(transaction=False) as pipe:
                for key in keys:
                    pipe.hget(key, DATA_FIELD)
                results = await pipe.execute(raise_on_error=False)
        items: list[tuple[str, str]] = []
        for raw_key, data in zip(keys, results, strict=True):
            key = raw_key.decode("utf-8", errors="replace") if isinstance(raw_key, bytes) else raw_key
            if isinstance(data, redis.ResponseError):
                logger.warning("Store SCAN: %s is not a record hash (%s)", key, data)
                items.append((key, ""))
            elif data is not None:
                items.append((key, self._payload(key, data)))
        logger.debug("Store SCAN: %s (%s keys)", prefix, len(items))
        return items
