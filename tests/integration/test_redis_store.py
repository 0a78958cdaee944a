"""RedisConfigStore integration tests. Require a reachable Redis server.

Connection settings come from REDIS_HOST / REDIS_PORT / REDIS_DB. Each test
uses its own key namespace and removes it afterwards.
"""

import json
import uuid

import pytest

from plotter_accounts.core.config import Settings
from plotter_accounts.domain.entities import Account
from plotter_accounts.infrastructure.exceptions import StoreUnavailableException
from plotter_accounts.infrastructure.persistence.repositories import AccountRepository
from plotter_accounts.infrastructure.store import KeySpace
from plotter_accounts.infrastructure.store.redis_store import RedisConfigStore


@pytest.fixture
def redis_keyspace() -> KeySpace:
    return KeySpace(f"test-{uuid.uuid4().hex[:12]}/")


@pytest.fixture
async def redis_store(redis_keyspace):
    """Connected RedisConfigStore; skips when Redis is not reachable."""
    settings = Settings(_env_file=None, store_backend="redis", redis_socket_timeout=1.0)
    store = RedisConfigStore(redis_keyspace.revision_key(), settings=settings)
    try:
        await store.connect()
    except StoreUnavailableException as e:
        await store.close()
        pytest.skip(f"Redis not reachable: {e.message}")
    yield store
    await store.delete_prefix(redis_keyspace.namespace)
    await store.close()


@pytest.mark.requires_redis
async def test_conditional_put_create_and_update(redis_store, redis_keyspace) -> None:
    key = redis_keyspace.tag_definition_key("teamA")
    assert await redis_store.conditional_put(key, "v1", None) is True
    assert await redis_store.conditional_put(key, "v2", None) is False
    found = await redis_store.get(key)
    assert found.value == "v1"
    assert await redis_store.conditional_put(key, "v2", found.version) is True
    assert await redis_store.conditional_put(key, "v3", found.version) is False
    assert (await redis_store.get(key)).value == "v2"


@pytest.mark.requires_redis
async def test_recreated_key_rejects_stale_version(redis_store, redis_keyspace) -> None:
    key = redis_keyspace.account_key("alice")
    await redis_store.conditional_put(key, "v0", None)
    stale = (await redis_store.get(key)).version
    assert await redis_store.delete(key) == 1
    assert await redis_store.delete(key) == 0
    await redis_store.conditional_put(key, "v1", None)
    assert await redis_store.conditional_put(key, "v2", stale) is False


@pytest.mark.requires_redis
async def test_scan_and_delete_prefix(redis_store, redis_keyspace) -> None:
    for name in ("bob", "alice", "albert"):
        await redis_store.conditional_put(redis_keyspace.account_key(name), name, None)
    items = await redis_store.scan_prefix(redis_keyspace.accounts_prefix("al"))
    assert [v for _, v in items] == ["albert", "alice"]
    assert await redis_store.delete_prefix(redis_keyspace.accounts_prefix("al")) == 2
    remaining = await redis_store.scan_prefix(redis_keyspace.accounts_prefix())
    assert [v for _, v in remaining] == ["bob"]


@pytest.mark.requires_redis
async def test_glob_characters_in_prefix_match_literally(redis_store, redis_keyspace) -> None:
    await redis_store.conditional_put(redis_keyspace.account_key("a*b"), "star", None)
    await redis_store.conditional_put(redis_keyspace.account_key("axb"), "plain", None)
    items = await redis_store.scan_prefix(redis_keyspace.accounts_prefix("a*"))
    assert [v for _, v in items] == ["star"]


@pytest.mark.requires_redis
async def test_non_hash_key_listed_as_corrupt(redis_store, redis_keyspace) -> None:
    repo = AccountRepository(redis_store, redis_keyspace)
    await repo.create(Account.new("alice", "cred"))
    await redis_store.redis.set(redis_keyspace.account_key("mallory"), json.dumps({}))
    rows = await repo.list_by_prefix()
    assert [(r.name, r.corrupt) for r in rows] == [("alice", False), ("mallory", True)]


@pytest.mark.requires_redis
async def test_non_utf8_payload_listed_as_corrupt(redis_store, redis_keyspace) -> None:
    repo = AccountRepository(redis_store, redis_keyspace)
    await repo.create(Account.new("alice", "cred"))
    await redis_store.redis.hset(
        redis_keyspace.account_key("bob"), mapping={"data": b"\xff\xfe{", "version": b"1"}
    )
    rows = await repo.list_by_prefix()
    assert [(r.name, r.corrupt) for r in rows] == [("alice", False), ("bob", True)]
