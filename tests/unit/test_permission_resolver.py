"""PermissionResolver tests: "all" override, per-pass cache, abort on bad tags."""

import json
from unittest.mock import AsyncMock

import pytest

from plotter_accounts.application.services import (
    EffectivePermissions,
    PermissionResolver,
    TagPrefixCache,
)
from plotter_accounts.core.constants import ALL_TAG_SYMBOL
from plotter_accounts.domain.entities import Account, TagDefinition
from plotter_accounts.domain.exceptions import NotFoundException
from plotter_accounts.infrastructure.exceptions import CorruptRecordException


async def _define(tag_repo, tag: str, *prefixes: str) -> None:
    assert await tag_repo.create(TagDefinition(tag, set(prefixes)))


async def _add(account_repo, username: str, *tags: str) -> None:
    assert await account_repo.create(Account.new(username, "cred", tags))


class TestEffectivePermissions:
    def test_universal_display(self) -> None:
        perms = EffectivePermissions.universal_access()
        assert perms.universal
        assert perms.display_items() == [ALL_TAG_SYMBOL]

    def test_prefix_display(self) -> None:
        perms = EffectivePermissions(prefixes=frozenset({"/b/c", "/a"}))
        assert sorted(perms.display_items()) == ["/a", "/b/c"]


class TestTagPrefixCache:
    def test_hits_and_misses(self) -> None:
        cache = TagPrefixCache()
        assert cache.get("t") is None
        cache.put("t", ["/x"])
        assert cache.get("t") == frozenset({"/x"})
        assert "t" in cache
        assert len(cache) == 1
        assert (cache.hits, cache.misses) == (1, 1)


async def test_union_of_tag_prefixes(tag_repo, resolver) -> None:
    await _define(tag_repo, "public", "/pub")
    await _define(tag_repo, "teamA", "/a", "/shared")
    await _define(tag_repo, "teamB", "/b", "/shared")
    perms = await resolver.resolve_tags(["public", "teamA", "teamB"])
    assert not perms.universal
    assert perms.prefixes == frozenset({"/pub", "/a", "/b", "/shared"})


async def test_all_overrides_without_lookups(tag_repo) -> None:
    """An account holding "all" resolves without reading any tag definition."""
    tag_repo.get = AsyncMock(side_effect=AssertionError("no lookup expected"))
    resolver = PermissionResolver(tag_repo)
    perms = await resolver.resolve(Account.new("root", "cred", ["all", "undefined"]))
    assert perms.universal
    tag_repo.get.assert_not_called()


async def test_missing_tag_aborts(tag_repo, resolver) -> None:
    await _define(tag_repo, "public", "/pub")
    with pytest.raises(NotFoundException) as exc_info:
        await resolver.resolve_tags(["public", "ghost"])
    assert exc_info.value.details["key"] == "ghost"


async def test_corrupt_tag_aborts(store, keyspace, tag_repo, resolver) -> None:
    await store.conditional_put(keyspace.tag_definition_key("public"), "{", None)
    with pytest.raises(CorruptRecordException):
        await resolver.resolve_tags(["public"])


async def test_shared_cache_looks_up_each_tag_once(tag_repo, resolver) -> None:
    await _define(tag_repo, "public", "/pub")
    await _define(tag_repo, "teamA", "/a")
    real_get = tag_repo.get
    tag_repo.get = AsyncMock(side_effect=real_get)
    cache = TagPrefixCache()
    for _ in range(3):
        await resolver.resolve_tags(["public", "teamA"], cache)
    assert tag_repo.get.await_count == 2
    assert cache.hits == 4


async def test_listing_resolves_each_account(tag_repo, account_repo, resolver) -> None:
    await _define(tag_repo, "public", "/pub")
    await _define(tag_repo, "teamA", "/a")
    await _add(account_repo, "alice", "teamA")
    await _add(account_repo, "bob")
    await _add(account_repo, "root", "all")

    rows = await resolver.resolve_listing()
    by_name = {r.username: r.permissions for r in rows}
    assert [r.username for r in rows] == ["alice", "bob", "root"]
    assert by_name["alice"].prefixes == frozenset({"/pub", "/a"})
    assert by_name["bob"].prefixes == frozenset({"/pub"})
    assert by_name["root"].universal


async def test_listing_is_idempotent(tag_repo, account_repo, resolver) -> None:
    await _define(tag_repo, "public", "/pub")
    await _add(account_repo, "alice")
    assert await resolver.resolve_listing() == await resolver.resolve_listing()


async def test_listing_sees_definition_changes_between_passes(tag_repo, account_repo, resolver) -> None:
    await _define(tag_repo, "public", "/pub")
    await _add(account_repo, "alice")
    before = await resolver.resolve_listing()
    found = await tag_repo.get("public")
    found.entity.add_prefixes(["/more"])
    assert await tag_repo.update(found.entity, found.version)
    after = await resolver.resolve_listing()
    assert before[0].permissions.prefixes == frozenset({"/pub"})
    assert after[0].permissions.prefixes == frozenset({"/pub", "/more"})


async def test_listing_reports_corrupt_accounts(store, keyspace, tag_repo, account_repo, resolver) -> None:
    await _define(tag_repo, "public", "/pub")
    await _add(account_repo, "alice")
    await store.conditional_put(
        keyspace.account_key("carol"), json.dumps({"username": "carol"}), None
    )
    rows = await resolver.resolve_listing()
    assert [(r.username, r.corrupt) for r in rows] == [("alice", False), ("carol", True)]


async def test_listing_aborts_on_undefined_tag(tag_repo, account_repo, resolver) -> None:
    await _add(account_repo, "alice")
    with pytest.raises(NotFoundException):
        await resolver.resolve_listing()


async def test_listing_requires_account_repo(tag_repo) -> None:
    with pytest.raises(RuntimeError):
        await PermissionResolver(tag_repo).resolve_listing()
