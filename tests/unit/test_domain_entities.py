"""Tests for domain entities, value objects, and set utilities."""

import pytest

from plotter_accounts.core.constants import ALL_TAG, PUBLIC_TAG
from plotter_accounts.domain.entities import Account, TagDefinition
from plotter_accounts.domain.entities.tag_definition import EMPTY_PREFIX_SET_MESSAGE
from plotter_accounts.domain.exceptions import (
    InvalidOperationException,
    ValidationException,
)
from plotter_accounts.domain.value_objects import ALL, AllTag, NamedTag, parse_tag
from plotter_accounts.shared.utils.sets import join_for_display, to_sequence, to_set


class TestSets:
    def test_to_set_deduplicates(self) -> None:
        assert to_set(["a", "b", "a"]) == {"a", "b"}

    def test_to_sequence_has_each_item_once(self) -> None:
        seq = to_sequence({"teamB", "public", "teamA"})
        assert sorted(seq) == ["public", "teamA", "teamB"]
        assert len(seq) == 3

    def test_join_for_display(self) -> None:
        assert join_for_display({"x"}) == "x"
        assert join_for_display(set()) == ""


class TestTagRefs:
    def test_parse_all_returns_virtual_tag(self) -> None:
        ref = parse_tag(ALL_TAG)
        assert ref is ALL
        assert isinstance(ref, AllTag)
        assert ref.is_all

    def test_parse_named(self) -> None:
        ref = parse_tag(PUBLIC_TAG)
        assert ref == NamedTag(PUBLIC_TAG)
        assert ref.is_public
        assert not ref.is_all

    def test_named_tag_rejects_reserved_and_malformed(self) -> None:
        with pytest.raises(ValueError):
            NamedTag(ALL_TAG)
        with pytest.raises(ValueError):
            NamedTag("")
        with pytest.raises(ValueError):
            parse_tag("has space")


class TestAccount:
    def test_new_always_holds_public(self) -> None:
        account = Account.new("alice", "cred", ["teamA"])
        assert account.tags == {"teamA", PUBLIC_TAG}

    def test_new_without_tags(self) -> None:
        assert Account.new("bob", "cred").tags == {PUBLIC_TAG}

    def test_username_validation(self) -> None:
        with pytest.raises(ValidationException) as exc_info:
            Account.new("", "cred")
        assert exc_info.value.details == {"field": "username"}
        with pytest.raises(ValidationException):
            Account.new("al ice", "cred")

    def test_grant_is_idempotent(self) -> None:
        account = Account.new("alice", "cred")
        assert account.grant(["teamA", "teamA"]) == {"teamA"}
        assert account.grant(["teamA"]) == set()
        assert account.tags == {PUBLIC_TAG, "teamA"}

    def test_grant_rejects_malformed_tag(self) -> None:
        account = Account.new("alice", "cred")
        with pytest.raises(ValidationException):
            account.grant(["bad tag"])
        assert account.tags == {PUBLIC_TAG}

    def test_grant_all_is_allowed(self) -> None:
        account = Account.new("root", "cred")
        account.grant([ALL_TAG])
        assert ALL_TAG in account.tags

    def test_revoke_removes_present_and_ignores_absent(self) -> None:
        account = Account.new("alice", "cred", ["teamA", "teamB"])
        outcome = account.revoke(["teamA", "missing"])
        assert outcome.removed == frozenset({"teamA"})
        assert not outcome.public_retained
        assert account.tags == {PUBLIC_TAG, "teamB"}

    def test_revoke_mixed_with_public_keeps_public(self) -> None:
        account = Account.new("alice", "cred", ["teamA", "teamB"])
        outcome = account.revoke(["teamA", PUBLIC_TAG])
        assert outcome.public_retained
        assert outcome.removed == frozenset({"teamA"})
        assert account.tags == {PUBLIC_TAG, "teamB"}

    def test_revoke_only_public_rejected(self) -> None:
        account = Account.new("alice", "cred", ["teamA"])
        with pytest.raises(InvalidOperationException) as exc_info:
            account.revoke([PUBLIC_TAG])
        assert exc_info.value.message == 'All user accounts must be assigned the "public" tag'
        assert account.tags == {PUBLIC_TAG, "teamA"}

    def test_set_credential_requires_value(self) -> None:
        account = Account.new("alice", "cred")
        account.set_credential("other")
        assert account.credential == "other"
        with pytest.raises(ValidationException):
            account.set_credential("")


class TestTagDefinition:
    def test_requires_prefixes(self) -> None:
        with pytest.raises(ValidationException) as exc_info:
            TagDefinition("teamA", set())
        assert exc_info.value.message == EMPTY_PREFIX_SET_MESSAGE

    def test_rejects_reserved_and_malformed_names(self) -> None:
        with pytest.raises(ValidationException):
            TagDefinition(ALL_TAG, {"/x"})
        with pytest.raises(ValidationException):
            TagDefinition("", {"/x"})
        with pytest.raises(ValidationException):
            TagDefinition("team a", {"/x"})

    def test_rejects_empty_prefix(self) -> None:
        with pytest.raises(ValidationException):
            TagDefinition("teamA", {""})

    def test_add_prefixes(self) -> None:
        tagdef = TagDefinition("teamA", {"/a"})
        assert tagdef.add_prefixes(["/a", "/b"]) == {"/b"}
        assert tagdef.prefixes == {"/a", "/b"}

    def test_remove_prefixes_ignores_absent(self) -> None:
        tagdef = TagDefinition("teamA", {"/a", "/b"})
        assert tagdef.remove_prefixes(["/a", "/zzz"]) == {"/a"}
        assert tagdef.prefixes == {"/b"}

    def test_remove_last_prefix_rejected_and_unchanged(self) -> None:
        tagdef = TagDefinition("teamA", {"/a", "/b"})
        with pytest.raises(InvalidOperationException) as exc_info:
            tagdef.remove_prefixes(["/a", "/b"])
        assert exc_info.value.message == EMPTY_PREFIX_SET_MESSAGE
        assert tagdef.prefixes == {"/a", "/b"}

    def test_remove_only_absent_prefixes_is_noop(self) -> None:
        tagdef = TagDefinition("teamA", {"/a"})
        assert tagdef.remove_prefixes(["/b"]) == set()
        assert tagdef.prefixes == {"/a"}
