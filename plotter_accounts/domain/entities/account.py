"""Account domain entity.

Represents a user account (credential plus granted tags), independent of
persistence.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from plotter_accounts.core.constants import PUBLIC_TAG
from plotter_accounts.domain.exceptions import (
    InvalidOperationException,
    ValidationException,
)
from plotter_accounts.domain.value_objects import parse_tag


def _check_tag_names(tags: Iterable[str]) -> None:
    for tag in tags:
        try:
            parse_tag(tag)
        except ValueError as e:
            raise ValidationException(f"Invalid tag name: {tag!r}", field="tags") from e


@dataclass(frozen=True)
class RevokeOutcome:
    """Result of Account.revoke.

    removed: tags that were present and are now gone.
    public_retained: True when the request named the public tag, which
        stays granted regardless.
    """

    removed: frozenset[str]
    public_retained: bool


@dataclass
class Account:
    """Domain entity for a user account.

    The credential is opaque stored material (a password hash); hashing is
    done by infrastructure.security before it reaches the entity. Tags are
    a set of tag names; the public tag is always present once created.
    """

    username: str
    credential: str
    tags: set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.tags = set(self.tags)
        self.validate()

    @classmethod
    def new(cls, username: str, credential: str, tags: Iterable[str] = ()) -> Account:
        """Build a fresh account; the public tag is always granted."""
        tag_set = set(tags)
        tag_set.add(PUBLIC_TAG)
        return cls(username=username, credential=credential, tags=tag_set)

    def validate(self) -> None:
        """Validate account rules. Raises ValidationException if invalid."""
        if not self.username:
            raise ValidationException("Username is required", field="username")
        if any(ch.isspace() for ch in self.username):
            raise ValidationException(
                "Username must not contain whitespace", field="username"
            )
        _check_tag_names(self.tags)

    def set_credential(self, credential: str) -> None:
        if not credential:
            raise ValidationException("Credential is required", field="credential")
        self.credential = credential

    def grant(self, tags: Iterable[str]) -> set[str]:
        """Add tags (idempotent per tag). Returns the tags that were newly added."""
        added = set(tags) - self.tags
        _check_tag_names(added)
        self.tags |= added
        return added

    def revoke(self, tags: Iterable[str]) -> RevokeOutcome:
        """Remove tags, never the public tag.

        A request that names only the public tag has nothing to apply and is
        rejected. When public is mixed with other tags, the others are
        removed and the outcome reports that public was retained.

        Raises:
            InvalidOperationException: If the only tag requested is public.
        """
        requested = set(tags)
        wants_public = PUBLIC_TAG in requested
        requested.discard(PUBLIC_TAG)
        if wants_public and not requested:
            raise InvalidOperationException(
                f'All user accounts must be assigned the "{PUBLIC_TAG}" tag',
                username=self.username,
                tag=PUBLIC_TAG,
            )
        removed = requested & self.tags
        self.tags -= removed
        return RevokeOutcome(removed=frozenset(removed), public_retained=wants_public)
