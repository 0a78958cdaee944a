"""Tag definition domain entity.

A tag is a named bundle of collection-path prefixes. The reserved "all"
tag is virtual and never represented by this entity.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from plotter_accounts.core.constants import ALL_TAG
from plotter_accounts.domain.exceptions import (
    InvalidOperationException,
    ValidationException,
)

EMPTY_PREFIX_SET_MESSAGE = (
    "Each tag must be assigned at least one prefix "
    "(use undeftag or undeftags to fully remove a tag)"
)


@dataclass
class TagDefinition:
    """Domain entity for a stored tag definition.

    Invariant: prefixes is never empty while the definition exists.
    Validation runs on construction.
    """

    tag: str
    prefixes: set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.prefixes = set(self.prefixes)
        self.validate()

    def validate(self) -> None:
        """Validate tag rules. Raises ValidationException if invalid."""
        if not self.tag:
            raise ValidationException("Tag name is required", field="tag")
        if any(ch.isspace() for ch in self.tag):
            raise ValidationException("Tag name must not contain whitespace", field="tag")
        if self.tag == ALL_TAG:
            raise ValidationException(
                f'Tag "{ALL_TAG}" is reserved and cannot be stored', field="tag"
            )
        if not self.prefixes:
            raise ValidationException(EMPTY_PREFIX_SET_MESSAGE, field="prefixes")
        if any(not p for p in self.prefixes):
            raise ValidationException("Path prefixes must be non-empty", field="prefixes")

    def add_prefixes(self, prefixes: Iterable[str]) -> set[str]:
        """Add prefixes (idempotent per prefix). Returns the newly added ones."""
        added = set(prefixes) - self.prefixes
        if any(not p for p in added):
            raise ValidationException("Path prefixes must be non-empty", field="prefixes")
        self.prefixes |= added
        return added

    def remove_prefixes(self, prefixes: Iterable[str]) -> set[str]:
        """Remove prefixes; prefixes not present are ignored.

        Raises:
            InvalidOperationException: If the removal would leave no prefixes.
                The definition is left unchanged.
        """
        removed = set(prefixes) & self.prefixes
        if removed and removed == self.prefixes:
            raise InvalidOperationException(EMPTY_PREFIX_SET_MESSAGE, tag=self.tag)
        self.prefixes -= removed
        return removed
