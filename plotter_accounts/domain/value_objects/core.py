"""Domain value objects for plotter-accounts.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from plotter_accounts.core.constants import ALL_TAG, PUBLIC_TAG


def _validate_name(value: str, field_name: str) -> None:
    """Validate non-empty and whitespace-free. Raises ValueError on failure."""
    if not value:
        raise ValueError(f"{field_name} must be a non-empty string")
    if any(ch.isspace() for ch in value):
        raise ValueError(f"{field_name} must not contain whitespace: {value!r}")


@dataclass(frozen=True)
class NamedTag:
    """Reference to an admin-defined tag stored in the config store."""

    name: str

    is_all: ClassVar[bool] = False

    def __post_init__(self) -> None:
        _validate_name(self.name, "Tag name")
        if self.name == ALL_TAG:
            raise ValueError(f"{ALL_TAG!r} is reserved; use parse_tag")

    @property
    def is_public(self) -> bool:
        return self.name == PUBLIC_TAG


@dataclass(frozen=True)
class AllTag:
    """The reserved virtual tag granting access to every stream."""

    name: ClassVar[str] = ALL_TAG
    is_all: ClassVar[bool] = True
    is_public: ClassVar[bool] = False


TagRef = NamedTag | AllTag

ALL = AllTag()


def parse_tag(name: str) -> TagRef:
    """Return ALL for the reserved name, otherwise a NamedTag.

    Raises:
        ValueError: If name is empty or contains whitespace.
    """
    if name == ALL_TAG:
        return ALL
    return NamedTag(name)
