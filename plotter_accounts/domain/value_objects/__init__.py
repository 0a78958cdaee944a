"""Domain value objects and shared value types."""

from plotter_accounts.domain.value_objects.core import (
    ALL,
    AllTag,
    NamedTag,
    TagRef,
    parse_tag,
)

__all__ = [
    "ALL",
    "AllTag",
    "NamedTag",
    "TagRef",
    "parse_tag",
]
