"""Conversions between token sequences and unique, unordered collections.

Tag sets and prefix sets are stored and manipulated as sets; these helpers
sit at the edges where lists come in (CLI tokens, JSON payloads) or go out.
"""

from collections.abc import Iterable


def to_set(items: Iterable[str]) -> set[str]:
    """Deduplicate items. Order of the input is irrelevant."""
    return set(items)


def to_sequence(items: Iterable[str]) -> list[str]:
    """Return the items as a list.

    Callers must not depend on the order; it is sorted only so that
    listings and stored payloads are stable for a given set.
    """
    return sorted(set(items))


def join_for_display(items: Iterable[str]) -> str:
    """Space-join items for one line of listing output."""
    return " ".join(to_sequence(items))
