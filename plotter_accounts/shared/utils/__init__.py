"""Shared utilities: set/sequence conversions."""

from plotter_accounts.shared.utils.sets import join_for_display, to_sequence, to_set

__all__ = [
    "join_for_display",
    "to_sequence",
    "to_set",
]
