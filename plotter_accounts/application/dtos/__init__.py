"""Application DTOs: read-models returned by services."""

from plotter_accounts.application.dtos.account import AccountResult
from plotter_accounts.application.dtos.tag_definition import (
    ALL_TAG_DEFINITION,
    TagDefinitionResult,
)

__all__ = [
    "ALL_TAG_DEFINITION",
    "AccountResult",
    "TagDefinitionResult",
]
