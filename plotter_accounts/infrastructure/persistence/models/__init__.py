"""Record models: JSON payload shapes for stored accounts and tag definitions."""

from plotter_accounts.infrastructure.persistence.models.account import AccountRecord
from plotter_accounts.infrastructure.persistence.models.tag_definition import (
    TagDefinitionRecord,
)

__all__ = [
    "AccountRecord",
    "TagDefinitionRecord",
]
