"""Repositories for accounts and tag definitions."""

from plotter_accounts.infrastructure.persistence.repositories.account_repo import (
    AccountRepository,
)
from plotter_accounts.infrastructure.persistence.repositories.base import (
    ListedRecord,
    RecordRepository,
    Versioned,
)
from plotter_accounts.infrastructure.persistence.repositories.tag_definition_repo import (
    TagDefinitionRepository,
)

__all__ = [
    "AccountRepository",
    "ListedRecord",
    "RecordRepository",
    "TagDefinitionRepository",
    "Versioned",
]
