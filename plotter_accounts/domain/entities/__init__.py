"""Domain entities.

Pure domain models; no store or serialization concerns.
"""

from plotter_accounts.domain.entities.account import Account, RevokeOutcome
from plotter_accounts.domain.entities.tag_definition import TagDefinition

__all__ = [
    "Account",
    "RevokeOutcome",
    "TagDefinition",
]
