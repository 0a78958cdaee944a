"""Domain layer: entities, value objects, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from plotter_accounts.domain.entities import Account, RevokeOutcome, TagDefinition
from plotter_accounts.domain.exceptions import (
    AlreadyExistsException,
    ConflictException,
    InvalidOperationException,
    NotFoundException,
    PlotterAccountsException,
    ValidationException,
)
from plotter_accounts.domain.value_objects import ALL, AllTag, NamedTag, TagRef, parse_tag

__all__ = [
    # Entities
    "Account",
    "RevokeOutcome",
    "TagDefinition",
    # Exceptions
    "AlreadyExistsException",
    "ConflictException",
    "InvalidOperationException",
    "NotFoundException",
    "PlotterAccountsException",
    "ValidationException",
    # Value objects
    "ALL",
    "AllTag",
    "NamedTag",
    "TagRef",
    "parse_tag",
]
