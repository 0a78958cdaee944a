"""Application services: accounts, tag definitions, permission resolution."""

from plotter_accounts.application.services.account_service import AccountService
from plotter_accounts.application.services.permission_resolver import (
    EffectivePermissions,
    PermissionResolver,
    ResolvedAccount,
    TagPrefixCache,
)
from plotter_accounts.application.services.tag_definition_service import (
    TagDefinitionService,
)

__all__ = [
    "AccountService",
    "EffectivePermissions",
    "PermissionResolver",
    "ResolvedAccount",
    "TagDefinitionService",
    "TagPrefixCache",
]
