"""Security: stored-credential derivation for accounts."""

from plotter_accounts.infrastructure.security.password import CredentialHasher

__all__ = ["CredentialHasher"]
