"""Stored-credential derivation for accounts (bcrypt over a SHA-256 digest).

The plaintext is digested with SHA-256 first because bcrypt only reads
72 bytes of input. The stored credential is the resulting bcrypt string;
accounts never hold plaintext.
"""

import base64
import hashlib

import bcrypt


class CredentialHasher:
    """Derives and checks stored credentials.

    Args:
        rounds: bcrypt cost factor (4-31). Lower values only for tests.
    """

    def __init__(self, rounds: int = 12) -> None:
        if not 4 <= rounds <= 31:
            raise ValueError(f"bcrypt rounds must be between 4 and 31, got {rounds}")
        self.rounds = rounds

    @staticmethod
    def _digest(plaintext: str) -> bytes:
        return base64.b64encode(hashlib.sha256(plaintext.encode("utf-8")).digest())

    def derive(self, plaintext: str) -> str:
        """Return the credential to store for plaintext."""
        if not plaintext:
            raise ValueError("password must be non-empty")
        return bcrypt.hashpw(
            self._digest(plaintext), bcrypt.gensalt(rounds=self.rounds)
        ).decode("ascii")
