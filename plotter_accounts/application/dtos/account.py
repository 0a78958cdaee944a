"""DTOs for account use cases (no dependency on the store payload)."""

from dataclasses import dataclass

from plotter_accounts.domain.entities.account import Account


@dataclass(frozen=True)
class AccountResult:
    """Account read-model. No credential.

    is_corrupt marks a listed key whose payload did not decode; tags is
    empty in that case.
    """

    username: str
    tags: frozenset[str]
    is_corrupt: bool = False

    @classmethod
    def from_entity(cls, account: Account) -> "AccountResult":
        return cls(username=account.username, tags=frozenset(account.tags))

    @classmethod
    def corrupt(cls, username: str) -> "AccountResult":
        return cls(username=username, tags=frozenset(), is_corrupt=True)
