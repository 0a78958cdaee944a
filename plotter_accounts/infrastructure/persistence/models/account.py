"""Stored shape of an account record (JSON payload in the config store)."""

from pydantic import BaseModel, ConfigDict

from plotter_accounts.domain.entities.account import Account
from plotter_accounts.shared.utils.sets import to_sequence, to_set


class AccountRecord(BaseModel):
    """JSON payload for an account. tags must be a list; null marks the record corrupt."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    username: str
    credential: str
    tags: list[str]

    @classmethod
    def from_entity(cls, account: Account) -> "AccountRecord":
        return cls(
            username=account.username,
            credential=account.credential,
            tags=to_sequence(account.tags),
        )

    def to_entity(self) -> Account:
        return Account(
            username=self.username,
            credential=self.credential,
            tags=to_set(self.tags),
        )
