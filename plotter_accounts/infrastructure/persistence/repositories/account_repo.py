"""Account repository over the config store."""

from plotter_accounts.domain.entities.account import Account
from plotter_accounts.infrastructure.persistence.models.account import AccountRecord
from plotter_accounts.infrastructure.persistence.repositories.base import RecordRepository


class AccountRepository(RecordRepository[Account]):
    """Accounts keyed by username under the keyspace's accounts root."""

    record_type = "account"

    def _key(self, name: str) -> str:
        return self.keyspace.account_key(name)

    def _prefix(self, name_prefix: str) -> str:
        return self.keyspace.accounts_prefix(name_prefix)

    def _name_from_key(self, key: str) -> str:
        return self.keyspace.username_from_key(key)

    def _name_of(self, entity: Account) -> str:
        return entity.username

    def _encode(self, entity: Account) -> str:
        return AccountRecord.from_entity(entity).model_dump_json()

    def _decode(self, payload: str) -> Account:
        return AccountRecord.model_validate_json(payload).to_entity()
