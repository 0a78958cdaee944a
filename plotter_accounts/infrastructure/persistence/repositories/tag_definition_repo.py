"""Tag definition repository over the config store.

Only real tag definitions live here; the virtual "all" tag is handled by
the application layer and never reaches the store.
"""

from plotter_accounts.domain.entities.tag_definition import TagDefinition
from plotter_accounts.infrastructure.persistence.models.tag_definition import (
    TagDefinitionRecord,
)
from plotter_accounts.infrastructure.persistence.repositories.base import RecordRepository


class TagDefinitionRepository(RecordRepository[TagDefinition]):
    """Tag definitions keyed by tag name under the keyspace's tagdefs root."""

    record_type = "tag definition"

    def _key(self, name: str) -> str:
        return self.keyspace.tag_definition_key(name)

    def _prefix(self, name_prefix: str) -> str:
        return self.keyspace.tag_definitions_prefix(name_prefix)

    def _name_from_key(self, key: str) -> str:
        return self.keyspace.tag_from_key(key)

    def _name_of(self, entity: TagDefinition) -> str:
        return entity.tag

    def _encode(self, entity: TagDefinition) -> str:
        return TagDefinitionRecord.from_entity(entity).model_dump_json()

    def _decode(self, payload: str) -> TagDefinition:
        return TagDefinitionRecord.model_validate_json(payload).to_entity()
