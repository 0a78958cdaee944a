"""Stored shape of a tag definition record (JSON payload in the config store)."""

from pydantic import BaseModel, ConfigDict

from plotter_accounts.domain.entities.tag_definition import TagDefinition
from plotter_accounts.shared.utils.sets import to_sequence, to_set


class TagDefinitionRecord(BaseModel):
    """JSON payload for a tag definition. prefixes must be a list; null marks it corrupt."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    tag: str
    prefixes: list[str]

    @classmethod
    def from_entity(cls, tagdef: TagDefinition) -> "TagDefinitionRecord":
        return cls(tag=tagdef.tag, prefixes=to_sequence(tagdef.prefixes))

    def to_entity(self) -> TagDefinition:
        return TagDefinition(tag=self.tag, prefixes=to_set(self.prefixes))
