"""DTOs for tag definition use cases."""

from dataclasses import dataclass

from plotter_accounts.core.constants import ALL_TAG, ALL_TAG_SYMBOL
from plotter_accounts.domain.entities.tag_definition import TagDefinition


@dataclass(frozen=True)
class TagDefinitionResult:
    """Tag definition read-model.

    is_virtual marks the synthesized "all" entry, which is never stored.
    is_corrupt marks a listed key whose payload did not decode.
    """

    tag: str
    prefixes: frozenset[str]
    is_virtual: bool = False
    is_corrupt: bool = False

    @classmethod
    def from_entity(cls, tagdef: TagDefinition) -> "TagDefinitionResult":
        return cls(tag=tagdef.tag, prefixes=frozenset(tagdef.prefixes))

    @classmethod
    def corrupt(cls, tag: str) -> "TagDefinitionResult":
        return cls(tag=tag, prefixes=frozenset(), is_corrupt=True)


ALL_TAG_DEFINITION = TagDefinitionResult(
    tag=ALL_TAG,
    prefixes=frozenset({ALL_TAG_SYMBOL}),
    is_virtual=True,
)
