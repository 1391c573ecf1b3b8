"""Story entities the consistency checks read.

These mirror the host application's stored shapes. Field names are
snake_case in Python and accept the host's camelCase keys (``dateTime``,
``isMilestone``, ``causeEvent``). Instances are frozen so a detection pass
always sees a stable snapshot.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DECEASED_STATUSES = frozenset({"deceased", "dead"})


class StoryEntity(BaseModel):
    """Common configuration for consumed entities."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str | None = Field(default=None, description="Stable identifier, if the host has one")
    name: str

    @property
    def key(self) -> str:
        """Identifier used in conflict records: the id, else the name."""
        return self.id or self.name


class Event(StoryEntity):
    """A dated narrative event."""

    date_time: str | None = Field(
        default=None, description="Date expression as written, e.g. 'circa 500 BCE'"
    )
    characters: list[str] = Field(default_factory=list, description="Linked character names")
    location: str | None = Field(default=None, description="Primary location name")
    dependencies: list[str] = Field(
        default_factory=list, description="Names or ids of events this one depends on"
    )
    is_milestone: bool = Field(default=False)
    description: str | None = Field(default=None)

    def involves(self, character_name: str) -> bool:
        return character_name in self.characters


class Character(StoryEntity):
    status: str | None = Field(default=None, description="e.g. alive, deceased, unknown")

    @property
    def is_deceased(self) -> bool:
        return (self.status or "").lower() in DECEASED_STATUSES


class Location(StoryEntity):
    pass


class CausalityLink(BaseModel):
    """An author-declared cause → effect relationship between two events."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    cause_event: str = Field(description="Name or id of the cause event")
    effect_event: str = Field(description="Name or id of the effect event")
    link_type: str | None = Field(
        default=None, description="direct, indirect, conditional, or catalyst"
    )
    strength: str | None = Field(default=None, description="weak, moderate, strong, or absolute")
    description: str | None = Field(default=None)
