"""Timeline conflict records produced by the detector."""
from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from uuid_utils import uuid7 as _uuid7


def uuid7() -> UUID:
    """Generate a UUID7 compatible with stdlib UUID."""
    return UUID(str(_uuid7()))


def run_token() -> str:
    """Per-run uniqueness token embedded in conflict ids."""
    return uuid7().hex


class ConflictType(str, Enum):
    """Kind of narrative inconsistency."""

    LOCATION = "location"  # Character in two places at once
    DEATH = "death"  # Character appears after dying
    AGE = "age"  # Reserved; needs a birth-date model
    CAUSALITY = "causality"  # Effect precedes its cause


class ConflictSeverity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class ConflictEntity(BaseModel):
    """An entity implicated in a conflict."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    entity_id: str
    entity_type: str = Field(description="character, location, event, ...")
    entity_name: str
    conflict_field: str | None = Field(default=None, description="Field that conflicts")
    conflict_value: str | None = Field(default=None, description="Value that conflicts")


class TimelineConflict(BaseModel):
    """A detected timeline inconsistency.

    Ids embed a per-run token, so rescanning identical input yields new ids.
    Replace the stored set after each scan; use ``conflict_fingerprint`` to
    recognise the same logical conflict across scans.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    type: ConflictType
    severity: ConflictSeverity
    entities: list[ConflictEntity] = Field(default_factory=list)
    events: list[str] = Field(default_factory=list, description="Event ids, or names")
    description: str
    suggestion: str = ""
    dismissed: bool = False
    detected: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())

    def dismiss(self) -> TimelineConflict:
        """Return a dismissed copy."""
        return self.model_copy(update={"dismissed": True})

    def involves_event(self, event_key: str) -> bool:
        return event_key in self.events

    def involves_entity(self, entity_key: str) -> bool:
        return any(
            entity_key in (e.entity_id, e.entity_name) for e in self.entities
        )
