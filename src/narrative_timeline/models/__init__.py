"""Pydantic data models."""

from .conflict import ConflictEntity, ConflictSeverity, ConflictType, TimelineConflict
from .entities import CausalityLink, Character, Event, Location

__all__ = [
    "Event",
    "Character",
    "Location",
    "CausalityLink",
    "ConflictType",
    "ConflictSeverity",
    "ConflictEntity",
    "TimelineConflict",
]
