"""Timeline conflict detection and helpers."""

from .detector import ConflictDetector, detect_conflicts
from .presentation import conflict_icon, severity_description
from .queries import (
    Fingerprint,
    active_conflicts,
    carry_over_dismissals,
    conflict_fingerprint,
    conflicts_by_severity,
    conflicts_by_type,
    conflicts_for_character,
    conflicts_for_event,
)
from .report import render_conflict_report

__all__ = [
    "ConflictDetector",
    "detect_conflicts",
    "conflict_icon",
    "severity_description",
    "Fingerprint",
    "active_conflicts",
    "carry_over_dismissals",
    "conflict_fingerprint",
    "conflicts_by_severity",
    "conflicts_by_type",
    "conflicts_for_character",
    "conflicts_for_event",
    "render_conflict_report",
]
