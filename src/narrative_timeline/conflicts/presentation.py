"""Labels for presenting conflicts; both helpers accept unknown values."""

from __future__ import annotations

from narrative_timeline.models.conflict import ConflictSeverity, ConflictType

SEVERITY_DESCRIPTIONS = {
    ConflictSeverity.CRITICAL: "Critical - Major timeline inconsistency that breaks narrative logic",
    ConflictSeverity.WARNING: "Warning - Potential issue that should be reviewed",
    ConflictSeverity.INFO: "Info - Minor inconsistency or suggestion for improvement",
}
UNKNOWN_SEVERITY = "Unknown severity level"

CONFLICT_ICONS = {
    ConflictType.LOCATION: "📍",
    ConflictType.DEATH: "💀",
    ConflictType.AGE: "📅",
    ConflictType.CAUSALITY: "🔗",
}
UNKNOWN_ICON = "⚠️"


def severity_description(severity: ConflictSeverity | str) -> str:
    try:
        return SEVERITY_DESCRIPTIONS[ConflictSeverity(severity)]
    except ValueError:
        return UNKNOWN_SEVERITY


def conflict_icon(conflict_type: ConflictType | str) -> str:
    try:
        return CONFLICT_ICONS[ConflictType(conflict_type)]
    except ValueError:
        return UNKNOWN_ICON
