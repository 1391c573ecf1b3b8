"""Markdown summary of a conflict scan."""

from __future__ import annotations

from collections.abc import Sequence

from narrative_timeline.conflicts.queries import conflicts_by_severity
from narrative_timeline.models.conflict import ConflictSeverity, TimelineConflict

_SECTIONS = (
    (ConflictSeverity.CRITICAL, "Critical"),
    (ConflictSeverity.WARNING, "Warnings"),
    (ConflictSeverity.INFO, "Info"),
)


def render_conflict_report(conflicts: Sequence[TimelineConflict]) -> str:
    """Render a markdown report with counts and one section per severity.

    Empty sections are omitted. Dismissed conflicts are counted but marked.
    """
    lines = ["# Timeline Conflict Report", "", f"**Total Conflicts:** {len(conflicts)}"]
    grouped = [(title, conflicts_by_severity(severity, conflicts)) for severity, title in _SECTIONS]
    lines.extend(f"- {title}: {len(items)}" for title, items in grouped)
    lines.append("")

    for title, items in grouped:
        if not items:
            continue
        lines.extend([f"## {title}", ""])
        for i, conflict in enumerate(items, start=1):
            marker = " (dismissed)" if conflict.dismissed else ""
            lines.append(f"{i}. **{conflict.description}**{marker}")
            lines.append(f"   - Type: {conflict.type.value}")
            lines.append(f"   - Events: {', '.join(conflict.events)}")
            if conflict.suggestion:
                lines.append(f"   - Suggestion: {conflict.suggestion}")
            lines.append("")

    return "\n".join(lines)
