"""Filtering and deterministic fingerprints for detected conflicts.

Conflict ids change on every scan. Fingerprints do not:
- Built from the conflict type, the sorted entity keys and the sorted event keys
- Entity keys are normalized (NFKD, diacritics stripped, casefolded,
  whitespace collapsed) and prefixed with the entity type
- Event keys are used verbatim
- Volatile fields (id, detected, description text) are excluded

Fingerprints are SHA-256 of the canonical parts joined with "\\n".
"""
from __future__ import annotations

import hashlib
import re
import unicodedata
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from narrative_timeline.models.conflict import ConflictSeverity, ConflictType, TimelineConflict

_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class Fingerprint:
    kind: str
    value: str  # hex sha256

    def __str__(self) -> str:
        return f"{self.kind}:{self.value}"


def _normalize_text(s: str) -> str:
    s = unicodedata.normalize("NFKD", s or "").encode("ascii", "ignore").decode("ascii")
    return _WS_RE.sub(" ", s.casefold()).strip()


def _sha256(parts: Iterable[str]) -> str:
    canonical = "\n".join(parts)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def conflict_fingerprint(conflict: TimelineConflict) -> Fingerprint:
    """Identity of a conflict that survives rescans."""
    entity_keys = sorted(
        f"{e.entity_type}:{_normalize_text(e.entity_id)}" for e in conflict.entities
    )
    parts = [conflict.type.value, *entity_keys, "--", *sorted(conflict.events)]
    return Fingerprint(kind=conflict.type.value, value=_sha256(parts))


def carry_over_dismissals(
    previous: Sequence[TimelineConflict], current: Sequence[TimelineConflict]
) -> list[TimelineConflict]:
    """Re-apply earlier dismissals to a fresh scan.

    The fresh scan still replaces the stored set; only the ``dismissed`` flag
    of logically identical conflicts is carried forward.
    """
    dismissed = {conflict_fingerprint(c).value for c in previous if c.dismissed}
    return [
        c.dismiss() if conflict_fingerprint(c).value in dismissed else c for c in current
    ]


def active_conflicts(conflicts: Iterable[TimelineConflict]) -> list[TimelineConflict]:
    return [c for c in conflicts if not c.dismissed]


def conflicts_for_character(
    character: str, conflicts: Iterable[TimelineConflict]
) -> list[TimelineConflict]:
    """Conflicts naming a character by id or name."""
    return [
        c
        for c in conflicts
        if any(
            e.entity_type == "character" and character in (e.entity_id, e.entity_name)
            for e in c.entities
        )
    ]


def conflicts_for_event(
    event_key: str, conflicts: Iterable[TimelineConflict]
) -> list[TimelineConflict]:
    return [c for c in conflicts if c.involves_event(event_key)]


def conflicts_by_severity(
    severity: ConflictSeverity, conflicts: Iterable[TimelineConflict]
) -> list[TimelineConflict]:
    return [c for c in conflicts if c.severity == severity]


def conflicts_by_type(
    conflict_type: ConflictType, conflicts: Iterable[TimelineConflict]
) -> list[TimelineConflict]:
    return [c for c in conflicts if c.type == conflict_type]
