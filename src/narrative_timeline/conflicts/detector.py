"""Timeline conflict detection for narrative consistency.

Checks, in this order:
- Location: a character at two or more places under the same date text
- Death: a deceased character appearing in events after their death event
- Age: reserved, always empty until a birth-date model exists
- Causality: an event starting before an event it depends on, or an effect
  starting before its declared cause

Does NOT:
- Mutate its inputs
- Sort or merge conflicts
- Report unresolvable references or unparseable dates
"""

from __future__ import annotations

from collections.abc import Sequence

from narrative_timeline.dates.parsing import parse_event_date
from narrative_timeline.dates.types import ParseOptions
from narrative_timeline.logging import get_logger
from narrative_timeline.models.conflict import (
    ConflictEntity,
    ConflictSeverity,
    ConflictType,
    TimelineConflict,
    run_token,
)
from narrative_timeline.models.entities import CausalityLink, Character, Event, Location

logger = get_logger(__name__)

DEATH_KEYWORDS = ("death", "dies", "killed", "died")


class ConflictDetector:
    """Runs the four timeline checks over one snapshot of story entities.

    Every check is pure for a fixed input; only the ``detected`` timestamp and
    the run token inside each id vary between runs.
    """

    def __init__(self, options: ParseOptions | None = None):
        self.options = options or ParseOptions()

    def detect(
        self,
        events: Sequence[Event],
        characters: Sequence[Character],
        locations: Sequence[Location],
        causality_links: Sequence[CausalityLink] | None = None,
    ) -> list[TimelineConflict]:
        """Detect all timeline conflicts.

        Args:
            events: All story events
            characters: All story characters
            locations: All story locations, used to label location conflicts
            causality_links: Optional explicit cause → effect links

        Returns:
            Conflicts from each check, concatenated in check order
        """
        logger.debug(
            "conflict_scan_started",
            events=len(events),
            characters=len(characters),
            locations=len(locations),
            causality_links=len(causality_links or ()),
        )
        conflicts: list[TimelineConflict] = []
        conflicts.extend(self.detect_location_conflicts(events, characters, locations))
        conflicts.extend(self.detect_death_conflicts(events, characters))
        conflicts.extend(self.detect_age_conflicts(events, characters))
        conflicts.extend(self.detect_causality_conflicts(events, causality_links))

        logger.info(
            "conflict_scan_complete",
            total=len(conflicts),
            by_type={
                kind.value: sum(1 for c in conflicts if c.type == kind) for kind in ConflictType
            },
        )
        return conflicts

    def _millis(self, text: str | None) -> int | None:
        parsed = parse_event_date(text, self.options)
        return parsed.to_millis()

    def detect_location_conflicts(
        self,
        events: Sequence[Event],
        characters: Sequence[Character],
        locations: Sequence[Location] = (),
    ) -> list[TimelineConflict]:
        """Flag characters placed at several locations under one date.

        Events are grouped by their date text exactly as written, so
        "2024-03-02" and "March 2, 2024" are separate groups.
        """
        conflicts: list[TimelineConflict] = []
        character_ids = {c.name: c.key for c in characters}
        location_ids = {loc.name: loc.key for loc in locations}

        events_by_date: dict[str, list[Event]] = {}
        for event in events:
            if event.date_time:
                events_by_date.setdefault(event.date_time, []).append(event)

        for date_text, day_events in events_by_date.items():
            # Dicts double as insertion-ordered sets
            places: dict[str, dict[str, None]] = {}
            for event in day_events:
                if not event.location:
                    continue
                for name in event.characters:
                    places.setdefault(name, {})[event.location] = None

            for name, seen in places.items():
                if len(seen) < 2:
                    continue
                where = list(seen)
                joined = ", ".join(where)
                implicated = [
                    e.key for e in day_events if e.location and e.involves(name)
                ]
                entities = [
                    ConflictEntity(
                        entity_id=character_ids.get(name, name),
                        entity_type="character",
                        entity_name=name,
                        conflict_field="location",
                        conflict_value=joined,
                    )
                ]
                entities.extend(
                    ConflictEntity(
                        entity_id=location_ids.get(place, place),
                        entity_type="location",
                        entity_name=place,
                        conflict_field="characters",
                        conflict_value=name,
                    )
                    for place in where
                )
                conflicts.append(
                    TimelineConflict(
                        id=f"location-conflict-{name}-{date_text}-{run_token()}",
                        type=ConflictType.LOCATION,
                        severity=ConflictSeverity.CRITICAL,
                        entities=entities,
                        events=implicated,
                        description=(
                            f'Character "{name}" appears at multiple locations on '
                            f"{date_text}: {joined}"
                        ),
                        suggestion=(
                            f"Review events on {date_text} and ensure {name} is only in one "
                            "location, or add travel time between events."
                        ),
                    )
                )
        return conflicts

    def detect_death_conflicts(
        self, events: Sequence[Event], characters: Sequence[Character]
    ) -> list[TimelineConflict]:
        """Flag deceased characters who appear after their death event.

        The death event is the first linked event, in input order, whose name
        or description mentions a death. Without a parseable death date there
        is no bound, and the character is skipped.
        """
        conflicts: list[TimelineConflict] = []

        for character in characters:
            if not character.is_deceased:
                continue
            linked = [e for e in events if e.involves(character.name)]
            death_event = next((e for e in linked if _mentions_death(e)), None)
            if death_event is None:
                continue

            death_millis = self._millis(death_event.date_time)
            if death_millis is None:
                logger.debug(
                    "death_date_unparsed", character=character.name, event=death_event.key
                )
                continue

            after_death = []
            for event in linked:
                if event is death_event:
                    continue
                millis = self._millis(event.date_time)
                if millis is not None and millis > death_millis:
                    after_death.append(event)
            if not after_death:
                continue

            conflicts.append(
                TimelineConflict(
                    id=f"death-conflict-{character.name}-{run_token()}",
                    type=ConflictType.DEATH,
                    severity=ConflictSeverity.CRITICAL,
                    entities=[
                        ConflictEntity(
                            entity_id=character.key,
                            entity_type="character",
                            entity_name=character.name,
                            conflict_field="status",
                            conflict_value="deceased",
                        )
                    ],
                    events=[death_event.key, *(e.key for e in after_death)],
                    description=(
                        f'Character "{character.name}" appears alive after death event '
                        f'"{death_event.name}" ({death_event.date_time})'
                    ),
                    suggestion=(
                        f"Review events after {death_event.date_time} and remove "
                        f"{character.name} or change their status to alive if they were "
                        "resurrected."
                    ),
                )
            )
        return conflicts

    def detect_age_conflicts(
        self, events: Sequence[Event], characters: Sequence[Character]
    ) -> list[TimelineConflict]:
        """Always empty: age checks need birth dates, which are not modelled."""
        return []

    def detect_causality_conflicts(
        self,
        events: Sequence[Event],
        causality_links: Sequence[CausalityLink] | None = None,
    ) -> list[TimelineConflict]:
        """Flag effects that start before their causes.

        Two sources are checked independently: each event's own
        ``dependencies`` and the explicit ``causality_links``. Each edge is
        evaluated once, so dependency cycles cannot loop.
        """
        conflicts: list[TimelineConflict] = []

        for event in events:
            if not event.dependencies:
                continue
            event_millis = self._millis(event.date_time)
            if event_millis is None:
                continue

            for dependency in event.dependencies:
                cause = _find_event(events, dependency)
                if cause is None:
                    logger.debug("dependency_unresolved", event=event.key, dependency=dependency)
                    continue
                cause_millis = self._millis(cause.date_time)
                if cause_millis is None or event_millis >= cause_millis:
                    continue
                conflicts.append(
                    TimelineConflict(
                        id=f"causality-conflict-{event.key}-{cause.key}-{run_token()}",
                        type=ConflictType.CAUSALITY,
                        severity=ConflictSeverity.CRITICAL,
                        events=[event.key, cause.key],
                        description=(
                            f'Event "{event.name}" ({event.date_time}) depends on '
                            f'"{cause.name}" ({cause.date_time}), but occurs before it'
                        ),
                        suggestion=(
                            f'Adjust the dates so "{cause.name}" occurs before '
                            f'"{event.name}", or remove the dependency.'
                        ),
                    )
                )

        for link in causality_links or ():
            cause = _find_event(events, link.cause_event)
            effect = _find_event(events, link.effect_event)
            if cause is None or effect is None:
                logger.debug("causality_link_unresolved", link=link.id)
                continue
            cause_millis = self._millis(cause.date_time)
            effect_millis = self._millis(effect.date_time)
            if cause_millis is None or effect_millis is None:
                continue
            if effect_millis >= cause_millis:
                continue
            conflicts.append(
                TimelineConflict(
                    id=f"causality-link-conflict-{link.id}-{run_token()}",
                    type=ConflictType.CAUSALITY,
                    severity=ConflictSeverity.CRITICAL,
                    events=[cause.key, effect.key],
                    description=(
                        f'Causality link violation: "{effect.name}" ({effect.date_time}) '
                        f'occurs before its cause "{cause.name}" ({cause.date_time})'
                    ),
                    suggestion=(
                        f'Adjust event dates so "{cause.name}" occurs before '
                        f'"{effect.name}", or remove the causality link.'
                    ),
                )
            )
        return conflicts


def _mentions_death(event: Event) -> bool:
    text = f"{event.name}\n{event.description or ''}".lower()
    return any(keyword in text for keyword in DEATH_KEYWORDS)


def _find_event(events: Sequence[Event], reference: str) -> Event | None:
    """First event whose name or id matches ``reference``."""
    return next((e for e in events if e.name == reference or e.id == reference), None)


def detect_conflicts(
    events: Sequence[Event],
    characters: Sequence[Character],
    locations: Sequence[Location],
    causality_links: Sequence[CausalityLink] | None = None,
    *,
    options: ParseOptions | None = None,
) -> list[TimelineConflict]:
    """Detect all timeline conflicts in one snapshot of story entities."""
    return ConflictDetector(options).detect(events, characters, locations, causality_links)
