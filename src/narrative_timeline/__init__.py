"""narrative-timeline - date normalization and consistency checks for story timelines.

Parses free-form event dates (including BCE eras and relative phrases) into
comparable instants and detects timeline conflicts between events,
characters, locations and causality links.
"""

__version__ = "0.2.0"

# Lazy imports to keep `import narrative_timeline` cheap
def __getattr__(name: str):
    if name == "dates":
        from narrative_timeline import dates
        return dates
    if name == "conflicts":
        from narrative_timeline import conflicts
        return conflicts
    if name == "models":
        from narrative_timeline import models
        return models
    if name == "parse_event_date":
        from narrative_timeline.dates import parse_event_date
        return parse_event_date
    if name == "detect_conflicts":
        from narrative_timeline.conflicts import detect_conflicts
        return detect_conflicts
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
