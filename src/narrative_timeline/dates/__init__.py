"""Date expression parsing, ordering and display."""

from .display import event_date_for_timeline, to_display
from .instant import CalendarInstant
from .natural import DateparserResolver, NaturalLanguageResolver, NaturalResolution
from .parsing import parse_event_date, to_millis
from .types import DateParseError, ParsedDate, ParseOptions, Precision

__all__ = [
    "CalendarInstant",
    "DateParseError",
    "DateparserResolver",
    "NaturalLanguageResolver",
    "NaturalResolution",
    "ParseOptions",
    "ParsedDate",
    "Precision",
    "event_date_for_timeline",
    "parse_event_date",
    "to_display",
    "to_millis",
]
