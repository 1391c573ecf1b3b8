"""Date expression parsing for narrative events.

Turns free-form date text into a ``ParsedDate`` whose ``start`` orders
correctly across the BCE/CE boundary.

Handles:
- ISO 8601: 2024-03-02, 2024-03, 2024-03-02T10:00+02:00, 100-01-01, -0043-03-15
- Tabular: 2024-03-02 10:00:00, 10:30 (anchored to the reference date)
- Written: March 2, 2024 / 2 Mar 2024 / 03/02/2024 (month-first when ambiguous)
- Relative: next Friday, this weekend, in 3 days (needs a reference date)
- Absolute phrases: the 5th of March, 1066
- Ranges: 2024-03-02 to 2024-03-05, 2024-03-02 - 2024-03-05
- Eras: 500 BCE, 44 B.C., March 15, 44 BC, AD 79, 100 CE, 2024-03-15 CE
- Qualifiers: circa, around, about, approx., approximately, ~, abt, ca.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone, tzinfo
from functools import partial

from dateutil import parser as dateutil_parser

from narrative_timeline.dates.instant import CalendarInstant
from narrative_timeline.dates.natural import NaturalLanguageResolver, default_resolver
from narrative_timeline.dates.types import DateParseError, ParsedDate, ParseOptions, Precision
from narrative_timeline.logging import get_logger

logger = get_logger(__name__)

APPROX_RE = re.compile(
    r"~|\b(?:circa|around|about|approx\w*|abt)\b\.?|\bca?\.(?=\s*\d)",
    re.IGNORECASE,
)
_BCE_MARKER = r"b\.?\s?c\.?(?:\s?e\.?)?"
_CE_MARKER = r"c\.?\s?e\.?|a\.?\s?d\.?"

# Numerals inside a full date ("2024-03-15 CE") are not era years
BCE_RE = re.compile(
    r"(?<![-/:])\b(?P<year>\d+)\s*(?P<marker>" + _BCE_MARKER + r")(?![a-z])",
    re.IGNORECASE,
)
CE_RE = re.compile(
    r"(?<![-/:])\b(?P<year>\d+)\s*(?P<marker>" + _CE_MARKER + r")(?![a-z])"
    r"|(?<![a-z])(?P<prefix>a\.?\s?d\.?)\s*(?P<prefix_year>\d+)\b",
    re.IGNORECASE,
)
DATED_ERA_RE = re.compile(
    r"^(?P<date>.*[-/:]\d+)\s*(?:(?P<bce>" + _BCE_MARKER + r")|(?P<ce>" + _CE_MARKER + r"))\s*$",
    re.IGNORECASE,
)
RANGE_RE = re.compile(
    r"^(?:from\s+|between\s+)?(?P<first>.+?)\s+(?:to|until|till|through|and|[-–—])\s+(?P<second>.+)$",
    re.IGNORECASE,
)
# An offset only counts after a time of day; "2024-03-05" is not -03:05
ZONE_TOKEN_RE = re.compile(
    r"\d:\d{2}(?::\d{2}(?:\.\d+)?)?\s*(?:[+-]\d{2}(?::?\d{2})?|z)\b|\b(?:utc|gmt)\b",
    re.IGNORECASE,
)

ISO_RE = re.compile(
    r"^(?P<year>[+-]\d{4,6}|\d{1,4})"
    r"(?:-(?P<month>\d{2})"
    r"(?:-(?P<day>\d{2})"
    r"(?:T(?P<hour>\d{2})(?::(?P<minute>\d{2})(?::(?P<second>\d{2})(?:[.,](?P<fraction>\d{1,9}))?)?)?"
    r"(?P<offset>Z|[+-]\d{2}(?::?\d{2})?)?)?)?)?$"
)
_SQL_TIME = r"(?P<hour>\d{1,2}):(?P<minute>\d{2})(?::(?P<second>\d{2})(?:\.(?P<fraction>\d{1,9}))?)?"
SQL_RE = re.compile(
    r"^(?:(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})(?:\s+" + _SQL_TIME + r")?"
    r"|" + _SQL_TIME.replace("?P<", "?P<t_") + r")"
    r"(?:\s*(?P<zone>Z|UTC|[+-]\d{2}(?::?\d{2})?|[A-Za-z]+/[A-Za-z_]+(?:/[A-Za-z_]+)?))?$"
)

# Placeholder spliced in where an era year was written; leap so Feb 29 survives
_ERA_PLACEHOLDER_YEAR = 2000

# Two distinct defaults reveal which fields dateutil read from the text
_DEFAULT_A = datetime(2000, 1, 1, 0, 0, 0)
_DEFAULT_B = datetime(2004, 2, 2, 1, 1, 1)

LITERAL_FORMATS = (
    ("%Y-%m", Precision.MONTH),
    ("%Y", Precision.YEAR),
    ("%b %d %Y", Precision.DAY),
    ("%B %d %Y", Precision.DAY),
)


@dataclass(frozen=True)
class EraMarker:
    """An era marker found in the text.

    ``year`` is the era year as written. It is ``None`` when the marker
    trails a full date, whose own year is then the era year.
    """

    year: int | None
    is_bce: bool
    start: int
    end: int

    def written_year(self, parsed_year: int) -> int:
        return self.year if self.year is not None else parsed_year

    def astronomical_year(self, written_year: int) -> int:
        return 1 - written_year if self.is_bce else written_year

    def splice(self, text: str) -> str:
        if self.year is None:
            return f"{text[:self.start]}{text[self.end:]}".strip()
        return f"{text[:self.start]}{_ERA_PLACEHOLDER_YEAR}{text[self.end:]}".strip()


@dataclass(frozen=True)
class _Resolution:
    start: CalendarInstant
    precision: Precision
    end: CalendarInstant | None = None
    era: EraMarker | None = None
    written_year: int | None = None


def is_approximate(text: str) -> bool:
    return bool(APPROX_RE.search(text))


def strip_qualifiers(text: str) -> str:
    return " ".join(APPROX_RE.sub(" ", text).split())


def scan_era(text: str) -> EraMarker | None:
    """Find a BCE marker, else a CE/AD marker, attached to a positive year.

    Failing that, a marker trailing a full date applies to that date's year.
    """
    for match in BCE_RE.finditer(text):
        year = int(match.group("year"))
        if year > 0:
            return EraMarker(year=year, is_bce=True, start=match.start(), end=match.end())
    for match in CE_RE.finditer(text):
        year = int(match.group("year") or match.group("prefix_year"))
        if year > 0:
            return EraMarker(year=year, is_bce=False, start=match.start(), end=match.end())
    match = DATED_ERA_RE.match(text)
    if match:
        return EraMarker(
            year=None,
            is_bce=match.group("bce") is not None,
            start=match.end("date"),
            end=match.end(),
        )
    return None


def _fraction_to_micros(fraction: str | None) -> int:
    if not fraction:
        return 0
    return int(fraction[:6].ljust(6, "0"))


def _offset_seconds(token: str) -> int:
    if token in ("Z", "UTC"):
        return 0
    sign = -1 if token[0] == "-" else 1
    digits = token[1:].replace(":", "")
    hours = int(digits[:2])
    minutes = int(digits[2:4]) if len(digits) > 2 else 0
    return sign * (hours * 3600 + minutes * 60)


def _zone_for(token: str | None, default: tzinfo) -> tzinfo:
    if token is None:
        return default
    if token in ("Z", "UTC") or token[0] in "+-":
        return timezone(timedelta(seconds=_offset_seconds(token)))
    return ParseOptions(timezone=token).tzinfo


def _parse_strict(text: str, options: ParseOptions) -> _Resolution | None:
    """ISO 8601 extended calendar dates with optional time and offset."""
    match = ISO_RE.match(text)
    if not match:
        return None
    parts = match.groupdict()
    if parts["hour"] is not None:
        precision = Precision.TIME
    elif parts["day"] is not None:
        precision = Precision.DAY
    elif parts["month"] is not None:
        precision = Precision.MONTH
    else:
        precision = Precision.YEAR

    try:
        tz = _zone_for(parts["offset"], options.tzinfo)
        start = CalendarInstant.localize(
            tz,
            year=int(parts["year"]),
            month=int(parts["month"] or 1),
            day=int(parts["day"] or 1),
            hour=int(parts["hour"] or 0),
            minute=int(parts["minute"] or 0),
            second=int(parts["second"] or 0),
            microsecond=_fraction_to_micros(parts["fraction"]),
        )
    except ValueError:
        return None
    return _Resolution(start=start, precision=precision)


def _parse_tabular(text: str, options: ParseOptions) -> _Resolution | None:
    """SQL-style date/time, then a relaxed dateutil pass that must find a year."""
    match = SQL_RE.match(text)
    if match:
        parts = match.groupdict()
        try:
            tz = _zone_for(parts["zone"], options.tzinfo)
        except ValueError:
            return None
        if parts["year"] is not None:
            year, month, day = int(parts["year"]), int(parts["month"]), int(parts["day"])
            hour, minute = parts["hour"], parts["minute"]
            second, fraction = parts["second"], parts["fraction"]
        else:
            anchor = options.reference_wall_time()
            if anchor is None:
                return None
            year, month, day = anchor.year, anchor.month, anchor.day
            hour, minute = parts["t_hour"], parts["t_minute"]
            second, fraction = parts["t_second"], parts["t_fraction"]
        try:
            start = CalendarInstant.localize(
                tz,
                year=year,
                month=month,
                day=day,
                hour=int(hour or 0),
                minute=int(minute or 0),
                second=int(second or 0),
                microsecond=_fraction_to_micros(fraction),
            )
        except ValueError:
            return None
        precision = Precision.TIME if hour is not None else Precision.DAY
        return _Resolution(start=start, precision=precision)

    return _parse_relaxed(text, options)


def _parse_relaxed(text: str, options: ParseOptions) -> _Resolution | None:
    if RANGE_RE.match(text):
        # dateutil reads "2024-03-02 - 2024-03-05" as one instant with an offset
        return None
    try:
        first = dateutil_parser.parse(text, default=_DEFAULT_A)
        second = dateutil_parser.parse(text, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        return None

    if first.year != second.year:
        # No year in the text; leave it to the relative resolver
        return None
    if first.tzinfo is not None and not ZONE_TOKEN_RE.search(text):
        logger.debug("relaxed_zone_rejected", text=text)
        return None
    if first.hour == second.hour:
        precision = Precision.TIME
    elif first.day == second.day:
        precision = Precision.DAY
    elif first.month == second.month:
        precision = Precision.MONTH
    else:
        precision = Precision.YEAR

    try:
        start = CalendarInstant.from_datetime(first, default_tz=options.tzinfo)
    except ValueError:
        return None
    return _Resolution(start=start, precision=precision)


def _parse_natural(
    text: str, options: ParseOptions, resolver: NaturalLanguageResolver
) -> _Resolution | None:
    resolved = resolver(text, options.reference_wall_time(), prefer_future=options.forward_date)
    if resolved is None:
        return None
    tz = options.tzinfo
    try:
        start = CalendarInstant.from_datetime(resolved.start, default_tz=tz)
        end = CalendarInstant.from_datetime(resolved.end, default_tz=tz) if resolved.end else None
    except ValueError:
        return None
    return _Resolution(start=start, end=end, precision=resolved.precision)


def _parse_literal(text: str, options: ParseOptions) -> _Resolution | None:
    for fmt, precision in LITERAL_FORMATS:
        try:
            value = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return _Resolution(
            start=CalendarInstant.from_datetime(value, default_tz=options.tzinfo),
            precision=precision,
        )
    return None


def _apply_era(resolution: _Resolution, era: EraMarker) -> _Resolution | None:
    """Move the resolved dates onto the era year, keeping month and day."""
    written = era.written_year(resolution.start.year)
    if written <= 0:
        return None
    try:
        start = resolution.start.with_year(era.astronomical_year(written))
        end = None
        if resolution.end is not None:
            end = resolution.end.shift_years(start.year - resolution.start.year)
    except ValueError:
        # e.g. Feb 29 in a non-leap era year
        return None
    return _Resolution(
        start=start, end=end, precision=resolution.precision, era=era, written_year=written
    )


def _resolve_expression(
    text: str, options: ParseOptions, resolver: NaturalLanguageResolver
) -> _Resolution | None:
    """One date expression: era scan, then the first stage that matches."""
    era = scan_era(text)
    if era is not None:
        text = era.splice(text)

    stages = (
        _parse_strict,
        _parse_tabular,
        partial(_parse_natural, resolver=resolver),
        _parse_literal,
    )
    for stage in stages:
        resolution = stage(text, options)
        if resolution is not None:
            return _apply_era(resolution, era) if era is not None else resolution
    return None


def _resolve_range(
    text: str, options: ParseOptions, resolver: NaturalLanguageResolver
) -> _Resolution | None:
    """Split "X to Y"; start and precision come from X, end from Y."""
    match = RANGE_RE.match(text)
    if not match:
        return None
    first = _resolve_expression(match.group("first"), options, resolver)
    if first is None:
        return None
    second = _resolve_expression(match.group("second"), options, resolver)
    if second is None:
        return None
    return replace(first, end=second.end or second.start)


def parse_event_date(
    text: str | None,
    options: ParseOptions | None = None,
    *,
    resolver: NaturalLanguageResolver | None = None,
) -> ParsedDate:
    """Parse a date expression into a ``ParsedDate``.

    Ranges ("X to Y", "X - Y") are split first and each side parsed on its
    own. A single expression runs through the stages in order and the first
    match wins: strict ISO grammar, tabular/relaxed grammar, natural language
    (relative phrases only with ``options.reference_date``), then a few
    literal formats. Approximation qualifiers and era markers are scanned
    independently of the stage that matched.

    Args:
        text: The date expression as written
        options: Resolution options; defaults to ``ParseOptions()``
        resolver: Natural-language resolver to use instead of the default

    Returns:
        ParsedDate; failures are reported in ``error``, never raised
    """
    if not text or not text.strip():
        return ParsedDate(error=DateParseError.EMPTY)

    options = options or ParseOptions()
    resolver = resolver or default_resolver
    source = text.strip()
    approximate = is_approximate(source)
    candidate = strip_qualifiers(source)

    resolution = _resolve_range(candidate, options, resolver) or _resolve_expression(
        candidate, options, resolver
    )
    if resolution is None:
        logger.debug("date_unparsed", text=source)
        return ParsedDate(error=DateParseError.UNPARSED)

    is_bce = bool(resolution.era and resolution.era.is_bce)
    return ParsedDate(
        start=resolution.start,
        end=resolution.end,
        precision=resolution.precision,
        approximate=approximate,
        is_bce=is_bce,
        original_year=resolution.written_year if is_bce else None,
    )


def to_millis(start: CalendarInstant | None) -> int | None:
    """Signed Unix milliseconds, ordered across the BCE/CE boundary."""
    if start is None:
        return None
    return start.to_millis()
