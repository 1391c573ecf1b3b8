"""Natural-language date resolution.

The parser reaches this stage through the narrow ``NaturalLanguageResolver``
protocol: one expression plus an optional anchor in, naive wall-clock start
(and optional end) out. The default implementation answers relative calendar
phrases ("next weekend", "last month") itself, so they can produce ranges,
and hands everything else to ``dateparser`` with its relative base pinned to
the anchor. Without an anchor only absolute phrases stating a year resolve.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, Sequence

from dateparser.date import DateDataParser
from dateutil.relativedelta import FR, MO, SA, SU, TH, TU, WE, relativedelta

from narrative_timeline.config import CONFIG
from narrative_timeline.dates.types import Precision
from narrative_timeline.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class NaturalResolution:
    """Naive wall-clock result of a natural-language phrase."""

    start: datetime
    precision: Precision
    end: datetime | None = None


class NaturalLanguageResolver(Protocol):
    def __call__(
        self, text: str, reference: datetime | None, *, prefer_future: bool = False
    ) -> NaturalResolution | None: ...


WEEKDAYS = {
    "monday": MO, "mon": MO,
    "tuesday": TU, "tue": TU, "tues": TU,
    "wednesday": WE, "wed": WE,
    "thursday": TH, "thu": TH, "thur": TH, "thurs": TH,
    "friday": FR, "fri": FR,
    "saturday": SA, "sat": SA,
    "sunday": SU, "sun": SU,
}

# Offset in whole units relative to the current week/weekend/month/year
MODIFIER_SHIFT = {"this": 0, "coming": 0, "next": 1, "last": -1, "previous": -1}

_RELATIVE_RE = re.compile(
    r"^(?P<modifier>this|coming|next|last|previous)\s+"
    r"(?P<unit>week-?end|week|month|year|" + "|".join(sorted(WEEKDAYS, key=len, reverse=True)) + r")$",
    re.IGNORECASE,
)
_RELATIVE_WORD_RE = re.compile(
    r"\b(?:ago|in|within|after|before|later|earlier|hence|next|last|this|previous|coming"
    r"|now|today|tonight|yesterday|tomorrow)\b",
    re.IGNORECASE,
)
_DECADE_RE = re.compile(r"\b\d{1,3}0'?s\b", re.IGNORECASE)
_TIME_RE = re.compile(
    r"\d{1,2}:\d{2}"
    r"|\b\d{1,2}\s*(?:am|pm|a\.m\.|p\.m\.)"
    r"|\b(?:noon|midnight)\b"
    r"|\b(?:hours?|minutes?|seconds?|hrs?|mins?|secs?)\b",
    re.IGNORECASE,
)

# dateparser parsers that read a date from the text itself, never as an offset from now
ABSOLUTE_PARSERS = ("custom-formats", "absolute-time")

_PERIOD_PRECISION = {
    "time": Precision.TIME,
    "day": Precision.DAY,
    "week": Precision.DAY,
    "month": Precision.MONTH,
    "year": Precision.YEAR,
}


def resolve_relative_phrase(text: str, reference: datetime) -> NaturalResolution | None:
    """Resolve "this/next/last <weekday|week|weekend|month|year>".

    Weekdays: "next" is the first such day strictly after the anchor, "last"
    the first strictly before, "this" the first on or after. Weeks run Monday
    to Sunday; "this weekend" is the upcoming Saturday (or the current one on
    a Sunday) and "next"/"last" shift it by a week.
    """
    match = _RELATIVE_RE.match(text.strip())
    if not match:
        return None

    modifier = match.group("modifier").lower()
    unit = match.group("unit").lower().replace("-", "")
    shift = MODIFIER_SHIFT[modifier]
    base = reference.replace(hour=0, minute=0, second=0, microsecond=0)

    if unit in WEEKDAYS:
        weekday = WEEKDAYS[unit]
        if modifier == "next":
            start = base + relativedelta(days=+1, weekday=weekday(+1))
        elif shift < 0:
            start = base + relativedelta(days=-1, weekday=weekday(-1))
        else:
            start = base + relativedelta(weekday=weekday(+1))
        return NaturalResolution(start=start, precision=Precision.DAY)

    if unit == "week":
        start = base + relativedelta(weekday=MO(-1), weeks=shift)
        return NaturalResolution(
            start=start, end=start + relativedelta(days=6), precision=Precision.DAY
        )

    if unit == "weekend":
        if base.weekday() == 6:
            saturday = base + relativedelta(weekday=SA(-1))
        else:
            saturday = base + relativedelta(weekday=SA(+1))
        start = saturday + relativedelta(weeks=shift)
        return NaturalResolution(
            start=start, end=start + relativedelta(days=1), precision=Precision.DAY
        )

    if unit == "month":
        start = base.replace(day=1) + relativedelta(months=shift)
        return NaturalResolution(
            start=start,
            end=start + relativedelta(months=1, days=-1),
            precision=Precision.MONTH,
        )

    start = base.replace(month=1, day=1) + relativedelta(years=shift)
    return NaturalResolution(
        start=start, end=start.replace(month=12, day=31), precision=Precision.YEAR
    )


class DateparserResolver:
    """Default resolver: relative rules first, then ``dateparser``.

    Without a reference only absolute phrases that state a year resolve.
    ``dateparser``'s relative-time parser runs only for text with a relative
    keyword, so "1850s" is not read as 1850 seconds ago.
    """

    def __init__(self, languages: Sequence[str] | None = None):
        self.languages = list(languages or CONFIG.languages)

    def __call__(
        self, text: str, reference: datetime | None, *, prefer_future: bool = False
    ) -> NaturalResolution | None:
        text = text.strip()
        if _DECADE_RE.search(text):
            return None
        if reference is not None:
            relative = resolve_relative_phrase(text, reference)
            if relative is not None:
                return relative

        parsers = list(ABSOLUTE_PARSERS)
        settings = {
            "PREFER_DATES_FROM": "future" if prefer_future else "current_period",
            "PREFER_DAY_OF_MONTH": "first",
            "TIMEZONE": "UTC",
            "RETURN_AS_TIMEZONE_AWARE": False,
        }
        if reference is None:
            settings["REQUIRE_PARTS"] = ["year"]
        else:
            settings["RELATIVE_BASE"] = reference
            if _RELATIVE_WORD_RE.search(text):
                parsers.insert(0, "relative-time")
        settings["PARSERS"] = parsers

        parser = DateDataParser(languages=self.languages, settings=settings)
        try:
            data = parser.get_date_data(text)
        except (ValueError, OverflowError) as e:
            logger.debug("dateparser_rejected", text=text, error=str(e))
            return None
        if data is None or data.date_obj is None:
            return None

        precision = _PERIOD_PRECISION.get(data.period or "day", Precision.DAY)
        if _TIME_RE.search(text):
            precision = Precision.TIME
        start = data.date_obj
        if start.tzinfo is not None:
            start = start.replace(tzinfo=None)
        # Unstated fields start the period
        if precision == Precision.YEAR:
            start = start.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
        elif precision == Precision.MONTH:
            start = start.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        return NaturalResolution(start=start, precision=precision)


default_resolver: NaturalLanguageResolver = DateparserResolver()
