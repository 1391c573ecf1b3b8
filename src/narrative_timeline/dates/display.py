"""Human-readable rendering of parsed dates."""

from __future__ import annotations

from babel import Locale, UnknownLocaleError
from babel.dates import format_skeleton, format_time, get_month_names

from narrative_timeline.config import CONFIG
from narrative_timeline.dates.instant import CalendarInstant
from narrative_timeline.models.entities import Event


def _locale(locale: str | None) -> Locale:
    name = (locale or CONFIG.default_locale).replace("-", "_")
    try:
        return Locale.parse(name)
    except (UnknownLocaleError, ValueError):
        return Locale.parse(CONFIG.default_locale.replace("-", "_"))


def _format_bce(start: CalendarInstant, original_year: int, locale: Locale) -> str:
    year = f"{original_year} BCE"
    if start.month == 1 and start.day == 1:
        return year
    month = get_month_names("wide", locale=locale)[start.month]
    if start.day == 1:
        return f"{month} {year}"
    return f"{month} {start.day}, {year}"


def to_display(
    start: CalendarInstant | None,
    locale: str | None = None,
    is_bce: bool = False,
    original_year: int | None = None,
) -> str:
    """Render a parsed start for people.

    BCE dates are rebuilt from the year the author wrote ("March 15, 44 BCE"),
    never from the internal astronomical year. CE dates use the locale's
    medium date with weekday plus a short time.
    """
    if start is None:
        return ""

    loc = _locale(locale)
    if is_bce and original_year:
        return _format_bce(start, original_year, loc)
    if start.year <= 0:
        return _format_bce(start, 1 - start.year, loc)
    if not start.in_datetime_range:
        return start.isoformat()

    value = start.to_datetime()
    date_part = format_skeleton("yMMMEd", value, locale=loc)
    time_part = format_time(value, format="short", locale=loc)
    return f"{date_part}, {time_part}"


def event_date_for_timeline(event: Event) -> str | None:
    """The raw date text used to place an event on a timeline."""
    return event.date_time
