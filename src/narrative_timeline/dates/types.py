"""Parse results and options for date expressions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from narrative_timeline.config import CONFIG
from narrative_timeline.dates.instant import CalendarInstant


class Precision(str, Enum):
    """Finest granularity the author actually wrote."""

    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    TIME = "time"


class DateParseError(str, Enum):
    EMPTY = "empty"
    UNPARSED = "unparsed"


@dataclass
class ParsedDate:
    """Structured date with precision and era tracking.

    ``error`` and ``start`` are mutually exclusive. For BCE dates
    ``original_year`` keeps the year as written and ``start.year`` holds the
    astronomical year ``1 - original_year``.
    """

    start: CalendarInstant | None = None
    end: CalendarInstant | None = None
    precision: Precision | None = None
    approximate: bool = False
    is_bce: bool = False
    original_year: int | None = None
    error: DateParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.start is not None

    def to_millis(self) -> int | None:
        return self.start.to_millis() if self.start is not None else None


def _resolve_zone(value: str | int | None) -> tzinfo:
    if value is None:
        value = CONFIG.default_timezone
    if isinstance(value, int):
        return timezone(timedelta(minutes=value))
    if value.upper() in ("UTC", "Z"):
        return timezone.utc
    return ZoneInfo(value)


class ParseOptions(BaseModel):
    """How ambiguous or relative text is resolved.

    ``reference_date`` is the only anchor for relative phrases; when it is
    missing, phrases such as "next Friday" do not resolve.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    forward_date: bool = Field(
        default=CONFIG.forward_date,
        description="Prefer future dates for ambiguous relative phrases",
    )
    timezone: str | int | None = Field(
        default=None, description="IANA zone name or UTC offset in minutes"
    )
    reference_date: datetime | date | None = Field(
        default=None, description="Anchor for relative phrases"
    )
    locale: str | None = Field(default=None, description="Display locale only")

    @field_validator("timezone")
    @classmethod
    def _known_zone(cls, value: str | int | None) -> str | int | None:
        if isinstance(value, int):
            if abs(value) >= 24 * 60:
                raise ValueError(f"offset {value} minutes out of range")
            return value
        if value is not None:
            try:
                _resolve_zone(value)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"unknown timezone {value!r}") from e
        return value

    @property
    def tzinfo(self) -> tzinfo:
        return _resolve_zone(self.timezone)

    def reference_wall_time(self) -> datetime | None:
        """The anchor as a naive wall-clock time in the configured zone."""
        ref = self.reference_date
        if ref is None:
            return None
        if not isinstance(ref, datetime):
            return datetime(ref.year, ref.month, ref.day)
        if ref.tzinfo is not None:
            return ref.astimezone(self.tzinfo).replace(tzinfo=None)
        return ref
