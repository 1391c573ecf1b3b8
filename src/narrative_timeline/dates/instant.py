"""Calendar instants that extend below year 1.

The standard library ``datetime`` stops at year 1, but narrative timelines
routinely reach into the BCE era. ``CalendarInstant`` uses astronomical year
numbering on the proleptic Gregorian calendar (1 BCE is year 0, 100 BCE is
year -99), so BCE and CE instants share one signed millisecond axis with no
year-zero gap.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import MAXYEAR, MINYEAR, datetime, timedelta, timezone, tzinfo

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

_MS_PER_SECOND = 1000
_SECONDS_PER_DAY = 86_400


def is_leap_year(year: int) -> bool:
    """Leap rule for astronomical years (year 0 is a leap year)."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    if month == 2:
        return 29 if is_leap_year(year) else 28
    if month in (4, 6, 9, 11):
        return 30
    return 31


def days_from_civil(year: int, month: int, day: int) -> int:
    """Days since 1970-01-01 for a proleptic Gregorian date.

    Floor division keeps this exact for negative years.
    """
    y = year - 1 if month <= 2 else year
    era = y // 400
    yoe = y - era * 400
    mp = month - 3 if month > 2 else month + 9
    doy = (153 * mp + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146_097 + doe - 719_468


def utc_offset_seconds(
    tz: tzinfo, year: int, month: int, day: int, hour: int = 0, minute: int = 0
) -> int:
    """Offset of ``tz`` at a wall-clock time, using year 1 or 9999 out of range."""
    clamped_year = min(max(year, MINYEAR), MAXYEAR)
    clamped_day = min(day, days_in_month(clamped_year, month))
    sample = datetime(clamped_year, month, clamped_day, hour, minute)
    offset = tz.utcoffset(sample)
    if offset is None:
        return 0
    return int(offset.total_seconds())


@dataclass(frozen=True)
class CalendarInstant:
    """A wall-clock reading plus its UTC offset, valid for any signed year."""

    year: int
    month: int = 1
    day: int = 1
    hour: int = 0
    minute: int = 0
    second: int = 0
    microsecond: int = 0
    utc_offset: int = 0  # seconds east of UTC

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month {self.month} out of range")
        if not 1 <= self.day <= days_in_month(self.year, self.month):
            raise ValueError(f"day {self.day} out of range for {self.year}-{self.month:02d}")
        if not 0 <= self.hour <= 23:
            raise ValueError(f"hour {self.hour} out of range")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"minute {self.minute} out of range")
        if not 0 <= self.second <= 59:
            raise ValueError(f"second {self.second} out of range")
        if not 0 <= self.microsecond <= 999_999:
            raise ValueError(f"microsecond {self.microsecond} out of range")
        if abs(self.utc_offset) >= _SECONDS_PER_DAY:
            raise ValueError(f"utc offset {self.utc_offset}s out of range")

    @classmethod
    def from_datetime(cls, value: datetime, default_tz: tzinfo | None = None) -> CalendarInstant:
        """Build from a ``datetime``; naive values are read in ``default_tz`` (UTC if unset)."""
        if value.tzinfo is not None and value.utcoffset() is not None:
            offset = int(value.utcoffset().total_seconds())
        else:
            offset = utc_offset_seconds(
                default_tz or timezone.utc,
                value.year, value.month, value.day, value.hour, value.minute,
            )
        return cls(
            year=value.year,
            month=value.month,
            day=value.day,
            hour=value.hour,
            minute=value.minute,
            second=value.second,
            microsecond=value.microsecond,
            utc_offset=offset,
        )

    @classmethod
    def localize(
        cls,
        tz: tzinfo,
        year: int,
        month: int = 1,
        day: int = 1,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        microsecond: int = 0,
    ) -> CalendarInstant:
        """Wall-clock fields read in ``tz``."""
        return cls(
            year=year,
            month=month,
            day=day,
            hour=hour,
            minute=minute,
            second=second,
            microsecond=microsecond,
            utc_offset=utc_offset_seconds(tz, year, month, day, hour, minute),
        )

    @property
    def in_datetime_range(self) -> bool:
        return MINYEAR <= self.year <= MAXYEAR

    @property
    def weekday(self) -> int:
        """Monday is 0, as ``datetime.weekday``."""
        # 1970-01-01 was a Thursday
        return (days_from_civil(self.year, self.month, self.day) + 3) % 7

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month - 1]

    def with_year(self, year: int) -> CalendarInstant:
        return replace(self, year=year)

    def shift_years(self, years: int) -> CalendarInstant:
        return replace(self, year=self.year + years)

    def to_millis(self) -> int:
        """Signed milliseconds since the Unix epoch."""
        days = days_from_civil(self.year, self.month, self.day)
        seconds = (
            days * _SECONDS_PER_DAY
            + self.hour * 3600
            + self.minute * 60
            + self.second
            - self.utc_offset
        )
        return seconds * _MS_PER_SECOND + self.microsecond // 1000

    def to_datetime(self) -> datetime:
        """Aware ``datetime`` with a fixed offset.

        Raises:
            ValueError: if the year is outside 1..9999.
        """
        if not self.in_datetime_range:
            raise ValueError(f"year {self.year} cannot be represented as a datetime")
        return datetime(
            self.year,
            self.month,
            self.day,
            self.hour,
            self.minute,
            self.second,
            self.microsecond,
            tzinfo=timezone(timedelta(seconds=self.utc_offset)),
        )

    def isoformat(self) -> str:
        if 0 <= self.year <= 9999:
            year = f"{self.year:04d}"
        else:
            year = f"{self.year:+07d}"
        sign = "+" if self.utc_offset >= 0 else "-"
        hours, rem = divmod(abs(self.utc_offset), 3600)
        offset = f"{sign}{hours:02d}:{rem // 60:02d}"
        return (
            f"{year}-{self.month:02d}-{self.day:02d}"
            f"T{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
            f".{self.microsecond // 1000:03d}{offset}"
        )
