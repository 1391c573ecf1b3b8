"""Tests for astronomical-year calendar instants."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from narrative_timeline.dates.instant import (
    CalendarInstant,
    days_from_civil,
    days_in_month,
    is_leap_year,
)

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def unix_millis(value: datetime) -> int:
    return (value - EPOCH) // timedelta(milliseconds=1)


class TestCalendarArithmetic:
    """Tests for the proleptic Gregorian helpers."""

    def test_epoch_is_day_zero(self):
        assert days_from_civil(1970, 1, 1) == 0
        assert days_from_civil(1969, 12, 31) == -1

    @pytest.mark.parametrize(
        "year,month,day",
        [(1, 1, 1), (1600, 2, 29), (1999, 12, 31), (2024, 3, 2), (9999, 12, 31)],
    )
    def test_days_agree_with_datetime(self, year, month, day):
        expected = (datetime(year, month, day, tzinfo=UTC) - EPOCH).days
        assert days_from_civil(year, month, day) == expected

    def test_year_zero_is_leap(self):
        """Year 0 (1 BCE) is a leap year in astronomical numbering."""
        assert is_leap_year(0)
        assert is_leap_year(-4)
        assert not is_leap_year(-1)
        assert not is_leap_year(-100)
        assert days_in_month(0, 2) == 29

    def test_year_zero_follows_year_minus_one(self):
        assert days_from_civil(0, 1, 1) - days_from_civil(-1, 12, 31) == 1
        assert days_from_civil(1, 1, 1) - days_from_civil(0, 12, 31) == 1


class TestCalendarInstant:
    """Tests for CalendarInstant."""

    def test_millis_match_unix_time(self):
        instant = CalendarInstant(2024, 3, 2, 10, 30, 15, 250_000)
        assert instant.to_millis() == unix_millis(datetime(2024, 3, 2, 10, 30, 15, 250_000, tzinfo=UTC))

    def test_offset_shifts_instant(self):
        utc = CalendarInstant(2024, 1, 1)
        plus_one = CalendarInstant(2024, 1, 1, utc_offset=3600)
        assert utc.to_millis() - plus_one.to_millis() == 3_600_000

    def test_bce_orders_before_ce(self):
        bce = CalendarInstant(year=-99)  # 100 BCE
        ce = CalendarInstant(year=100)
        assert bce.to_millis() < CalendarInstant(year=0).to_millis() < ce.to_millis()

    def test_rejects_invalid_fields(self):
        with pytest.raises(ValueError):
            CalendarInstant(2024, 13, 1)
        with pytest.raises(ValueError):
            CalendarInstant(-1, 2, 29)
        with pytest.raises(ValueError):
            CalendarInstant(2024, 1, 1, hour=24)

    def test_leap_day_in_year_zero(self):
        assert CalendarInstant(0, 2, 29).day == 29

    def test_with_year_validates(self):
        leap = CalendarInstant(2000, 2, 29)
        assert leap.with_year(-44).year == -44
        with pytest.raises(ValueError):
            leap.with_year(-43)

    def test_weekday(self):
        assert CalendarInstant(2024, 3, 2).weekday == 5  # Saturday
        assert CalendarInstant(1970, 1, 1).weekday == 3  # Thursday

    def test_datetime_round_trip(self):
        original = datetime(2024, 3, 2, 8, 15, tzinfo=ZoneInfo("Europe/Paris"))
        instant = CalendarInstant.from_datetime(original)
        assert instant.utc_offset == 3600
        assert instant.to_datetime() == original

    def test_naive_datetime_uses_default_zone(self):
        instant = CalendarInstant.from_datetime(
            datetime(2024, 7, 1, 12, 0), default_tz=ZoneInfo("America/New_York")
        )
        assert instant.utc_offset == -4 * 3600

    def test_to_datetime_out_of_range(self):
        with pytest.raises(ValueError):
            CalendarInstant(year=0).to_datetime()

    def test_localize(self):
        instant = CalendarInstant.localize(ZoneInfo("America/New_York"), 2024, 1, 15, 9)
        assert instant.utc_offset == -5 * 3600
        assert instant.hour == 9

    def test_isoformat_extended_year(self):
        assert CalendarInstant(year=-99).isoformat() == "-000099-01-01T00:00:00.000+00:00"
        assert CalendarInstant(2024, 3, 2, utc_offset=-18000).isoformat() == (
            "2024-03-02T00:00:00.000-05:00"
        )
