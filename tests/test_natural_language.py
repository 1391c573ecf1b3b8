"""Tests for natural-language date resolution."""
from __future__ import annotations

from datetime import datetime

import pytest

from narrative_timeline.dates import DateParseError, ParseOptions, Precision, parse_event_date
from narrative_timeline.dates.natural import DateparserResolver, resolve_relative_phrase

# A Monday
REFERENCE = datetime(2024, 1, 15)


class TestRelativePhrases:
    """Rule-based weekday, week, weekend, month and year phrases."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("next Friday", datetime(2024, 1, 19)),
            ("last Friday", datetime(2024, 1, 12)),
            ("this Friday", datetime(2024, 1, 19)),
            ("this Monday", datetime(2024, 1, 15)),
            ("next Monday", datetime(2024, 1, 22)),
            ("previous tue", datetime(2024, 1, 9)),
        ],
    )
    def test_weekdays(self, text, expected):
        result = resolve_relative_phrase(text, REFERENCE)
        assert result.start == expected
        assert result.precision == Precision.DAY
        assert result.end is None

    def test_next_weekend(self):
        result = resolve_relative_phrase("next weekend", REFERENCE)
        assert result.start == datetime(2024, 1, 27)
        assert result.end == datetime(2024, 1, 28)

    def test_this_weekend(self):
        result = resolve_relative_phrase("this weekend", REFERENCE)
        assert (result.start, result.end) == (datetime(2024, 1, 20), datetime(2024, 1, 21))

    def test_this_weekend_on_sunday(self):
        result = resolve_relative_phrase("this weekend", datetime(2024, 1, 21, 18, 0))
        assert result.start == datetime(2024, 1, 20)

    def test_next_week(self):
        result = resolve_relative_phrase("next week", REFERENCE)
        assert (result.start, result.end) == (datetime(2024, 1, 22), datetime(2024, 1, 28))

    def test_last_month(self):
        result = resolve_relative_phrase("last month", REFERENCE)
        assert result.start == datetime(2023, 12, 1)
        assert result.end == datetime(2023, 12, 31)
        assert result.precision == Precision.MONTH

    def test_next_year(self):
        result = resolve_relative_phrase("next year", REFERENCE)
        assert (result.start, result.end) == (datetime(2025, 1, 1), datetime(2025, 12, 31))
        assert result.precision == Precision.YEAR

    def test_time_of_day_dropped(self):
        result = resolve_relative_phrase("next friday", datetime(2024, 1, 15, 17, 45))
        assert result.start == datetime(2024, 1, 19)

    def test_other_phrases_left_alone(self):
        assert resolve_relative_phrase("tomorrow", REFERENCE) is None
        assert resolve_relative_phrase("next fortnight", REFERENCE) is None


class TestDateparserResolver:
    """Tests for the default resolver."""

    @pytest.fixture
    def resolver(self):
        return DateparserResolver(languages=["en"])

    def test_tomorrow(self, resolver):
        result = resolver("tomorrow", REFERENCE)
        assert result.start.date() == datetime(2024, 1, 16).date()
        assert result.precision == Precision.DAY

    def test_in_days(self, resolver):
        result = resolver("in 3 days", REFERENCE)
        assert result.start.date() == datetime(2024, 1, 18).date()

    def test_relative_rules_win(self, resolver):
        assert resolver("next weekend", REFERENCE).end == datetime(2024, 1, 28)

    def test_decades_not_read_as_seconds(self, resolver):
        assert resolver("1850s", REFERENCE) is None
        assert resolver("the 1920's", REFERENCE) is None

    def test_absolute_phrase_without_reference(self, resolver):
        result = resolver("the 5th of March, 1066", None)
        assert result.start == datetime(1066, 3, 5)
        assert result.precision == Precision.DAY

    def test_relative_phrase_needs_reference(self, resolver):
        assert resolver("next friday", None) is None
        assert resolver("tomorrow", None) is None

    def test_gibberish(self, resolver):
        assert resolver("qwerty zxcv", REFERENCE) is None


class TestParserIntegration:
    """Relative phrases through parse_event_date."""

    def test_weekend_has_range(self):
        result = parse_event_date("next weekend", ParseOptions(reference_date=REFERENCE))
        assert (result.start.month, result.start.day) == (1, 27)
        assert (result.end.month, result.end.day) == (1, 28)
        assert result.precision == Precision.DAY

    def test_reference_date_changes_answer(self):
        early = parse_event_date("next friday", ParseOptions(reference_date=datetime(2024, 1, 15)))
        later = parse_event_date("next friday", ParseOptions(reference_date=datetime(2024, 1, 22)))
        assert later.to_millis() - early.to_millis() == 7 * 86_400_000

    def test_relative_range(self):
        result = parse_event_date(
            "from this monday to this friday", ParseOptions(reference_date=REFERENCE)
        )
        assert (result.start.month, result.start.day) == (1, 15)
        assert (result.end.month, result.end.day) == (1, 19)

    def test_decade_unparsed(self):
        result = parse_event_date("1850s", ParseOptions(reference_date=REFERENCE))
        assert result.error == DateParseError.UNPARSED

    def test_approximate_relative(self):
        result = parse_event_date("around next friday", ParseOptions(reference_date=REFERENCE))
        assert result.approximate
        assert result.start.day == 19
