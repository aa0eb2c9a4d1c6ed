"""
Tests for date normalization and calendar helpers.
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from utils.datetime_helpers import add_months, days_in_month, format_date_key, normalize_date

MANILA = ZoneInfo('Asia/Manila')


class FakeTimestamp:
    """Timestamp wrapper exposing to_datetime()."""

    def __init__(self, value):
        self.value = value

    def to_datetime(self):
        return self.value


class JsTimestamp:
    """Timestamp wrapper exposing toDate()."""

    def __init__(self, value):
        self.value = value

    def toDate(self):
        return self.value


class TestNormalizeDate:
    """Tests for normalize_date."""

    def test_date_and_naive_datetime(self):
        assert normalize_date(date(2025, 12, 1)) == date(2025, 12, 1)
        assert normalize_date(datetime(2025, 12, 1, 16, 0)) == date(2025, 12, 1)

    def test_aware_datetime_uses_timezone(self):
        """23:00 UTC is already the next day in Manila."""
        value = datetime(2025, 11, 30, 23, 0, tzinfo=timezone.utc)
        assert normalize_date(value, MANILA) == date(2025, 12, 1)

    def test_iso_strings(self):
        assert normalize_date('2025-12-01') == date(2025, 12, 1)
        assert normalize_date('2025-12-01T16:00:00') == date(2025, 12, 1)
        assert normalize_date('2025-11-30T18:00:00Z', MANILA) == date(2025, 12, 1)

    def test_epoch_milliseconds(self):
        millis = datetime(2025, 12, 1, 10, 0, tzinfo=MANILA).timestamp() * 1000
        assert normalize_date(millis, MANILA) == date(2025, 12, 1)
        assert normalize_date(int(millis), MANILA) == date(2025, 12, 1)

    def test_seconds_mapping(self):
        seconds = int(datetime(2025, 12, 1, 10, 0, tzinfo=MANILA).timestamp())
        assert normalize_date({'seconds': seconds, 'nanoseconds': 0}, MANILA) == date(2025, 12, 1)
        assert normalize_date({'_seconds': seconds}, MANILA) == date(2025, 12, 1)

    def test_timestamp_wrappers(self):
        value = datetime(2025, 12, 1, 9, 0)
        assert normalize_date(FakeTimestamp(value)) == date(2025, 12, 1)
        assert normalize_date(JsTimestamp(value)) == date(2025, 12, 1)

    @pytest.mark.parametrize('value', [
        None, '', 'not a date', '2025-02-30', True, [], {'foo': 1}, object(),
    ])
    def test_unparseable_values_return_none(self, value):
        assert normalize_date(value) is None


class TestCalendarHelpers:
    """Tests for month arithmetic."""

    def test_add_months_returns_first_of_month(self):
        assert add_months(date(2025, 11, 20), 1) == date(2025, 12, 1)
        assert add_months(date(2025, 11, 20), 0) == date(2025, 11, 1)

    def test_add_months_crosses_years(self):
        assert add_months(date(2025, 1, 15), -1) == date(2024, 12, 1)
        assert add_months(date(2025, 11, 20), 12) == date(2026, 11, 1)

    def test_days_in_month(self):
        assert days_in_month(2025, 12) == 31
        assert days_in_month(2024, 2) == 29

    def test_format_date_key(self):
        assert format_date_key(date(2025, 3, 7)) == '2025-03-07'
