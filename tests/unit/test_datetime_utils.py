"""Tests for day-granularity date helpers."""

from datetime import date, datetime, timezone

import pytest

from dashboard.shared.utils.datetime_utils import to_date, today_utc, utcnow


class TestToDate:
    def test_plain_date(self):
        assert to_date(date(2025, 6, 15)) == date(2025, 6, 15)

    def test_datetime_drops_time(self):
        assert to_date(datetime(2025, 6, 15, 23, 59)) == date(2025, 6, 15)

    def test_iso_strings(self):
        assert to_date("2025-06-15") == date(2025, 6, 15)
        assert to_date("2025-06-15T08:00:00Z") == date(2025, 6, 15)
        assert to_date(" 2025-06-15T08:00:00+05:45 ") == date(2025, 6, 15)

    def test_invalid_string(self):
        with pytest.raises(ValueError):
            to_date("15/06/2025")

    def test_invalid_type(self):
        with pytest.raises(TypeError):
            to_date(20250615)


class TestClock:
    def test_utcnow_is_aware(self):
        assert utcnow().tzinfo == timezone.utc

    def test_today_utc(self):
        assert today_utc() == datetime.now(timezone.utc).date()
