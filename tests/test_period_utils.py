"""Tests for period window resolution."""
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from opsboard.core.exceptions import InvalidDateRangeError, InvalidOffsetError, InvalidPeriodTypeError
from opsboard.services.pnl_reporting.period_utils import (
    PERIOD_TYPES,
    resolve_custom_period,
    resolve_period,
)

LONDON = ZoneInfo("Europe/London")

ONE_MS = timedelta(milliseconds=1)


class TestResolvePeriod:
    def test_monthly_current(self, now):
        window = resolve_period("monthly", 0, now)
        assert window.start == datetime(2025, 3, 1, tzinfo=LONDON)
        assert window.end == datetime(2025, 4, 1, tzinfo=LONDON) - ONE_MS
        assert window.label == "March 2025"
        assert window.type == "monthly"
        assert window.offset == 0

    def test_monthly_offset_crosses_year(self, now):
        window = resolve_period("monthly", 3, now)
        assert window.first_day == date(2024, 12, 1)
        assert window.last_day == date(2024, 12, 31)
        assert window.label == "December 2024"

    def test_daily_label(self, now):
        window = resolve_period("daily", 0, now)
        assert window.first_day == window.last_day == date(2025, 3, 17)
        assert window.label == "17 March 2025"

    def test_weekly_starts_on_monday(self):
        wednesday = datetime(2025, 3, 19, 9, 0, tzinfo=LONDON)
        window = resolve_period("weekly", 0, wednesday)
        assert window.first_day == date(2025, 3, 17)
        assert window.last_day == date(2025, 3, 23)
        assert window.label == "Week of 17 March 2025"

    def test_weekly_on_sunday_belongs_to_previous_monday(self):
        sunday = datetime(2025, 3, 23, 23, 0, tzinfo=LONDON)
        window = resolve_period("weekly", 1, sunday)
        assert window.first_day == date(2025, 3, 10)
        assert window.label == "Week of 10 March 2025"

    def test_quarterly_previous(self, now):
        window = resolve_period("quarterly", 1, now)
        assert window.first_day == date(2024, 10, 1)
        assert window.last_day == date(2024, 12, 31)
        assert window.label == "Q4 2024"

    def test_quarterly_current(self, now):
        window = resolve_period("quarterly", 0, now)
        assert window.first_day == date(2025, 1, 1)
        assert window.last_day == date(2025, 3, 31)
        assert window.label == "Q1 2025"

    def test_yearly(self, now):
        window = resolve_period("yearly", 1, now)
        assert window.first_day == date(2024, 1, 1)
        assert window.last_day == date(2024, 12, 31)
        assert window.label == "2024"

    @pytest.mark.parametrize("period_type", PERIOD_TYPES)
    def test_current_window_contains_now(self, period_type, now):
        window = resolve_period(period_type, 0, now)
        assert window.start <= now <= window.end
        assert window.start.tzinfo is now.tzinfo

    @pytest.mark.parametrize("period_type", PERIOD_TYPES)
    @pytest.mark.parametrize("offset", [0, 1, 5])
    def test_consecutive_windows_are_adjacent(self, period_type, offset, now):
        newer = resolve_period(period_type, offset, now)
        older = resolve_period(period_type, offset + 1, now)
        assert older.end + ONE_MS == newer.start

    def test_unknown_period_type(self, now):
        with pytest.raises(InvalidPeriodTypeError) as exc_info:
            resolve_period("fortnightly", 0, now)
        assert exc_info.value.code == "RPT300"
        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("offset", [-1, 1.5, "1", True])
    def test_invalid_offset(self, offset, now):
        with pytest.raises(InvalidOffsetError) as exc_info:
            resolve_period("monthly", offset, now)
        assert exc_info.value.code == "RPT301"


class TestWindowMembership:
    def test_bounds_are_inclusive(self, now):
        window = resolve_period("monthly", 0, now)
        assert window.includes(window.start)
        assert window.includes(window.end)
        assert not window.includes(window.end + ONE_MS)
        assert not window.includes(window.start - ONE_MS)

    def test_dates_on_edges(self, now):
        window = resolve_period("monthly", 0, now)
        assert window.includes(date(2025, 3, 1))
        assert window.includes(date(2025, 3, 31))
        assert not window.includes(date(2025, 4, 1))

    def test_aware_values_are_converted(self, now):
        window = resolve_period("monthly", 0, now)
        # 23:30 UTC on 31 March is 00:30 BST on 1 April
        assert not window.includes(datetime(2025, 3, 31, 23, 30, tzinfo=timezone.utc))
        assert window.includes(datetime(2025, 3, 31, 22, 30, tzinfo=timezone.utc))

    def test_aware_value_against_naive_window_is_read_as_utc(self):
        window = resolve_custom_period(date(2025, 3, 1), date(2025, 3, 31))
        assert window.start.tzinfo is None
        # 00:30 on 1 April in Paris is 22:30 UTC on 31 March
        assert window.includes(datetime(2025, 4, 1, 0, 30, tzinfo=ZoneInfo("Europe/Paris")))
        assert not window.includes(datetime(2025, 4, 1, 0, 30, tzinfo=timezone.utc))


class TestCustomPeriod:
    def test_whole_days(self, now):
        window = resolve_custom_period(date(2025, 3, 1), date(2025, 3, 15), now)
        assert window.type == "custom"
        assert window.start == datetime(2025, 3, 1, tzinfo=LONDON)
        assert window.end == datetime(2025, 3, 16, tzinfo=LONDON) - ONE_MS
        assert window.label == "1 Mar 2025 to 15 Mar 2025"

    def test_single_day(self, now):
        window = resolve_custom_period(date(2025, 3, 5), date(2025, 3, 5), now)
        assert window.first_day == window.last_day == date(2025, 3, 5)

    def test_inverted_range(self, now):
        with pytest.raises(InvalidDateRangeError) as exc_info:
            resolve_custom_period(date(2025, 3, 15), date(2025, 3, 1), now)
        assert exc_info.value.code == "RPT302"

    def test_missing_bound(self, now):
        with pytest.raises(InvalidDateRangeError):
            resolve_custom_period(date(2025, 3, 1), None, now)
