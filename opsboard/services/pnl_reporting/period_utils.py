"""Period window calculation utilities.

Turns a period type and an offset (0 = current period, 1 = previous, ...)
into a concrete ``[start, end]`` window. "Now" is always passed in; nothing
here reads the system clock.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple

from opsboard.core.exceptions import (
    InvalidDateRangeError,
    InvalidOffsetError,
    InvalidPeriodTypeError,
)

PERIOD_TYPES: Tuple[str, ...] = ("daily", "weekly", "monthly", "quarterly", "yearly")
CUSTOM_PERIOD = "custom"

# Weeks start on Monday (datetime.weekday() == 0)
WEEK_ANCHOR_WEEKDAY = 0

_ONE_MS = timedelta(milliseconds=1)


@dataclass(frozen=True)
class PeriodWindow:
    """A resolved reporting window. ``start`` and ``end`` are both inclusive."""

    type: str
    start: datetime
    end: datetime
    label: str
    offset: int = 0

    def includes(self, value: date | datetime) -> bool:
        """Closed-interval membership test for a date or datetime.

        A bare date is read as midnight of that day. Naive datetimes are read
        in the window's timezone; aware ones are converted to it. A naive
        window is taken to be UTC.
        """
        if not isinstance(value, datetime):
            value = datetime.combine(value, time.min)
        tz = self.start.tzinfo
        if value.tzinfo is None:
            value = value.replace(tzinfo=tz)
        elif tz is None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        else:
            value = value.astimezone(tz)
        return self.start <= value <= self.end

    @property
    def first_day(self) -> date:
        return self.start.date()

    @property
    def last_day(self) -> date:
        return self.end.date()


def validate_offset(offset: object) -> int:
    """Return ``offset`` if it is a non-negative integer, else raise."""
    # bool is an int subclass but never a meaningful offset
    if isinstance(offset, bool) or not isinstance(offset, int):
        raise InvalidOffsetError(offset)
    if offset < 0:
        raise InvalidOffsetError(offset)
    return offset


def _midnight(day: date, now: datetime) -> datetime:
    return datetime.combine(day, time.min, tzinfo=now.tzinfo)


def _shift_month(year: int, month: int, months_back: int) -> Tuple[int, int]:
    """Move (year, month) back by ``months_back`` whole months."""
    index = year * 12 + (month - 1) - months_back
    return index // 12, index % 12 + 1


def _month_start(year: int, month: int, now: datetime) -> datetime:
    return _midnight(date(year, month, 1), now)


def _next_month_start(year: int, month: int, now: datetime) -> datetime:
    year, month = _shift_month(year, month, -1)
    return _month_start(year, month, now)


def _format_day(day: date) -> str:
    return f"{day.day} {day.strftime('%B %Y')}"


def resolve_period(period_type: str, offset: int, now: datetime) -> PeriodWindow:
    """Resolve ``period_type`` and ``offset`` into a window relative to ``now``.

    Args:
        period_type: 'daily', 'weekly', 'monthly', 'quarterly' or 'yearly'
        offset: Whole periods to step back from the current one (0 = current)
        now: The reference instant; its tzinfo is carried onto the window

    Returns:
        PeriodWindow with inclusive start/end and a display label

    Raises:
        InvalidPeriodTypeError: Unknown period type
        InvalidOffsetError: Negative or non-integer offset
    """
    if period_type not in PERIOD_TYPES:
        raise InvalidPeriodTypeError(period_type, PERIOD_TYPES)
    offset = validate_offset(offset)
    today = now.date()

    if period_type == "daily":
        day = today - timedelta(days=offset)
        start = _midnight(day, now)
        end = start + timedelta(days=1) - _ONE_MS
        label = _format_day(day)

    elif period_type == "weekly":
        days_since_anchor = (today.weekday() - WEEK_ANCHOR_WEEKDAY) % 7
        week_start = today - timedelta(days=days_since_anchor) - timedelta(weeks=offset)
        start = _midnight(week_start, now)
        end = start + timedelta(days=7) - _ONE_MS
        label = f"Week of {_format_day(week_start)}"

    elif period_type == "monthly":
        year, month = _shift_month(today.year, today.month, offset)
        start = _month_start(year, month, now)
        end = _next_month_start(year, month, now) - _ONE_MS
        label = start.strftime("%B %Y")

    elif period_type == "quarterly":
        year, month = _shift_month(today.year, today.month, offset * 3)
        quarter = (month - 1) // 3
        first_month = quarter * 3 + 1
        start = _month_start(year, first_month, now)
        end = _next_month_start(year, first_month + 2, now) - _ONE_MS
        label = f"Q{quarter + 1} {year}"

    else:  # yearly
        year = today.year - offset
        start = _midnight(date(year, 1, 1), now)
        end = _midnight(date(year + 1, 1, 1), now) - _ONE_MS
        label = str(year)

    return PeriodWindow(type=period_type, start=start, end=end, label=label, offset=offset)


def resolve_custom_period(start_date: date, end_date: date, now: datetime | None = None) -> PeriodWindow:
    """Build a window covering whole days from ``start_date`` to ``end_date``.

    ``now`` only supplies the timezone for the window bounds.

    Raises:
        InvalidDateRangeError: Missing bound or start after end
    """
    if start_date is None or end_date is None:
        raise InvalidDateRangeError(
            start_date, end_date, reason="Custom period requires startDate and endDate"
        )
    if start_date > end_date:
        raise InvalidDateRangeError(start_date, end_date)

    tz_source = now or datetime.min
    start = _midnight(start_date, tz_source)
    end = _midnight(end_date + timedelta(days=1), tz_source) - _ONE_MS
    label = f"{start_date.day} {start_date.strftime('%b %Y')} to {end_date.day} {end_date.strftime('%b %Y')}"
    return PeriodWindow(type=CUSTOM_PERIOD, start=start, end=end, label=label)
