"""Recurring cost proration.

Apportions a recurring business cost to the calendar days of a period window
it was active for. Returned amounts keep full ``Decimal`` precision; rounding
to pence happens once, when the report is composed.

Day-count policy
----------------
Daily rates use fixed divisors (30 / 91 / 365) rather than the real length of
each month or quarter. Changing them changes every historical report, so they
are module constants and covered by tests.

Within the overlap, a calendar month that is covered completely is charged
its monthly-equivalent amount (amount, amount/3, amount/12 for monthly,
quarterly, yearly costs). A partly covered month is charged daily rate x
days, capped at the monthly equivalent.

The overlap is inclusive on both ends: a cost whose ``end_date`` is the
window's first day contributes exactly one day.
"""
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterator, Optional, Tuple

from opsboard.core.exceptions import MalformedCostDefinitionError

from .period_utils import PeriodWindow

DAILY_RATE_DIVISORS = {
    "monthly": Decimal("30"),
    "quarterly": Decimal("91"),
    "yearly": Decimal("365"),
}

# Billing periods per month, used for the full-month charge
MONTHLY_EQUIVALENT_DIVISORS = {
    "monthly": Decimal("1"),
    "quarterly": Decimal("3"),
    "yearly": Decimal("12"),
}


def _to_date(value) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


def _month_end(day: date) -> date:
    if day.month == 12:
        return date(day.year, 12, 31)
    return date(day.year, day.month + 1, 1) - timedelta(days=1)


def _month_segments(first: date, last: date) -> Iterator[Tuple[date, date, bool]]:
    """Split ``[first, last]`` by calendar month.

    Yields (segment_start, segment_end, covers_whole_month).
    """
    cursor = first
    while cursor <= last:
        month_last = _month_end(cursor)
        segment_end = min(month_last, last)
        whole = cursor.day == 1 and segment_end == month_last
        yield cursor, segment_end, whole
        cursor = segment_end + timedelta(days=1)


def active_overlap(cost, window: PeriodWindow) -> Optional[Tuple[date, date]]:
    """Calendar days on which ``cost`` is active inside ``window``, or None."""
    effective = _to_date(cost.effective_date)
    if effective is None:
        raise MalformedCostDefinitionError(getattr(cost, "id", None), "missing effective_date")
    end = _to_date(cost.end_date)

    first = max(effective, window.first_day)
    last = window.last_day if end is None else min(end, window.last_day)
    if first > last:
        return None
    return first, last


def daily_rate(cost) -> Decimal:
    """Canonical daily rate of a recurring cost."""
    frequency = cost.frequency
    if not frequency:
        raise MalformedCostDefinitionError(getattr(cost, "id", None), "recurring cost has no frequency")
    divisor = DAILY_RATE_DIVISORS.get(frequency)
    if divisor is None:
        raise MalformedCostDefinitionError(getattr(cost, "id", None), f"unknown frequency {frequency!r}")
    return Decimal(str(cost.amount)) / divisor


def prorate_recurring_cost(cost, window: PeriodWindow) -> Decimal:
    """Portion of a recurring cost attributable to ``window``.

    Args:
        cost: Object with amount, frequency, effective_date, end_date, is_active
        window: Resolved period window

    Returns:
        Unrounded amount; Decimal("0") when inactive or not overlapping

    Raises:
        MalformedCostDefinitionError: Missing/unknown frequency or effective date
    """
    rate = daily_rate(cost)
    if not cost.is_active:
        return Decimal("0")

    overlap = active_overlap(cost, window)
    if overlap is None:
        return Decimal("0")

    monthly_equivalent = Decimal(str(cost.amount)) / MONTHLY_EQUIVALENT_DIVISORS[cost.frequency]
    total = Decimal("0")
    for segment_start, segment_end, whole in _month_segments(*overlap):
        if whole:
            total += monthly_equivalent
        else:
            days = (segment_end - segment_start).days + 1
            total += min(rate * days, monthly_equivalent)
    return total


def is_in_window(cost, window: PeriodWindow) -> bool:
    """True iff a one-time cost's ``effective_date`` falls inside ``window``.

    Raises:
        MalformedCostDefinitionError: Missing effective date
    """
    if cost.effective_date is None:
        raise MalformedCostDefinitionError(getattr(cost, "id", None), "missing effective_date")
    return window.includes(cost.effective_date)
