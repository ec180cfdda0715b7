"""Entry points of the P&L aggregation engine.

``compute_report`` is deterministic: the same records and the same ``now``
always give the same report. Nothing here reads the clock or the database.
"""
from datetime import datetime
from typing import Iterable, Mapping, Union

from opsboard.models.pnl_schemas import PnLReport, Projection, TaxSalaryOptions

from .aggregation import aggregate_costs, aggregate_deals
from .computations import compose_report, compute_tax_and_salary
from .period_utils import PeriodWindow, resolve_period


def compute_window_report(window: PeriodWindow, deals: Iterable, costs: Iterable) -> PnLReport:
    """Aggregate ``deals`` and ``costs`` over an already resolved window."""
    return compose_report(window, aggregate_deals(deals, window), aggregate_costs(costs, window))


def compute_report(
    period_type: str,
    period_offset: int,
    deals: Iterable,
    costs: Iterable,
    now: datetime,
) -> PnLReport:
    """Build the P&L report for one period.

    Args:
        period_type: 'daily', 'weekly', 'monthly', 'quarterly' or 'yearly'
        period_offset: 0 for the current period, 1 for the previous, ...
        deals: Deal records; may include deals outside the period
        costs: All business cost records, regardless of date
        now: Reference instant for resolving the period

    Raises:
        InvalidPeriodTypeError, InvalidOffsetError: before any aggregation
    """
    window = resolve_period(period_type, period_offset, now)
    return compute_window_report(window, deals, costs)


def project_tax_and_salary(
    report: PnLReport,
    options: Union[TaxSalaryOptions, Mapping, None] = None,
) -> Projection:
    """Corporation tax and salary projection for an existing report."""
    if options is None:
        options = TaxSalaryOptions()
    elif not isinstance(options, TaxSalaryOptions):
        options = TaxSalaryOptions(**options)
    return compute_tax_and_salary(report, options)
