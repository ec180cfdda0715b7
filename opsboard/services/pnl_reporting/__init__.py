"""P&L Reporting Module.

Period-based financial aggregation behind the Profit & Loss report.

Sub-modules:
- period_utils: Period window resolution (daily/weekly/monthly/quarterly/yearly/custom)
- proration: Recurring cost proration and one-time cost windowing
- aggregation: Deal and business cost aggregation
- computations: Report composition and tax/salary projection
- engine: Pure entry points (compute_report, project_tax_and_salary)
- reporting_service: Database-backed PnLReportingService
"""
from .aggregation import VAT_RATE, CostTotals, DealTotals, aggregate_costs, aggregate_deals
from .computations import CORPORATION_TAX_RATE, compose_report, round_money
from .engine import compute_report, compute_window_report, project_tax_and_salary
from .period_utils import PERIOD_TYPES, PeriodWindow, resolve_custom_period, resolve_period
from .proration import DAILY_RATE_DIVISORS, is_in_window, prorate_recurring_cost
from .reporting_service import PnLReportingService, reporting_now

__all__ = [
    # Constants
    "VAT_RATE",
    "CORPORATION_TAX_RATE",
    "DAILY_RATE_DIVISORS",
    "PERIOD_TYPES",
    # Value objects
    "PeriodWindow",
    "DealTotals",
    "CostTotals",
    # Computation functions
    "resolve_period",
    "resolve_custom_period",
    "prorate_recurring_cost",
    "is_in_window",
    "aggregate_deals",
    "aggregate_costs",
    "compose_report",
    "round_money",
    # Entry points
    "compute_report",
    "compute_window_report",
    "project_tax_and_salary",
    # Service class
    "PnLReportingService",
    "reporting_now",
]
