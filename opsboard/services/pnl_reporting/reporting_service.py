"""P&L Reporting Service.

Fetches source records from the database and hands them to the pure engine.
Reports are never persisted; every call recomputes from ``deals`` and
``business_costs``.
"""
import logging
import time
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.orm import Session

from opsboard import metrics
from opsboard.core.config import settings
from opsboard.models.pnl_models import BusinessCost, Deal
from opsboard.models.pnl_schemas import PnLReport, Projection, TaxSalaryOptions

from .engine import compute_window_report, project_tax_and_salary
from .period_utils import CUSTOM_PERIOD, PeriodWindow, resolve_custom_period, resolve_period

logger = logging.getLogger(__name__)


def reporting_now() -> datetime:
    """Current instant in the configured reporting timezone."""
    return datetime.now(ZoneInfo(settings.REPORT_TIMEZONE))


class PnLReportingService:
    """Service for generating P&L reports from stored deals and costs.

    Responsibilities:
    - Resolve the period window server-side from (period, offset)
    - Fetch deals closing in the window and every business cost
    - Delegate aggregation to the engine
    - Tax/salary projection on top of a fresh report
    """

    def __init__(self, db: Session):
        self.db = db

    def resolve_window(
        self,
        period_type: str,
        offset: int = 0,
        now: Optional[datetime] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> PeriodWindow:
        """Resolve the reporting window.

        ``start_date``/``end_date`` are only honoured for the custom period;
        for every other period type they are ignored.
        """
        now = now or reporting_now()
        if period_type == CUSTOM_PERIOD:
            return resolve_custom_period(start_date, end_date, now)
        if start_date or end_date:
            logger.debug("Ignoring client-supplied dates for %s period", period_type)
        return resolve_period(period_type, offset, now)

    def _fetch_deals(self, window: PeriodWindow) -> list[Deal]:
        # Calendar-day bounds over-fetch slightly; the engine filters exactly
        stmt = (
            select(Deal)
            .where(Deal.close_date >= window.first_day, Deal.close_date <= window.last_day)
            .order_by(Deal.close_date.desc(), Deal.id)
        )
        return list(self.db.scalars(stmt))

    def _fetch_costs(self) -> list[BusinessCost]:
        stmt = select(BusinessCost).order_by(BusinessCost.id)
        return list(self.db.scalars(stmt))

    def generate_report(
        self,
        period_type: str = "monthly",
        offset: int = 0,
        now: Optional[datetime] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> PnLReport:
        """Generate the P&L report for a period.

        Args:
            period_type: daily/weekly/monthly/quarterly/yearly, or custom
            offset: Periods back from the current one (ignored for custom)
            now: Reference instant; defaults to the clock in REPORT_TIMEZONE
            start_date: First day of a custom period
            end_date: Last day of a custom period

        Returns:
            PnLReport computed fresh from the database
        """
        started = time.perf_counter()
        window = self.resolve_window(period_type, offset, now, start_date, end_date)
        logger.info(
            "Generating P&L report for period: %s (%s to %s)",
            window.type, window.start.isoformat(), window.end.isoformat(),
        )

        deals = self._fetch_deals(window)
        costs = self._fetch_costs()
        report = compute_window_report(window, deals, costs)

        elapsed = time.perf_counter() - started
        metrics.pnl_report_generated(window.type, elapsed)
        logger.info(
            "P&L report %s: revenue_net=%s total_costs=%s gross_profit=%s deals=%s excluded_costs=%s",
            window.label, report.total_revenue_net, report.total_costs, report.gross_profit,
            report.total_deals, len(report.business_costs.excluded_cost_ids),
        )
        return report

    def generate_projection(
        self,
        options: TaxSalaryOptions,
        period_type: str = "monthly",
        offset: int = 0,
        now: Optional[datetime] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> tuple[PnLReport, Projection]:
        """Generate a report and project corporation tax and salary onto it."""
        report = self.generate_report(
            period_type=period_type, offset=offset, now=now, start_date=start_date, end_date=end_date,
        )
        projection = project_tax_and_salary(report, options)
        metrics.pnl_projection_served()
        return report, projection
