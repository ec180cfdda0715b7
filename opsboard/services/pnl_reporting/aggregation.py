"""Deal and business cost aggregation for a period window.

Both aggregators are pure reductions over records the caller has already
fetched. Callers may over-fetch; membership is decided here.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable

from opsboard import metrics
from opsboard.core.exceptions import MalformedCostDefinitionError

from .period_utils import PeriodWindow
from .proration import is_in_window, prorate_recurring_cost

logger = logging.getLogger(__name__)

# VAT is derived from inc-VAT revenue, never read from the stored net figure
VAT_RATE = Decimal("0.20")

RECURRING = "recurring"
ONE_TIME = "one_time"


def _money(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


@dataclass(frozen=True)
class DealTotals:
    """Unrounded deal sums for one window."""

    total_revenue_inc_vat: Decimal = Decimal("0")
    operating_expenses: Decimal = Decimal("0")
    setter_costs: Decimal = Decimal("0")
    sales_rep_costs: Decimal = Decimal("0")
    lead_fulfillment_costs: Decimal = Decimal("0")
    total_deals: int = 0
    total_leads_sold: int = 0

    @property
    def vat_deducted(self) -> Decimal:
        return self.total_revenue_inc_vat * VAT_RATE

    @property
    def total_revenue_net(self) -> Decimal:
        return self.total_revenue_inc_vat - self.vat_deducted

    @property
    def deal_costs_total(self) -> Decimal:
        return (
            self.operating_expenses
            + self.setter_costs
            + self.sales_rep_costs
            + self.lead_fulfillment_costs
        )


@dataclass(frozen=True)
class CostTotals:
    """Unrounded business cost contributions for one window, per category."""

    recurring_by_category: dict[str, Decimal] = field(default_factory=dict)
    one_time_by_category: dict[str, Decimal] = field(default_factory=dict)
    excluded_cost_ids: tuple = ()

    @property
    def recurring(self) -> Decimal:
        return sum(self.recurring_by_category.values(), Decimal("0"))

    @property
    def one_time(self) -> Decimal:
        return sum(self.one_time_by_category.values(), Decimal("0"))

    @property
    def total(self) -> Decimal:
        return self.recurring + self.one_time

    @property
    def categories(self) -> list[str]:
        return sorted(set(self.recurring_by_category) | set(self.one_time_by_category))


def aggregate_deals(deals: Iterable, window: PeriodWindow) -> DealTotals:
    """Sum revenue and the four deal cost lines for deals closed in ``window``."""
    revenue = Decimal("0")
    operating = Decimal("0")
    setter = Decimal("0")
    sales_rep = Decimal("0")
    fulfillment = Decimal("0")
    count = 0
    leads = 0

    for deal in deals:
        if deal.close_date is None or not window.includes(deal.close_date):
            continue
        revenue += _money(deal.revenue_inc_vat)
        operating += _money(deal.operating_expense)
        setter += _money(deal.setter_cost)
        sales_rep += _money(deal.sales_rep_cost)
        fulfillment += _money(deal.lead_fulfillment_cost)
        leads += int(deal.leads_sold or 0)
        count += 1

    return DealTotals(
        total_revenue_inc_vat=revenue,
        operating_expenses=operating,
        setter_costs=setter,
        sales_rep_costs=sales_rep,
        lead_fulfillment_costs=fulfillment,
        total_deals=count,
        total_leads_sold=leads,
    )


def aggregate_costs(costs: Iterable, window: PeriodWindow) -> CostTotals:
    """Attribute business costs to ``window`` and group them by category.

    Inactive costs are skipped. A malformed cost is excluded and logged;
    it never aborts the report.
    """
    recurring: dict[str, Decimal] = defaultdict(Decimal)
    one_time: dict[str, Decimal] = defaultdict(Decimal)
    excluded: list = []

    for cost in costs:
        if not cost.is_active:
            continue

        try:
            if cost.cost_type == RECURRING:
                amount = prorate_recurring_cost(cost, window)
                if amount:
                    recurring[cost.category] += amount
            elif cost.cost_type == ONE_TIME:
                if is_in_window(cost, window):
                    one_time[cost.category] += _money(cost.amount)
            else:
                raise MalformedCostDefinitionError(
                    getattr(cost, "id", None), f"unknown cost_type {cost.cost_type!r}"
                )
        except MalformedCostDefinitionError as exc:
            logger.warning("Excluding cost from P&L: %s", exc.message, extra={"cost_id": exc.details["cost_id"]})
            metrics.pnl_cost_excluded()
            excluded.append(getattr(cost, "id", None))

    return CostTotals(
        recurring_by_category=dict(recurring),
        one_time_by_category=dict(one_time),
        excluded_cost_ids=tuple(excluded),
    )
