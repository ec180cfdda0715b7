"""Report composition and presentation-time projections.

Pure computation logic. No database access.

Rounding happens here and only here: every leaf total is rounded half-up to
pence once, and composite figures (totals, profit) are derived from the
rounded leaves so that

    total_costs == deal_costs.total + business_costs.total
    gross_profit == total_revenue_net - total_costs
    sum(business_costs.by_category) == recurring + one_time

hold exactly on the published report.
"""
from decimal import ROUND_HALF_UP, Decimal

from opsboard.models.pnl_schemas import (
    BusinessCostBreakdown,
    DealCostBreakdown,
    PnLReport,
    Projection,
    ReportPeriod,
    TaxSalaryOptions,
)

from .aggregation import CostTotals, DealTotals
from .period_utils import PeriodWindow

# Flat UK corporation tax rate applied at presentation time
CORPORATION_TAX_RATE = Decimal("0.20")

PENNY = Decimal("0.01")
ZERO = Decimal("0.00")


def round_money(value: Decimal) -> Decimal:
    """Round to pence using ROUND_HALF_UP."""
    return Decimal(value).quantize(PENNY, rounding=ROUND_HALF_UP)


def _safe_ratio(numerator: Decimal, denominator) -> Decimal:
    """numerator / denominator, or 0 when the denominator is zero."""
    if not denominator:
        return ZERO
    return round_money(Decimal(numerator) / Decimal(denominator))


def compose_report(window: PeriodWindow, deals: DealTotals, costs: CostTotals) -> PnLReport:
    """Combine deal and cost totals into the published P&L report.

    Args:
        window: The resolved period window
        deals: Output of aggregate_deals for the same window
        costs: Output of aggregate_costs for the same window

    Returns:
        Fully populated PnLReport; no field is ever missing or NaN
    """
    # Revenue
    revenue_inc_vat = round_money(deals.total_revenue_inc_vat)
    vat_deducted = round_money(deals.vat_deducted)
    revenue_net = revenue_inc_vat - vat_deducted

    # Deal costs
    operating = round_money(deals.operating_expenses)
    setter = round_money(deals.setter_costs)
    sales_rep = round_money(deals.sales_rep_costs)
    fulfillment = round_money(deals.lead_fulfillment_costs)
    deal_costs_total = operating + setter + sales_rep + fulfillment

    # Business costs, rounded per category bucket
    recurring_rounded = {c: round_money(v) for c, v in costs.recurring_by_category.items()}
    one_time_rounded = {c: round_money(v) for c, v in costs.one_time_by_category.items()}
    by_category = {
        category: recurring_rounded.get(category, ZERO) + one_time_rounded.get(category, ZERO)
        for category in costs.categories
    }
    recurring_total = sum(recurring_rounded.values(), ZERO)
    one_time_total = sum(one_time_rounded.values(), ZERO)
    business_total = recurring_total + one_time_total

    # Totals & profit
    total_costs = deal_costs_total + business_total
    gross_profit = revenue_net - total_costs
    profit_margin = _safe_ratio(gross_profit * 100, revenue_net)

    return PnLReport(
        period=ReportPeriod(
            type=window.type,
            offset=window.offset,
            start=window.start,
            end=window.end,
            label=window.label,
        ),
        total_revenue_inc_vat=revenue_inc_vat,
        vat_deducted=vat_deducted,
        total_revenue_net=revenue_net,
        deal_costs=DealCostBreakdown(
            operating_expenses=operating,
            setter_costs=setter,
            sales_rep_costs=sales_rep,
            lead_fulfillment_costs=fulfillment,
            total=deal_costs_total,
        ),
        business_costs=BusinessCostBreakdown(
            recurring=recurring_total,
            one_time=one_time_total,
            total=business_total,
            by_category=by_category,
            excluded_cost_ids=list(costs.excluded_cost_ids),
        ),
        total_costs=total_costs,
        gross_profit=gross_profit,
        profit_margin=profit_margin,
        total_deals=deals.total_deals,
        total_leads_sold=deals.total_leads_sold,
        avg_revenue_per_deal=_safe_ratio(revenue_inc_vat, deals.total_deals),
        avg_profit_per_deal=_safe_ratio(gross_profit, deals.total_deals),
    )


def compute_tax_and_salary(report: PnLReport, options: TaxSalaryOptions) -> Projection:
    """
    Apply corporation tax and salary drawings to a composed report.

    Corporation tax is only charged on a positive gross profit. The report is
    read, never modified, so this can be re-run with different options.
    """
    gross_profit = report.gross_profit
    if options.include_corp_tax and gross_profit > 0:
        corp_tax = round_money(gross_profit * CORPORATION_TAX_RATE)
    else:
        corp_tax = ZERO
    profit_after_tax = gross_profit - corp_tax
    # salary_amount is validated to at most 2 dp, so this never rounds
    salary = Decimal(options.salary_amount).quantize(PENNY)
    final_profit = profit_after_tax - salary

    return Projection(
        gross_profit=gross_profit,
        corp_tax=corp_tax,
        profit_after_tax=profit_after_tax,
        salary_amount=salary,
        final_profit=final_profit,
    )
