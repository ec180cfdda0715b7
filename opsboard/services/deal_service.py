"""
Deal Service.

Handles deal entry and the per-deal financial breakdown computed at entry
time (VAT, growth fund, commissions, lead fulfilment). The stored figures are
what the P&L report sums later.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from sqlalchemy.orm import Session

from opsboard import metrics
from opsboard.core.exceptions import DealNotFoundError, DealValidationError
from opsboard.models.pnl_models import Deal
from opsboard.models.pnl_schemas import DealCreate, DealUpdate

logger = logging.getLogger(__name__)


VAT_DIVISOR = Decimal("1.20")                  # Prices are quoted inc. 20% VAT
OPERATING_EXPENSE_RATE = Decimal("0.20")        # Growth fund: 20% of net revenue
LEAD_FULFILLMENT_COST_PER_LEAD = Decimal("20")  # £20 per lead sold


@dataclass(frozen=True)
class DealInput:
    revenue_inc_vat: Decimal
    leads_sold: int
    lead_sale_price: Decimal
    setter_commission_percent: Decimal = Decimal("0")
    sales_rep_commission_percent: Decimal = Decimal("0")


@dataclass(frozen=True)
class DealFinancials:
    revenue_net: Decimal
    vat_deducted: Decimal
    operating_expense: Decimal
    setter_cost: Decimal
    sales_rep_cost: Decimal
    lead_fulfillment_cost: Decimal
    total_costs: Decimal
    gross_profit: Decimal
    profit_margin: Decimal


def _round2(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def calculate_deal_financials(data: DealInput) -> DealFinancials:
    """
    Calculate all derived financial fields for a deal.

    Commissions and the growth fund are percentages of net (ex-VAT) revenue;
    lead fulfilment is a flat per-lead charge.
    """
    revenue_inc_vat = Decimal(str(data.revenue_inc_vat))
    revenue_net = revenue_inc_vat / VAT_DIVISOR
    vat_deducted = revenue_inc_vat - revenue_net

    operating_expense = revenue_net * OPERATING_EXPENSE_RATE
    setter_cost = revenue_net * Decimal(str(data.setter_commission_percent)) / 100
    sales_rep_cost = revenue_net * Decimal(str(data.sales_rep_commission_percent)) / 100
    lead_fulfillment_cost = LEAD_FULFILLMENT_COST_PER_LEAD * data.leads_sold

    total_costs = operating_expense + setter_cost + sales_rep_cost + lead_fulfillment_cost
    gross_profit = revenue_net - total_costs
    profit_margin = (gross_profit / revenue_net * 100) if revenue_net > 0 else Decimal("0")

    return DealFinancials(
        revenue_net=_round2(revenue_net),
        vat_deducted=_round2(vat_deducted),
        operating_expense=_round2(operating_expense),
        setter_cost=_round2(setter_cost),
        sales_rep_cost=_round2(sales_rep_cost),
        lead_fulfillment_cost=_round2(lead_fulfillment_cost),
        total_costs=_round2(total_costs),
        gross_profit=_round2(gross_profit),
        profit_margin=_round2(profit_margin),
    )


def _validate(data: DealInput) -> None:
    if data.revenue_inc_vat is None or Decimal(str(data.revenue_inc_vat)) <= 0:
        raise DealValidationError("Revenue (inc VAT) is required", field="revenue_inc_vat")
    if data.leads_sold is None or data.leads_sold <= 0:
        raise DealValidationError("Leads sold is required", field="leads_sold")
    if data.lead_sale_price is None or Decimal(str(data.lead_sale_price)) <= 0:
        raise DealValidationError("Lead sale price is required", field="lead_sale_price")
    for name in ("setter_commission_percent", "sales_rep_commission_percent"):
        value = Decimal(str(getattr(data, name)))
        if value < 0 or value > 100:
            raise DealValidationError(f"{name} must be between 0 and 100", field=name)


class DealService:
    """Service for deal entry and listing."""

    def __init__(self, db: Session, user_id: str | None = None):
        self._db = db
        self._user_id = user_id

    def _apply_financials(self, deal: Deal) -> None:
        data = DealInput(
            revenue_inc_vat=deal.revenue_inc_vat,
            leads_sold=deal.leads_sold,
            lead_sale_price=deal.lead_sale_price,
            setter_commission_percent=deal.setter_commission_percent or Decimal("0"),
            sales_rep_commission_percent=deal.sales_rep_commission_percent or Decimal("0"),
        )
        _validate(data)
        financials = calculate_deal_financials(data)
        deal.revenue_net = financials.revenue_net
        deal.operating_expense = financials.operating_expense
        deal.setter_cost = financials.setter_cost
        deal.sales_rep_cost = financials.sales_rep_cost
        deal.lead_fulfillment_cost = financials.lead_fulfillment_cost

    def create(self, data: DealCreate) -> Deal:
        """Create a deal with its derived financials."""
        if not data.company_name or not data.company_name.strip():
            raise DealValidationError("Company name is required", field="company_name")

        deal = Deal(
            company_name=data.company_name.strip(),
            revenue_inc_vat=data.revenue_inc_vat,
            leads_sold=data.leads_sold,
            lead_sale_price=data.lead_sale_price,
            setter_commission_percent=data.setter_commission_percent,
            sales_rep_commission_percent=data.sales_rep_commission_percent,
            close_date=data.close_date,
            notes=data.notes,
            created_by=self._user_id,
        )
        self._apply_financials(deal)
        self._db.add(deal)
        self._db.commit()
        self._db.refresh(deal)
        metrics.deal_created()
        logger.info(
            "Created deal %s for %s: revenue_inc_vat=%s revenue_net=%s",
            deal.id, deal.company_name, deal.revenue_inc_vat, deal.revenue_net,
        )
        return deal

    def get(self, deal_id: int) -> Deal:
        """Get a deal by ID or raise DealNotFoundError."""
        deal = self._db.get(Deal, deal_id)
        if deal is None:
            raise DealNotFoundError(deal_id)
        return deal

    def list(self, start_date: date | None = None, end_date: date | None = None) -> Sequence[Deal]:
        """List deals, newest close date first, optionally within a date range."""
        query = self._db.query(Deal)
        if start_date:
            query = query.filter(Deal.close_date >= start_date)
        if end_date:
            query = query.filter(Deal.close_date <= end_date)
        return query.order_by(Deal.close_date.desc(), Deal.id.desc()).all()

    def update(self, deal_id: int, data: DealUpdate) -> Deal:
        """Update a deal and recompute its derived financials."""
        deal = self.get(deal_id)
        # Only notes may be cleared; every other column is NOT NULL
        update_data = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key == "notes"
        }
        if "company_name" in update_data and not update_data["company_name"].strip():
            raise DealValidationError("Company name is required", field="company_name")
        for key, value in update_data.items():
            setattr(deal, key, value)

        try:
            self._apply_financials(deal)
        except DealValidationError:
            self._db.rollback()
            raise
        self._db.commit()
        self._db.refresh(deal)
        logger.info("Updated deal %s fields=%s", deal.id, sorted(update_data))
        return deal
