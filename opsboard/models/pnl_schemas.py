"""
Pydantic schemas for the P&L API.

Used for request/response validation in deal, business cost and report endpoints.
Money is carried as ``Decimal`` end to end so reports serialise identically
on every run.
"""
import datetime as dt
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


CostTypeLiteral = Literal["recurring", "one_time"]
FrequencyLiteral = Literal["monthly", "quarterly", "yearly"]


# ---------------------------------------------------------------------------
# Deals
# ---------------------------------------------------------------------------

class DealBase(BaseModel):
    """Fields an operator enters for a closed deal"""
    company_name: str = Field(..., min_length=1, max_length=200, description="Client company name")
    revenue_inc_vat: Decimal = Field(..., gt=0, description="Deal value including VAT (GBP)")
    leads_sold: int = Field(..., gt=0, description="Number of leads sold")
    lead_sale_price: Decimal = Field(..., gt=0, description="Price per lead (GBP)")
    setter_commission_percent: Decimal = Field(Decimal("0"), ge=0, le=100)
    sales_rep_commission_percent: Decimal = Field(Decimal("0"), ge=0, le=100)
    close_date: dt.date = Field(..., description="Date the deal closed")
    notes: str | None = None


class DealCreate(DealBase):
    """Schema for creating a deal"""


class DealUpdate(BaseModel):
    """Schema for updating a deal; derived fields are recomputed"""
    company_name: str | None = Field(None, min_length=1, max_length=200)
    revenue_inc_vat: Decimal | None = Field(None, gt=0)
    leads_sold: int | None = Field(None, gt=0)
    lead_sale_price: Decimal | None = Field(None, gt=0)
    setter_commission_percent: Decimal | None = Field(None, ge=0, le=100)
    sales_rep_commission_percent: Decimal | None = Field(None, ge=0, le=100)
    close_date: dt.date | None = None
    notes: str | None = None


class DealOut(DealBase):
    """Schema for deal response"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    revenue_net: Decimal
    operating_expense: Decimal
    setter_cost: Decimal
    sales_rep_cost: Decimal
    lead_fulfillment_cost: Decimal
    created_by: str | None
    created_at: dt.datetime
    updated_at: dt.datetime | None


# ---------------------------------------------------------------------------
# Business costs
# ---------------------------------------------------------------------------

class BusinessCostBase(BaseModel):
    """Operator-entered cost fields"""
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    amount: Decimal = Field(..., gt=0, description="Cost amount (GBP)")
    cost_type: CostTypeLiteral
    frequency: FrequencyLiteral | None = None
    category: str = Field(..., min_length=1, max_length=50)
    effective_date: dt.date
    end_date: dt.date | None = None
    is_active: bool = True

    @field_validator("category")
    @classmethod
    def normalise_category(cls, v: str) -> str:
        return v.strip().lower()


class BusinessCostCreate(BusinessCostBase):
    """Schema for creating a business cost"""

    @model_validator(mode="after")
    def check_frequency(self) -> "BusinessCostCreate":
        if self.cost_type == "recurring" and self.frequency is None:
            raise ValueError("Frequency is required for recurring costs")
        if self.end_date is not None and self.end_date < self.effective_date:
            raise ValueError("end_date cannot be before effective_date")
        return self


class BusinessCostUpdate(BaseModel):
    """Schema for updating a business cost"""
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    amount: Decimal | None = Field(None, gt=0)
    cost_type: CostTypeLiteral | None = None
    frequency: FrequencyLiteral | None = None
    category: str | None = Field(None, min_length=1, max_length=50)
    effective_date: dt.date | None = None
    end_date: dt.date | None = None
    is_active: bool | None = None


class BusinessCostOut(BusinessCostBase):
    """Schema for business cost response"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    category_display: str
    created_by: str | None
    created_at: dt.datetime
    updated_at: dt.datetime | None


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

class ReportPeriod(BaseModel):
    """Resolved reporting window"""
    type: str
    offset: int
    start: dt.datetime
    end: dt.datetime
    label: str


class DealCostBreakdown(BaseModel):
    """The four cost lines attached directly to closed deals"""
    operating_expenses: Decimal
    setter_costs: Decimal
    sales_rep_costs: Decimal
    lead_fulfillment_costs: Decimal
    total: Decimal


class BusinessCostBreakdown(BaseModel):
    """Business costs attributable to the window"""
    recurring: Decimal
    one_time: Decimal
    total: Decimal
    by_category: dict[str, Decimal]
    excluded_cost_ids: list[int | str | None] = Field(default_factory=list)


class PnLReport(BaseModel):
    """Profit & Loss summary for one period window"""
    period: ReportPeriod

    # Revenue
    total_revenue_inc_vat: Decimal
    vat_deducted: Decimal
    total_revenue_net: Decimal

    # Costs
    deal_costs: DealCostBreakdown
    business_costs: BusinessCostBreakdown
    total_costs: Decimal

    # Profit
    gross_profit: Decimal
    profit_margin: Decimal  # Percentage of net revenue

    # Volume
    total_deals: int
    total_leads_sold: int
    avg_revenue_per_deal: Decimal
    avg_profit_per_deal: Decimal


class TaxSalaryOptions(BaseModel):
    """Presentation-time deductions applied to a report"""
    include_corp_tax: bool = False
    salary_amount: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)


class Projection(BaseModel):
    """Profit after corporation tax and salary drawings"""
    gross_profit: Decimal
    corp_tax: Decimal
    profit_after_tax: Decimal
    salary_amount: Decimal
    final_profit: Decimal


class ProjectionRequest(BaseModel):
    """Body of POST /pnl/projection; accepts camelCase or snake_case keys"""
    model_config = ConfigDict(populate_by_name=True)

    period: str = "monthly"
    offset: int = Field(0, ge=0)
    start_date: dt.date | None = Field(None, alias="startDate", description="Custom period only")
    end_date: dt.date | None = Field(None, alias="endDate", description="Custom period only")
    include_corp_tax: bool = Field(False, alias="includeCorpTax")
    salary_amount: Decimal = Field(Decimal("0"), ge=0, decimal_places=2, alias="salaryAmount")

    def options(self) -> TaxSalaryOptions:
        return TaxSalaryOptions(include_corp_tax=self.include_corp_tax, salary_amount=self.salary_amount)


class ProjectionOut(BaseModel):
    """Report together with its tax/salary projection"""
    report: PnLReport
    projection: Projection


class DealListOut(BaseModel):
    """Deals table payload"""
    deals: list[DealOut]
    total: int


class BusinessCostListOut(BaseModel):
    """Costs table payload"""
    costs: list[BusinessCostOut]
    categories: list[str]
