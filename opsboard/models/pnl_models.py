"""
P&L source records: closed deals and business operating costs.

Both tables are the only inputs to the P&L report. Reports are never stored;
they are recomputed from these rows on every request, so costs are
deactivated rather than deleted to keep historical reports reproducible.
"""
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Integer,
    Numeric,
    String,
    Text,
)

from opsboard.db.base_class import Base


class CostType(str, Enum):
    """How a business cost is incurred"""
    RECURRING = "recurring"
    ONE_TIME = "one_time"


class CostFrequency(str, Enum):
    """Billing cycle of a recurring cost"""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class CostCategory(str, Enum):
    """Categories offered by the dashboard. ``category`` itself is free-form."""
    SOFTWARE = "software"
    DATA = "data"
    MARKETING = "marketing"
    PERSONNEL = "personnel"
    OFFICE = "office"
    OTHER = "other"


class Deal(Base):
    """
    A closed sale.

    Derived money fields (net revenue, growth fund, commissions, fulfilment)
    are computed once at entry time by ``DealService``.
    """
    __tablename__ = "deals"

    id = Column(Integer, primary_key=True, index=True)
    company_name = Column(String(200), nullable=False)

    # Revenue
    revenue_inc_vat = Column(Numeric(12, 2), nullable=False)
    revenue_net = Column(Numeric(12, 2), nullable=False)

    # Growth fund (operating expense)
    operating_expense = Column(Numeric(12, 2), nullable=False, default=0)

    # Leads
    leads_sold = Column(Integer, nullable=False, default=0)
    lead_sale_price = Column(Numeric(12, 2), nullable=False, default=0)

    # Commissions
    setter_commission_percent = Column(Numeric(5, 2), nullable=False, default=0)
    sales_rep_commission_percent = Column(Numeric(5, 2), nullable=False, default=0)
    setter_cost = Column(Numeric(12, 2), nullable=False, default=0)
    sales_rep_cost = Column(Numeric(12, 2), nullable=False, default=0)

    lead_fulfillment_cost = Column(Numeric(12, 2), nullable=False, default=0)

    close_date = Column(Date, nullable=False, index=True)
    notes = Column(Text)

    # Metadata
    created_by = Column(String(64))
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, onupdate=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<Deal(id={self.id}, company={self.company_name!r}, revenue_inc_vat={self.revenue_inc_vat}, close_date={self.close_date})>"


class BusinessCost(Base):
    """
    An operating expense line.

    Recurring costs need a ``frequency``; a null ``end_date`` means the cost
    runs indefinitely from ``effective_date``.
    """
    __tablename__ = "business_costs"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)

    amount = Column(Numeric(12, 2), nullable=False)
    cost_type = Column(String(20), nullable=False, index=True)  # recurring, one_time
    frequency = Column(String(20))  # monthly, quarterly, yearly; null for one_time
    category = Column(String(50), nullable=False, index=True)

    effective_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date)
    is_active = Column(Boolean, nullable=False, default=True)

    # Metadata
    created_by = Column(String(64))
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, onupdate=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<BusinessCost(id={self.id}, name={self.name!r}, amount={self.amount}, type={self.cost_type}, category={self.category})>"

    @property
    def category_display(self) -> str:
        """Human-readable category name"""
        return self.category.replace("_", " ").title()
