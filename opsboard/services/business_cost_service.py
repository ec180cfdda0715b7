"""
Business Cost Service.

Handles business cost CRUD. Costs are deactivated, never deleted, so that
re-running an old report gives the same answer.
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Sequence

from sqlalchemy.orm import Session

from opsboard import metrics
from opsboard.core.exceptions import BusinessCostNotFoundError, BusinessCostValidationError
from opsboard.models.pnl_models import BusinessCost, CostCategory, CostFrequency, CostType
from opsboard.models.pnl_schemas import BusinessCostCreate, BusinessCostUpdate

logger = logging.getLogger(__name__)

COST_TYPES = {t.value for t in CostType}
FREQUENCIES = {f.value for f in CostFrequency}
DEFAULT_CATEGORIES = [c.value for c in CostCategory]
NULLABLE_FIELDS = {"description", "frequency", "end_date"}


def validate_cost_fields(
    *,
    name: str | None,
    amount: Decimal | None,
    cost_type: str | None,
    frequency: str | None,
    category: str | None,
    effective_date: date | None,
    end_date: date | None,
) -> None:
    """Raise BusinessCostValidationError for the first broken rule."""
    if not name or not name.strip():
        raise BusinessCostValidationError("Cost name is required", field="name")
    if amount is None or Decimal(str(amount)) <= 0:
        raise BusinessCostValidationError("Amount is required", field="amount")
    if not cost_type:
        raise BusinessCostValidationError("Cost type is required", field="cost_type")
    if cost_type not in COST_TYPES:
        raise BusinessCostValidationError("Invalid cost type", field="cost_type")
    if not category:
        raise BusinessCostValidationError("Category is required", field="category")
    if not effective_date:
        raise BusinessCostValidationError("Effective date is required", field="effective_date")
    if cost_type == CostType.RECURRING.value and not frequency:
        raise BusinessCostValidationError("Frequency is required for recurring costs", field="frequency")
    if frequency and frequency not in FREQUENCIES:
        raise BusinessCostValidationError("Invalid frequency", field="frequency")
    if end_date and end_date < effective_date:
        raise BusinessCostValidationError("End date cannot be before effective date", field="end_date")


class BusinessCostService:
    """Service for business cost operations."""

    def __init__(self, db: Session, user_id: str | None = None):
        self._db = db
        self._user_id = user_id

    def create(self, data: BusinessCostCreate) -> BusinessCost:
        """Create a new business cost."""
        validate_cost_fields(
            name=data.name,
            amount=data.amount,
            cost_type=data.cost_type,
            frequency=data.frequency,
            category=data.category,
            effective_date=data.effective_date,
            end_date=data.end_date,
        )
        cost = BusinessCost(
            name=data.name.strip(),
            description=data.description,
            amount=data.amount,
            cost_type=data.cost_type,
            frequency=data.frequency if data.cost_type == CostType.RECURRING.value else None,
            category=data.category,
            effective_date=data.effective_date,
            end_date=data.end_date,
            is_active=data.is_active,
            created_by=self._user_id,
        )
        self._db.add(cost)
        self._db.commit()
        self._db.refresh(cost)
        metrics.business_cost_changed("create")
        logger.info("Created business cost: %s (id=%s)", cost.name, cost.id)
        return cost

    def get(self, cost_id: int) -> BusinessCost:
        """Get a cost by ID or raise BusinessCostNotFoundError."""
        cost = self._db.get(BusinessCost, cost_id)
        if cost is None:
            raise BusinessCostNotFoundError(cost_id)
        return cost

    def list(
        self,
        category: str | None = None,
        cost_type: str | None = None,
        is_active: bool | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Sequence[BusinessCost]:
        """List costs, newest effective date first. ``"all"`` disables a filter."""
        query = self._db.query(BusinessCost)
        if category and category != "all":
            query = query.filter(BusinessCost.category == category)
        if cost_type and cost_type != "all":
            query = query.filter(BusinessCost.cost_type == cost_type)
        if is_active is not None:
            query = query.filter(BusinessCost.is_active.is_(is_active))
        if start_date:
            query = query.filter(BusinessCost.effective_date >= start_date)
        if end_date:
            query = query.filter(BusinessCost.effective_date <= end_date)
        return query.order_by(BusinessCost.effective_date.desc(), BusinessCost.id.desc()).all()

    def categories(self) -> list[str]:
        """Default categories plus any free-form ones already in use."""
        used = {row[0] for row in self._db.query(BusinessCost.category).distinct()}
        extra = sorted(used - set(DEFAULT_CATEGORIES))
        return DEFAULT_CATEGORIES + extra

    def update(self, cost_id: int, data: BusinessCostUpdate) -> BusinessCost:
        """Update a business cost; the merged record must still be valid."""
        cost = self.get(cost_id)
        update_data = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_FIELDS
        }
        if update_data.get("category"):
            update_data["category"] = update_data["category"].strip().lower()

        merged = {column: getattr(cost, column) for column in (
            "name", "amount", "cost_type", "frequency", "category", "effective_date", "end_date",
        )}
        merged.update({k: v for k, v in update_data.items() if k in merged})
        if merged["cost_type"] == CostType.ONE_TIME.value:
            merged["frequency"] = None
            update_data["frequency"] = None
        validate_cost_fields(**merged)

        for key, value in update_data.items():
            setattr(cost, key, value)
        self._db.commit()
        self._db.refresh(cost)
        metrics.business_cost_changed("update")
        logger.info("Updated business cost %s fields=%s", cost.id, sorted(update_data))
        return cost

    def deactivate(self, cost_id: int) -> BusinessCost:
        """Soft delete a cost so it drops out of every report."""
        cost = self.get(cost_id)
        cost.is_active = False
        self._db.commit()
        self._db.refresh(cost)
        metrics.business_cost_changed("deactivate")
        logger.info("Deactivated business cost %s", cost.id)
        return cost
