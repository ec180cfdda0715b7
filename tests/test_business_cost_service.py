"""Tests for business cost management."""
from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from opsboard.core.exceptions import BusinessCostNotFoundError, BusinessCostValidationError
from opsboard.models.pnl_schemas import BusinessCostCreate, BusinessCostUpdate
from opsboard.services.business_cost_service import (
    DEFAULT_CATEGORIES,
    BusinessCostService,
    validate_cost_fields,
)


def _cost_create(**overrides) -> BusinessCostCreate:
    data = {
        "name": "CRM licence",
        "amount": Decimal("300"),
        "cost_type": "recurring",
        "frequency": "monthly",
        "category": "Software",
        "effective_date": date(2025, 1, 1),
    }
    data.update(overrides)
    return BusinessCostCreate(**data)


class TestValidation:
    def test_recurring_requires_frequency_in_schema(self):
        with pytest.raises(ValidationError):
            _cost_create(frequency=None)

    def test_end_before_start_rejected_in_schema(self):
        with pytest.raises(ValidationError):
            _cost_create(end_date=date(2024, 12, 31))

    def test_validate_cost_fields(self):
        base = {
            "name": "Rent",
            "amount": Decimal("1000"),
            "cost_type": "recurring",
            "frequency": "monthly",
            "category": "office",
            "effective_date": date(2025, 1, 1),
            "end_date": None,
        }
        validate_cost_fields(**base)

        with pytest.raises(BusinessCostValidationError) as exc_info:
            validate_cost_fields(**{**base, "frequency": None})
        assert exc_info.value.code == "CST002"

        with pytest.raises(BusinessCostValidationError):
            validate_cost_fields(**{**base, "cost_type": "monthly"})

        with pytest.raises(BusinessCostValidationError):
            validate_cost_fields(**{**base, "amount": Decimal("0")})


class TestBusinessCostService:
    def test_create_normalises_category(self, db_session):
        cost = BusinessCostService(db_session, user_id="ops-admin").create(_cost_create())
        assert cost.id is not None
        assert cost.category == "software"
        assert cost.category_display == "Software"
        assert cost.is_active is True
        assert cost.created_by == "ops-admin"

    def test_one_time_has_no_frequency(self, db_session):
        cost = BusinessCostService(db_session).create(
            _cost_create(name="Solicitor", cost_type="one_time", frequency="monthly", category="legal")
        )
        assert cost.frequency is None

    def test_list_filters(self, db_session):
        service = BusinessCostService(db_session)
        service.create(_cost_create(name="CRM"))
        service.create(_cost_create(name="Ads", category="marketing", effective_date=date(2025, 3, 1)))
        service.create(
            _cost_create(name="Audit", cost_type="one_time", category="legal", effective_date=date(2025, 3, 20))
        )
        inactive = service.create(_cost_create(name="Old tool", effective_date=date(2024, 6, 1)))
        service.deactivate(inactive.id)

        assert len(service.list()) == 4
        assert len(service.list(category="all")) == 4
        assert [c.name for c in service.list(category="marketing")] == ["Ads"]
        assert [c.name for c in service.list(cost_type="one_time")] == ["Audit"]
        assert {c.name for c in service.list(is_active=True)} == {"CRM", "Ads", "Audit"}
        assert [c.name for c in service.list(is_active=False)] == ["Old tool"]
        in_march = service.list(start_date=date(2025, 3, 1), end_date=date(2025, 3, 31))
        assert [c.name for c in in_march] == ["Audit", "Ads"]

    def test_categories_include_custom(self, db_session):
        service = BusinessCostService(db_session)
        assert service.categories() == DEFAULT_CATEGORIES
        service.create(_cost_create(category="legal"))
        assert service.categories() == DEFAULT_CATEGORIES + ["legal"]

    def test_update_to_one_time_clears_frequency(self, db_session):
        service = BusinessCostService(db_session)
        cost = service.create(_cost_create())
        updated = service.update(cost.id, BusinessCostUpdate(cost_type="one_time", amount=Decimal("99")))
        assert updated.cost_type == "one_time"
        assert updated.frequency is None
        assert updated.amount == Decimal("99")

    def test_update_rejects_recurring_without_frequency(self, db_session):
        service = BusinessCostService(db_session)
        cost = service.create(_cost_create(cost_type="one_time", category="legal"))
        with pytest.raises(BusinessCostValidationError):
            service.update(cost.id, BusinessCostUpdate(cost_type="recurring"))

    def test_deactivate(self, db_session):
        service = BusinessCostService(db_session)
        cost = service.create(_cost_create())
        assert service.deactivate(cost.id).is_active is False
        assert service.get(cost.id).is_active is False

    def test_get_missing(self, db_session):
        with pytest.raises(BusinessCostNotFoundError) as exc_info:
            BusinessCostService(db_session).get(99)
        assert exc_info.value.code == "CST001"
