"""Tests for deal and business cost aggregation."""
from datetime import date, timedelta
from decimal import Decimal

import pytest

from opsboard.services.pnl_reporting.aggregation import aggregate_costs, aggregate_deals
from opsboard.services.pnl_reporting.period_utils import resolve_period


@pytest.fixture
def march(now):
    return resolve_period("monthly", 0, now)


class TestAggregateDeals:
    def test_sums_deals_inside_window(self, deal_factory, march):
        deals = [
            deal_factory(date(2025, 3, 1), 1200, operating_expense=200, leads_sold=2),
            deal_factory(date(2025, 3, 31), 600, setter_cost=50, leads_sold=3),
            deal_factory(date(2025, 4, 1), 9999),
            deal_factory(date(2025, 2, 28), 9999),
        ]
        totals = aggregate_deals(deals, march)
        assert totals.total_deals == 2
        assert totals.total_leads_sold == 5
        assert totals.total_revenue_inc_vat == Decimal("1800")
        assert totals.vat_deducted == Decimal("360")
        assert totals.total_revenue_net == Decimal("1440")
        assert totals.deal_costs_total == Decimal("250")

    def test_one_millisecond_after_window_is_excluded(self, deal_factory, march):
        deals = [
            deal_factory(march.end, 100),
            deal_factory(march.end + timedelta(milliseconds=1), 100),
        ]
        assert aggregate_deals(deals, march).total_deals == 1

    def test_empty(self, march):
        totals = aggregate_deals([], march)
        assert totals.total_deals == 0
        assert totals.total_revenue_inc_vat == Decimal("0")


class TestAggregateCosts:
    def test_groups_by_category(self, cost_factory, march):
        costs = [
            cost_factory(300, category="software"),
            cost_factory(100, category="software", frequency="quarterly"),
            cost_factory(150, cost_type="one_time", category="legal", effective_date=date(2025, 3, 10)),
            cost_factory(50, cost_type="one_time", category="legal", effective_date=date(2025, 4, 2)),
        ]
        totals = aggregate_costs(costs, march)
        assert totals.categories == ["legal", "software"]
        assert totals.one_time_by_category == {"legal": Decimal("150")}
        assert totals.recurring == totals.recurring_by_category["software"]
        assert totals.total == totals.recurring + totals.one_time
        assert totals.excluded_cost_ids == ()

    def test_inactive_costs_are_skipped(self, cost_factory, march):
        costs = [
            cost_factory(300, is_active=False),
            cost_factory(150, cost_type="one_time", effective_date=date(2025, 3, 10), is_active=False),
        ]
        totals = aggregate_costs(costs, march)
        assert totals.total == Decimal("0")
        assert totals.excluded_cost_ids == ()

    def test_malformed_cost_is_excluded_not_fatal(self, cost_factory, march, caplog):
        costs = [
            cost_factory(300, id=1),
            cost_factory(500, frequency=None, id=2),
            cost_factory(80, cost_type="subscription", id=3),
        ]
        with caplog.at_level("WARNING"):
            totals = aggregate_costs(costs, march)
        assert totals.total == Decimal("300")
        assert totals.excluded_cost_ids == (2, 3)
        assert "Excluding cost from P&L" in caplog.text

    def test_one_time_cost_without_effective_date_is_excluded(self, cost_factory, march, caplog):
        costs = [
            cost_factory(150, cost_type="one_time", effective_date=date(2025, 3, 10), id=4),
            cost_factory(90, cost_type="one_time", effective_date=None, id=9),
        ]
        with caplog.at_level("WARNING"):
            totals = aggregate_costs(costs, march)
        assert totals.one_time == Decimal("150")
        assert totals.excluded_cost_ids == (9,)
        assert "missing effective_date" in caplog.text
