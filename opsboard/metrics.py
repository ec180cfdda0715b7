"""Metrics facade.

Service code should ONLY call the semantic helpers here so the backend can
change freely. Counters are registered on the default Prometheus registry and
exposed by ``GET /metrics``.

Metrics:
- pnl_reports_generated_total{period}   Reports computed, by period type
- pnl_report_latency_seconds             Fetch + aggregate time per report
- pnl_costs_excluded_total               Cost records skipped as malformed
- pnl_projections_total                  Tax/salary projections served
- deals_created_total                    Deals entered
- business_costs_changed_total{action}   Cost create/update/deactivate operations
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

_REPORTS_GENERATED = Counter(
    "pnl_reports_generated_total", "P&L reports computed", ["period"]
)
_REPORT_LATENCY = Histogram(
    "pnl_report_latency_seconds",
    "Time to fetch source records and compute a P&L report",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5),
)
_COSTS_EXCLUDED = Counter(
    "pnl_costs_excluded_total", "Business cost records excluded from a report as malformed"
)
_PROJECTIONS = Counter("pnl_projections_total", "Tax and salary projections served")
_DEALS_CREATED = Counter("deals_created_total", "Deals successfully created")
_COSTS_CHANGED = Counter(
    "business_costs_changed_total", "Business cost write operations", ["action"]
)


def pnl_report_generated(period: str, latency_seconds: float | None = None):
    _REPORTS_GENERATED.labels(period=period).inc()
    if latency_seconds is not None:
        _REPORT_LATENCY.observe(latency_seconds)


def pnl_cost_excluded():
    _COSTS_EXCLUDED.inc()


def pnl_projection_served():
    _PROJECTIONS.inc()


def deal_created():
    _DEALS_CREATED.inc()


def business_cost_changed(action: str):
    _COSTS_CHANGED.labels(action=action).inc()
