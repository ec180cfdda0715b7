"""
P&L Report Routes.

The window is always resolved on the server from ``period`` and ``offset``.
Client-supplied dates only count for ``period=custom``.
"""
from __future__ import annotations

import datetime as dt
import logging

from fastapi import APIRouter, Query

from opsboard.api.dependencies import AdminUserDep, DbDep
from opsboard.core.config import settings
from opsboard.models.pnl_schemas import PnLReport, ProjectionOut, ProjectionRequest
from opsboard.services.pnl_reporting import PnLReportingService, reporting_now

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/report", response_model=PnLReport)
def get_report(
    db: DbDep,
    current_user: AdminUserDep,
    period: str = Query(settings.DEFAULT_PERIOD, description="daily, weekly, monthly, quarterly, yearly or custom"),
    offset: int = Query(0, description="Periods back from the current one"),
    start_date: dt.date | None = Query(None, alias="startDate", description="Custom period only"),
    end_date: dt.date | None = Query(None, alias="endDate", description="Custom period only"),
):
    """Profit & Loss report for one period window."""
    logger.info("P&L report requested by %s: period=%s offset=%s", current_user, period, offset)
    service = PnLReportingService(db)
    return service.generate_report(
        period_type=period,
        offset=offset,
        now=reporting_now(),
        start_date=start_date,
        end_date=end_date,
    )


@router.post("/projection", response_model=ProjectionOut)
def post_projection(
    body: ProjectionRequest,
    db: DbDep,
    current_user: AdminUserDep,
):
    """Report plus corporation tax and salary projection."""
    logger.info(
        "P&L projection requested by %s: period=%s offset=%s corp_tax=%s",
        current_user, body.period, body.offset, body.include_corp_tax,
    )
    service = PnLReportingService(db)
    report, projection = service.generate_projection(
        body.options(),
        period_type=body.period,
        offset=body.offset,
        now=reporting_now(),
        start_date=body.start_date,
        end_date=body.end_date,
    )
    return ProjectionOut(report=report, projection=projection)
