"""Business cost routes. Costs are deactivated rather than deleted."""
from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Query, status

from opsboard.api.dependencies import AdminUserDep, DbDep
from opsboard.models.pnl_schemas import (
    BusinessCostCreate,
    BusinessCostListOut,
    BusinessCostOut,
    BusinessCostUpdate,
)
from opsboard.services.business_cost_service import BusinessCostService

router = APIRouter()


@router.get("/costs", response_model=BusinessCostListOut)
def list_costs(
    db: DbDep,
    _admin: AdminUserDep,
    category: str | None = Query(None, description="Category name or 'all'"),
    cost_type: str | None = Query(None, alias="costType", description="recurring, one_time or 'all'"),
    is_active: bool | None = Query(None, alias="isActive"),
    start_date: dt.date | None = Query(None, alias="startDate"),
    end_date: dt.date | None = Query(None, alias="endDate"),
):
    """List costs with optional filters, plus the categories to offer in forms."""
    service = BusinessCostService(db)
    costs = service.list(
        category=category,
        cost_type=cost_type,
        is_active=is_active,
        start_date=start_date,
        end_date=end_date,
    )
    return BusinessCostListOut(
        costs=[BusinessCostOut.model_validate(c) for c in costs],
        categories=service.categories(),
    )


@router.post("/costs", response_model=BusinessCostOut, status_code=status.HTTP_201_CREATED)
def create_cost(data: BusinessCostCreate, db: DbDep, current_user: AdminUserDep):
    return BusinessCostService(db, user_id=current_user).create(data)


@router.get("/costs/{cost_id}", response_model=BusinessCostOut)
def get_cost(cost_id: int, db: DbDep, _admin: AdminUserDep):
    return BusinessCostService(db).get(cost_id)


@router.put("/costs/{cost_id}", response_model=BusinessCostOut)
def update_cost(cost_id: int, data: BusinessCostUpdate, db: DbDep, _admin: AdminUserDep):
    return BusinessCostService(db).update(cost_id, data)


@router.post("/costs/{cost_id}/deactivate", response_model=BusinessCostOut)
def deactivate_cost(cost_id: int, db: DbDep, _admin: AdminUserDep):
    return BusinessCostService(db).deactivate(cost_id)
