"""Deal entry routes."""
from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Query, status

from opsboard.api.dependencies import AdminUserDep, DbDep
from opsboard.models.pnl_schemas import DealCreate, DealListOut, DealOut, DealUpdate
from opsboard.services.deal_service import DealService

router = APIRouter()


@router.get("/deals", response_model=DealListOut)
def list_deals(
    db: DbDep,
    _admin: AdminUserDep,
    start_date: dt.date | None = Query(None, alias="startDate"),
    end_date: dt.date | None = Query(None, alias="endDate"),
):
    deals = DealService(db).list(start_date=start_date, end_date=end_date)
    return DealListOut(deals=[DealOut.model_validate(d) for d in deals], total=len(deals))


@router.post("/deals", response_model=DealOut, status_code=status.HTTP_201_CREATED)
def create_deal(data: DealCreate, db: DbDep, current_user: AdminUserDep):
    return DealService(db, user_id=current_user).create(data)


@router.get("/deals/{deal_id}", response_model=DealOut)
def get_deal(deal_id: int, db: DbDep, _admin: AdminUserDep):
    return DealService(db).get(deal_id)


@router.put("/deals/{deal_id}", response_model=DealOut)
def update_deal(deal_id: int, data: DealUpdate, db: DbDep, current_user: AdminUserDep):
    return DealService(db, user_id=current_user).update(deal_id, data)
