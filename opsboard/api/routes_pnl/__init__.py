"""
P&L API Routes Module.

All routes are prefixed with /pnl and require an admin bearer token.

Sub-modules:
- reports: P&L report and tax/salary projection
- deals: Deal entry and listing
- costs: Business cost management
"""
from __future__ import annotations

from fastapi import APIRouter

from .costs import router as costs_router
from .deals import router as deals_router
from .reports import router as reports_router

# Main router with /pnl prefix
router = APIRouter(prefix="/pnl", tags=["pnl"])

router.include_router(reports_router)
router.include_router(deals_router)
router.include_router(costs_router)

__all__ = ["router"]
