"""
API routes for the finance tracker.
"""

from fastapi import APIRouter

from fintrack.api import (
    assets,
    calculations,
    dashboard,
    goals,
    insurance,
    investments,
    loans,
    recurring,
    transactions,
)

router = APIRouter()

# Include sub-routers
router.include_router(transactions.router, prefix="/transactions", tags=["transactions"])
router.include_router(investments.router, prefix="/investments", tags=["investments"])
router.include_router(loans.router, prefix="/loans", tags=["loans"])
router.include_router(goals.router, prefix="/goals", tags=["goals"])
router.include_router(assets.router, prefix="/assets", tags=["assets"])
router.include_router(insurance.router, prefix="/insurance", tags=["insurance"])
router.include_router(recurring.router, prefix="/recurring", tags=["recurring"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
