"""
Dashboard API endpoints: cash-flow summary, net worth and budgets.
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date
from sqlalchemy.orm import Session

from fintrack.api.investments import active_investments, active_transactions
from fintrack.db.database import get_db
from fintrack.db.models import Budget, Loan, OtherAsset, TransactionCategory
from fintrack.services import portfolio, summary

logger = logging.getLogger(__name__)

router = APIRouter()


class BudgetInput(BaseModel):
    amount: float = Field(ge=0)


@router.get("/summary")
async def get_financial_summary(
    month: Optional[date] = None,
    db: Session = Depends(get_db),
):
    """Income, expenses and balance, for one month if given."""
    transactions = active_transactions(db)
    return {
        **summary.financial_summary(transactions, month),
        "spending_by_category": summary.spending_by_category(transactions, month),
    }


@router.get("/net-worth")
async def get_net_worth(
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
):
    """Investments plus other assets, less outstanding loans."""
    performances = portfolio.compute_portfolio_performance(
        active_investments(db), active_transactions(db), as_of
    )
    loans = db.query(Loan).filter(Loan.is_deleted == False).all()
    assets = db.query(OtherAsset).filter(OtherAsset.is_deleted == False).all()
    return portfolio.compute_net_worth(performances, loans, assets)


@router.get("/budgets")
async def get_budgets(
    month: Optional[date] = None,
    db: Session = Depends(get_db),
):
    """Spend against each category budget for the month (default current)."""
    budgets = db.query(Budget).filter(Budget.is_deleted == False).all()
    return {
        "month": (month or date.today()).strftime("%Y-%m"),
        "budgets": summary.budget_status(active_transactions(db), budgets, month),
    }


@router.put("/budgets/{category}")
async def set_budget(
    category: TransactionCategory,
    budget_data: BudgetInput,
    db: Session = Depends(get_db),
):
    """Set the monthly limit for a category."""
    budget = db.query(Budget).filter(Budget.category == category).first()
    if budget is None:
        budget = Budget(category=category, amount=budget_data.amount)
        db.add(budget)
    else:
        budget.amount = budget_data.amount
        budget.is_deleted = False

    db.commit()
    logger.info(f"Budget for {category.value} set to {budget_data.amount}")

    return {"category": category.value, "amount": budget_data.amount}


@router.delete("/budgets")
async def reset_budgets(db: Session = Depends(get_db)):
    """Remove every category budget."""
    count = (
        db.query(Budget)
        .filter(Budget.is_deleted == False)
        .update({Budget.is_deleted: True})
    )
    db.commit()
    return {"deleted": count}
