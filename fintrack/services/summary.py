"""
Cash-flow summaries: monthly income/expenses, budgets and goals.
"""

from datetime import date
from typing import Dict, List, Optional, Sequence

from fintrack.db.models import (
    Budget,
    Goal,
    Transaction,
    TransactionCategory,
    TransactionType,
)

WARNING_THRESHOLD = 75.0


def _in_month(txn: Transaction, month: Optional[date]) -> bool:
    if month is None:
        return True
    return txn.date.year == month.year and txn.date.month == month.month


def financial_summary(
    transactions: Sequence[Transaction], month: Optional[date] = None
) -> Dict[str, float]:
    """
    Income, expenses and balance.

    Args:
        transactions: Transactions to summarize
        month: Any date in the month to restrict to; all transactions if None
    """
    selected = [t for t in transactions if _in_month(t, month)]
    income = sum(t.amount for t in selected if t.type == TransactionType.income)
    expenses = sum(t.amount for t in selected if t.type == TransactionType.expense)
    return {
        "income": income,
        "expenses": expenses,
        "balance": income - expenses,
    }


def spending_by_category(
    transactions: Sequence[Transaction], month: Optional[date] = None
) -> Dict[str, float]:
    """Expense totals per category."""
    totals: Dict[str, float] = {}
    for t in transactions:
        if t.type != TransactionType.expense or not _in_month(t, month):
            continue
        key = TransactionCategory(t.category).value
        totals[key] = totals.get(key, 0.0) + t.amount
    return totals


def budget_status(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
    month: Optional[date] = None,
) -> List[Dict]:
    """Spend against each category budget for a month (default current)."""
    if month is None:
        month = date.today()

    spent = spending_by_category(transactions, month)
    rows = []

    for budget in budgets:
        category = TransactionCategory(budget.category).value
        amount_spent = spent.get(category, 0.0)
        percent_used = (amount_spent / budget.amount * 100) if budget.amount > 0 else 0.0

        if percent_used > 100:
            status = "over"
        elif percent_used > WARNING_THRESHOLD:
            status = "warning"
        else:
            status = "ok"

        rows.append(
            {
                "category": category,
                "budget": budget.amount,
                "spent": amount_spent,
                "remaining": budget.amount - amount_spent,
                "percent_used": percent_used,
                "status": status,
            }
        )

    return rows


def goal_progress(goal: Goal) -> Dict:
    """Progress toward a savings goal, capped at 100%."""
    target = goal.target_amount or 0.0
    current = goal.current_amount or 0.0
    progress = (current / target * 100) if target > 0 else 0.0
    return {
        "id": goal.id,
        "name": goal.name,
        "target_amount": target,
        "current_amount": current,
        "progress_percent": min(progress, 100.0),
        "remaining": max(0.0, target - current),
        "deadline": goal.deadline,
        "achieved": target > 0 and current >= target,
    }
