"""
Premium and recurring-transaction reminders.

Finds insurance premiums falling due soon and recurring entries whose next
due date has arrived, and rolls recurring due dates forward.
"""

import logging
from datetime import date, timedelta
from typing import List, Optional, Sequence

from dateutil.relativedelta import relativedelta

from fintrack.config import get_settings
from fintrack.db.models import (
    Frequency,
    InsurancePolicy,
    RecurringTransaction,
    Transaction,
)

logger = logging.getLogger(__name__)
settings = get_settings()

FREQUENCY_STEPS = {
    Frequency.daily: relativedelta(days=1),
    Frequency.weekly: relativedelta(weeks=1),
    Frequency.monthly: relativedelta(months=1),
    Frequency.yearly: relativedelta(years=1),
}


def upcoming_premiums(
    policies: Sequence[InsurancePolicy],
    as_of: Optional[date] = None,
    window_days: Optional[int] = None,
) -> List[InsurancePolicy]:
    """
    Policies whose premium falls due within the reminder window.

    Both ends of the window are inclusive: a premium due today and one due
    exactly window_days from today are listed. Results are ordered by due
    date.

    Args:
        policies: Policies to check
        as_of: First day of the window (default today)
        window_days: Length of the window (default from settings)
    """
    if as_of is None:
        as_of = date.today()
    if window_days is None:
        window_days = settings.premium_reminder_days

    window_end = as_of + timedelta(days=window_days)
    upcoming = [
        p for p in policies if as_of <= p.premium_due_date <= window_end
    ]
    return sorted(upcoming, key=lambda p: p.premium_due_date)


def next_due_date(frequency: Frequency, current: date) -> date:
    """The due date one period after current."""
    return current + FREQUENCY_STEPS[Frequency(frequency)]


def due_recurring(
    recurring: Sequence[RecurringTransaction], as_of: Optional[date] = None
) -> List[RecurringTransaction]:
    """Recurring entries whose next due date is on or before as_of."""
    if as_of is None:
        as_of = date.today()
    return [r for r in recurring if r.next_due_date <= as_of]


def post_recurring(recurring: RecurringTransaction) -> Transaction:
    """
    Record the entry due on the current next_due_date and advance it.

    The new transaction carries the recurring entry's amount, type and
    category. The caller is responsible for adding it to a session.
    """
    txn = Transaction(
        date=recurring.next_due_date,
        description=recurring.name,
        amount=recurring.amount,
        type=recurring.type,
        category=recurring.category,
        recurring_transaction_id=recurring.id,
    )
    recurring.next_due_date = next_due_date(
        recurring.frequency, recurring.next_due_date
    )
    logger.info(
        f"Posted {recurring.name} for {txn.date}, next due {recurring.next_due_date}"
    )
    return txn
