"""
Deposit Valuation

Current value of Fixed Deposits (lump sum, compounded quarterly by default)
and Recurring Deposits (fixed monthly instalment, compounded monthly).
Rates are annual percentages (e.g., 7.5 for 7.5%).
"""

from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from fintrack.calculations.compounding import ensure_finite, growth_factor

DAYS_PER_YEAR = 365.25
QUARTERLY = 4


def months_elapsed(start_date: date, as_of: date) -> int:
    """
    Count completed months between two dates.

    A month is only counted once its start day has been reached, so
    2023-07-05 -> 2023-08-04 is 0 months and 2023-07-05 -> 2023-08-05 is 1.
    """
    if as_of <= start_date:
        return 0
    delta = relativedelta(as_of, start_date)
    return delta.years * 12 + delta.months


def calculate_fd_value(
    principal: float,
    annual_rate: float,
    start_date: Optional[date],
    as_of: Optional[date] = None,
    compounding_per_year: int = QUARTERLY,
) -> float:
    """
    Calculate the current value of a fixed deposit.

    A = P * (1 + r/n) ** (n * t)

    Args:
        principal: Amount deposited
        annual_rate: Annual interest rate as a percentage
        start_date: Date the deposit was opened
        as_of: Valuation date (default today)
        compounding_per_year: Compounding periods per year (default quarterly)

    Returns:
        Current value, or the principal unchanged if no interest has accrued
    """
    if annual_rate < 0:
        raise ValueError("Interest rate cannot be negative")
    if compounding_per_year <= 0:
        raise ValueError("Compounding periods per year must be positive")

    if principal <= 0 or annual_rate == 0 or start_date is None:
        return principal

    if as_of is None:
        as_of = date.today()

    years = (as_of - start_date).days / DAYS_PER_YEAR
    if years <= 0:
        return principal

    rate = annual_rate / 100
    n = compounding_per_year
    return ensure_finite(principal * growth_factor(rate / n, n * years))


def calculate_rd_value(
    monthly_investment: float,
    annual_rate: float,
    start_date: Optional[date],
    as_of: Optional[date] = None,
) -> float:
    """
    Calculate the current value of a recurring deposit.

    Each instalment grows at the monthly rate for the number of months it
    has been invested, giving the future value of an annuity-due:
    M * (1 + i) * ((1 + i) ** n - 1) / i.

    Args:
        monthly_investment: Monthly instalment amount
        annual_rate: Annual interest rate as a percentage
        start_date: Date of the first instalment
        as_of: Valuation date (default today)

    Returns:
        Current value, 0 if no month has completed yet
    """
    if annual_rate < 0:
        raise ValueError("Interest rate cannot be negative")

    if monthly_investment <= 0 or start_date is None:
        return 0.0

    if as_of is None:
        as_of = date.today()

    n = months_elapsed(start_date, as_of)
    if n <= 0:
        return 0.0

    i = annual_rate / 100 / 12
    if i == 0:
        return monthly_investment * n

    return ensure_finite(monthly_investment * (1 + i) * (growth_factor(i, n) - 1) / i)


def calculate_rd_maturity(
    monthly_investment: float, annual_rate: float, tenure_months: int
) -> float:
    """Maturity value of a recurring deposit held for its full tenure."""
    if annual_rate < 0:
        raise ValueError("Interest rate cannot be negative")
    if monthly_investment <= 0 or tenure_months <= 0:
        return 0.0

    i = annual_rate / 100 / 12
    if i == 0:
        return monthly_investment * tenure_months
    return ensure_finite(
        monthly_investment * (1 + i) * (growth_factor(i, tenure_months) - 1) / i
    )
