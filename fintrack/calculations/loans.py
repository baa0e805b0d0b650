"""
Loan EMI and Amortization Calculations

Implements the equated monthly instalment (EMI) and the month-by-month
principal/interest split of a reducing-balance loan.
Rates are annual percentages (e.g., 8.5 for 8.5%), tenures are in years.
"""

import math
from datetime import date
from typing import Dict, List, Optional

from dateutil.relativedelta import relativedelta

from fintrack.calculations.compounding import ensure_finite, growth_factor


def _months(tenure_years: float) -> int:
    return int(round(tenure_years * 12))


def calculate_emi(principal: float, annual_rate: float, tenure_years: float) -> float:
    """
    Calculate the monthly instalment of a loan.

    EMI = P * i * (1 + i)^n / ((1 + i)^n - 1)

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as a percentage
        tenure_years: Loan tenure in years

    Returns:
        Monthly instalment (0 for invalid input)

    Raises:
        ValueError: If the instalment is too large to represent
    """
    number_of_months = _months(tenure_years)
    if principal <= 0 or annual_rate < 0 or number_of_months <= 0:
        return 0.0

    monthly_rate = annual_rate / 12 / 100

    if monthly_rate == 0:
        return principal / number_of_months

    growth = growth_factor(monthly_rate, number_of_months)
    if growth == 1:
        return principal / number_of_months

    return ensure_finite(principal * monthly_rate / (1 - 1 / growth))


def calculate_total_interest_payable(
    principal: float, emi: float, tenure_years: float
) -> float:
    """Total interest over the loan term at a fixed EMI."""
    number_of_months = _months(tenure_years)
    if principal <= 0 or emi <= 0 or number_of_months <= 0:
        return 0.0
    return emi * number_of_months - principal


def calculate_outstanding_balance(
    principal: float,
    annual_rate: float,
    tenure_years: float,
    payments_made: int,
) -> float:
    """Calculate remaining loan balance after N instalments."""
    number_of_months = _months(tenure_years)
    if payments_made >= number_of_months:
        return 0.0
    if payments_made <= 0:
        return max(0.0, principal)

    monthly_rate = annual_rate / 12 / 100
    emi = calculate_emi(principal, annual_rate, tenure_years)

    if monthly_rate == 0:
        return max(0.0, principal - emi * payments_made)

    growth = growth_factor(monthly_rate, payments_made)
    balance = ensure_finite(principal * growth - emi * (growth - 1) / monthly_rate)

    return max(0.0, balance)


def months_to_repay(principal: float, annual_rate: float, emi: float) -> int:
    """
    Number of instalments needed to clear a balance at a fixed EMI.

    Raises:
        ValueError: If the EMI does not cover the first month's interest
    """
    if principal <= 0:
        return 0
    if emi <= 0:
        raise ValueError("EMI must be positive")

    monthly_rate = annual_rate / 12 / 100

    if monthly_rate == 0:
        return math.ceil(principal / emi - 1e-9)

    first_interest = principal * monthly_rate
    if emi <= first_interest:
        raise ValueError("EMI does not cover the monthly interest")

    n = -math.log(1 - first_interest / emi) / math.log(1 + monthly_rate)
    return math.ceil(n - 1e-9)


def generate_amortization_schedule(
    principal: float,
    annual_rate: float,
    tenure_years: float,
    start_date: Optional[date] = None,
) -> List[Dict]:
    """
    Generate a full amortization schedule.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as a percentage
        tenure_years: Loan tenure in years
        start_date: Date of the first instalment (default today)

    Returns:
        List of amortization rows
    """
    number_of_months = _months(tenure_years)
    emi = calculate_emi(principal, annual_rate, tenure_years)
    if emi == 0:
        return []

    monthly_rate = annual_rate / 12 / 100

    if start_date is None:
        start_date = date.today()

    schedule = []
    balance = principal

    for month in range(1, number_of_months + 1):
        payment_date = start_date + relativedelta(months=month - 1)
        interest = balance * monthly_rate

        if month == number_of_months:
            # Final instalment clears whatever floating-point residue is left
            principal_paid = balance
            payment = balance + interest
        else:
            principal_paid = min(emi - interest, balance)
            payment = principal_paid + interest

        balance = max(0.0, balance - principal_paid)

        schedule.append(
            {
                "month": month,
                "date": payment_date.isoformat(),
                "emi": round(payment, 2),
                "principal": round(principal_paid, 2),
                "interest": round(interest, 2),
                "balance": round(balance, 2),
            }
        )

        if balance == 0:
            break

    return schedule


def summarize_schedule(schedule: List[Dict]) -> Dict[str, float]:
    """Total interest, principal and amount paid over a schedule."""
    total_interest = sum(row["interest"] for row in schedule)
    total_principal = sum(row["principal"] for row in schedule)
    return {
        "total_interest": round(total_interest, 2),
        "total_principal": round(total_principal, 2),
        "total_paid": round(total_interest + total_principal, 2),
        "months": len(schedule),
    }
