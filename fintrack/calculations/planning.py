"""
Planning Calculators

Closed-form projections for goal planning: SIP and lump-sum growth,
systematic withdrawals, FIRE corpus, inflation and human life value.
Rates are annual percentages.
"""

from typing import Dict

from fintrack.calculations.compounding import ensure_finite, growth_factor

SWP_MAX_MONTHS = 600  # 50 years


def sip_future_value(
    monthly_investment: float, annual_return: float, years: float
) -> Dict[str, float]:
    """
    Future value of a monthly SIP, invested at the start of each month.

    FV = M * ((1 + i)^n - 1) / i * (1 + i)
    """
    i = annual_return / 100 / 12
    n = int(round(years * 12))
    invested = monthly_investment * n

    if i == 0:
        total_value = invested
    else:
        total_value = ensure_finite(
            monthly_investment * ((growth_factor(i, n) - 1) / i) * (1 + i)
        )

    return {
        "total_value": total_value,
        "invested_amount": invested,
        "estimated_gains": total_value - invested,
    }


def lumpsum_future_value(
    amount: float, annual_return: float, years: float
) -> Dict[str, float]:
    """Future value of a one-time investment compounded annually."""
    total_value = ensure_finite(amount * growth_factor(annual_return / 100, years))
    return {
        "total_value": total_value,
        "invested_amount": amount,
        "estimated_gains": total_value - amount,
    }


def swp_duration(
    corpus: float, monthly_withdrawal: float, annual_return: float
) -> Dict:
    """
    How long a corpus lasts under fixed monthly withdrawals.

    Returns are credited before each withdrawal. Simulation stops at
    SWP_MAX_MONTHS, in which case the plan is reported as sustainable.
    """
    if monthly_withdrawal <= 0:
        raise ValueError("Monthly withdrawal must be positive")

    monthly_return = annual_return / 100 / 12
    balance = corpus
    months = 0

    while balance > 0 and months < SWP_MAX_MONTHS:
        balance += balance * monthly_return
        balance -= monthly_withdrawal
        months += 1

    sustainable = months >= SWP_MAX_MONTHS
    years, remaining_months = divmod(months, 12)

    return {
        "months": months,
        "years": years,
        "remaining_months": remaining_months,
        "sustainable": sustainable,
        "total_withdrawn": None if sustainable else monthly_withdrawal * months,
    }


def fire_corpus(
    monthly_expenses: float, current_savings: float, withdrawal_rate: float = 4.0
) -> Dict[str, float]:
    """Corpus needed to live off a safe withdrawal rate, and the shortfall."""
    if withdrawal_rate <= 0:
        raise ValueError("Withdrawal rate must be positive")

    corpus = monthly_expenses * 12 / (withdrawal_rate / 100)
    return {
        "fire_corpus": corpus,
        "shortfall": max(0.0, corpus - current_savings),
    }


def inflation_adjusted_cost(
    today_cost: float, inflation_rate: float, years: float
) -> float:
    """Cost after the given number of years of inflation."""
    return ensure_finite(today_cost * growth_factor(inflation_rate / 100, years))


def human_life_value(
    current_age: int,
    retirement_age: int,
    annual_income: float,
    outstanding_loans: float = 0.0,
    existing_savings: float = 0.0,
    existing_cover: float = 0.0,
) -> Dict[str, float]:
    """Life insurance gap from income replacement plus debts, less assets."""
    years_to_retirement = max(0, retirement_age - current_age)
    total_needs = annual_income * years_to_retirement + outstanding_loans
    assets_available = existing_savings + existing_cover
    return {
        "total_needs": total_needs,
        "assets_available": assets_available,
        "insurance_gap": total_needs - assets_available,
    }
