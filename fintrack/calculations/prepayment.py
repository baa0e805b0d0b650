"""
Loan Prepayment Simulation

Compares a loan before and after a lump-sum part-prepayment under the two
usual options: keep the tenure and lower the EMI, or keep the EMI and
finish early.
"""

from dataclasses import dataclass, asdict
from typing import Dict

from fintrack.calculations.loans import (
    calculate_emi,
    calculate_total_interest_payable,
    months_to_repay,
)

LOAN_CLOSED = "Loan Closed"


@dataclass
class PrepaymentResult:
    """Outcome of a prepayment against an outstanding loan."""

    old_emi: float = 0.0
    new_emi: float = 0.0
    interest_saved: float = 0.0
    tenure_reduction_months: int = 0
    loan_closed: bool = False

    @property
    def tenure_reduced_label(self) -> str:
        if self.loan_closed:
            return LOAN_CLOSED
        return format_months(self.tenure_reduction_months)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["tenure_reduced_label"] = self.tenure_reduced_label
        return data


def format_months(months: int) -> str:
    """Render a month count as 'N years, M months'."""
    years, remainder = divmod(max(0, months), 12)
    return f"{years} years, {remainder} months"


def simulate_prepayment(
    outstanding_principal: float,
    annual_rate: float,
    remaining_tenure_years: float,
    prepayment_amount: float,
) -> PrepaymentResult:
    """
    Simulate a part-prepayment.

    Args:
        outstanding_principal: Principal still owed
        annual_rate: Annual interest rate as a percentage
        remaining_tenure_years: Years left on the loan
        prepayment_amount: Lump sum paid now

    Returns:
        PrepaymentResult with EMI before/after, interest saved at the same
        tenure, and the tenure reduction at the same EMI

    Raises:
        ValueError: If the prepayment amount is negative
    """
    if prepayment_amount < 0:
        raise ValueError("Prepayment amount cannot be negative")

    if outstanding_principal <= 0 or annual_rate <= 0 or remaining_tenure_years <= 0:
        return PrepaymentResult()

    old_emi = calculate_emi(outstanding_principal, annual_rate, remaining_tenure_years)
    old_interest = calculate_total_interest_payable(
        outstanding_principal, old_emi, remaining_tenure_years
    )
    original_months = int(round(remaining_tenure_years * 12))

    new_principal = outstanding_principal - prepayment_amount
    if new_principal <= 0:
        return PrepaymentResult(
            old_emi=old_emi,
            new_emi=0.0,
            interest_saved=old_interest,
            tenure_reduction_months=original_months,
            loan_closed=True,
        )

    new_emi = calculate_emi(new_principal, annual_rate, remaining_tenure_years)
    new_interest = calculate_total_interest_payable(
        new_principal, new_emi, remaining_tenure_years
    )

    months_at_old_emi = months_to_repay(new_principal, annual_rate, old_emi)

    return PrepaymentResult(
        old_emi=old_emi,
        new_emi=new_emi,
        interest_saved=old_interest - new_interest,
        tenure_reduction_months=max(0, original_months - months_at_old_emi),
        loan_closed=False,
    )
