"""
IRR, NPV and XIRR Calculations

Implements the money-weighted (XIRR) return of an investment using the
Newton-Raphson method on the cash-flow NPV. Outflows (money invested) are
negative, inflows (redemptions, current value) are positive.
"""

import logging
from datetime import date
from typing import List, Sequence

import numpy as np

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
TOLERANCE = 1e-7
DEFAULT_GUESS = 0.1
DAYS_IN_YEAR = 365.0


def _validate_cash_flows(cash_flows: Sequence[float]) -> None:
    if len(cash_flows) < 2:
        raise ValueError("At least 2 cash flows required")

    has_positive = any(cf > 0 for cf in cash_flows)
    has_negative = any(cf < 0 for cf in cash_flows)

    if not has_positive or not has_negative:
        raise ValueError("Cash flows must contain both positive and negative values")


def _damped_step(rate: float, new_rate: float) -> float:
    """Keep iterates above -100%, where the discount factor is undefined."""
    if new_rate <= -1:
        return (rate - 1) / 2
    return new_rate


def calculate_npv(cash_flows: Sequence[float], discount_rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of evenly spaced cash flows.

    Args:
        cash_flows: Array of cash flows (negative = outflow, positive = inflow)
        discount_rate: Per-period discount rate (e.g., 0.10 for 10%)

    Returns:
        NPV value
    """
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(len(flows), dtype=float)
    return float(np.sum(flows / (1 + discount_rate) ** periods))


def _npv_derivative(cash_flows: Sequence[float], rate: float) -> float:
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(len(flows), dtype=float)
    return float(-np.sum(periods * flows / (1 + rate) ** (periods + 1)))


def calculate_irr(cash_flows: Sequence[float], guess: float = DEFAULT_GUESS) -> float:
    """
    Calculate IRR (Internal Rate of Return) for evenly spaced cash flows.

    Args:
        cash_flows: Array of periodic cash flows
        guess: Initial guess for rate (default 0.1 = 10%)

    Returns:
        Per-period IRR as decimal (e.g., 0.15 for 15%)

    Raises:
        ValueError: If IRR cannot be calculated
    """
    _validate_cash_flows(cash_flows)

    rate = guess

    for _ in range(MAX_ITERATIONS):
        npv = calculate_npv(cash_flows, rate)
        if abs(npv) < TOLERANCE:
            return rate

        dnpv = _npv_derivative(cash_flows, rate)
        if dnpv == 0:
            raise ValueError("IRR calculation failed: derivative is zero")

        new_rate = _damped_step(rate, rate - npv / dnpv)

        if abs(new_rate - rate) < TOLERANCE:
            return new_rate

        rate = new_rate

    raise ValueError("IRR calculation did not converge")


def _year_fractions(dates: Sequence[date]) -> np.ndarray:
    """Years elapsed from the earliest date to each date."""
    base_date = min(dates)
    return np.array([(d - base_date).days for d in dates], dtype=float) / DAYS_IN_YEAR


def calculate_xnpv(
    cash_flows: Sequence[float], dates: Sequence[date], discount_rate: float
) -> float:
    """Calculate XNPV (NPV with specific dates)."""
    if len(cash_flows) != len(dates):
        raise ValueError("Cash flows and dates arrays must have same length")
    if not cash_flows:
        return 0.0

    flows = np.asarray(cash_flows, dtype=float)
    years = _year_fractions(dates)
    return float(np.sum(flows / (1 + discount_rate) ** years))


def _xnpv_derivative(
    flows: np.ndarray, years: np.ndarray, rate: float
) -> float:
    return float(-np.sum(years * flows / (1 + rate) ** (years + 1)))


def calculate_xirr(
    cash_flows: Sequence[float],
    dates: Sequence[date],
    guess: float = DEFAULT_GUESS,
) -> float:
    """
    Calculate XIRR (IRR with specific dates).

    Dates do not need to be sorted; time is measured from the earliest date
    on a 365-day year.

    Args:
        cash_flows: Array of cash flows
        dates: Array of dates corresponding to each cash flow
        guess: Initial guess for rate (default 0.1 = 10%)

    Returns:
        Annual rate as decimal

    Raises:
        ValueError: If XIRR cannot be calculated
    """
    if len(cash_flows) != len(dates):
        raise ValueError("Cash flows and dates arrays must have same length")

    _validate_cash_flows(cash_flows)

    flows = np.asarray(cash_flows, dtype=float)
    years = _year_fractions(dates)
    rate = guess

    for _ in range(MAX_ITERATIONS):
        xnpv = float(np.sum(flows / (1 + rate) ** years))
        if abs(xnpv) < TOLERANCE:
            return rate

        dxnpv = _xnpv_derivative(flows, years, rate)
        if dxnpv == 0:
            raise ValueError("XIRR calculation failed: derivative is zero")

        new_rate = _damped_step(rate, rate - xnpv / dxnpv)

        if abs(new_rate - rate) < TOLERANCE:
            return new_rate

        rate = new_rate

    raise ValueError("XIRR calculation did not converge")


def xirr_percent(
    cash_flows: List[float], dates: List[date], guess: float = DEFAULT_GUESS
) -> float:
    """
    XIRR as a percentage, or 0.0 if it cannot be computed.

    Used where a return figure is displayed next to a holding and a missing
    value should not fail the whole view.
    """
    try:
        return calculate_xirr(cash_flows, dates, guess) * 100
    except ValueError as e:
        logger.warning(f"XIRR unavailable for {len(cash_flows)} cash flows: {e}")
        return 0.0


def monthly_to_annualized(monthly_rate: float) -> float:
    """Convert a monthly rate to an effective annual rate."""
    return ((1 + monthly_rate) ** 12) - 1


def annualized_to_monthly(annual_rate: float) -> float:
    """Convert an effective annual rate to a monthly rate."""
    return ((1 + annual_rate) ** (1 / 12)) - 1
