"""
Compound Growth

Growth factors shared by the deposit, loan and planning formulas. Results
that leave the float range are reported as ValueError so callers handle
them like any other bad input.
"""

import math


def growth_factor(rate: float, periods: float) -> float:
    """
    Calculate (1 + rate) ** periods.

    Args:
        rate: Periodic rate as decimal
        periods: Number of compounding periods

    Returns:
        Growth factor

    Raises:
        ValueError: If the rate is below -100% or the factor overflows
    """
    if rate < -1:
        raise ValueError("Rate cannot be below -100%")

    try:
        factor = (1 + rate) ** periods
    except OverflowError:
        raise ValueError("Result is out of range: reduce the rate or the term")

    return ensure_finite(factor)


def ensure_finite(value: float) -> float:
    """Return value unchanged, or raise ValueError if it overflowed to infinity."""
    if not math.isfinite(value):
        raise ValueError("Result is out of range: reduce the amount, rate or term")
    return value
