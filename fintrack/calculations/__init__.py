"""
Financial Calculation Engine

Core calculation modules for personal-finance tracking: returns, deposit
valuation, loan amortization, prepayment and planning projections.
"""

from fintrack.calculations import compounding, xirr, deposits, loans, prepayment, planning

__all__ = ["compounding", "xirr", "deposits", "loans", "prepayment", "planning"]
