"""
Fintrack: personal finance tracking with investment returns, deposit
valuation and loan amortization.
"""

__version__ = "0.1.0"
