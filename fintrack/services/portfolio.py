"""
Portfolio performance.

Derives invested amount, current value, P&L and XIRR for each holding by
joining investment records with the transactions linked to them.
"""

import logging
from dataclasses import dataclass, asdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from fintrack.calculations.deposits import calculate_fd_value, calculate_rd_value
from fintrack.calculations.xirr import xirr_percent
from fintrack.config import get_settings
from fintrack.db.models import (
    Investment,
    InvestmentType,
    Loan,
    OtherAsset,
    Transaction,
    TransactionCategory,
)

logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass
class InvestmentPerformance:
    """Derived figures for a single holding."""

    id: str
    name: str
    type: str
    total_invested: float
    current_value: float
    pnl: float
    pnl_percent: float
    xirr: float  # Percent

    def to_dict(self) -> Dict:
        return asdict(self)


def _xirr_for(
    outflows: Iterable[Transaction], current_value: float, as_of: date
) -> float:
    """XIRR of contributions against the current value redeemed on as_of."""
    flows = [(t.date, -t.amount) for t in outflows]
    if current_value > 0:
        flows.append((as_of, current_value))

    flows.sort(key=lambda flow: flow[0])

    return xirr_percent(
        [amount for _, amount in flows],
        [when for when, _ in flows],
        guess=settings.xirr_guess,
    )


def current_value_for(
    investment: Investment, total_invested: float, as_of: date
) -> float:
    """
    Value a holding: deposits by formula, everything else as entered.

    A deposit whose terms cannot be valued falls back to the stored value.
    """
    try:
        if (
            investment.type == InvestmentType.fixed_deposit
            and investment.start_date
            and investment.interest_rate
        ):
            return calculate_fd_value(
                total_invested,
                investment.interest_rate,
                investment.start_date,
                as_of=as_of,
                compounding_per_year=settings.fd_compounding_per_year,
            )

        if (
            investment.type == InvestmentType.recurring_deposit
            and investment.start_date
            and investment.interest_rate
            and investment.monthly_investment
        ):
            return calculate_rd_value(
                investment.monthly_investment,
                investment.interest_rate,
                investment.start_date,
                as_of=as_of,
            )
    except ValueError as e:
        logger.warning(f"Cannot value {investment.name} from its terms: {e}")

    return investment.current_value or 0.0


def compute_investment_performance(
    investment: Investment,
    transactions: Sequence[Transaction],
    as_of: Optional[date] = None,
) -> InvestmentPerformance:
    """
    Compute performance of one holding.

    Args:
        investment: The holding
        transactions: All transactions; only those linked to the holding are used
        as_of: Valuation date (default today)
    """
    if as_of is None:
        as_of = date.today()

    linked = [t for t in transactions if t.investment_id == investment.id]
    total_invested = sum(t.amount for t in linked)
    current_value = current_value_for(investment, total_invested, as_of)

    pnl = current_value - total_invested
    pnl_percent = (pnl / total_invested * 100) if total_invested > 0 else 0.0

    return InvestmentPerformance(
        id=investment.id,
        name=investment.name,
        type=InvestmentType(investment.type).value,
        total_invested=total_invested,
        current_value=current_value,
        pnl=pnl,
        pnl_percent=pnl_percent,
        xirr=_xirr_for(linked, current_value, as_of),
    )


def compute_portfolio_performance(
    investments: Sequence[Investment],
    transactions: Sequence[Transaction],
    as_of: Optional[date] = None,
) -> List[InvestmentPerformance]:
    """Performance of every holding."""
    return [
        compute_investment_performance(inv, transactions, as_of)
        for inv in investments
    ]


def compute_portfolio_summary(
    performances: Sequence[InvestmentPerformance],
    transactions: Sequence[Transaction],
    as_of: Optional[date] = None,
) -> Dict[str, float]:
    """
    Portfolio totals and a portfolio-wide XIRR.

    The XIRR treats every investment-category transaction as an outflow and
    the combined current value as a single inflow on the valuation date.
    """
    if as_of is None:
        as_of = date.today()

    total_invested = sum(p.total_invested for p in performances)
    total_current_value = sum(p.current_value for p in performances)

    contributions = [
        t for t in transactions if t.category == TransactionCategory.investment
    ]

    logger.debug(
        f"Portfolio XIRR over {len(contributions)} contributions "
        f"and {len(performances)} holdings"
    )

    return {
        "total_invested": total_invested,
        "total_current_value": total_current_value,
        "overall_gain_loss": total_current_value - total_invested,
        "xirr": _xirr_for(contributions, total_current_value, as_of),
    }


def compute_net_worth(
    performances: Sequence[InvestmentPerformance],
    loans: Sequence[Loan],
    other_assets: Sequence[OtherAsset],
) -> Dict[str, float]:
    """
    Net worth as investments plus other assets, less loan balances.

    Assets financed by a loan are counted through other_assets only, so
    a loan's asset value is not added again here.
    """
    total_investments = sum(p.current_value for p in performances)
    total_other_assets = sum(a.value for a in other_assets)
    total_assets = total_investments + total_other_assets
    total_liabilities = sum(
        loan.outstanding_amount for loan in loans if not loan.is_closed
    )

    return {
        "total_investments": total_investments,
        "total_other_assets": total_other_assets,
        "total_assets": total_assets,
        "total_liabilities": total_liabilities,
        "net_worth": total_assets - total_liabilities,
    }
