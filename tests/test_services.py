"""
Tests for portfolio performance, cash-flow summaries and reminders.
"""

import pytest
from datetime import date

from fintrack.calculations.deposits import calculate_fd_value
from fintrack.db.models import (
    Budget,
    Frequency,
    Goal,
    InsurancePolicy,
    InsuranceType,
    Investment,
    InvestmentType,
    Loan,
    OtherAsset,
    RecurringTransaction,
    Transaction,
    TransactionCategory,
    TransactionType,
)
from fintrack.services.portfolio import (
    compute_investment_performance,
    compute_net_worth,
    compute_portfolio_performance,
    compute_portfolio_summary,
)
from fintrack.services.reminders import (
    due_recurring,
    next_due_date,
    post_recurring,
    upcoming_premiums,
)
from fintrack.services.summary import (
    budget_status,
    financial_summary,
    goal_progress,
    spending_by_category,
)


def make_txn(amount, when, investment_id=None, type=TransactionType.expense,
             category=TransactionCategory.investment, description="Entry"):
    return Transaction(
        id=f"t-{when.isoformat()}-{amount}-{category.value}",
        date=when,
        description=description,
        amount=amount,
        type=type,
        category=category,
        investment_id=investment_id,
    )


@pytest.fixture
def fixed_deposit():
    return Investment(
        id="fd1",
        name="Bank Fixed Deposit",
        type=InvestmentType.fixed_deposit,
        current_value=100000,
        start_date=date(2023, 1, 1),
        interest_rate=7.5,
    )


@pytest.fixture
def recurring_deposit():
    return Investment(
        id="rd1",
        name="Recurring Deposit",
        type=InvestmentType.recurring_deposit,
        current_value=10000,
        start_date=date(2023, 7, 5),
        interest_rate=7.0,
        monthly_investment=5000,
    )


@pytest.fixture
def index_fund():
    return Investment(
        id="mf1",
        name="Index Fund",
        type=InvestmentType.mutual_funds,
        current_value=120000,
    )


@pytest.fixture
def transactions():
    return [
        make_txn(100000, date(2023, 1, 1), "fd1"),
        make_txn(5000, date(2023, 7, 5), "rd1"),
        make_txn(5000, date(2023, 8, 5), "rd1"),
    ]


class TestInvestmentPerformance:
    """Test derived performance of single holdings."""

    def test_fixed_deposit_valued_from_contributions(self, fixed_deposit, transactions):
        perf = compute_investment_performance(
            fixed_deposit, transactions, as_of=date(2024, 1, 1)
        )
        expected = calculate_fd_value(100000, 7.5, date(2023, 1, 1), as_of=date(2024, 1, 1))

        assert perf.total_invested == 100000
        assert perf.current_value == pytest.approx(expected)
        assert perf.pnl == pytest.approx(expected - 100000)
        assert perf.pnl_percent == pytest.approx((expected - 100000) / 1000)
        # One year of growth: XIRR equals the simple return
        assert abs(perf.xirr - perf.pnl_percent) < 0.01

    def test_recurring_deposit_valued_from_instalment(self, recurring_deposit, transactions):
        perf = compute_investment_performance(
            recurring_deposit, transactions, as_of=date(2023, 9, 5)
        )
        assert perf.total_invested == 10000
        assert abs(perf.current_value - 10087.67) < 0.01
        assert perf.xirr > 0

    def test_holding_without_contributions(self, index_fund, transactions):
        perf = compute_investment_performance(index_fund, transactions, as_of=date(2024, 1, 1))
        assert perf.total_invested == 0
        assert perf.current_value == 120000
        assert perf.pnl_percent == 0
        assert perf.xirr == 0

    def test_market_holding_uses_stored_value(self, index_fund):
        txns = [make_txn(100000, date(2023, 1, 1), "mf1")]
        perf = compute_investment_performance(index_fund, txns, as_of=date(2024, 1, 1))
        assert perf.pnl == 20000
        assert abs(perf.xirr - 20.0) < 0.01

    def test_fd_without_rate_keeps_stored_value(self, transactions):
        fd = Investment(
            id="fd1",
            name="Unrated FD",
            type=InvestmentType.fixed_deposit,
            current_value=101000,
            start_date=date(2023, 1, 1),
        )
        perf = compute_investment_performance(fd, transactions, as_of=date(2024, 1, 1))
        assert perf.current_value == 101000

    def test_unvaluable_deposit_keeps_stored_value(self):
        fd = Investment(
            id="fd9",
            name="Runaway FD",
            type=InvestmentType.fixed_deposit,
            current_value=100000,
            start_date=date(1900, 1, 1),
            interest_rate=10000,
        )
        txns = [make_txn(100000, date(1900, 1, 1), "fd9")]
        perf = compute_investment_performance(fd, txns, as_of=date(2024, 1, 1))
        assert perf.current_value == 100000
        assert perf.pnl == 0

    def test_to_dict(self, index_fund):
        perf = compute_investment_performance(index_fund, [], as_of=date(2024, 1, 1))
        data = perf.to_dict()
        assert data["type"] == "Mutual Funds"
        assert data["id"] == "mf1"


class TestPortfolio:
    """Test portfolio aggregation."""

    def test_summary_totals(self, fixed_deposit, recurring_deposit, index_fund, transactions):
        as_of = date(2024, 1, 1)
        performances = compute_portfolio_performance(
            [fixed_deposit, recurring_deposit, index_fund], transactions, as_of
        )
        summary = compute_portfolio_summary(performances, transactions, as_of)

        assert summary["total_invested"] == 110000
        assert summary["total_current_value"] == pytest.approx(
            sum(p.current_value for p in performances)
        )
        assert summary["overall_gain_loss"] == pytest.approx(
            summary["total_current_value"] - 110000
        )
        assert summary["xirr"] > 0

    def test_summary_ignores_non_investment_transactions(self, index_fund):
        txns = [
            make_txn(100000, date(2023, 1, 1), "mf1"),
            make_txn(
                50000,
                date(2023, 6, 1),
                type=TransactionType.income,
                category=TransactionCategory.salary,
            ),
        ]
        performances = compute_portfolio_performance([index_fund], txns, date(2024, 1, 1))
        summary = compute_portfolio_summary(performances, txns, date(2024, 1, 1))
        assert abs(summary["xirr"] - 20.0) < 0.01

    def test_net_worth(self, index_fund):
        performances = compute_portfolio_performance([index_fund], [], date(2024, 1, 1))
        loans = [
            Loan(name="Car", principal=500000, outstanding_amount=300000,
                 interest_rate=9, tenure_years=5, emi=10000, is_closed=False),
            Loan(name="Old", principal=100000, outstanding_amount=50000,
                 interest_rate=9, tenure_years=1, emi=9000, is_closed=True),
        ]
        assets = [OtherAsset(name="Car", value=400000)]

        result = compute_net_worth(performances, loans, assets)

        assert result["total_assets"] == 520000
        assert result["total_liabilities"] == 300000
        assert result["net_worth"] == 220000


class TestSummaries:
    """Test cash-flow summaries."""

    @pytest.fixture
    def monthly_transactions(self):
        return [
            make_txn(80000, date(2024, 3, 1), type=TransactionType.income,
                     category=TransactionCategory.salary),
            make_txn(900, date(2024, 3, 5), category=TransactionCategory.food),
            make_txn(300, date(2024, 3, 20), category=TransactionCategory.food),
            make_txn(2000, date(2024, 3, 10), category=TransactionCategory.bills),
            make_txn(5000, date(2024, 2, 10), category=TransactionCategory.shopping),
        ]

    def test_financial_summary_for_month(self, monthly_transactions):
        result = financial_summary(monthly_transactions, date(2024, 3, 15))
        assert result["income"] == 80000
        assert result["expenses"] == 3200
        assert result["balance"] == 76800

    def test_financial_summary_all_time(self, monthly_transactions):
        result = financial_summary(monthly_transactions)
        assert result["expenses"] == 8200

    def test_spending_by_category(self, monthly_transactions):
        result = spending_by_category(monthly_transactions, date(2024, 3, 1))
        assert result == {"Food": 1200, "Bills": 2000}

    def test_budget_status(self, monthly_transactions):
        budgets = [
            Budget(category=TransactionCategory.food, amount=1000),
            Budget(category=TransactionCategory.bills, amount=2500),
            Budget(category=TransactionCategory.transport, amount=1000),
        ]
        rows = {r["category"]: r for r in budget_status(monthly_transactions, budgets, date(2024, 3, 1))}

        assert rows["Food"]["status"] == "over"
        assert rows["Food"]["remaining"] == -200
        assert rows["Bills"]["status"] == "warning"
        assert rows["Bills"]["percent_used"] == pytest.approx(80)
        assert rows["Transport"]["status"] == "ok"
        assert rows["Transport"]["spent"] == 0

    def test_budget_status_band_edges(self):
        """Exactly 75% is still ok and exactly 100% is still a warning."""
        txns = [
            make_txn(750, date(2024, 3, 5), category=TransactionCategory.food),
            make_txn(1000, date(2024, 3, 5), category=TransactionCategory.bills),
            make_txn(1000.5, date(2024, 3, 5), category=TransactionCategory.shopping),
        ]
        budgets = [
            Budget(category=TransactionCategory.food, amount=1000),
            Budget(category=TransactionCategory.bills, amount=1000),
            Budget(category=TransactionCategory.shopping, amount=1000),
        ]
        rows = {r["category"]: r for r in budget_status(txns, budgets, date(2024, 3, 1))}

        assert rows["Food"]["percent_used"] == 75
        assert rows["Food"]["status"] == "ok"
        assert rows["Bills"]["percent_used"] == 100
        assert rows["Bills"]["status"] == "warning"
        assert rows["Shopping"]["status"] == "over"

    def test_goal_progress_capped(self):
        goal = Goal(id="g1", name="Holiday", target_amount=1000, current_amount=1500)
        result = goal_progress(goal)
        assert result["progress_percent"] == 100
        assert result["remaining"] == 0
        assert result["achieved"]

    def test_goal_progress_partial(self):
        goal = Goal(id="g2", name="Car", target_amount=400000, current_amount=100000)
        result = goal_progress(goal)
        assert result["progress_percent"] == 25
        assert result["remaining"] == 300000
        assert not result["achieved"]


class TestReminders:
    """Test premium reminders and recurring schedules."""

    def make_policy(self, name, due):
        return InsurancePolicy(
            id=name,
            policy_name=name,
            type=InsuranceType.health,
            sum_assured=500000,
            premium_amount=12000,
            premium_due_date=due,
        )

    def test_upcoming_premiums_inclusive_window(self):
        policies = [
            self.make_policy("late", date(2024, 4, 1)),
            self.make_policy("edge", date(2024, 3, 31)),
            self.make_policy("past", date(2024, 2, 28)),
            self.make_policy("today", date(2024, 3, 1)),
        ]
        result = upcoming_premiums(policies, as_of=date(2024, 3, 1))
        assert [p.id for p in result] == ["today", "edge"]

    def test_upcoming_premiums_window_length(self):
        policies = [self.make_policy("soon", date(2024, 3, 8))]
        assert upcoming_premiums(policies, date(2024, 3, 1), window_days=6) == []
        assert len(upcoming_premiums(policies, date(2024, 3, 1), window_days=7)) == 1

    @pytest.mark.parametrize(
        "frequency,expected",
        [
            (Frequency.daily, date(2024, 2, 1)),
            (Frequency.weekly, date(2024, 2, 7)),
            (Frequency.monthly, date(2024, 2, 29)),
            (Frequency.yearly, date(2025, 1, 31)),
        ],
    )
    def test_next_due_date(self, frequency, expected):
        assert next_due_date(frequency, date(2024, 1, 31)) == expected

    def test_due_recurring(self):
        items = [
            RecurringTransaction(id="a", name="Rent", next_due_date=date(2024, 3, 1)),
            RecurringTransaction(id="b", name="Gym", next_due_date=date(2024, 3, 2)),
        ]
        assert [r.id for r in due_recurring(items, date(2024, 3, 1))] == ["a"]

    def test_post_recurring(self):
        salary = RecurringTransaction(
            id="sal",
            name="Salary",
            amount=80000,
            type=TransactionType.income,
            category=TransactionCategory.salary,
            frequency=Frequency.monthly,
            start_date=date(2024, 1, 1),
            next_due_date=date(2024, 3, 1),
        )
        txn = post_recurring(salary)

        assert txn.date == date(2024, 3, 1)
        assert txn.amount == 80000
        assert txn.type == TransactionType.income
        assert txn.recurring_transaction_id == "sal"
        assert salary.next_due_date == date(2024, 4, 1)
