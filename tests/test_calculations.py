"""
Tests for financial calculation engine.
"""

import pytest
from datetime import date

from fintrack.calculations.xirr import (
    calculate_irr,
    calculate_npv,
    calculate_xirr,
    calculate_xnpv,
    xirr_percent,
    monthly_to_annualized,
    annualized_to_monthly,
)
from fintrack.calculations.deposits import (
    calculate_fd_value,
    calculate_rd_value,
    calculate_rd_maturity,
    months_elapsed,
)
from fintrack.calculations.loans import (
    calculate_emi,
    calculate_total_interest_payable,
    calculate_outstanding_balance,
    generate_amortization_schedule,
    months_to_repay,
    summarize_schedule,
)
from fintrack.calculations.prepayment import simulate_prepayment, format_months
from fintrack.calculations import planning
from fintrack.calculations import xirr as xirr_module
from fintrack.calculations.compounding import ensure_finite, growth_factor


class TestXIRR:
    """Test IRR and XIRR calculation functions."""

    def test_xirr_one_year(self):
        """Investment of 100 returning 110 a year later is 10%."""
        rate = calculate_xirr([-100, 110], [date(2023, 1, 1), date(2024, 1, 1)])
        assert abs(rate - 0.10) < 1e-6

    def test_xirr_two_years_with_leap_day(self):
        """Time is measured in 365-day years, so a leap year is slightly longer."""
        rate = calculate_xirr([-1000, 1210], [date(2023, 1, 1), date(2025, 1, 1)])
        assert abs(rate - 0.10) < 0.001
        assert rate < 0.10

    def test_xirr_unsorted_dates(self):
        """Order of the flows does not matter."""
        dates = [date(2024, 1, 1), date(2023, 1, 1), date(2023, 7, 1)]
        flows = [1200, -1000, -100]
        sorted_rate = calculate_xirr(
            [-1000, -100, 1200], [date(2023, 1, 1), date(2023, 7, 1), date(2024, 1, 1)]
        )
        assert calculate_xirr(flows, dates) == pytest.approx(sorted_rate, abs=1e-9)

    def test_xirr_negative_return(self):
        """Losing half in a year converges from the default guess."""
        rate = calculate_xirr([-100, 50], [date(2023, 1, 1), date(2024, 1, 1)])
        assert abs(rate + 0.5) < 1e-4

    def test_xirr_root_zeroes_xnpv(self):
        dates = [date(2022, 3, 15), date(2022, 9, 1), date(2023, 2, 10), date(2024, 5, 20)]
        flows = [-5000, -2500, -1000, 10500]
        rate = calculate_xirr(flows, dates)
        assert abs(calculate_xnpv(flows, dates, rate)) < 1e-4

    def test_xirr_requires_both_signs(self):
        with pytest.raises(ValueError):
            calculate_xirr([100, 110], [date(2023, 1, 1), date(2024, 1, 1)])

    def test_xirr_length_mismatch(self):
        with pytest.raises(ValueError):
            calculate_xirr([-100, 110], [date(2023, 1, 1)])

    def test_xirr_requires_two_flows(self):
        with pytest.raises(ValueError):
            calculate_xirr([-100], [date(2023, 1, 1)])

    def test_xirr_same_day_flows(self):
        """Flows on a single date give no time for a rate to act on."""
        with pytest.raises(ValueError, match="derivative is zero"):
            calculate_xirr([-100, 50], [date(2023, 1, 1), date(2023, 1, 1)])

    def test_xirr_gives_up_after_max_iterations(self, monkeypatch):
        monkeypatch.setattr(xirr_module, "MAX_ITERATIONS", 1)
        with pytest.raises(ValueError, match="did not converge"):
            calculate_xirr([-1000, 1200], [date(2023, 1, 1), date(2024, 1, 1)])

    def test_xirr_percent_falls_back_to_zero(self):
        assert xirr_percent([120000], [date(2024, 1, 1)]) == 0.0

    def test_xirr_percent(self):
        value = xirr_percent([-100, 110], [date(2023, 1, 1), date(2024, 1, 1)])
        assert abs(value - 10.0) < 1e-4

    def test_calculate_irr_multi_period(self):
        """Investment of 100, annual returns of 20, capital back at the end."""
        rate = calculate_irr([-100, 20, 20, 20, 20, 120])
        assert abs(rate - 0.20) < 1e-6

    def test_calculate_npv(self):
        npv = calculate_npv([-100, 50, 50, 50], 0.10)
        assert npv == pytest.approx(24.343, abs=0.001)

    def test_rate_conversions_round_trip(self):
        monthly = annualized_to_monthly(0.12)
        assert monthly_to_annualized(monthly) == pytest.approx(0.12)


class TestDeposits:
    """Test FD and RD valuation."""

    def test_months_elapsed_counts_completed_months(self):
        start = date(2023, 7, 5)
        assert months_elapsed(start, date(2023, 8, 4)) == 0
        assert months_elapsed(start, date(2023, 8, 5)) == 1
        assert months_elapsed(start, date(2024, 7, 5)) == 12
        assert months_elapsed(start, date(2023, 1, 1)) == 0

    def test_fd_value_quarterly(self):
        value = calculate_fd_value(100000, 7.5, date(2023, 1, 1), as_of=date(2024, 1, 1))
        assert abs(value - 107708) < 5

    def test_fd_value_before_start(self):
        value = calculate_fd_value(100000, 7.5, date(2024, 1, 1), as_of=date(2023, 1, 1))
        assert value == 100000

    def test_fd_value_zero_rate(self):
        assert calculate_fd_value(5000, 0, date(2020, 1, 1), as_of=date(2024, 1, 1)) == 5000

    def test_fd_negative_rate(self):
        with pytest.raises(ValueError):
            calculate_fd_value(5000, -1, date(2020, 1, 1))

    def test_rd_value(self):
        """Two instalments of 5000 at 7% grow for two and one months."""
        value = calculate_rd_value(5000, 7.0, date(2023, 7, 5), as_of=date(2023, 9, 5))
        i = 0.07 / 12
        expected = 5000 * (1 + i) ** 2 + 5000 * (1 + i)
        assert value == pytest.approx(expected)
        assert abs(value - 10087.67) < 0.01

    def test_rd_value_before_first_month(self):
        assert calculate_rd_value(5000, 7.0, date(2023, 7, 5), as_of=date(2023, 8, 1)) == 0

    def test_rd_value_zero_rate(self):
        value = calculate_rd_value(1000, 0, date(2023, 1, 1), as_of=date(2023, 7, 1))
        assert value == 6000

    def test_rd_maturity(self):
        value = calculate_rd_maturity(5000, 7.0, 2)
        assert abs(value - 10087.67) < 0.01


class TestLoans:
    """Test EMI and amortization."""

    def test_calculate_emi(self):
        emi = calculate_emi(1000000, 8.5, 15)
        assert 9840 < emi < 9855

    def test_emi_zero_rate(self):
        assert calculate_emi(120000, 0, 1) == 10000

    def test_emi_invalid_inputs(self):
        assert calculate_emi(0, 8.5, 10) == 0
        assert calculate_emi(100000, 8.5, 0) == 0
        assert calculate_emi(100000, -1, 10) == 0

    def test_total_interest_payable(self):
        emi = calculate_emi(100000, 12, 1)
        total = calculate_total_interest_payable(100000, emi, 1)
        assert total == pytest.approx(emi * 12 - 100000)
        assert calculate_total_interest_payable(100000, 0, 1) == 0

    def test_schedule_length_and_final_balance(self):
        schedule = generate_amortization_schedule(100000, 12, 1, start_date=date(2024, 1, 10))
        assert len(schedule) == 12
        assert schedule[-1]["balance"] == 0
        assert schedule[0]["interest"] == 1000.00
        assert schedule[0]["date"] == "2024-01-10"
        assert schedule[1]["date"] == "2024-02-10"

    def test_schedule_principal_sums_to_loan(self):
        schedule = generate_amortization_schedule(250000, 9, 5, start_date=date(2024, 1, 1))
        totals = summarize_schedule(schedule)
        assert abs(totals["total_principal"] - 250000) < 1
        assert totals["months"] == 60
        assert all(row["balance"] >= 0 for row in schedule)

    def test_schedule_balance_is_decreasing(self):
        schedule = generate_amortization_schedule(500000, 10, 3, start_date=date(2024, 1, 1))
        balances = [row["balance"] for row in schedule]
        assert balances == sorted(balances, reverse=True)
        # Interest share falls as the balance is repaid
        assert schedule[0]["interest"] > schedule[-1]["interest"]

    def test_schedule_empty_for_invalid_loan(self):
        assert generate_amortization_schedule(0, 10, 3) == []

    def test_outstanding_balance_matches_schedule(self):
        schedule = generate_amortization_schedule(100000, 12, 1, start_date=date(2024, 1, 1))
        balance = calculate_outstanding_balance(100000, 12, 1, 6)
        assert abs(balance - schedule[5]["balance"]) < 0.05
        assert calculate_outstanding_balance(100000, 12, 1, 0) == 100000
        assert calculate_outstanding_balance(100000, 12, 1, 12) == 0

    def test_months_to_repay(self):
        emi = calculate_emi(1000000, 8.5, 15)
        assert months_to_repay(1000000, 8.5, emi) == 180

    def test_months_to_repay_emi_too_small(self):
        with pytest.raises(ValueError):
            months_to_repay(1000000, 12, 10000)


class TestPrepayment:
    """Test the prepayment simulator."""

    def test_partial_prepayment(self):
        result = simulate_prepayment(1000000, 8.5, 15, 200000)
        old_emi = calculate_emi(1000000, 8.5, 15)

        assert result.old_emi == pytest.approx(old_emi)
        assert result.new_emi == pytest.approx(old_emi * 0.8)
        assert result.interest_saved == pytest.approx(0.2 * (old_emi * 180 - 1000000))
        assert result.tenure_reduction_months == 58
        assert result.tenure_reduced_label == "4 years, 10 months"
        assert not result.loan_closed

    def test_prepayment_closes_loan(self):
        result = simulate_prepayment(500000, 9, 5, 600000)
        assert result.loan_closed
        assert result.new_emi == 0
        assert result.tenure_reduced_label == "Loan Closed"
        assert result.interest_saved == pytest.approx(
            calculate_emi(500000, 9, 5) * 60 - 500000
        )

    def test_zero_prepayment_saves_nothing(self):
        result = simulate_prepayment(500000, 9, 5, 0)
        assert result.interest_saved == pytest.approx(0, abs=1e-6)
        assert result.tenure_reduction_months == 0

    def test_invalid_loan_gives_empty_result(self):
        result = simulate_prepayment(0, 8.5, 15, 1000)
        assert result.old_emi == 0
        assert result.interest_saved == 0
        assert result.tenure_reduced_label == "0 years, 0 months"

    def test_negative_prepayment(self):
        with pytest.raises(ValueError):
            simulate_prepayment(500000, 9, 5, -1)

    def test_format_months(self):
        assert format_months(14) == "1 years, 2 months"
        assert format_months(0) == "0 years, 0 months"


class TestPlanning:
    """Test goal-planning calculators."""

    def test_sip_future_value(self):
        result = planning.sip_future_value(10000, 12, 10)
        assert result["invested_amount"] == 1200000
        assert result["total_value"] == pytest.approx(2323391, rel=1e-4)

    def test_sip_zero_return(self):
        result = planning.sip_future_value(1000, 0, 1)
        assert result["total_value"] == 12000
        assert result["estimated_gains"] == 0

    def test_lumpsum(self):
        result = planning.lumpsum_future_value(100000, 10, 2)
        assert result["total_value"] == pytest.approx(121000)

    def test_swp_depletes(self):
        result = planning.swp_duration(100000, 10000, 0)
        assert result["months"] == 10
        assert not result["sustainable"]
        assert result["total_withdrawn"] == 100000

    def test_swp_sustainable(self):
        result = planning.swp_duration(1000000, 5000, 12)
        assert result["sustainable"]
        assert result["months"] == planning.SWP_MAX_MONTHS
        assert result["total_withdrawn"] is None

    def test_fire_corpus(self):
        result = planning.fire_corpus(50000, 5000000, 4)
        assert result["fire_corpus"] == pytest.approx(15000000)
        assert result["shortfall"] == pytest.approx(10000000)

    def test_inflation(self):
        assert planning.inflation_adjusted_cost(100, 10, 2) == pytest.approx(121)

    def test_human_life_value(self):
        result = planning.human_life_value(30, 60, 1000000, 2000000, 500000, 1000000)
        assert result["total_needs"] == 32000000
        assert result["insurance_gap"] == 30500000


class TestCompounding:
    """Test growth factors that leave the float range."""

    def test_growth_factor(self):
        assert growth_factor(0.1, 2) == pytest.approx(1.21)

    def test_growth_factor_overflow(self):
        with pytest.raises(ValueError, match="out of range"):
            growth_factor(0.01, 120000)

    def test_growth_factor_rate_below_minus_100(self):
        with pytest.raises(ValueError):
            growth_factor(-2, 1.5)

    def test_ensure_finite(self):
        assert ensure_finite(12.5) == 12.5
        with pytest.raises(ValueError):
            ensure_finite(float("inf"))

    def test_emi_overflow(self):
        with pytest.raises(ValueError):
            calculate_emi(100000, 12, 10000)

    def test_emi_long_tenure_approaches_interest_only(self):
        """Over 500 years the instalment barely exceeds the monthly interest."""
        assert calculate_emi(100000, 12, 500) == pytest.approx(1000, rel=1e-9)

    def test_fd_overflow(self):
        with pytest.raises(ValueError):
            calculate_fd_value(100000, 10000, date(1900, 1, 1), as_of=date(2024, 1, 1))

    def test_rd_overflow(self):
        with pytest.raises(ValueError):
            calculate_rd_value(1000, 100000, date(1900, 1, 1), as_of=date(2024, 1, 1))

    def test_outstanding_balance_overflow(self):
        with pytest.raises(ValueError):
            calculate_outstanding_balance(100000, 1200000, 100, 600)

    def test_lumpsum_overflow(self):
        with pytest.raises(ValueError):
            planning.lumpsum_future_value(1000, 100, 2000)

    def test_sip_overflow(self):
        with pytest.raises(ValueError):
            planning.sip_future_value(1000, 1200, 100)

    def test_inflation_overflow(self):
        with pytest.raises(ValueError):
            planning.inflation_adjusted_cost(100, 100, 2000)
