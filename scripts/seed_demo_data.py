"""
Seed the database with a demo household: deposits, a fund, a home loan,
a few months of spending, budgets, an insurance policy and a recurring bill.
"""
import sys
import os
from datetime import date

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fintrack.calculations.loans import calculate_emi
from fintrack.db.database import SessionLocal, init_db
from fintrack.db.models import (
    Budget,
    Frequency,
    Goal,
    InsurancePolicy,
    InsuranceType,
    Investment,
    InvestmentType,
    Loan,
    LoanType,
    OtherAsset,
    RecurringTransaction,
    Transaction,
    TransactionCategory,
    TransactionType,
)


def main():
    init_db()
    db = SessionLocal()

    try:
        existing = db.query(Investment).filter(Investment.name == "SBI Fixed Deposit").first()
        if existing:
            print(f"Demo data already present (FD ID: {existing.id})")
            return

        fd = Investment(
            name="SBI Fixed Deposit",
            type=InvestmentType.fixed_deposit,
            current_value=100000,
            start_date=date(2023, 1, 15),
            interest_rate=7.5,
        )
        rd = Investment(
            name="ICICI Recurring Deposit",
            type=InvestmentType.recurring_deposit,
            current_value=10000,
            start_date=date(2023, 7, 5),
            interest_rate=7.0,
            monthly_investment=5000,
        )
        fund = Investment(
            name="Nifty 50 Index Fund",
            type=InvestmentType.mutual_funds,
            current_value=120000,
        )
        db.add_all([fd, rd, fund])
        db.flush()
        print(f"Created investments: {fd.name}, {rd.name}, {fund.name}")

        transactions = [
            Transaction(date=date(2023, 11, 1), description="Monthly Salary", amount=50000,
                        type=TransactionType.income, category=TransactionCategory.salary),
            Transaction(date=date(2023, 11, 2), description="Groceries", amount=2500,
                        type=TransactionType.expense, category=TransactionCategory.food),
            Transaction(date=date(2023, 11, 5), description="Rent", amount=5000,
                        type=TransactionType.expense, category=TransactionCategory.housing),
            Transaction(date=date(2023, 1, 15), description="Initial FD Investment", amount=100000,
                        type=TransactionType.expense, category=TransactionCategory.investment,
                        investment_id=fd.id),
            Transaction(date=date(2023, 7, 5), description="Monthly RD Installment", amount=5000,
                        type=TransactionType.expense, category=TransactionCategory.investment,
                        investment_id=rd.id),
            Transaction(date=date(2023, 8, 5), description="Monthly RD Installment", amount=5000,
                        type=TransactionType.expense, category=TransactionCategory.investment,
                        investment_id=rd.id),
        ]
        db.add_all(transactions)

        db.add(
            Loan(
                name="SBI Home Loan",
                loan_type=LoanType.home,
                principal=5000000,
                outstanding_amount=4800000,
                interest_rate=8.5,
                tenure_years=20,
                emi=calculate_emi(5000000, 8.5, 20),
                start_date=date(2022, 7, 1),
                asset_current_value=6000000,
            )
        )

        db.add_all([
            OtherAsset(name="Savings Account Balance", value=250000),
            OtherAsset(name="Primary Home Value", value=7500000),
            Goal(name="Vacation to Goa", target_amount=50000, current_amount=15000,
                 deadline=date(2024, 6, 1)),
            Budget(category=TransactionCategory.food, amount=10000),
            Budget(category=TransactionCategory.shopping, amount=5000),
            InsurancePolicy(policy_name="LIC Term Plan", type=InsuranceType.life,
                            sum_assured=10000000, premium_amount=25000,
                            premium_due_date=date(2024, 8, 15),
                            issue_date=date(2020, 8, 15), expiry_date=date(2050, 8, 15)),
            RecurringTransaction(name="Internet Bill", amount=999,
                                 type=TransactionType.expense,
                                 category=TransactionCategory.bills,
                                 frequency=Frequency.monthly,
                                 start_date=date(2023, 11, 10),
                                 next_due_date=date(2023, 12, 10)),
        ])

        db.commit()
        print(f"Seeded {len(transactions)} transactions, 1 loan, 2 assets, 1 goal, 2 budgets, "
              f"1 policy, 1 recurring bill")

    except Exception as e:
        print(f"Error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
