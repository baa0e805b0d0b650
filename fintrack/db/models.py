"""
SQLAlchemy ORM models for personal-finance records.
"""

from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    Float,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Enum as SQLEnum,
)
from sqlalchemy.orm import declarative_base
import uuid
import enum


class TransactionType(str, enum.Enum):
    """Direction of a transaction."""
    income = "Income"
    expense = "Expense"


class TransactionCategory(str, enum.Enum):
    """Spending and income categories."""
    food = "Food"
    transport = "Transport"
    shopping = "Shopping"
    bills = "Bills"
    entertainment = "Entertainment"
    health = "Health"
    housing = "Housing"
    salary = "Salary"
    investment = "Investment"
    other = "Other"


class InvestmentType(str, enum.Enum):
    """Kinds of holdings."""
    stocks = "Stocks"
    mutual_funds = "Mutual Funds"
    crypto = "Cryptocurrency"
    fixed_deposit = "Fixed Deposit"
    recurring_deposit = "Recurring Deposit"


class LoanType(str, enum.Enum):
    """Kinds of loans."""
    personal = "Personal Loan"
    home = "Home Loan"
    car = "Car Loan"
    education = "Education Loan"


class InsuranceType(str, enum.Enum):
    """Kinds of insurance policies."""
    life = "Life Insurance"
    health = "Health Insurance"
    vehicle = "Vehicle Insurance"
    home = "Home Insurance"


class Frequency(str, enum.Enum):
    """How often a recurring transaction falls due."""
    daily = "Daily"
    weekly = "Weekly"
    monthly = "Monthly"
    yearly = "Yearly"


Base = declarative_base()


def generate_uuid():
    return str(uuid.uuid4())


class AuditMixin:
    """Mixin for audit fields on all models."""

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
    is_deleted = Column(Boolean, default=False, nullable=False)


class Transaction(AuditMixin, Base):
    """An income or expense entry, optionally linked to an investment."""

    __tablename__ = "transactions"

    id = Column(String, primary_key=True, default=generate_uuid)
    date = Column(Date, nullable=False)
    description = Column(String(255), nullable=False)
    amount = Column(Float, nullable=False)
    type = Column(SQLEnum(TransactionType), nullable=False)
    category = Column(SQLEnum(TransactionCategory), nullable=False)

    # Contributions to a holding carry its id
    investment_id = Column(String, ForeignKey("investments.id"), nullable=True)

    # Entries posted from a recurring schedule
    recurring_transaction_id = Column(
        String, ForeignKey("recurring_transactions.id"), nullable=True
    )


class Investment(AuditMixin, Base):
    """A holding whose performance is derived from its linked transactions."""

    __tablename__ = "investments"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    type = Column(SQLEnum(InvestmentType), nullable=False)

    # Market value as last entered; FD/RD values are recomputed
    current_value = Column(Float, default=0.0, nullable=False)

    # FD/RD terms
    start_date = Column(Date, nullable=True)
    interest_rate = Column(Float, nullable=True)  # Annual percentage
    monthly_investment = Column(Float, nullable=True)  # RD instalment


class Loan(AuditMixin, Base):
    """A reducing-balance loan."""

    __tablename__ = "loans"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    loan_type = Column(SQLEnum(LoanType), default=LoanType.personal, nullable=False)
    principal = Column(Float, nullable=False)
    outstanding_amount = Column(Float, nullable=False)
    interest_rate = Column(Float, nullable=False)  # Annual percentage
    tenure_years = Column(Float, nullable=False)
    emi = Column(Float, nullable=False)
    start_date = Column(Date, nullable=True)
    asset_current_value = Column(Float, nullable=True)
    is_closed = Column(Boolean, default=False, nullable=False)


class OtherAsset(AuditMixin, Base):
    """A manually valued asset (property, gold, vehicle)."""

    __tablename__ = "other_assets"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    value = Column(Float, default=0.0, nullable=False)


class Goal(AuditMixin, Base):
    """A savings goal."""

    __tablename__ = "goals"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    target_amount = Column(Float, nullable=False)
    current_amount = Column(Float, default=0.0, nullable=False)
    deadline = Column(Date, nullable=True)


class Budget(AuditMixin, Base):
    """Monthly spending limit for a category."""

    __tablename__ = "budgets"

    id = Column(String, primary_key=True, default=generate_uuid)
    category = Column(SQLEnum(TransactionCategory), unique=True, nullable=False)
    amount = Column(Float, nullable=False)


class InsurancePolicy(AuditMixin, Base):
    """An insurance policy with its next premium due date."""

    __tablename__ = "insurance_policies"

    id = Column(String, primary_key=True, default=generate_uuid)
    policy_name = Column(String(255), nullable=False)
    type = Column(SQLEnum(InsuranceType), nullable=False)
    sum_assured = Column(Float, nullable=False)
    premium_amount = Column(Float, nullable=False)
    premium_due_date = Column(Date, nullable=False)
    issue_date = Column(Date, nullable=True)
    expiry_date = Column(Date, nullable=True)


class RecurringTransaction(AuditMixin, Base):
    """A bill, subscription or salary that repeats on a fixed frequency."""

    __tablename__ = "recurring_transactions"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    amount = Column(Float, nullable=False)
    type = Column(SQLEnum(TransactionType), nullable=False)
    category = Column(SQLEnum(TransactionCategory), nullable=False)
    frequency = Column(SQLEnum(Frequency), default=Frequency.monthly, nullable=False)
    start_date = Column(Date, nullable=False)
    next_due_date = Column(Date, nullable=False)
