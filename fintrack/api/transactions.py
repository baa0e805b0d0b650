"""
Transaction API endpoints.
"""

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel
from typing import Optional, List
import datetime as dt
from datetime import date
from sqlalchemy.orm import Session

from fintrack.db.database import get_db
from fintrack.db.models import (
    Investment,
    Transaction,
    TransactionCategory,
    TransactionType,
)

router = APIRouter()


class TransactionCreate(BaseModel):
    """Schema for creating a transaction."""

    date: dt.date
    description: str
    amount: float
    type: TransactionType
    category: TransactionCategory
    investment_id: Optional[str] = None


class TransactionUpdate(BaseModel):
    """Schema for updating a transaction."""

    date: Optional[dt.date] = None
    description: Optional[str] = None
    amount: Optional[float] = None
    type: Optional[TransactionType] = None
    category: Optional[TransactionCategory] = None
    investment_id: Optional[str] = None


class TransactionResponse(BaseModel):
    """Schema for transaction response."""

    id: str
    date: dt.date
    description: str
    amount: float
    type: TransactionType
    category: TransactionCategory
    investment_id: Optional[str] = None
    recurring_transaction_id: Optional[str] = None


class TransactionListResponse(BaseModel):
    """Response for listing transactions."""

    transactions: List[TransactionResponse]
    total: int


def transaction_to_response(txn: Transaction) -> TransactionResponse:
    """Convert Transaction model to response schema."""
    return TransactionResponse(
        id=txn.id,
        date=txn.date,
        description=txn.description,
        amount=txn.amount,
        type=txn.type,
        category=txn.category,
        investment_id=txn.investment_id,
        recurring_transaction_id=txn.recurring_transaction_id,
    )


def _get_transaction(db: Session, transaction_id: str) -> Transaction:
    txn = (
        db.query(Transaction)
        .filter(Transaction.id == transaction_id, Transaction.is_deleted == False)
        .first()
    )
    if not txn:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return txn


def _check_investment(db: Session, investment_id: Optional[str]) -> None:
    if investment_id is None:
        return
    exists = (
        db.query(Investment)
        .filter(Investment.id == investment_id, Investment.is_deleted == False)
        .first()
    )
    if not exists:
        raise HTTPException(status_code=400, detail="Linked investment not found")


@router.get("/", response_model=TransactionListResponse)
async def list_transactions(
    skip: int = 0,
    limit: int = 100,
    type: Optional[TransactionType] = None,
    category: Optional[TransactionCategory] = None,
    investment_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
):
    """List transactions, newest first, with optional filtering."""
    query = db.query(Transaction).filter(Transaction.is_deleted == False)

    if type:
        query = query.filter(Transaction.type == type)
    if category:
        query = query.filter(Transaction.category == category)
    if investment_id:
        query = query.filter(Transaction.investment_id == investment_id)
    if start_date:
        query = query.filter(Transaction.date >= start_date)
    if end_date:
        query = query.filter(Transaction.date <= end_date)

    total = query.count()
    transactions = (
        query.order_by(Transaction.date.desc()).offset(skip).limit(limit).all()
    )

    return TransactionListResponse(
        transactions=[transaction_to_response(t) for t in transactions],
        total=total,
    )


@router.post("/", response_model=TransactionResponse, status_code=201)
async def create_transaction(
    transaction_data: TransactionCreate,
    db: Session = Depends(get_db),
):
    """Record a transaction."""
    _check_investment(db, transaction_data.investment_id)

    db_transaction = Transaction(**transaction_data.model_dump())

    db.add(db_transaction)
    db.commit()
    db.refresh(db_transaction)

    return transaction_to_response(db_transaction)


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: str,
    db: Session = Depends(get_db),
):
    """Get a transaction by ID."""
    return transaction_to_response(_get_transaction(db, transaction_id))


@router.put("/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    transaction_id: str,
    transaction_data: TransactionUpdate,
    db: Session = Depends(get_db),
):
    """Update a transaction."""
    db_transaction = _get_transaction(db, transaction_id)

    # Update only provided fields
    update_data = transaction_data.model_dump(exclude_unset=True)
    if "investment_id" in update_data:
        _check_investment(db, update_data["investment_id"])

    for field, value in update_data.items():
        setattr(db_transaction, field, value)

    db.commit()
    db.refresh(db_transaction)

    return transaction_to_response(db_transaction)


@router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: str,
    db: Session = Depends(get_db),
):
    """Soft delete a transaction."""
    db_transaction = _get_transaction(db, transaction_id)

    db_transaction.is_deleted = True
    db.commit()

    return {"deleted": True, "id": transaction_id}
