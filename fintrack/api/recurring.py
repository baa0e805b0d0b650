"""
Recurring transaction API endpoints.

Bills, subscriptions and salaries that repeat on a fixed frequency. Posting
a due entry records a transaction and moves the next due date forward.
"""

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date
from sqlalchemy.orm import Session

from fintrack.api.transactions import TransactionResponse, transaction_to_response
from fintrack.db.database import get_db
from fintrack.db.models import (
    Frequency,
    RecurringTransaction,
    TransactionCategory,
    TransactionType,
)
from fintrack.services.reminders import due_recurring, post_recurring

router = APIRouter()


class RecurringCreate(BaseModel):
    """Schema for creating a recurring transaction."""

    name: str
    amount: float = Field(gt=0)
    type: TransactionType = TransactionType.expense
    category: TransactionCategory = TransactionCategory.bills
    frequency: Frequency = Frequency.monthly
    start_date: date
    next_due_date: Optional[date] = None


class RecurringUpdate(BaseModel):
    """Schema for updating a recurring transaction."""

    name: Optional[str] = None
    amount: Optional[float] = Field(default=None, gt=0)
    type: Optional[TransactionType] = None
    category: Optional[TransactionCategory] = None
    frequency: Optional[Frequency] = None
    next_due_date: Optional[date] = None


class RecurringResponse(BaseModel):
    """Schema for recurring transaction response."""

    id: str
    name: str
    amount: float
    type: TransactionType
    category: TransactionCategory
    frequency: Frequency
    start_date: date
    next_due_date: date


class PostedResponse(BaseModel):
    """The transaction recorded and the schedule after posting."""

    transaction: TransactionResponse
    recurring: RecurringResponse


def recurring_to_response(item: RecurringTransaction) -> RecurringResponse:
    """Convert RecurringTransaction model to response schema."""
    return RecurringResponse(
        id=item.id,
        name=item.name,
        amount=item.amount,
        type=item.type,
        category=item.category,
        frequency=item.frequency,
        start_date=item.start_date,
        next_due_date=item.next_due_date,
    )


def _get_recurring(db: Session, recurring_id: str) -> RecurringTransaction:
    item = (
        db.query(RecurringTransaction)
        .filter(
            RecurringTransaction.id == recurring_id,
            RecurringTransaction.is_deleted == False,
        )
        .first()
    )
    if not item:
        raise HTTPException(status_code=404, detail="Recurring transaction not found")
    return item


@router.get("/", response_model=List[RecurringResponse])
async def list_recurring(db: Session = Depends(get_db)):
    """List recurring transactions by next due date."""
    items = (
        db.query(RecurringTransaction)
        .filter(RecurringTransaction.is_deleted == False)
        .order_by(RecurringTransaction.next_due_date)
        .all()
    )
    return [recurring_to_response(r) for r in items]


@router.get("/due", response_model=List[RecurringResponse])
async def list_due_recurring(
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
):
    """Recurring transactions due on or before as_of."""
    items = (
        db.query(RecurringTransaction)
        .filter(RecurringTransaction.is_deleted == False)
        .order_by(RecurringTransaction.next_due_date)
        .all()
    )
    return [recurring_to_response(r) for r in due_recurring(items, as_of)]


@router.post("/", response_model=RecurringResponse, status_code=201)
async def create_recurring(
    recurring_data: RecurringCreate, db: Session = Depends(get_db)
):
    """Create a recurring transaction. The first due date defaults to the start date."""
    data = recurring_data.model_dump()
    if data["next_due_date"] is None:
        data["next_due_date"] = data["start_date"]

    db_item = RecurringTransaction(**data)
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    return recurring_to_response(db_item)


@router.get("/{recurring_id}", response_model=RecurringResponse)
async def get_recurring(recurring_id: str, db: Session = Depends(get_db)):
    """Get a recurring transaction by ID."""
    return recurring_to_response(_get_recurring(db, recurring_id))


@router.put("/{recurring_id}", response_model=RecurringResponse)
async def update_recurring(
    recurring_id: str,
    recurring_data: RecurringUpdate,
    db: Session = Depends(get_db),
):
    """Update a recurring transaction."""
    db_item = _get_recurring(db, recurring_id)
    for field, value in recurring_data.model_dump(exclude_unset=True).items():
        setattr(db_item, field, value)
    db.commit()
    db.refresh(db_item)
    return recurring_to_response(db_item)


@router.post("/{recurring_id}/post", response_model=PostedResponse)
async def post_recurring_entry(recurring_id: str, db: Session = Depends(get_db)):
    """Record the currently due entry as a transaction and advance the schedule."""
    db_item = _get_recurring(db, recurring_id)

    txn = post_recurring(db_item)
    db.add(txn)
    db.commit()
    db.refresh(txn)
    db.refresh(db_item)

    return PostedResponse(
        transaction=transaction_to_response(txn),
        recurring=recurring_to_response(db_item),
    )


@router.delete("/{recurring_id}")
async def delete_recurring(recurring_id: str, db: Session = Depends(get_db)):
    """Soft delete a recurring transaction. Posted transactions are kept."""
    db_item = _get_recurring(db, recurring_id)
    db_item.is_deleted = True
    db.commit()
    return {"deleted": True, "id": recurring_id}
