"""
Investment API endpoints.

Stored holdings plus their derived performance (invested, current value,
P&L, XIRR) computed from linked transactions.
"""

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date
from sqlalchemy.orm import Session

from fintrack.db.database import get_db
from fintrack.db.models import Investment, InvestmentType, Transaction
from fintrack.services import portfolio

router = APIRouter()


class InvestmentCreate(BaseModel):
    """Schema for creating an investment."""

    name: str
    type: InvestmentType
    current_value: float = 0.0
    start_date: Optional[date] = None
    interest_rate: Optional[float] = Field(default=None, ge=0)
    monthly_investment: Optional[float] = Field(default=None, ge=0)


class InvestmentUpdate(BaseModel):
    """Schema for updating an investment."""

    name: Optional[str] = None
    type: Optional[InvestmentType] = None
    current_value: Optional[float] = None
    start_date: Optional[date] = None
    interest_rate: Optional[float] = Field(default=None, ge=0)
    monthly_investment: Optional[float] = Field(default=None, ge=0)


class InvestmentResponse(BaseModel):
    """Schema for investment response."""

    id: str
    name: str
    type: InvestmentType
    current_value: float
    start_date: Optional[date] = None
    interest_rate: Optional[float] = None
    monthly_investment: Optional[float] = None


class PerformanceResponse(BaseModel):
    """Derived performance of a holding."""

    id: str
    name: str
    type: str
    total_invested: float
    current_value: float
    pnl: float
    pnl_percent: float
    xirr: float


class PortfolioSummaryResponse(BaseModel):
    """Portfolio-wide totals."""

    total_invested: float
    total_current_value: float
    overall_gain_loss: float
    xirr: float


def investment_to_response(inv: Investment) -> InvestmentResponse:
    """Convert Investment model to response schema."""
    return InvestmentResponse(
        id=inv.id,
        name=inv.name,
        type=inv.type,
        current_value=inv.current_value,
        start_date=inv.start_date,
        interest_rate=inv.interest_rate,
        monthly_investment=inv.monthly_investment,
    )


def active_investments(db: Session) -> List[Investment]:
    return db.query(Investment).filter(Investment.is_deleted == False).all()


def active_transactions(db: Session) -> List[Transaction]:
    return db.query(Transaction).filter(Transaction.is_deleted == False).all()


def _get_investment(db: Session, investment_id: str) -> Investment:
    inv = (
        db.query(Investment)
        .filter(Investment.id == investment_id, Investment.is_deleted == False)
        .first()
    )
    if not inv:
        raise HTTPException(status_code=404, detail="Investment not found")
    return inv


@router.get("/", response_model=List[InvestmentResponse])
async def list_investments(
    type: Optional[InvestmentType] = None,
    db: Session = Depends(get_db),
):
    """List investments."""
    query = db.query(Investment).filter(Investment.is_deleted == False)
    if type:
        query = query.filter(Investment.type == type)
    return [investment_to_response(inv) for inv in query.all()]


@router.post("/", response_model=InvestmentResponse, status_code=201)
async def create_investment(
    investment_data: InvestmentCreate,
    db: Session = Depends(get_db),
):
    """Create an investment."""
    db_investment = Investment(**investment_data.model_dump())

    db.add(db_investment)
    db.commit()
    db.refresh(db_investment)

    return investment_to_response(db_investment)


@router.get("/performance", response_model=List[PerformanceResponse])
async def list_performance(
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
):
    """Performance of every holding."""
    performances = portfolio.compute_portfolio_performance(
        active_investments(db), active_transactions(db), as_of
    )
    return [PerformanceResponse(**p.to_dict()) for p in performances]


@router.get("/summary", response_model=PortfolioSummaryResponse)
async def portfolio_summary(
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
):
    """Portfolio totals and XIRR."""
    transactions = active_transactions(db)
    performances = portfolio.compute_portfolio_performance(
        active_investments(db), transactions, as_of
    )
    return PortfolioSummaryResponse(
        **portfolio.compute_portfolio_summary(performances, transactions, as_of)
    )


@router.get("/{investment_id}", response_model=InvestmentResponse)
async def get_investment(
    investment_id: str,
    db: Session = Depends(get_db),
):
    """Get an investment by ID."""
    return investment_to_response(_get_investment(db, investment_id))


@router.get("/{investment_id}/performance", response_model=PerformanceResponse)
async def get_investment_performance(
    investment_id: str,
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
):
    """Performance of a single holding."""
    inv = _get_investment(db, investment_id)
    linked = (
        db.query(Transaction)
        .filter(
            Transaction.investment_id == investment_id,
            Transaction.is_deleted == False,
        )
        .all()
    )
    performance = portfolio.compute_investment_performance(inv, linked, as_of)
    return PerformanceResponse(**performance.to_dict())


@router.put("/{investment_id}", response_model=InvestmentResponse)
async def update_investment(
    investment_id: str,
    investment_data: InvestmentUpdate,
    db: Session = Depends(get_db),
):
    """Update an investment."""
    db_investment = _get_investment(db, investment_id)

    update_data = investment_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_investment, field, value)

    db.commit()
    db.refresh(db_investment)

    return investment_to_response(db_investment)


@router.delete("/{investment_id}")
async def delete_investment(
    investment_id: str,
    db: Session = Depends(get_db),
):
    """Soft delete an investment."""
    db_investment = _get_investment(db, investment_id)

    db_investment.is_deleted = True
    db.commit()

    return {"deleted": True, "id": investment_id}
