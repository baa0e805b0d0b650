"""
Loan API endpoints.
"""

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date
from sqlalchemy.orm import Session

from fintrack.calculations import loans as loan_math
from fintrack.calculations.deposits import months_elapsed
from fintrack.calculations.prepayment import simulate_prepayment
from fintrack.db.database import get_db
from fintrack.db.models import Loan, LoanType

router = APIRouter()


class LoanCreate(BaseModel):
    """Schema for creating a loan. EMI is derived from the terms."""

    name: str
    loan_type: LoanType = LoanType.personal
    principal: float = Field(gt=0)
    outstanding_amount: Optional[float] = Field(default=None, ge=0)
    interest_rate: float = Field(ge=0)
    tenure_years: float = Field(gt=0)
    start_date: Optional[date] = None
    asset_current_value: Optional[float] = None


class LoanUpdate(BaseModel):
    """Schema for updating a loan."""

    name: Optional[str] = None
    loan_type: Optional[LoanType] = None
    outstanding_amount: Optional[float] = Field(default=None, ge=0)
    asset_current_value: Optional[float] = None


class LoanResponse(BaseModel):
    """Schema for loan response."""

    id: str
    name: str
    loan_type: LoanType
    principal: float
    outstanding_amount: float
    interest_rate: float
    tenure_years: float
    emi: float
    start_date: Optional[date] = None
    asset_current_value: Optional[float] = None
    is_closed: bool


class LoanPrepaymentInput(BaseModel):
    """Prepayment against a stored loan."""

    prepayment_amount: float = Field(ge=0)
    remaining_tenure_years: Optional[float] = Field(default=None, gt=0)
    as_of: Optional[date] = None


def loan_to_response(loan: Loan) -> LoanResponse:
    """Convert Loan model to response schema."""
    return LoanResponse(
        id=loan.id,
        name=loan.name,
        loan_type=loan.loan_type,
        principal=loan.principal,
        outstanding_amount=loan.outstanding_amount,
        interest_rate=loan.interest_rate,
        tenure_years=loan.tenure_years,
        emi=loan.emi,
        start_date=loan.start_date,
        asset_current_value=loan.asset_current_value,
        is_closed=bool(loan.is_closed),
    )


def remaining_tenure_years(loan: Loan, as_of: Optional[date] = None) -> float:
    """Years left on a loan, measured from its start date."""
    total_months = int(round(loan.tenure_years * 12))
    if loan.start_date is None:
        return loan.tenure_years
    elapsed = months_elapsed(loan.start_date, as_of or date.today())
    return max(0, total_months - elapsed) / 12


def _get_loan(db: Session, loan_id: str) -> Loan:
    loan = (
        db.query(Loan)
        .filter(Loan.id == loan_id, Loan.is_deleted == False)
        .first()
    )
    if not loan:
        raise HTTPException(status_code=404, detail="Loan not found")
    return loan


@router.get("/", response_model=List[LoanResponse])
async def list_loans(
    include_closed: bool = False,
    db: Session = Depends(get_db),
):
    """List loans."""
    query = db.query(Loan).filter(Loan.is_deleted == False)
    if not include_closed:
        query = query.filter(Loan.is_closed == False)
    return [loan_to_response(loan) for loan in query.all()]


@router.post("/", response_model=LoanResponse, status_code=201)
async def create_loan(
    loan_data: LoanCreate,
    db: Session = Depends(get_db),
):
    """Create a loan."""
    try:
        emi = loan_math.calculate_emi(
            loan_data.principal, loan_data.interest_rate, loan_data.tenure_years
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    outstanding = loan_data.outstanding_amount
    if outstanding is None:
        outstanding = loan_data.principal

    db_loan = Loan(
        name=loan_data.name,
        loan_type=loan_data.loan_type,
        principal=loan_data.principal,
        outstanding_amount=outstanding,
        interest_rate=loan_data.interest_rate,
        tenure_years=loan_data.tenure_years,
        emi=emi,
        start_date=loan_data.start_date,
        asset_current_value=loan_data.asset_current_value,
    )

    db.add(db_loan)
    db.commit()
    db.refresh(db_loan)

    return loan_to_response(db_loan)


@router.get("/{loan_id}", response_model=LoanResponse)
async def get_loan(
    loan_id: str,
    db: Session = Depends(get_db),
):
    """Get a loan by ID."""
    return loan_to_response(_get_loan(db, loan_id))


@router.get("/{loan_id}/schedule")
async def get_loan_schedule(
    loan_id: str,
    db: Session = Depends(get_db),
):
    """Amortization schedule of a loan from its original terms."""
    loan = _get_loan(db, loan_id)
    schedule = loan_math.generate_amortization_schedule(
        principal=loan.principal,
        annual_rate=loan.interest_rate,
        tenure_years=loan.tenure_years,
        start_date=loan.start_date,
    )
    return {
        "loan_id": loan_id,
        "emi": loan.emi,
        "schedule": schedule,
        **loan_math.summarize_schedule(schedule),
    }


@router.post("/{loan_id}/prepayment")
async def simulate_loan_prepayment(
    loan_id: str,
    inputs: LoanPrepaymentInput,
    db: Session = Depends(get_db),
):
    """Simulate a prepayment against the loan's outstanding balance."""
    loan = _get_loan(db, loan_id)
    tenure = inputs.remaining_tenure_years or remaining_tenure_years(loan, inputs.as_of)

    try:
        result = simulate_prepayment(
            loan.outstanding_amount,
            loan.interest_rate,
            tenure,
            inputs.prepayment_amount,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"loan_id": loan_id, "remaining_tenure_years": tenure, **result.to_dict()}


@router.put("/{loan_id}", response_model=LoanResponse)
async def update_loan(
    loan_id: str,
    loan_data: LoanUpdate,
    db: Session = Depends(get_db),
):
    """Update a loan."""
    db_loan = _get_loan(db, loan_id)

    update_data = loan_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_loan, field, value)

    db.commit()
    db.refresh(db_loan)

    return loan_to_response(db_loan)


@router.post("/{loan_id}/close", response_model=LoanResponse)
async def close_loan(
    loan_id: str,
    db: Session = Depends(get_db),
):
    """Mark a loan as fully paid."""
    db_loan = _get_loan(db, loan_id)

    db_loan.is_closed = True
    db_loan.outstanding_amount = 0.0
    db.commit()
    db.refresh(db_loan)

    return loan_to_response(db_loan)


@router.delete("/{loan_id}")
async def delete_loan(
    loan_id: str,
    db: Session = Depends(get_db),
):
    """Soft delete a loan."""
    db_loan = _get_loan(db, loan_id)

    db_loan.is_deleted = True
    db.commit()

    return {"deleted": True, "id": loan_id}
