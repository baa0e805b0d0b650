"""
Insurance policy API endpoints.
"""

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date
from sqlalchemy.orm import Session

from fintrack.db.database import get_db
from fintrack.db.models import InsurancePolicy, InsuranceType
from fintrack.services.reminders import upcoming_premiums

router = APIRouter()


class PolicyCreate(BaseModel):
    """Schema for creating an insurance policy."""

    policy_name: str
    type: InsuranceType
    sum_assured: float = Field(ge=0)
    premium_amount: float = Field(ge=0)
    premium_due_date: date
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None


class PolicyUpdate(BaseModel):
    """Schema for updating an insurance policy."""

    policy_name: Optional[str] = None
    type: Optional[InsuranceType] = None
    sum_assured: Optional[float] = Field(default=None, ge=0)
    premium_amount: Optional[float] = Field(default=None, ge=0)
    premium_due_date: Optional[date] = None
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None


class PolicyResponse(BaseModel):
    """Schema for policy response."""

    id: str
    policy_name: str
    type: InsuranceType
    sum_assured: float
    premium_amount: float
    premium_due_date: date
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None


class UpcomingPremiumsResponse(BaseModel):
    """Premiums falling due within the reminder window."""

    policies: List[PolicyResponse]
    total_due: float


def policy_to_response(policy: InsurancePolicy) -> PolicyResponse:
    """Convert InsurancePolicy model to response schema."""
    return PolicyResponse(
        id=policy.id,
        policy_name=policy.policy_name,
        type=policy.type,
        sum_assured=policy.sum_assured,
        premium_amount=policy.premium_amount,
        premium_due_date=policy.premium_due_date,
        issue_date=policy.issue_date,
        expiry_date=policy.expiry_date,
    )


def _active_policies(db: Session) -> List[InsurancePolicy]:
    return db.query(InsurancePolicy).filter(InsurancePolicy.is_deleted == False).all()


def _get_policy(db: Session, policy_id: str) -> InsurancePolicy:
    policy = (
        db.query(InsurancePolicy)
        .filter(InsurancePolicy.id == policy_id, InsurancePolicy.is_deleted == False)
        .first()
    )
    if not policy:
        raise HTTPException(status_code=404, detail="Policy not found")
    return policy


@router.get("/", response_model=List[PolicyResponse])
async def list_policies(db: Session = Depends(get_db)):
    """List insurance policies."""
    return [policy_to_response(p) for p in _active_policies(db)]


@router.get("/upcoming", response_model=UpcomingPremiumsResponse)
async def get_upcoming_premiums(
    as_of: Optional[date] = None,
    days: Optional[int] = None,
    db: Session = Depends(get_db),
):
    """Premiums due between as_of and the end of the reminder window."""
    if days is not None and days < 0:
        raise HTTPException(status_code=400, detail="Window must not be negative")

    upcoming = upcoming_premiums(_active_policies(db), as_of=as_of, window_days=days)
    return UpcomingPremiumsResponse(
        policies=[policy_to_response(p) for p in upcoming],
        total_due=sum(p.premium_amount for p in upcoming),
    )


@router.post("/", response_model=PolicyResponse, status_code=201)
async def create_policy(policy_data: PolicyCreate, db: Session = Depends(get_db)):
    """Create an insurance policy."""
    db_policy = InsurancePolicy(**policy_data.model_dump())
    db.add(db_policy)
    db.commit()
    db.refresh(db_policy)
    return policy_to_response(db_policy)


@router.get("/{policy_id}", response_model=PolicyResponse)
async def get_policy(policy_id: str, db: Session = Depends(get_db)):
    """Get a policy by ID."""
    return policy_to_response(_get_policy(db, policy_id))


@router.put("/{policy_id}", response_model=PolicyResponse)
async def update_policy(
    policy_id: str, policy_data: PolicyUpdate, db: Session = Depends(get_db)
):
    """Update a policy."""
    db_policy = _get_policy(db, policy_id)
    for field, value in policy_data.model_dump(exclude_unset=True).items():
        setattr(db_policy, field, value)
    db.commit()
    db.refresh(db_policy)
    return policy_to_response(db_policy)


@router.delete("/{policy_id}")
async def delete_policy(policy_id: str, db: Session = Depends(get_db)):
    """Soft delete a policy."""
    db_policy = _get_policy(db, policy_id)
    db_policy.is_deleted = True
    db.commit()
    return {"deleted": True, "id": policy_id}
