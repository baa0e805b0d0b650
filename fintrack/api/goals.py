"""
Savings goal API endpoints.
"""

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date
from sqlalchemy.orm import Session

from fintrack.db.database import get_db
from fintrack.db.models import Goal
from fintrack.services.summary import goal_progress

router = APIRouter()


class GoalCreate(BaseModel):
    name: str
    target_amount: float = Field(gt=0)
    current_amount: float = Field(default=0.0, ge=0)
    deadline: Optional[date] = None


class GoalUpdate(BaseModel):
    name: Optional[str] = None
    target_amount: Optional[float] = Field(default=None, gt=0)
    current_amount: Optional[float] = Field(default=None, ge=0)
    deadline: Optional[date] = None


class ContributionInput(BaseModel):
    amount: float = Field(gt=0)


def _get_goal(db: Session, goal_id: str) -> Goal:
    goal = db.query(Goal).filter(Goal.id == goal_id, Goal.is_deleted == False).first()
    if not goal:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal


@router.get("/")
async def list_goals(db: Session = Depends(get_db)):
    """List goals with progress."""
    goals = db.query(Goal).filter(Goal.is_deleted == False).all()
    return {"goals": [goal_progress(g) for g in goals], "total": len(goals)}


@router.post("/", status_code=201)
async def create_goal(goal_data: GoalCreate, db: Session = Depends(get_db)):
    """Create a goal."""
    db_goal = Goal(**goal_data.model_dump())
    db.add(db_goal)
    db.commit()
    db.refresh(db_goal)
    return goal_progress(db_goal)


@router.get("/{goal_id}")
async def get_goal(goal_id: str, db: Session = Depends(get_db)):
    """Get a goal by ID."""
    return goal_progress(_get_goal(db, goal_id))


@router.put("/{goal_id}")
async def update_goal(
    goal_id: str, goal_data: GoalUpdate, db: Session = Depends(get_db)
):
    """Update a goal."""
    db_goal = _get_goal(db, goal_id)
    for field, value in goal_data.model_dump(exclude_unset=True).items():
        setattr(db_goal, field, value)
    db.commit()
    db.refresh(db_goal)
    return goal_progress(db_goal)


@router.post("/{goal_id}/contribute")
async def contribute_to_goal(
    goal_id: str, contribution: ContributionInput, db: Session = Depends(get_db)
):
    """Add money saved toward a goal."""
    db_goal = _get_goal(db, goal_id)
    db_goal.current_amount = (db_goal.current_amount or 0.0) + contribution.amount
    db.commit()
    db.refresh(db_goal)
    return goal_progress(db_goal)


@router.delete("/{goal_id}")
async def delete_goal(goal_id: str, db: Session = Depends(get_db)):
    """Soft delete a goal."""
    db_goal = _get_goal(db, goal_id)
    db_goal.is_deleted = True
    db.commit()
    return {"deleted": True, "id": goal_id}
