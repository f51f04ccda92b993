from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import List, Optional

from habitpulse.auth import get_current_user
from habitpulse.database import get_db
from habitpulse.exceptions import NotFound, InvalidSchedule
from habitpulse.services.goal_service import GoalService
from habitpulse.services.completion_service import CompletionService
from habitpulse.services.priority_service import PriorityService

router = APIRouter(prefix="/api/v1/goals", tags=["Goals"])


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class GoalCreate(BaseModel):
    name: str
    description: Optional[str] = None
    is_measurable: bool = False
    target_value: int = 0
    unit: str = "minutes"
    schedule_days: Optional[List[int]] = None
    interval_days: Optional[int] = None
    interval_start_date: Optional[date] = None

class GoalUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    is_measurable: Optional[bool] = None
    target_value: Optional[int] = None
    unit: Optional[str] = None
    schedule_days: Optional[List[int]] = None
    interval_days: Optional[int] = None
    interval_start_date: Optional[date] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None

class ReorderRequest(BaseModel):
    goal_ids: List[int]

@router.get("")
def list_goals(
    today_only: bool = True,
    today: Optional[date] = None,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user),
):
    try:
        return GoalService.get_goals(db, user_id, today or utc_today(), today_only=today_only)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.post("")
def create_goal(goal_data: GoalCreate, db: Session = Depends(get_db), user_id: int = Depends(get_current_user)):
    try:
        goal = GoalService.create(db, user_id, goal_data.model_dump(exclude_unset=True))
        return {"status": "success", "data": goal.to_dict()}
    except InvalidSchedule as e:
        raise HTTPException(status_code=400, detail=e.reason)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.post("/reorder")
def reorder_goals(body: ReorderRequest, db: Session = Depends(get_db), user_id: int = Depends(get_current_user)):
    try:
        applied = PriorityService.reorder(db, user_id, body.goal_ids)
        return {"status": "success", "reordered": len(applied)}
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/{goal_id}")
def get_goal(goal_id: int, db: Session = Depends(get_db), user_id: int = Depends(get_current_user)):
    try:
        return GoalService.get_by_id(db, user_id, goal_id).to_dict()
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.put("/{goal_id}")
def update_goal(goal_id: int, goal_data: GoalUpdate, db: Session = Depends(get_db), user_id: int = Depends(get_current_user)):
    try:
        goal = GoalService.update(db, user_id, goal_id, goal_data.model_dump(exclude_unset=True))
        return {"status": "success", "data": goal.to_dict()}
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidSchedule as e:
        raise HTTPException(status_code=400, detail=e.reason)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.delete("/{goal_id}")
def delete_goal(goal_id: int, db: Session = Depends(get_db), user_id: int = Depends(get_current_user)):
    try:
        GoalService.delete(db, user_id, goal_id)
        return {"status": "success"}
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.post("/{goal_id}/toggle")
def toggle_goal(
    goal_id: int,
    day: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user),
):
    """Flip completion for the given day (server's UTC today by default)."""
    try:
        return {"is_completed": CompletionService.toggle(db, user_id, goal_id, day or utc_today())}
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
