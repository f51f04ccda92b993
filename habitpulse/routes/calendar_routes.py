from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from habitpulse.auth import get_current_user
from habitpulse.database import get_db
from habitpulse.exceptions import InvalidDateRange
from habitpulse.services.calendar_service import CalendarService

# Shares the /goals prefix; must be included before goal_routes so that
# "/calendar" is not captured by "/{goal_id}".
router = APIRouter(prefix="/api/v1/goals/calendar", tags=["Calendar"])

@router.get("")
def calendar_range(
    start_date: date,
    end_date: date,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user),
):
    try:
        return CalendarService.month_summary(db, user_id, start_date, end_date)
    except InvalidDateRange as e:
        raise HTTPException(status_code=400, detail=e.reason)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/{day}")
def calendar_day(day: date, db: Session = Depends(get_db), user_id: int = Depends(get_current_user)):
    try:
        return CalendarService.day_detail(db, user_id, day)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
