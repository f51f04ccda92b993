"""
calendar_service.py - Calendar heatmap and day details
Combines recurrence evaluation with completion records over a date range.

Only active goals count. A goal that is due but inactive is left out of both
total_scheduled and completed, so completed <= total_scheduled always holds.
Future dates are evaluated like any other; hiding them is a display concern.
"""

from datetime import date, timedelta

from sqlalchemy.orm import Session

from habitpulse.config import CALENDAR_MAX_RANGE_DAYS
from habitpulse.exceptions import InvalidDateRange
from habitpulse.services.completion_service import CompletionService
from habitpulse.services.goal_service import GoalService
from habitpulse.services.schedule import schedule_for, is_due


def iter_days(start: date, end: date):
    d = start
    while d <= end:
        yield d
        d += timedelta(days=1)


class CalendarService:
    @staticmethod
    def day_summary(db: Session, user_id: int, day: date) -> dict:
        return CalendarService.month_summary(db, user_id, day, day)[0]

    @staticmethod
    def day_detail(db: Session, user_id: int, day: date) -> dict:
        """Due active goals for one day, split into done / not done by priority."""
        goals = GoalService.get_all(db, user_id, active_only=True)
        due = [g for g in goals if is_due(schedule_for(g), day)]
        done_ids = CompletionService.completed_goal_ids(db, [g.id for g in due], day)

        done = [g.to_summary() for g in due if g.id in done_ids]
        not_done = [g.to_summary() for g in due if g.id not in done_ids]
        return {
            "date": day,
            "total_scheduled": len(due),
            "completed": len(done),
            "done": done,
            "not_done": not_done,
        }

    @staticmethod
    def month_summary(db: Session, user_id: int, start: date, end: date,
                      max_days: int = CALENDAR_MAX_RANGE_DAYS) -> list[dict]:
        """One {date, total_scheduled, completed} entry per day, start..end inclusive.

        Goals and completions are loaded once for the whole range; the work
        left is O(days x goals) predicate checks in memory.
        """
        if end < start:
            raise InvalidDateRange("end_date must not be before start_date")
        span = (end - start).days + 1
        if max_days is not None and span > max_days:
            raise InvalidDateRange(f"Date range cannot exceed {max_days} days")

        goals = GoalService.get_all(db, user_id, active_only=True)
        schedules = [(g.id, schedule_for(g)) for g in goals]
        completions = CompletionService.completions_between(db, [g.id for g in goals], start, end)

        days = []
        for d in iter_days(start, end):
            scheduled = 0
            completed = 0
            for goal_id, schedule in schedules:
                if not is_due(schedule, d):
                    continue
                scheduled += 1
                if (goal_id, d) in completions:
                    completed += 1
            days.append({"date": d, "total_scheduled": scheduled, "completed": completed})
        return days
