"""
goal_service.py - Goal store and goal list queries
Create / partial update / delete with schedule validation, ownership-scoped
lookups, and the dashboard listing (due today) vs. full listing.
"""

import logging
from datetime import date

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from habitpulse.exceptions import NotFound, InvalidSchedule
from habitpulse.models.goal import Goal, ALL_WEEKDAYS
from habitpulse.services.completion_service import CompletionService
from habitpulse.services.schedule import is_goal_due

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 100
UNIT_MAX_LENGTH = 20

# Fields a caller may change through update()
UPDATABLE_FIELDS = {
    "name", "description", "is_measurable", "target_value", "unit",
    "schedule_days", "interval_days", "interval_start_date",
    "sort_order", "is_active",
}

# Only nullable columns can be cleared with an explicit None; for every other
# field None means "leave unchanged"
NULLABLE_FIELDS = {"description", "interval_days", "interval_start_date"}


def validate_goal_fields(values: dict) -> None:
    """Raise InvalidSchedule if the merged goal fields are not storable."""
    name = values.get("name")
    if not name or not name.strip():
        raise InvalidSchedule("Name is required")
    if len(name) > NAME_MAX_LENGTH:
        raise InvalidSchedule(f"Name must be at most {NAME_MAX_LENGTH} characters")

    unit = values.get("unit")
    if not unit or not unit.strip():
        raise InvalidSchedule("Unit is required")
    if len(unit) > UNIT_MAX_LENGTH:
        raise InvalidSchedule(f"Unit must be at most {UNIT_MAX_LENGTH} characters")

    if values.get("target_value") is None or values["target_value"] < 0:
        raise InvalidSchedule("Target value must be zero or greater")

    days = values.get("schedule_days") or []
    for d in days:
        if isinstance(d, bool) or not isinstance(d, int) or not 0 <= d <= 6:
            raise InvalidSchedule(f"Schedule day {d!r} is not a weekday number between 0 and 6")

    interval_days = values.get("interval_days")
    if interval_days is not None:
        if interval_days < 1:
            raise InvalidSchedule("Interval days must be at least 1")
        if values.get("interval_start_date") is None:
            raise InvalidSchedule("Interval start date is required when interval days is set")
    elif not days:
        raise InvalidSchedule("Select at least one schedule day or configure an interval")


class GoalService:
    @staticmethod
    def create(db: Session, user_id: int, data: dict) -> Goal:
        values = {
            "name": data.get("name"),
            "description": data.get("description"),
            "is_measurable": data.get("is_measurable", False),
            "target_value": data.get("target_value", 0),
            "unit": data.get("unit", "minutes"),
            "schedule_days": data.get("schedule_days", ALL_WEEKDAYS),
            "interval_days": data.get("interval_days"),
            "interval_start_date": data.get("interval_start_date"),
        }
        if values["schedule_days"] is None:
            values["schedule_days"] = ALL_WEEKDAYS
        validate_goal_fields(values)

        try:
            max_order = db.query(func.max(Goal.sort_order)).filter(Goal.user_id == user_id).scalar()
            goal = Goal(
                user_id=user_id,
                name=values["name"].strip(),
                description=values["description"],
                is_measurable=values["is_measurable"],
                target_value=values["target_value"],
                unit=values["unit"].strip(),
                interval_days=values["interval_days"],
                interval_start_date=values["interval_start_date"] if values["interval_days"] is not None else None,
                sort_order=0 if max_order is None else max_order + 1,
                is_active=True,
            )
            goal.schedule_day_list = values["schedule_days"]
            db.add(goal)
            db.commit()
            db.refresh(goal)
        except SQLAlchemyError:
            db.rollback()
            raise

        logger.info(f"Goal {goal.id} created for user {user_id}")
        return goal

    @staticmethod
    def get_by_id(db: Session, user_id: int, goal_id: int) -> Goal:
        goal = db.query(Goal).filter_by(id=goal_id, user_id=user_id).first()
        if not goal:
            raise NotFound()
        return goal

    @staticmethod
    def update(db: Session, user_id: int, goal_id: int, data: dict) -> Goal:
        """Partial update: only keys present in data change.

        None is ignored except for nullable fields. An explicit None for
        interval_days switches the goal back to weekday mode and drops the
        anchor date as well.
        """
        goal = GoalService.get_by_id(db, user_id, goal_id)

        changes = {
            k: v for k, v in data.items()
            if k in UPDATABLE_FIELDS and (v is not None or k in NULLABLE_FIELDS)
        }
        if "interval_days" in changes and changes["interval_days"] is None:
            changes["interval_start_date"] = None

        merged = goal.to_dict()
        merged.update(changes)
        validate_goal_fields(merged)

        try:
            for k, v in changes.items():
                if k == "schedule_days":
                    goal.schedule_day_list = v
                elif k in ("name", "unit"):
                    setattr(goal, k, v.strip())
                else:
                    setattr(goal, k, v)
            db.commit()
            db.refresh(goal)
        except SQLAlchemyError:
            db.rollback()
            raise

        logger.info(f"Goal {goal_id} updated for user {user_id}: {sorted(changes)}")
        return goal

    @staticmethod
    def delete(db: Session, user_id: int, goal_id: int) -> None:
        goal = GoalService.get_by_id(db, user_id, goal_id)
        try:
            db.delete(goal)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        logger.info(f"Goal {goal_id} deleted for user {user_id}")

    @staticmethod
    def get_all(db: Session, user_id: int, active_only: bool = False) -> list[Goal]:
        """User's goals in priority order (sort_order, then id for ties)."""
        query = db.query(Goal).filter_by(user_id=user_id)
        if active_only:
            query = query.filter_by(is_active=True)
        return query.order_by(Goal.sort_order, Goal.id).all()

    @staticmethod
    def get_goals(db: Session, user_id: int, today: date, today_only: bool = True) -> list[dict]:
        """Goals with today's status.

        today_only=True is the dashboard: active goals that are due today.
        today_only=False lists every goal, inactive ones included.
        """
        goals = GoalService.get_all(db, user_id, active_only=today_only)
        if today_only:
            goals = [g for g in goals if is_goal_due(g, today)]

        done = CompletionService.completed_goal_ids(db, [g.id for g in goals], today)
        result = []
        for g in goals:
            item = g.to_dict()
            item["is_completed_today"] = g.id in done
            result.append(item)
        return result
