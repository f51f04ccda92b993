"""
completion_service.py - Per-goal, per-day completion state
A Completion row means "done on that day", its absence means "not done".
Rows are only ever created or removed through toggle().
"""

import logging
from datetime import date

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from habitpulse.exceptions import NotFound
from habitpulse.models.goal import Goal
from habitpulse.models.completion import Completion

logger = logging.getLogger(__name__)


class CompletionService:
    @staticmethod
    def is_completed(db: Session, goal_id: int, day: date) -> bool:
        return db.query(Completion.id).filter_by(goal_id=goal_id, completed_on=day).first() is not None

    @staticmethod
    def toggle(db: Session, user_id: int, goal_id: int, day: date) -> bool:
        """Flip completion for (goal, day) and return the new state.

        Raises NotFound before touching completions if the goal is missing or
        owned by another user. A racing insert that trips the unique
        constraint is resolved by re-reading and returning the stored state.
        """
        goal = db.query(Goal.id).filter_by(id=goal_id, user_id=user_id).first()
        if not goal:
            raise NotFound()

        try:
            deleted = db.query(Completion).filter_by(
                goal_id=goal_id, completed_on=day
            ).delete(synchronize_session=False)
            if deleted:
                db.commit()
                logger.info(f"Goal {goal_id} unchecked for {day} (user {user_id})")
                return False

            db.add(Completion(goal_id=goal_id, completed_on=day))
            db.commit()
            logger.info(f"Goal {goal_id} checked for {day} (user {user_id})")
            return True
        except IntegrityError:
            db.rollback()
            logger.warning(f"Concurrent toggle on goal {goal_id} for {day}, re-reading state")
            # The goal may have been deleted by the request we raced with
            if not db.query(Goal.id).filter_by(id=goal_id, user_id=user_id).first():
                raise NotFound()
            return CompletionService.is_completed(db, goal_id, day)
        except SQLAlchemyError:
            db.rollback()
            raise

    @staticmethod
    def completed_goal_ids(db: Session, goal_ids: list[int], day: date) -> set[int]:
        """Which of goal_ids have a completion on day. One query."""
        if not goal_ids:
            return set()
        rows = db.query(Completion.goal_id).filter(
            Completion.goal_id.in_(goal_ids),
            Completion.completed_on == day,
        ).all()
        return {r.goal_id for r in rows}

    @staticmethod
    def completions_between(db: Session, goal_ids: list[int], start: date, end: date) -> set[tuple[int, date]]:
        """(goal_id, completed_on) pairs inside the inclusive range."""
        if not goal_ids:
            return set()
        rows = db.query(Completion.goal_id, Completion.completed_on).filter(
            Completion.goal_id.in_(goal_ids),
            Completion.completed_on >= start,
            Completion.completed_on <= end,
        ).all()
        return {(r.goal_id, r.completed_on) for r in rows}
