"""
priority_service.py - Manual goal ranking
sort_order is a per-user integer axis, lower = higher priority.
Callers send the ordered list for one visible group (e.g. active goals);
the group boundary lives in the listing query, not here.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from habitpulse.models.goal import Goal

logger = logging.getLogger(__name__)


class PriorityService:
    @staticmethod
    def reorder(db: Session, user_id: int, ordered_goal_ids: list[int]) -> dict[int, int]:
        """Set sort_order = position in ordered_goal_ids, starting at 0.

        Ids owned by other users (or unknown) are skipped silently, and goals
        not listed keep their rank. A repeated id keeps its first position.
        Everything is written in one commit. Returns {goal_id: new_rank}.
        """
        positions: dict[int, int] = {}
        for index, goal_id in enumerate(ordered_goal_ids):
            positions.setdefault(goal_id, index)

        if not positions:
            return {}

        try:
            goals = db.query(Goal).filter(
                Goal.user_id == user_id,
                Goal.id.in_(list(positions)),
            ).all()
            applied = {}
            for g in goals:
                g.sort_order = positions[g.id]
                applied[g.id] = g.sort_order
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

        skipped = len(positions) - len(applied)
        logger.info(f"Reordered {len(applied)} goals for user {user_id} ({skipped} ignored)")
        return applied
