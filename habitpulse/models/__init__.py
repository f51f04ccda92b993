# Import all models so they register with SQLAlchemy Base.metadata
# This ensures Base.metadata.create_all() creates all tables

from habitpulse.models.user import User
from habitpulse.models.goal import Goal
from habitpulse.models.completion import Completion

__all__ = [
    "User",
    "Goal",
    "Completion",
]
