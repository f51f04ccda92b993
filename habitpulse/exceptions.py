"""
exceptions.py - Error taxonomy shared by services and routes.
Routes map these to HTTP status codes; services raise them and never swallow.
"""


class HabitPulseError(Exception):
    """Base class for all domain errors."""


class NotFound(HabitPulseError):
    """Goal is missing or belongs to someone else. Both look the same to callers."""

    def __init__(self, what: str = "Goal"):
        super().__init__(f"{what} not found")


class InvalidSchedule(HabitPulseError):
    """A goal was submitted without a usable recurrence (or with bad fields)."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class InvalidDateRange(HabitPulseError):
    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
