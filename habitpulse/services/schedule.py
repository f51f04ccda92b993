"""
schedule.py - Recurrence evaluation
Decides whether a goal is due on a calendar date. Pure, no database access.

A goal recurs either on a set of weekdays or every N days from an anchor date.
The stored row keeps both sets of columns, so the mode is resolved once in
schedule_for() and everything downstream works on the resulting variant.
"""

from dataclasses import dataclass
from datetime import date
from typing import Union


@dataclass(frozen=True)
class WeekdaySchedule:
    days: frozenset  # ints 0..6, 0 = Sunday


@dataclass(frozen=True)
class IntervalSchedule:
    every: int
    anchor: date


Schedule = Union[WeekdaySchedule, IntervalSchedule]


def weekday_of(day: date) -> int:
    """Sunday-based weekday: 0 = Sunday .. 6 = Saturday."""
    return day.isoweekday() % 7


def schedule_for(goal) -> Schedule:
    """Resolve the active recurrence mode of a goal.

    Interval mode wins whenever both interval_days and interval_start_date are
    present, even if schedule_days is also populated.
    """
    if goal.interval_days is not None and goal.interval_start_date is not None:
        return IntervalSchedule(every=goal.interval_days, anchor=goal.interval_start_date)
    return WeekdaySchedule(days=frozenset(goal.schedule_day_list))


def is_due(schedule: Schedule, day: date) -> bool:
    if isinstance(schedule, IntervalSchedule):
        if day < schedule.anchor:
            return False
        return (day.toordinal() - schedule.anchor.toordinal()) % schedule.every == 0
    return weekday_of(day) in schedule.days


def is_goal_due(goal, day: date) -> bool:
    """Due check straight from a Goal row. Does not look at is_active."""
    return is_due(schedule_for(goal), day)
