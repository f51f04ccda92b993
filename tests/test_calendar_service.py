"""Tests for calendar summaries and day details."""

from datetime import date, timedelta

import pytest

from habitpulse.exceptions import InvalidDateRange
from habitpulse.services.calendar_service import CalendarService, iter_days
from habitpulse.services.completion_service import CompletionService
from habitpulse.services.goal_service import GoalService

MON = date(2025, 6, 2)
SUN = date(2025, 6, 8)


def by_date(days):
    return {d["date"]: (d["total_scheduled"], d["completed"]) for d in days}


class TestIterDays:
    def test_inclusive(self):
        assert list(iter_days(MON, date(2025, 6, 4))) == [MON, date(2025, 6, 3), date(2025, 6, 4)]

    def test_single_day(self):
        assert list(iter_days(MON, MON)) == [MON]


class TestMonthSummary:
    def test_mon_wed_fri_week(self, db, user, make_goal):
        g = make_goal("Gym", schedule_days=[1, 3, 5])
        CompletionService.toggle(db, user.id, g.id, MON)
        CompletionService.toggle(db, user.id, g.id, date(2025, 6, 6))
        # Completion on a day the goal is not due must not count
        CompletionService.toggle(db, user.id, g.id, date(2025, 6, 3))

        days = CalendarService.month_summary(db, user.id, MON, SUN)
        assert [d["date"] for d in days] == list(iter_days(MON, SUN))
        assert by_date(days) == {
            date(2025, 6, 2): (1, 1),
            date(2025, 6, 3): (0, 0),
            date(2025, 6, 4): (1, 0),
            date(2025, 6, 5): (0, 0),
            date(2025, 6, 6): (1, 1),
            date(2025, 6, 7): (0, 0),
            date(2025, 6, 8): (0, 0),
        }

    def test_completed_never_exceeds_scheduled(self, db, user, make_goal):
        goals = [
            make_goal("Daily"),
            make_goal("MWF", schedule_days=[1, 3, 5]),
            make_goal("Every 2", interval_days=2, interval_start_date=date(2025, 5, 30)),
            make_goal("Weekend", schedule_days=[0, 6]),
        ]
        start, end = date(2025, 5, 26), date(2025, 6, 15)
        for i, d in enumerate(iter_days(start, end)):
            for j, g in enumerate(goals):
                if (i + j) % 2 == 0:
                    CompletionService.toggle(db, user.id, g.id, d)

        for d in CalendarService.month_summary(db, user.id, start, end):
            assert 0 <= d["completed"] <= d["total_scheduled"] <= len(goals)

    def test_inactive_goals_excluded(self, db, user, make_goal):
        g = make_goal("Paused")
        CompletionService.toggle(db, user.id, g.id, MON)
        GoalService.update(db, user.id, g.id, {"is_active": False})
        assert by_date(CalendarService.month_summary(db, user.id, MON, MON)) == {MON: (0, 0)}

    def test_only_own_goals(self, db, user, other_user, make_goal):
        make_goal("Mine")
        make_goal("Theirs", owner=other_user)
        assert by_date(CalendarService.month_summary(db, user.id, MON, MON)) == {MON: (1, 0)}

    def test_interval_goal(self, db, user, make_goal):
        make_goal("Every 3", interval_days=3, interval_start_date=date(2025, 1, 1))
        days = by_date(CalendarService.month_summary(db, user.id, date(2024, 12, 30), date(2025, 1, 7)))
        due = sorted(d for d, (scheduled, _) in days.items() if scheduled)
        assert due == [date(2025, 1, 1), date(2025, 1, 4), date(2025, 1, 7)]

    def test_future_dates_are_evaluated(self, db, user, make_goal):
        make_goal("Daily")
        future = date(2099, 1, 1)
        assert by_date(CalendarService.month_summary(db, user.id, future, future)) == {future: (1, 0)}

    def test_unknown_user_gets_empty_days(self, db):
        assert by_date(CalendarService.month_summary(db, 4242, MON, date(2025, 6, 3))) == {
            MON: (0, 0),
            date(2025, 6, 3): (0, 0),
        }

    def test_deleted_goal_no_longer_counted(self, db, user, make_goal):
        keep = make_goal("Keep")
        gone = make_goal("Gone")
        CompletionService.toggle(db, user.id, keep.id, MON)
        CompletionService.toggle(db, user.id, gone.id, MON)
        assert by_date(CalendarService.month_summary(db, user.id, MON, MON)) == {MON: (2, 2)}
        GoalService.delete(db, user.id, gone.id)
        assert by_date(CalendarService.month_summary(db, user.id, MON, MON)) == {MON: (1, 1)}

    def test_end_before_start(self, db, user):
        with pytest.raises(InvalidDateRange):
            CalendarService.month_summary(db, user.id, SUN, MON)

    def test_range_cap(self, db, user):
        start = date(2024, 1, 1)
        assert len(CalendarService.month_summary(db, user.id, start, start + timedelta(days=365))) == 366
        with pytest.raises(InvalidDateRange):
            CalendarService.month_summary(db, user.id, start, start + timedelta(days=366))

    def test_custom_cap(self, db, user):
        with pytest.raises(InvalidDateRange):
            CalendarService.month_summary(db, user.id, MON, SUN, max_days=3)


class TestDaySummary:
    def test_counts(self, db, user, make_goal):
        a = make_goal("A")
        make_goal("B")
        make_goal("Tue only", schedule_days=[2])
        CompletionService.toggle(db, user.id, a.id, MON)
        assert CalendarService.day_summary(db, user.id, MON) == {
            "date": MON, "total_scheduled": 2, "completed": 1,
        }


class TestDayDetail:
    def test_partitions_due_goals(self, db, user, make_goal):
        a = make_goal("A", is_measurable=True, target_value=30, unit="minutes")
        b = make_goal("B")
        c = make_goal("C")
        make_goal("Tue only", schedule_days=[2])
        CompletionService.toggle(db, user.id, b.id, MON)

        detail = CalendarService.day_detail(db, user.id, MON)
        assert detail["date"] == MON
        assert (detail["total_scheduled"], detail["completed"]) == (3, 1)
        assert [g["id"] for g in detail["done"]] == [b.id]
        assert [g["id"] for g in detail["not_done"]] == [a.id, c.id]
        assert detail["not_done"][0] == {
            "id": a.id, "name": "A", "is_measurable": True, "target_value": 30, "unit": "minutes",
        }

    def test_lists_follow_sort_order(self, db, user, make_goal):
        a, b, c = make_goal("A"), make_goal("B"), make_goal("C")
        GoalService.update(db, user.id, a.id, {"sort_order": 9})
        detail = CalendarService.day_detail(db, user.id, MON)
        assert [g["name"] for g in detail["not_done"]] == ["B", "C", "A"]

    def test_matches_summary(self, db, user, make_goal):
        a = make_goal("A")
        make_goal("B", schedule_days=[1, 2])
        CompletionService.toggle(db, user.id, a.id, MON)
        detail = CalendarService.day_detail(db, user.id, MON)
        summary = CalendarService.day_summary(db, user.id, MON)
        assert (detail["total_scheduled"], detail["completed"]) == (summary["total_scheduled"], summary["completed"])

    def test_inactive_goal_is_in_neither_list(self, db, user, make_goal):
        a = make_goal("A")
        paused_done = make_goal("Paused done")
        paused_open = make_goal("Paused open")
        CompletionService.toggle(db, user.id, paused_done.id, MON)
        GoalService.update(db, user.id, paused_done.id, {"is_active": False})
        GoalService.update(db, user.id, paused_open.id, {"is_active": False})

        detail = CalendarService.day_detail(db, user.id, MON)
        assert detail["done"] == []
        assert [g["id"] for g in detail["not_done"]] == [a.id]
        assert (detail["total_scheduled"], detail["completed"]) == (1, 0)

    def test_unknown_user(self, db):
        detail = CalendarService.day_detail(db, 4242, MON)
        assert detail["done"] == [] and detail["not_done"] == []
        assert detail["total_scheduled"] == 0
