"""
Name: Recurrence Rules Tests

Responsibilities:
  - Validate the reset decision for every task kind
  - Validate calendar math in the application timezone
  - Validate deadline rollover helper

Notes:
  - Reference "now" is Wednesday 2025-06-18 12:00 UTC
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from worknest.domain.entities import (
    CustomRecurrence,
    CustomRecurrenceType,
    RecurrenceFrequency,
    RecurringPattern,
    TaskKind,
)
from worknest.domain.recurrence import (
    check_recurrence,
    day_of_week,
    deadline_moment,
    deadline_passed,
    deadline_rollover_due,
    should_reset,
    week_start,
)

pytestmark = pytest.mark.unit

UTC = timezone.utc
NOW = datetime(2025, 6, 18, 12, 0, tzinfo=UTC)


def _at(day: str, hour: int = 12) -> datetime:
    return datetime.fromisoformat(day).replace(hour=hour, tzinfo=UTC)


class TestCalendarHelpers:
    def test_day_of_week_starts_on_sunday(self):
        assert day_of_week(date(2025, 6, 15)) == 0  # Sunday
        assert day_of_week(date(2025, 6, 18)) == 3  # Wednesday
        assert day_of_week(date(2025, 6, 21)) == 6  # Saturday

    def test_week_start_is_previous_sunday(self):
        assert week_start(date(2025, 6, 18)) == date(2025, 6, 15)
        assert week_start(date(2025, 6, 15)) == date(2025, 6, 15)


class TestFixedKinds:
    def test_never_completed_does_not_reset(self):
        check = check_recurrence(TaskKind.DAILY, None, now=NOW, tz=UTC)

        assert check.should_reset is False
        assert check.message == "Task has never been completed"

    def test_one_time_never_resets(self):
        check = check_recurrence(
            TaskKind.ONE_TIME, NOW - timedelta(days=400), now=NOW, tz=UTC
        )

        assert check.should_reset is False
        assert check.message == "One-time tasks do not reset"

    def test_daily_resets_on_new_day(self):
        check = check_recurrence(
            TaskKind.DAILY, _at("2025-06-17", 23), now=NOW, tz=UTC
        )

        assert check.should_reset is True
        assert check.message == "Daily task reset - new day"

    def test_daily_same_day_does_not_reset(self):
        assert not should_reset(TaskKind.DAILY, _at("2025-06-18", 1), now=NOW, tz=UTC)

    def test_daily_uses_application_timezone(self):
        # 01:00 UTC on the 18th is 22:00 on the 17th in Buenos Aires.
        tz = ZoneInfo("America/Argentina/Buenos_Aires")
        completed = _at("2025-06-18", 1)

        assert should_reset(TaskKind.DAILY, completed, now=NOW, tz=tz) is True
        assert should_reset(TaskKind.DAILY, completed, now=NOW, tz=UTC) is False

    def test_weekly_resets_when_week_changes(self):
        # Saturday 14th belongs to the previous Sunday-based week.
        assert should_reset(TaskKind.WEEKLY, _at("2025-06-14"), now=NOW, tz=UTC)

    def test_weekly_same_week_does_not_reset(self):
        assert not should_reset(TaskKind.WEEKLY, _at("2025-06-15"), now=NOW, tz=UTC)

    def test_monthly_resets_on_new_month(self):
        check = check_recurrence(TaskKind.MONTHLY, _at("2025-05-31"), now=NOW, tz=UTC)

        assert check.should_reset is True
        assert check.message == "Monthly task reset - new month"

    def test_monthly_same_month_does_not_reset(self):
        assert not should_reset(TaskKind.MONTHLY, _at("2025-06-01"), now=NOW, tz=UTC)

    def test_monthly_resets_across_year_boundary(self):
        now = datetime(2025, 1, 2, 9, 0, tzinfo=UTC)

        assert should_reset(TaskKind.MONTHLY, _at("2024-12-31"), now=now, tz=UTC)


class TestRecurringPattern:
    def test_daily_interval_elapsed(self):
        pattern = RecurringPattern(RecurrenceFrequency.DAILY, interval=3)

        assert should_reset(
            TaskKind.RECURRING, _at("2025-06-15"), now=NOW, tz=UTC, pattern=pattern
        )

    def test_daily_interval_not_elapsed(self):
        pattern = RecurringPattern(RecurrenceFrequency.DAILY, interval=3)

        assert not should_reset(
            TaskKind.RECURRING, _at("2025-06-16"), now=NOW, tz=UTC, pattern=pattern
        )

    def test_weekly_interval_on_allowed_weekday(self):
        pattern = RecurringPattern(
            RecurrenceFrequency.WEEKLY, interval=1, days_of_week=(3,)
        )

        check = check_recurrence(
            TaskKind.RECURRING, _at("2025-06-11"), now=NOW, tz=UTC, pattern=pattern
        )

        assert check.should_reset is True
        assert check.message == "Recurring weekly task reset - 1 week(s) passed"

    def test_weekly_interval_on_other_weekday(self):
        pattern = RecurringPattern(
            RecurrenceFrequency.WEEKLY, interval=1, days_of_week=(1,)
        )

        assert not should_reset(
            TaskKind.RECURRING, _at("2025-06-11"), now=NOW, tz=UTC, pattern=pattern
        )

    def test_monthly_waits_for_day_of_month(self):
        early = RecurringPattern(
            RecurrenceFrequency.MONTHLY, interval=1, day_of_month=20
        )
        reached = RecurringPattern(
            RecurrenceFrequency.MONTHLY, interval=1, day_of_month=15
        )

        assert not should_reset(
            TaskKind.RECURRING, _at("2025-05-20"), now=NOW, tz=UTC, pattern=early
        )
        assert should_reset(
            TaskKind.RECURRING, _at("2025-05-20"), now=NOW, tz=UTC, pattern=reached
        )

    @pytest.mark.parametrize(
        "pattern",
        [None, RecurringPattern(RecurrenceFrequency.DAILY, interval=0)],
    )
    def test_invalid_pattern_does_not_reset(self, pattern):
        check = check_recurrence(
            TaskKind.RECURRING,
            NOW - timedelta(days=30),
            now=NOW,
            tz=UTC,
            pattern=pattern,
        )

        assert check.should_reset is False
        assert check.message == "Invalid recurring pattern"


class TestCustomRecurrence:
    def test_missing_configuration(self):
        check = check_recurrence(TaskKind.CUSTOM, _at("2025-06-10"), now=NOW, tz=UTC)

        assert check.should_reset is False
        assert check.message == "Custom tasks require custom recurrence configuration"

    def test_recurring_weekday_matches(self):
        custom = CustomRecurrence(CustomRecurrenceType.DAYS_OF_WEEK, days=(1, 3))

        check = check_recurrence(
            TaskKind.CUSTOM, _at("2025-06-17"), now=NOW, tz=UTC, custom=custom
        )

        assert check.should_reset is True
        assert check.message == "Custom recurring weekday matched (day 3)"

    def test_never_resets_twice_on_same_day(self):
        custom = CustomRecurrence(CustomRecurrenceType.DAYS_OF_WEEK, days=(3,))

        check = check_recurrence(
            TaskKind.CUSTOM, _at("2025-06-18", 8), now=NOW, tz=UTC, custom=custom
        )

        assert check.should_reset is False
        assert check.message == "Already completed today"

    def test_weekday_not_configured(self):
        custom = CustomRecurrence(CustomRecurrenceType.DAYS_OF_WEEK, days=(1,))

        assert not should_reset(
            TaskKind.CUSTOM, _at("2025-06-17"), now=NOW, tz=UTC, custom=custom
        )

    def test_non_recurring_weekday_needs_a_new_week(self):
        custom = CustomRecurrence(
            CustomRecurrenceType.DAYS_OF_WEEK, days=(3,), recurring=False
        )

        assert should_reset(
            TaskKind.CUSTOM, _at("2025-06-11"), now=NOW, tz=UTC, custom=custom
        )
        assert not should_reset(
            TaskKind.CUSTOM, _at("2025-06-17"), now=NOW, tz=UTC, custom=custom
        )

    def test_day_of_month_matches(self):
        custom = CustomRecurrence(CustomRecurrenceType.DAYS_OF_MONTH, days=(18,))

        check = check_recurrence(
            TaskKind.CUSTOM, _at("2025-05-18"), now=NOW, tz=UTC, custom=custom
        )

        assert check.should_reset is True
        assert check.message == "Custom recurring day 18 of month matched"

    def test_day_of_month_not_matched(self):
        custom = CustomRecurrence(CustomRecurrenceType.DAYS_OF_MONTH, days=(17,))

        assert not should_reset(
            TaskKind.CUSTOM, _at("2025-05-18"), now=NOW, tz=UTC, custom=custom
        )

    def test_no_days_configured(self):
        custom = CustomRecurrence(CustomRecurrenceType.DAYS_OF_MONTH, days=())

        check = check_recurrence(
            TaskKind.CUSTOM, _at("2025-05-18"), now=NOW, tz=UTC, custom=custom
        )

        assert check.message == "No days configured"


class TestDeadlinePassed:
    def test_no_deadline(self):
        assert deadline_passed(None, now=NOW, tz=UTC) is False

    def test_deadline_before_today(self):
        assert deadline_passed(date(2025, 6, 17), now=NOW, tz=UTC) is True

    def test_deadline_today_is_not_passed(self):
        assert deadline_passed(date(2025, 6, 18), now=NOW, tz=UTC) is False


class TestDeadlineMoment:
    def test_combines_date_and_time_in_timezone(self):
        tz = ZoneInfo("America/Argentina/Buenos_Aires")

        moment = deadline_moment(date(2025, 6, 16), "17:30", tz)

        assert moment == datetime(2025, 6, 16, 17, 30, tzinfo=tz)

    @pytest.mark.parametrize(
        "deadline_date, deadline_time",
        [
            (None, "17:00"),
            (date(2025, 6, 16), None),
            (date(2025, 6, 16), ""),
            (date(2025, 6, 16), "25:99"),
            (date(2025, 6, 16), "17"),
        ],
    )
    def test_missing_or_malformed_is_none(self, deadline_date, deadline_time):
        assert deadline_moment(deadline_date, deadline_time, UTC) is None


class TestDeadlineRolloverDue:
    def test_weekly_deadline_earlier_this_week_is_not_due(self):
        for day in ("2025-06-17", "2025-06-18", "2025-06-19", "2025-06-20"):
            assert (
                deadline_rollover_due(
                    TaskKind.WEEKLY,
                    date(2025, 6, 16),
                    "17:00",
                    now=_at(day),
                    tz=UTC,
                )
                is False
            )

    def test_weekly_deadline_from_last_week_is_due(self):
        assert deadline_rollover_due(
            TaskKind.WEEKLY, date(2025, 6, 13), "17:00", now=NOW, tz=UTC
        )

    def test_daily_deadline_from_yesterday_is_due(self):
        assert deadline_rollover_due(
            TaskKind.DAILY, date(2025, 6, 17), "18:00", now=NOW, tz=UTC
        )

    def test_monthly_deadline_same_month_is_not_due(self):
        assert not deadline_rollover_due(
            TaskKind.MONTHLY, date(2025, 6, 2), "09:00", now=NOW, tz=UTC
        )

    def test_deadline_not_reached_yet(self):
        assert not deadline_rollover_due(
            TaskKind.DAILY, date(2025, 6, 18), "18:00", now=NOW, tz=UTC
        )

    def test_without_time_is_never_due(self):
        assert not deadline_rollover_due(
            TaskKind.WEEKLY, date(2025, 6, 1), None, now=NOW, tz=UTC
        )

    def test_other_kinds_never_roll_over(self):
        assert not deadline_rollover_due(
            TaskKind.ONE_TIME, date(2025, 6, 1), "09:00", now=NOW, tz=UTC
        )
