"""
Name: Reset Recurring Tasks Use Case Tests

Responsibilities:
  - Validate which tasks are due (completed cycle, missed deadline)
  - Validate the reset mutation and history snapshots
  - Validate idempotency, scope, time budget and partial failures

Notes:
  - Clock fixed at Wednesday 2025-06-18 12:00 UTC unless a test walks the days
  - Monotonic clock injected to drive the time budget
"""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import Mock
from uuid import uuid4

import pytest

from worknest.application.usecases.tasks import (
    ResetRecurringTasksError,
    ResetRecurringTasksUseCase,
    ResetScope,
)
from worknest.domain.entities import (
    ApprovalStatus,
    Subtask,
    Task,
    TaskKind,
    TaskStatus,
)
from worknest.infrastructure.repositories import (
    InMemoryTaskHistoryRepository,
    InMemoryTaskRepository,
)

pytestmark = pytest.mark.unit

UTC = timezone.utc
NOW = datetime(2025, 6, 18, 12, 0, tzinfo=UTC)
TODAY = date(2025, 6, 18)
YESTERDAY = NOW - timedelta(days=1)


@pytest.fixture
def tasks():
    return InMemoryTaskRepository()


@pytest.fixture
def history():
    return InMemoryTaskHistoryRepository()


def _use_case(tasks, history, *, max_seconds=240.0, monotonic=None):
    return ResetRecurringTasksUseCase(
        tasks,
        history,
        timezone=UTC,
        max_seconds=max_seconds,
        clock=lambda: NOW,
        monotonic=monotonic or (lambda: 0.0),
    )


def _use_case_at(tasks, history, now: datetime):
    return ResetRecurringTasksUseCase(
        tasks,
        history,
        timezone=UTC,
        max_seconds=240.0,
        clock=lambda: now,
        monotonic=lambda: 0.0,
    )


def _completed(kind: TaskKind, completed_at: datetime = YESTERDAY, **kwargs) -> Task:
    worker = uuid4()
    return Task(
        id=uuid4(),
        title=f"{kind.value} task",
        task_kind=kind,
        assigned_to=worker,
        status=TaskStatus.COMPLETED,
        approval_status=ApprovalStatus.APPROVED,
        completed_at=completed_at,
        completed_by=worker,
        ticked_at=completed_at,
        approved_by=uuid4(),
        approved_at=completed_at,
        custom_field_values={"notes": "done"},
        **kwargs,
    )


class TestDueTasks:
    def test_completed_daily_task_is_reset(self, tasks, history):
        task = _completed(TaskKind.DAILY, deadline_date=date(2025, 6, 17))
        tasks.add_task(task)

        result = _use_case(tasks, history).execute()

        saved = tasks.get_task(task.id)
        assert result.reset_count == 1
        assert result.truncated is False
        assert saved.status is TaskStatus.PENDING
        assert saved.approval_status is ApprovalStatus.PENDING
        assert saved.completed_at is None
        assert saved.completed_by is None
        assert saved.ticked_at is None
        assert saved.approved_by is None
        assert saved.custom_field_values == {}
        assert saved.deadline_date == TODAY
        assert saved.last_reset_on == TODAY

    def test_completed_today_is_not_reset(self, tasks, history):
        tasks.add_task(_completed(TaskKind.DAILY, completed_at=NOW - timedelta(hours=2)))

        assert _use_case(tasks, history).execute().reset_count == 0

    def test_one_time_task_is_never_a_candidate(self, tasks, history):
        task = _completed(TaskKind.ONE_TIME, completed_at=NOW - timedelta(days=90))
        tasks.add_task(task)

        assert _use_case(tasks, history).execute().reset_count == 0
        assert tasks.get_task(task.id).status is TaskStatus.COMPLETED

    def test_weekly_deadline_is_kept_on_cycle_reset(self, tasks, history):
        task = _completed(
            TaskKind.WEEKLY,
            completed_at=NOW - timedelta(days=7),
            deadline_date=date(2025, 6, 20),
        )
        tasks.add_task(task)

        _use_case(tasks, history).execute()

        assert tasks.get_task(task.id).deadline_date == date(2025, 6, 20)

    def test_pending_task_with_missed_deadline_rolls_over(self, tasks, history):
        task = Task(
            id=uuid4(),
            title="weekly report",
            task_kind=TaskKind.WEEKLY,
            deadline_date=date(2025, 6, 10),
            deadline_time="17:00",
        )
        tasks.add_task(task)

        result = _use_case(tasks, history).execute()

        records = history.list_for_task(task.id)
        assert result.reset_count == 1
        assert tasks.get_task(task.id).deadline_date == TODAY
        assert len(records) == 1
        assert records[0].approval_status is ApprovalStatus.DEADLINE_PASSED
        assert records[0].not_ticked is True
        assert records[0].deadline_date == date(2025, 6, 10)

    def test_missed_weekly_deadline_rolls_over_once_per_week(self, tasks, history):
        task = Task(
            id=uuid4(),
            title="weekly report",
            task_kind=TaskKind.WEEKLY,
            deadline_date=date(2025, 6, 16),
            deadline_time="17:00",
        )
        tasks.add_task(task)

        same_week = [
            _use_case_at(tasks, history, datetime(2025, 6, day, 12, 0, tzinfo=UTC))
            .execute()
            .reset_count
            for day in (17, 18, 19, 20)
        ]

        assert same_week == [0, 0, 0, 0]
        assert history.list_for_task(task.id) == []
        assert tasks.get_task(task.id).deadline_date == date(2025, 6, 16)

        next_monday = datetime(2025, 6, 23, 12, 0, tzinfo=UTC)
        assert _use_case_at(tasks, history, next_monday).execute().reset_count == 1
        assert tasks.get_task(task.id).deadline_date == date(2025, 6, 23)

        next_tuesday = datetime(2025, 6, 24, 12, 0, tzinfo=UTC)
        assert _use_case_at(tasks, history, next_tuesday).execute().reset_count == 0
        assert len(history.list_for_task(task.id)) == 1

    def test_missed_daily_deadline_rolls_over_next_day(self, tasks, history):
        task = Task(
            id=uuid4(),
            title="end of day log",
            task_kind=TaskKind.DAILY,
            deadline_date=date(2025, 6, 17),
            deadline_time="18:00",
        )
        tasks.add_task(task)

        assert _use_case(tasks, history).execute().reset_count == 1
        assert tasks.get_task(task.id).deadline_date == TODAY

    def test_missed_deadline_without_time_is_left_alone(self, tasks, history):
        tasks.add_task(
            Task(
                id=uuid4(),
                title="monthly review",
                task_kind=TaskKind.MONTHLY,
                deadline_date=date(2025, 5, 2),
            )
        )

        assert _use_case(tasks, history).execute().reset_count == 0

    def test_stale_weekly_deadline_moves_on_cycle_reset(self, tasks, history):
        task = _completed(
            TaskKind.WEEKLY,
            completed_at=NOW - timedelta(days=7),
            deadline_date=date(2025, 6, 10),
            deadline_time="17:00",
        )
        tasks.add_task(task)

        assert _use_case(tasks, history).execute().reset_count == 1
        assert tasks.get_task(task.id).deadline_date == TODAY

        tomorrow = NOW + timedelta(days=1)
        assert _use_case_at(tasks, history, tomorrow).execute().reset_count == 0

    def test_pending_task_without_missed_deadline_is_left_alone(self, tasks, history):
        tasks.add_task(
            Task(
                id=uuid4(),
                title="monthly",
                task_kind=TaskKind.MONTHLY,
                deadline_date=TODAY,
            )
        )

        assert _use_case(tasks, history).execute().reset_count == 0


class TestHistory:
    def test_snapshot_is_recorded_before_reset(self, tasks, history):
        task = _completed(TaskKind.DAILY)
        tasks.add_task(task)

        _use_case(tasks, history).execute()

        (record,) = history.list_for_task(task.id)
        assert record.task_title == task.title
        assert record.completed_by == task.completed_by
        assert record.completed_at == task.completed_at
        assert record.approval_status is ApprovalStatus.APPROVED
        assert record.custom_field_values == {"notes": "done"}
        assert record.not_ticked is False
        assert record.recorded_at == NOW

    def test_completed_subtasks_get_their_own_records(self, tasks, history):
        task = _completed(TaskKind.DAILY)
        done = Subtask(
            id=uuid4(),
            task_id=task.id,
            title="step 1",
            status=TaskStatus.COMPLETED,
            ticked=True,
            completed_at=YESTERDAY,
            completed_by=task.completed_by,
            ticked_at=YESTERDAY,
        )
        open_ = Subtask(id=uuid4(), task_id=task.id, title="step 2")
        tasks.add_task(task)
        tasks.add_subtask(done)
        tasks.add_subtask(open_)

        _use_case(tasks, history).execute()

        records = history.list_for_task(task.id)
        assert len(records) == 2
        assert {r.subtask_id for r in records} == {None, done.id}
        for subtask in tasks.list_subtasks(task.id):
            assert subtask.status is TaskStatus.PENDING
            assert subtask.ticked is False
            assert subtask.completed_at is None

    def test_history_failure_does_not_block_reset(self, tasks):
        broken_history = Mock()
        broken_history.append.side_effect = RuntimeError("history down")
        task = _completed(TaskKind.DAILY)
        tasks.add_task(task)

        result = _use_case(tasks, broken_history).execute()

        assert result.reset_count == 1
        assert tasks.get_task(task.id).status is TaskStatus.PENDING


class TestRunSemantics:
    def test_second_run_on_same_day_is_a_no_op(self, tasks, history):
        task = _completed(TaskKind.DAILY)
        tasks.add_task(task)
        use_case = _use_case(tasks, history)

        assert use_case.execute().reset_count == 1
        assert use_case.execute().reset_count == 0
        assert len(history.list_for_task(task.id)) == 1

    def test_user_scope_only_touches_assigned_tasks(self, tasks, history):
        me = uuid4()
        mine = _completed(TaskKind.DAILY)
        mine.assigned_to = None
        mine.assignees = [me]
        other = _completed(TaskKind.DAILY)
        tasks.add_task(mine)
        tasks.add_task(other)

        result = _use_case(tasks, history).execute(ResetScope.user(me))

        assert result.reset_count == 1
        assert tasks.get_task(mine.id).status is TaskStatus.PENDING
        assert tasks.get_task(other.id).status is TaskStatus.COMPLETED

    def test_project_scope(self, tasks, history):
        project = uuid4()
        inside = _completed(TaskKind.DAILY, project_id=project)
        outside = _completed(TaskKind.DAILY, project_id=uuid4())
        tasks.add_task(inside)
        tasks.add_task(outside)

        result = _use_case(tasks, history).execute(ResetScope.project(project))

        assert result.reset_count == 1
        assert tasks.get_task(outside.id).status is TaskStatus.COMPLETED

    def test_time_budget_truncates_the_run(self, tasks, history):
        for _ in range(3):
            tasks.add_task(_completed(TaskKind.DAILY))
        ticks = iter([0.0, 0.0, 100.0, 100.0])

        result = _use_case(
            tasks, history, max_seconds=10.0, monotonic=lambda: next(ticks)
        ).execute()

        assert result.truncated is True
        assert result.reset_count == 1

    def test_mutation_failure_reports_partial_count(self, tasks, history):
        first = _completed(
            TaskKind.DAILY, created_at=datetime(2025, 1, 1, tzinfo=UTC)
        )
        second = _completed(
            TaskKind.DAILY, created_at=datetime(2025, 1, 2, tzinfo=UTC)
        )
        tasks.add_task(first)
        tasks.add_task(second)
        original_save = tasks.save_task

        def flaky_save(task):
            if task.id == second.id:
                raise RuntimeError("write rejected")
            original_save(task)

        tasks.save_task = flaky_save

        with pytest.raises(ResetRecurringTasksError) as exc_info:
            _use_case(tasks, history).execute()

        assert exc_info.value.reset_count == 1
        assert tasks.get_task(first.id).status is TaskStatus.PENDING
        assert tasks.get_task(second.id).status is TaskStatus.COMPLETED
