"""
Name: In-Memory Repository Tests

Responsibilities:
  - Validate the in-memory adapters honor the repository contracts
  - Validate copy-on-read isolation
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from worknest.domain.entities import (
    EmployeePermission,
    Subtask,
    Task,
    TaskKind,
    TaskStatus,
)
from worknest.identity.users import UserRole
from worknest.infrastructure.repositories import (
    InMemoryEmployeePermissionRepository,
    InMemoryTaskRepository,
    InMemoryUserRepository,
)

pytestmark = pytest.mark.unit

NOW = datetime(2025, 6, 18, 12, 0, tzinfo=timezone.utc)


class TestUsers:
    def test_duplicate_email_is_rejected(self, user_factory):
        repo = InMemoryUserRepository()
        repo.create_user(user_factory.create(email="dup@example.com"))

        with pytest.raises(ValueError):
            repo.create_user(user_factory.create(email="dup@example.com"))

    def test_approved_employees_sorted_by_name(self, user_factory):
        repo = InMemoryUserRepository(
            [
                user_factory.create(name="Zoe"),
                user_factory.create(name="Adam"),
                user_factory.create(UserRole.ADMIN, name="Boss"),
                user_factory.create(name="Nope", is_approved=False),
            ]
        )

        names = [u.name for u in repo.list_approved_employees()]

        assert names == ["Adam", "Zoe"]


class TestEmployeePermissions:
    def test_upsert_keeps_original_created_at(self):
        repo = InMemoryEmployeePermissionRepository()
        employee = uuid4()
        repo.upsert(EmployeePermission(employee, ("view_projects",), created_at=NOW))

        updated = repo.upsert(
            EmployeePermission(
                employee, ("manage_tasks",), created_at=NOW + timedelta(days=1)
            )
        )

        assert updated.created_at == NOW
        assert repo.get_by_employee(employee).permissions == ("manage_tasks",)
        assert len(repo.list_all()) == 1

    def test_delete_by_employee(self):
        repo = InMemoryEmployeePermissionRepository()
        employee = uuid4()
        repo.upsert(EmployeePermission(employee))

        assert repo.delete_by_employee(employee) is True
        assert repo.delete_by_employee(employee) is False


class TestTasks:
    def test_reads_are_copies(self):
        task = Task(id=uuid4(), title="t", task_kind=TaskKind.DAILY)
        repo = InMemoryTaskRepository([task])

        (candidate,) = repo.list_reset_candidates([TaskKind.DAILY])
        candidate.status = TaskStatus.COMPLETED
        candidate.assignees.append(uuid4())

        stored = repo.get_task(task.id)
        assert stored.status is TaskStatus.PENDING
        assert stored.assignees == []

    def test_candidates_filtered_by_kind_and_ordered(self):
        older = Task(
            id=uuid4(),
            title="a",
            task_kind=TaskKind.WEEKLY,
            created_at=NOW - timedelta(days=2),
        )
        newer = Task(id=uuid4(), title="b", task_kind=TaskKind.DAILY, created_at=NOW)
        skipped = Task(id=uuid4(), title="c", task_kind=TaskKind.ONE_TIME)
        repo = InMemoryTaskRepository([newer, skipped, older])

        candidates = repo.list_reset_candidates([TaskKind.DAILY, TaskKind.WEEKLY])

        assert [t.id for t in candidates] == [older.id, newer.id]

    def test_reset_subtasks_counts_only_the_task_subtasks(self):
        task_id = uuid4()
        repo = InMemoryTaskRepository(
            subtasks=[
                Subtask(uuid4(), task_id, "a", status=TaskStatus.COMPLETED, ticked=True),
                Subtask(uuid4(), task_id, "b"),
                Subtask(uuid4(), uuid4(), "other", status=TaskStatus.COMPLETED),
            ]
        )

        assert repo.reset_subtasks(task_id) == 2
        assert all(not s.ticked for s in repo.list_subtasks(task_id))
