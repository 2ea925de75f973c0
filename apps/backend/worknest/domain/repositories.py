"""
CRC — domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define persistence contracts for users, permission grants, recurring tasks,
  task history and retention-managed records (ports).
- Keep the application layer independent from PostgreSQL / in-memory adapters.
- Enable straightforward unit testing (stub repositories).

Collaborators
- domain.entities: EmployeePermission, Task, Subtask, TaskCompletion
- identity.users: User
- infrastructure.repositories: postgres/*, in_memory/* implementations

Constraints
- Pure interfaces only: no side effects, no infrastructure imports, no SQL.
- Retention deletes are bulk predicates: each returns the number of rows removed.
"""

from datetime import date, datetime
from typing import List, Optional, Protocol
from uuid import UUID

from ..identity.users import User
from .entities import EmployeePermission, Subtask, Task, TaskCompletion, TaskKind


class UserRepository(Protocol):
    """R: Read access to users (login, session refresh, grantor lookup)."""

    def get_user_by_id(self, user_id: UUID) -> Optional[User]: ...

    def get_user_by_email(self, email: str) -> Optional[User]: ...

    def list_approved_employees(self) -> List[User]:
        """R: Employees with is_approved=True, ordered by name."""
        ...

    def create_user(self, user: User) -> User: ...


class EmployeePermissionRepository(Protocol):
    """R: At most one grant document per employee."""

    def get_by_employee(self, employee_id: UUID) -> Optional[EmployeePermission]: ...

    def list_all(self) -> List[EmployeePermission]: ...

    def upsert(self, grant: EmployeePermission) -> EmployeePermission:
        """R: Insert or replace the grant for grant.employee_id."""
        ...

    def delete_by_employee(self, employee_id: UUID) -> bool:
        """R: True if a grant existed and was removed."""
        ...


class TaskRepository(Protocol):
    """R: Recurring task templates and their subtasks."""

    def list_reset_candidates(
        self,
        kinds: List[TaskKind],
        *,
        assignee_id: UUID | None = None,
        project_id: UUID | None = None,
    ) -> List[Task]:
        """
        R: Tasks whose kind is in `kinds`, optionally scoped to an assignee
        (assigned_to or assignees) or to a project.
        """
        ...

    def list_subtasks(self, task_id: UUID) -> List[Subtask]: ...

    def save_task(self, task: Task) -> None:
        """R: Persist every mutable field of the task (status, completion, marker)."""
        ...

    def reset_subtasks(self, task_id: UUID) -> int:
        """R: Return every subtask of task_id to pending/unticked; returns count."""
        ...


class TaskHistoryRepository(Protocol):
    """R: Append-only history of completed (or missed) task cycles."""

    def append(self, record: TaskCompletion) -> None: ...

    def list_for_task(self, task_id: UUID) -> List[TaskCompletion]: ...


class RetentionRepository(Protocol):
    """R: Bulk deletes for records with a retention window."""

    def delete_meetings_before(self, day: date) -> int:
        """R: Delete meetings whose meeting_date < day."""
        ...

    def delete_completed_employee_tasks_before(self, cutoff: datetime) -> int:
        """R: Delete employee tasks with completed=True and completed_at < cutoff."""
        ...

    def delete_daily_updates_before(self, cutoff: datetime) -> int:
        """R: Delete daily updates with created_at < cutoff."""
        ...
