"""
Name: Worker Job Tests

Responsibilities:
  - reset_recurring_tasks_job returns the run summary
  - retention_cleanup_job fails loud on partial failure (RQ retry)
  - Worker readiness payloads and /metrics access
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest

from worknest import container
from worknest.application.usecases.maintenance import CleanupResult
from worknest.context import get_context_dict
from worknest.crosscutting.config import get_settings
from worknest.crosscutting.exceptions import MaintenanceError
from worknest.domain.entities import ApprovalStatus, Task, TaskKind, TaskStatus
from worknest.worker import worker_health
from worknest.worker.jobs import reset_recurring_tasks_job, retention_cleanup_job
from worknest.worker.worker_server import metrics_access_status

pytestmark = pytest.mark.unit


def test_reset_job_returns_summary():
    container.get_task_repository().add_task(
        Task(
            id=uuid4(),
            title="Inbox zero",
            task_kind=TaskKind.DAILY,
            status=TaskStatus.COMPLETED,
            approval_status=ApprovalStatus.APPROVED,
            completed_at=datetime.now(timezone.utc) - timedelta(days=1),
        )
    )

    assert reset_recurring_tasks_job() == {"reset_count": 1, "truncated": False}


def test_cleanup_job_returns_counts():
    summary = retention_cleanup_job()

    assert summary == {
        "deletedMeetings": 0,
        "deletedCompletedTasks": 0,
        "deletedOldUpdates": 0,
    }


def test_cleanup_job_raises_on_partial_failure():
    use_case = MagicMock()
    use_case.execute.return_value = CleanupResult(
        deleted_meetings=1, errors={"employee_tasks": "timeout"}
    )

    with patch(
        "worknest.worker.jobs.get_run_retention_cleanup_use_case",
        return_value=use_case,
    ):
        with pytest.raises(MaintenanceError, match="employee_tasks"):
            retention_cleanup_job()


def test_job_context_is_cleared_after_failure():
    use_case = MagicMock()
    use_case.execute.side_effect = RuntimeError("boom")

    with patch(
        "worknest.worker.jobs.get_reset_recurring_tasks_use_case",
        return_value=use_case,
    ):
        with pytest.raises(RuntimeError):
            reset_recurring_tasks_job()

    assert get_context_dict() == {}


class TestWorkerHealth:
    def test_ready_when_db_and_redis_respond(self, monkeypatch):
        monkeypatch.setattr(worker_health, "_check_db", lambda url: True)
        monkeypatch.setattr(worker_health, "_queued_jobs", lambda url, name: 2)

        assert worker_health.readiness_payload() == {
            "ok": True,
            "db": "connected",
            "redis": "connected",
            "queue": "maintenance",
            "queued_jobs": 2,
        }

    def test_not_ready_without_redis(self, monkeypatch):
        monkeypatch.setattr(worker_health, "_check_db", lambda url: True)
        monkeypatch.setattr(worker_health, "_queued_jobs", lambda url, name: None)

        payload = worker_health.readiness_payload()

        assert payload["ok"] is False
        assert payload["redis"] == "disconnected"

    def test_empty_urls_are_not_connected(self):
        assert worker_health._check_db("") is False
        assert worker_health._queued_jobs("", "maintenance") is None

    def test_main_exit_code(self, monkeypatch, capsys):
        monkeypatch.setattr(
            worker_health, "readiness_payload", lambda: {"ok": False}
        )

        with pytest.raises(SystemExit) as exc_info:
            worker_health.main()

        assert exc_info.value.code == 1
        assert '"ok": false' in capsys.readouterr().out


class TestWorkerMetricsAccess:
    def test_open_by_default(self):
        assert metrics_access_status(None) == 200

    def test_requires_admin_bearer_when_protected(
        self, monkeypatch, admin_user, employee_user, auth_headers
    ):
        monkeypatch.setenv("METRICS_REQUIRE_AUTH", "1")
        get_settings.cache_clear()

        assert metrics_access_status(None) == 401
        assert metrics_access_status("Bearer garbage") == 401
        assert (
            metrics_access_status(auth_headers(employee_user)["Authorization"]) == 403
        )
        assert metrics_access_status(auth_headers(admin_user)["Authorization"]) == 200
