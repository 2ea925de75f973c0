"""
Name: RQ Maintenance Queue Tests

Responsibilities:
  - Validate config validation (fail-fast)
  - Validate enqueue uses importable job paths, retry and timeouts
  - Validate enqueue errors are wrapped

Notes:
  - rq is replaced by a MagicMock (no Redis needed)
"""

from unittest.mock import MagicMock, patch

import pytest

from worknest.infrastructure.queue import (
    QueueConfigurationError,
    QueueEnqueueError,
    RQMaintenanceQueue,
    RQQueueConfig,
)
from worknest.infrastructure.queue.import_utils import is_importable_dotted_path
from worknest.infrastructure.queue.job_paths import (
    MAINTENANCE_JOB_PATHS,
    RESET_RECURRING_TASKS_JOB_PATH,
    RETENTION_CLEANUP_JOB_PATH,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def fake_rq():
    rq = MagicMock()
    rq.Queue.return_value.enqueue.return_value = MagicMock(id="job-123")
    with patch(
        "worknest.infrastructure.queue.rq_queue._lazy_import_rq", return_value=rq
    ):
        yield rq


def test_job_paths_are_importable():
    for path in MAINTENANCE_JOB_PATHS:
        assert is_importable_dotted_path(path), path


def test_non_callable_or_bad_paths_are_rejected():
    assert is_importable_dotted_path("worknest.nope.missing") is False
    assert is_importable_dotted_path("no_dots") is False
    constant = "worknest.infrastructure.queue.job_paths.MAINTENANCE_QUEUE_NAME"
    assert is_importable_dotted_path(constant) is False


def test_enqueue_reset_job(fake_rq):
    redis = MagicMock()
    queue = RQMaintenanceQueue(
        redis=redis, config=RQQueueConfig(queue_name="maint", retry_max_attempts=2)
    )

    job_id = queue.enqueue_reset_recurring_tasks()

    assert job_id == "job-123"
    assert queue.queue_name == "maint"
    fake_rq.Queue.assert_called_once_with(name="maint", connection=redis)
    fake_rq.Retry.assert_called_once_with(max=2)
    args, kwargs = fake_rq.Queue.return_value.enqueue.call_args
    assert args == (RESET_RECURRING_TASKS_JOB_PATH,)
    assert kwargs["retry"] is fake_rq.Retry.return_value
    assert kwargs["job_timeout"] == 600


def test_enqueue_cleanup_without_retry(fake_rq):
    queue = RQMaintenanceQueue(
        redis=MagicMock(), config=RQQueueConfig(retry_max_attempts=0)
    )

    queue.enqueue_retention_cleanup()

    args, kwargs = fake_rq.Queue.return_value.enqueue.call_args
    assert args == (RETENTION_CLEANUP_JOB_PATH,)
    assert kwargs["retry"] is None
    fake_rq.Retry.assert_not_called()


def test_blank_queue_name_falls_back_to_default(fake_rq):
    queue = RQMaintenanceQueue(redis=MagicMock(), config=RQQueueConfig(queue_name="  "))

    assert queue.queue_name == "maintenance"


@pytest.mark.parametrize(
    "config",
    [
        RQQueueConfig(retry_max_attempts=-1),
        RQQueueConfig(job_timeout_seconds=0),
        RQQueueConfig(result_ttl_seconds=-5),
    ],
)
def test_invalid_config_fails_fast(fake_rq, config):
    with pytest.raises(QueueConfigurationError):
        RQMaintenanceQueue(redis=MagicMock(), config=config)


def test_enqueue_failure_is_wrapped(fake_rq):
    fake_rq.Queue.return_value.enqueue.side_effect = ConnectionError("redis down")
    queue = RQMaintenanceQueue(redis=MagicMock(), config=RQQueueConfig())

    with pytest.raises(QueueEnqueueError) as exc_info:
        queue.enqueue_reset_recurring_tasks()

    assert isinstance(exc_info.value.original_error, ConnectionError)
