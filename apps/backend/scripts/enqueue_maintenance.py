"""
Name: Maintenance Enqueue Script

Responsibilities:
  - Enqueue the maintenance jobs (recurring task reset, retention cleanup)
    on the RQ maintenance queue from the command line
  - Allow operators to trigger a run outside the scheduler
"""

from __future__ import annotations

import argparse
import os
import sys

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from worknest.container import get_maintenance_queue  # noqa: E402
from worknest.infrastructure.queue import QueueError  # noqa: E402


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Enqueue maintenance jobs.")
    parser.add_argument(
        "job",
        choices=["reset", "cleanup", "all"],
        help="Which maintenance job to enqueue",
    )
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    queue = get_maintenance_queue()
    if queue is None:
        raise SystemExit("REDIS_URL is required to enqueue maintenance jobs.")

    try:
        if args.job in ("reset", "all"):
            job_id = queue.enqueue_reset_recurring_tasks()
            print(f"Enqueued reset_recurring_tasks: job_id={job_id}")
        if args.job in ("cleanup", "all"):
            job_id = queue.enqueue_retention_cleanup()
            print(f"Enqueued retention_cleanup: job_id={job_id}")
    except QueueError as exc:
        raise SystemExit(f"Enqueue failed: {exc}") from exc


if __name__ == "__main__":
    main()
