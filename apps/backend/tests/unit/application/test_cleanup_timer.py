"""
Name: Cleanup Timer Tests

Responsibilities:
  - Validate idempotent start (one thread per process)
  - Validate run_once never propagates failures
  - Validate stop interrupts the wait
"""

import threading
from types import SimpleNamespace

import pytest

from worknest.application.cleanup_timer import CleanupTimer

pytestmark = pytest.mark.unit


class TestCleanupTimer:
    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            CleanupTimer(lambda: None, 0)

    def test_start_is_idempotent_and_runs_immediately(self):
        ran = threading.Event()
        calls = []

        def run():
            calls.append(1)
            ran.set()

        timer = CleanupTimer(run, interval_seconds=3600)
        try:
            assert timer.start() is True
            assert timer.start() is False
            assert ran.wait(5)
            assert timer.is_running is True
        finally:
            timer.stop()

        assert timer.is_running is False
        assert len(calls) == 1

    def test_concurrent_starts_create_a_single_thread(self):
        timer = CleanupTimer(lambda: None, interval_seconds=3600)
        results = []
        barrier = threading.Barrier(8)

        def start():
            barrier.wait()
            results.append(timer.start())

        threads = [threading.Thread(target=start) for _ in range(8)]
        try:
            for t in threads:
                t.start()
            for t in threads:
                t.join()
        finally:
            timer.stop()

        assert results.count(True) == 1

    def test_run_once_swallows_cleanup_errors(self):
        def boom():
            raise RuntimeError("db down")

        CleanupTimer(boom, interval_seconds=60).run_once()

    def test_run_once_accepts_partial_results(self):
        CleanupTimer(lambda: SimpleNamespace(ok=False), interval_seconds=60).run_once()

    def test_restart_after_stop(self):
        timer = CleanupTimer(lambda: None, interval_seconds=3600)
        try:
            assert timer.start() is True
            timer.stop()
            assert timer.start() is True
        finally:
            timer.stop()
