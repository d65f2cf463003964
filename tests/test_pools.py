"""
Tests for WorkerPools — Thread pools and outbound limits

Tests verify:
- WorkerPool starts lazily, records when calls start, and keeps stats
- RateLimiter enforces both concurrency and minimum request interval
- RequestBudget caps lifetime requests
"""

import threading
import time

import pytest

from typoscope.core.errors import EngineClosedError
from typoscope.orchestrator.pools import PoolStats, RateLimiter, RequestBudget, WorkerPool


# =============================================================================
# WorkerPool
# =============================================================================

class TestWorkerPool:
    """Lazily started thread pool."""

    def test_submit(self):
        pool = WorkerPool(max_workers=2, name="test")
        try:
            call = pool.submit(lambda a, b: a + b, 2, b=3)

            assert call.future.result(timeout=5) == 5
            assert call.started_at is not None
            assert call.started_at >= call.submitted_at
            assert call.elapsed() >= 0
        finally:
            pool.shutdown()

    def test_elapsed_none_while_queued(self):
        pool = WorkerPool(max_workers=1)
        gate = threading.Event()
        try:
            pool.submit(gate.wait, 5)
            queued = pool.submit(lambda: None)

            assert queued.elapsed() is None
        finally:
            gate.set()
            pool.shutdown()

    def test_stats(self):
        pool = WorkerPool(max_workers=2)

        def fail():
            raise ValueError("boom")

        try:
            ok = pool.submit(lambda: 1)
            bad = pool.submit(fail)
            ok.future.result(timeout=5)
            with pytest.raises(ValueError):
                bad.future.result(timeout=5)

            deadline = time.monotonic() + 5
            while pool.stats().active_tasks and time.monotonic() < deadline:
                time.sleep(0.01)

            stats = pool.stats()
            assert stats.completed_tasks == 1
            assert stats.failed_tasks == 1
            assert stats.active_tasks == 0
        finally:
            pool.shutdown()

    def test_submit_after_shutdown(self):
        pool = WorkerPool(max_workers=1)
        pool.shutdown()

        assert pool.is_shutdown
        with pytest.raises(EngineClosedError):
            pool.submit(lambda: None)

    def test_shutdown_without_start(self):
        WorkerPool(max_workers=1).shutdown()

    def test_pool_stats_average(self):
        stats = PoolStats(completed_tasks=4, total_duration_ms=100.0)

        assert stats.avg_duration_ms == 25.0
        assert PoolStats().avg_duration_ms == 0.0
        assert stats.to_dict()["avg_duration_ms"] == 25.0


# =============================================================================
# RateLimiter
# =============================================================================

class TestRateLimiter:
    """Concurrency and interval limits."""

    def test_concurrency_limit(self):
        limiter = RateLimiter(max_concurrent=1, rate_limit=1000.0)

        assert limiter.acquire(timeout=1)
        assert not limiter.acquire(timeout=0.05)

        limiter.release()
        assert limiter.acquire(timeout=1)
        limiter.release()

    def test_min_interval(self):
        limiter = RateLimiter(max_concurrent=5, rate_limit=20.0)

        started = time.monotonic()
        for _ in range(3):
            assert limiter.acquire(timeout=1)
            limiter.release()
        elapsed = time.monotonic() - started

        # Three requests at 20/s need at least two 50ms gaps
        assert elapsed >= 0.09


# =============================================================================
# RequestBudget
# =============================================================================

class TestRequestBudget:
    """Lifetime request caps."""

    def test_limited(self):
        budget = RequestBudget(2)

        assert budget.consume()
        assert budget.consume()
        assert not budget.consume()
        assert budget.used == 2
        assert budget.remaining == 0

    def test_unlimited(self):
        budget = RequestBudget(0)

        for _ in range(100):
            assert budget.consume()
        assert budget.remaining is None
