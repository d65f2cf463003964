"""
WorkerPools — Thread pools and outbound limits

Implements:
- WorkerPool: lazily started ThreadPoolExecutor with stats
- PendingCall: a submitted call plus the moment it started running
- RateLimiter: concurrency budget plus minimum interval between requests
- RequestBudget: lifetime cap on provider requests

Detectors are CPU-light and side-effect free, and provider calls are
I/O-bound, so both run on threads.
"""

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from ..core.errors import EngineClosedError


@dataclass
class PoolStats:
    """Statistics for pool observability."""
    active_tasks: int = 0
    completed_tasks: int = 0
    failed_tasks: int = 0
    total_duration_ms: float = 0.0

    @property
    def avg_duration_ms(self) -> float:
        if self.completed_tasks == 0:
            return 0.0
        return self.total_duration_ms / self.completed_tasks

    def to_dict(self) -> dict:
        return {
            "active_tasks": self.active_tasks,
            "completed_tasks": self.completed_tasks,
            "failed_tasks": self.failed_tasks,
            "avg_duration_ms": round(self.avg_duration_ms, 2)
        }


class RateLimiter:
    """
    Limiter for outbound provider calls.

    Prevents overwhelming external APIs with too many concurrent requests.
    """

    def __init__(self, max_concurrent: int = 3, rate_limit: float = 10.0):
        """
        Args:
            max_concurrent: Maximum concurrent requests
            rate_limit: Maximum requests per second
        """
        self.max_concurrent = max_concurrent
        self._semaphore = threading.Semaphore(max_concurrent)
        self._rate_limit = rate_limit
        self._last_request = 0.0
        self._lock = threading.Lock()

    def acquire(self, timeout: Optional[float] = None) -> bool:
        """
        Acquire permission to make a request.

        Blocks until permission granted or timeout.
        Returns True if acquired, False on timeout.
        """
        if not self._semaphore.acquire(timeout=timeout):
            return False

        # Enforce rate limit
        with self._lock:
            now = time.monotonic()
            min_interval = 1.0 / self._rate_limit
            elapsed = now - self._last_request

            if elapsed < min_interval:
                time.sleep(min_interval - elapsed)

            self._last_request = time.monotonic()

        return True

    def release(self) -> None:
        """Release permission after request completes."""
        self._semaphore.release()


class RequestBudget:
    """Lifetime request cap. A limit of 0 means unlimited."""

    def __init__(self, max_requests: int = 0):
        self.max_requests = max_requests
        self._used = 0
        self._lock = threading.Lock()

    def consume(self) -> bool:
        """Take one request from the budget. False when exhausted."""
        with self._lock:
            if self.max_requests and self._used >= self.max_requests:
                return False
            self._used += 1
            return True

    @property
    def used(self) -> int:
        return self._used

    @property
    def remaining(self) -> Optional[int]:
        """Requests left, or None when unlimited."""
        if not self.max_requests:
            return None
        return max(0, self.max_requests - self._used)


@dataclass
class PendingCall:
    """A submitted call. started_at is set once a worker picks it up."""
    future: Future
    submitted_at: float = field(default_factory=time.monotonic)
    started_at: Optional[float] = None
    payload: Any = None

    def elapsed(self, now: Optional[float] = None) -> Optional[float]:
        """Seconds since the call started running, or None if still queued."""
        if self.started_at is None:
            return None
        return (now if now is not None else time.monotonic()) - self.started_at


class WorkerPool:
    """
    ThreadPool started on first use.

    Suitable for detector runs and provider calls.
    """

    def __init__(self, max_workers: int, name: str = "typoscope"):
        self.max_workers = max_workers
        self.name = name
        self._executor: Optional[ThreadPoolExecutor] = None
        self._stats = PoolStats()
        self._lock = threading.Lock()
        self._shutdown = False

    def _ensure_started(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._shutdown:
                raise EngineClosedError(f"pool {self.name} is shut down")
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix=f"{self.name}-"
                )
            self._stats.active_tasks += 1
            return self._executor

    def submit(self, fn: Callable, *args: Any, **kwargs: Any) -> PendingCall:
        """
        Submit a call for execution.

        Returns a PendingCall whose started_at records when it began running.
        """
        executor = self._ensure_started()
        pending = PendingCall(future=Future())

        def run():
            pending.started_at = time.monotonic()
            return fn(*args, **kwargs)

        pending.future = executor.submit(run)
        pending.future.add_done_callback(lambda f: self._on_complete(f, pending))
        return pending

    def _on_complete(self, future: Future, pending: PendingCall) -> None:
        """Callback when a call completes."""
        with self._lock:
            self._stats.active_tasks -= 1
            if future.cancelled() or future.exception() is not None:
                self._stats.failed_tasks += 1
            else:
                self._stats.completed_tasks += 1
                duration = pending.elapsed()
                if duration is not None:
                    self._stats.total_duration_ms += duration * 1000

    def stats(self) -> PoolStats:
        """Get pool statistics."""
        with self._lock:
            return PoolStats(
                active_tasks=self._stats.active_tasks,
                completed_tasks=self._stats.completed_tasks,
                failed_tasks=self._stats.failed_tasks,
                total_duration_ms=self._stats.total_duration_ms
            )

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown the pool. Queued calls are cancelled."""
        with self._lock:
            self._shutdown = True
            executor = self._executor
        if executor is not None:
            executor.shutdown(wait=wait, cancel_futures=True)
