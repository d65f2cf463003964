"""Cooperative cancellation for analyze() calls."""

import threading

from .errors import AnalysisCancelled


class CancellationToken:
    """
    Shared flag polled by the orchestrator between stages.

    Any thread may call cancel(). Once set it stays set.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise AnalysisCancelled("analysis was cancelled")
