"""
EventBus — Structured side-channel for analysis runs

The orchestrator emits events here instead of calling telemetry directly.
Subscribers are plain callables. They run synchronously on the emitting
thread, and a failing subscriber is logged and skipped, so analysis
results never depend on observers.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class EventType(Enum):
    ANALYSIS_STARTED = "analysis_started"
    ANALYSIS_COMPLETED = "analysis_completed"
    ANALYSIS_CANCELLED = "analysis_cancelled"
    DETECTOR_FAILED = "detector_failed"
    DETECTOR_REGISTERED = "detector_registered"
    DETECTOR_UNREGISTERED = "detector_unregistered"
    FINDING_DROPPED = "finding_dropped"
    FINDING_AUGMENTED = "finding_augmented"
    AUGMENTATION_FAILED = "augmentation_failed"
    OPTIONS_CHANGED = "options_changed"
    FIXES_APPLIED = "fixes_applied"


@dataclass(frozen=True)
class AnalysisEvent:
    type: EventType
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "data": dict(self.data),
            "timestamp": self.timestamp,
        }


Subscriber = Callable[[AnalysisEvent], None]


class EventBus:
    """Observer list for AnalysisEvents."""

    def __init__(self):
        self._subscribers: List[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber) -> None:
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        """Remove a previously added subscriber."""
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def emit(self, event_type: EventType, **data: Any) -> AnalysisEvent:
        event = AnalysisEvent(type=event_type, data=data)
        with self._lock:
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception("Event subscriber failed for %s", event_type.value)
        return event

    def __len__(self) -> int:
        return len(self._subscribers)
