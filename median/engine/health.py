"""Rolling health monitoring for the calculation engine."""

import logging
import statistics
import threading
from typing import Any

from median.config.settings import HealthConfig
from median.engine.events import EventBus, EventName
from median.store.interface import HistoryStore

logger = logging.getLogger(__name__)


class HealthMonitor:
    """Tracks a bounded health score and watches recent history.

    After every recorded calculation:
    - mean quality of the last `window` records below `quality_floor`
      publishes quality-degraded
    - mean duration above `slow_calculation_ms` publishes performance-slow

    The health score starts at 1.0 and moves by fixed steps: +0.01 for a
    high-quality result, -0.05 for a low-quality one, -0.1 for a failure.
    It is bounded to [0, 1].
    """

    _HIGH_QUALITY = 0.9
    _LOW_QUALITY = 0.7
    _HIGH_QUALITY_STEP = 0.01
    _LOW_QUALITY_STEP = -0.05
    _FAILURE_STEP = -0.1

    def __init__(self, store: HistoryStore, events: EventBus, config: HealthConfig) -> None:
        self._store = store
        self._events = events
        self._config = config
        self._score = 1.0
        self._successes = 0
        self._failures = 0
        self._lock = threading.Lock()

    @property
    def score(self) -> float:
        with self._lock:
            return self._score

    def record_success(self, quality: float) -> None:
        """Account for a recorded calculation and check recent history."""
        with self._lock:
            self._successes += 1
            if quality > self._HIGH_QUALITY:
                self._adjust(self._HIGH_QUALITY_STEP)
            elif quality < self._LOW_QUALITY:
                self._adjust(self._LOW_QUALITY_STEP)

        self.check()

    def record_failure(self) -> None:
        """Account for a failed calculation."""
        with self._lock:
            self._failures += 1
            self._adjust(self._FAILURE_STEP)

    def check(self) -> None:
        """Publish degradation events for the recent window, if any."""
        recent = self._store.recent(self._config.window)
        if not recent:
            return

        mean_quality = statistics.fmean(r.quality for r in recent)
        if mean_quality < self._config.quality_floor:
            logger.warning("Median quality degraded: mean %.3f over %d", mean_quality, len(recent))
            self._events.publish(
                EventName.QUALITY_DEGRADED,
                {"mean_quality": mean_quality, "window": len(recent)},
            )

        mean_duration = statistics.fmean(r.calculation_duration_ms for r in recent)
        if mean_duration > self._config.slow_calculation_ms:
            logger.warning("Median calculations slow: mean %.1f ms", mean_duration)
            self._events.publish(
                EventName.PERFORMANCE_SLOW,
                {"mean_duration_ms": mean_duration, "window": len(recent)},
            )

    def metrics(self) -> dict[str, Any]:
        """Get a snapshot of health metrics."""
        recent = self._store.recent(self._config.window)
        with self._lock:
            snapshot = {
                "health_score": self._score,
                "successful_calculations": self._successes,
                "failed_calculations": self._failures,
            }
        snapshot.update(
            {
                "history_size": self._store.count(),
                "recent_mean_quality": (
                    statistics.fmean(r.quality for r in recent) if recent else None
                ),
                "recent_mean_duration_ms": (
                    statistics.fmean(r.calculation_duration_ms for r in recent)
                    if recent
                    else None
                ),
            }
        )
        return snapshot

    def _adjust(self, step: float) -> None:
        self._score = min(1.0, max(0.0, self._score + step))
