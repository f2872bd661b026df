"""In-memory rolling history store."""

import statistics
import threading
from collections import Counter, deque
from typing import Any

from median.models.history import HistoryRecord
from median.store.interface import HistoryFilter, HistoryStore


class MemoryHistoryStore(HistoryStore):
    """Thread-safe in-memory ring buffer of history records.

    PROPERTIES:
    - Thread-safe: Uses lock for concurrent access
    - Bounded: deque(maxlen=capacity) evicts the oldest record
    - In-memory: Data is lost on process restart
    """

    def __init__(self, capacity: int = 100) -> None:
        """Initialize the in-memory store.

        Args:
            capacity: Maximum number of records retained
        """
        if capacity < 1:
            raise ValueError("Capacity must be at least 1")
        self._capacity = capacity
        self._records: deque[HistoryRecord] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def append(self, record: HistoryRecord) -> None:
        """Append a record, evicting the oldest one at capacity."""
        with self._lock:
            self._records.append(record)

    def recent(self, count: int | None = None) -> list[HistoryRecord]:
        """Get the most recent records, oldest first."""
        with self._lock:
            records = list(self._records)
        if count is None:
            return records
        if count <= 0:
            return []
        return records[-count:]

    def query(self, filter_criteria: HistoryFilter) -> list[HistoryRecord]:
        """Query records matching the filter criteria.

        Returns:
            List of matching records (newest first)
        """
        with self._lock:
            results = [r for r in reversed(self._records) if filter_criteria.matches(r)]

        if filter_criteria.limit:
            results = results[: filter_criteria.limit]
        return results

    def count(self, filter_criteria: HistoryFilter | None = None) -> int:
        """Count records, optionally filtered."""
        with self._lock:
            if filter_criteria is None:
                return len(self._records)
            return sum(1 for r in self._records if filter_criteria.matches(r))

    def get_statistics(self) -> dict[str, Any]:
        """Get storage statistics.

        Returns:
            Dictionary with record counts and median/duration summaries
        """
        with self._lock:
            records = list(self._records)

        by_strategy = Counter(r.strategy_used.value for r in records)
        medians = [r.median_value for r in records]
        durations = [r.calculation_duration_ms for r in records]
        return {
            "total_records": len(records),
            "capacity": self._capacity,
            "records_by_strategy": dict(by_strategy),
            "flagged_for_review": sum(1 for r in records if r.flagged_for_review),
            "average_median": statistics.fmean(medians) if medians else None,
            "average_duration_ms": statistics.fmean(durations) if durations else None,
            "storage_type": "memory",
            "is_persistent": False,
        }

    def clear(self) -> None:
        """Clear all records (for testing only)."""
        with self._lock:
            self._records.clear()
