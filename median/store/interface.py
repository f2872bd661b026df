"""Interface for calculation history storage."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from median.models.history import HistoryRecord
from median.models.scores import StrategyType


class HistoryFilter:
    """Filter criteria for querying history records.

    All filter criteria are optional and applied with AND logic.
    """

    def __init__(
        self,
        strategies: list[StrategyType] | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
        flagged_only: bool = False,
        limit: int | None = None,
    ) -> None:
        """Initialize filter criteria.

        Args:
            strategies: Filter by strategy used (OR within list)
            since: Earliest timestamp (inclusive)
            until: Latest timestamp (inclusive)
            flagged_only: Only records flagged for review
            limit: Maximum number of records to return
        """
        self.strategies = strategies
        self.since = since
        self.until = until
        self.flagged_only = flagged_only
        self.limit = limit

    def matches(self, record: HistoryRecord) -> bool:
        """Check if a record matches this filter."""
        if self.strategies and record.strategy_used not in self.strategies:
            return False

        if self.since and record.timestamp < self.since:
            return False
        if self.until and record.timestamp > self.until:
            return False

        if self.flagged_only and not record.flagged_for_review:
            return False

        return True


class HistoryStore(ABC):
    """Abstract interface for the rolling calculation history.

    PROPERTIES:
    - Bounded: Holds at most `capacity` records; the oldest is evicted
      when a new record arrives at capacity
    - Ordered: Records are kept in insertion order
    - Immutable records: Stored records are never modified
    - Thread-safe appends: The append is the engine's only shared write
    """

    @property
    @abstractmethod
    def capacity(self) -> int:
        """Get the maximum number of retained records."""
        ...

    @abstractmethod
    def append(self, record: HistoryRecord) -> None:
        """Append a record, evicting the oldest one at capacity."""
        ...

    @abstractmethod
    def recent(self, count: int | None = None) -> list[HistoryRecord]:
        """Get the most recent records, oldest first.

        Args:
            count: Number of records to return (all when None)
        """
        ...

    @abstractmethod
    def query(self, filter_criteria: HistoryFilter) -> list[HistoryRecord]:
        """Query records matching the filter (newest first)."""
        ...

    @abstractmethod
    def count(self, filter_criteria: HistoryFilter | None = None) -> int:
        """Count records, optionally filtered."""
        ...

    @abstractmethod
    def get_statistics(self) -> dict[str, Any]:
        """Get storage statistics."""
        ...
