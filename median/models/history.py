"""History record model."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from median.models.scores import StrategyType


@dataclass(frozen=True)
class HistoryRecord:
    """Compressed projection of a MedianResult kept in the history store.

    The full result is not retained past the calculation call.
    """

    median_value: float
    strategy_used: StrategyType
    calculation_duration_ms: float
    confidence: float
    quality: float
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    flagged_for_review: bool = False

    def __post_init__(self) -> None:
        """Validate history record constraints."""
        if not 0.0 <= self.quality <= 1.0:
            raise ValueError("Quality must be between 0.0 and 1.0")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError("Confidence must be between 0.0 and 1.0")
        if self.calculation_duration_ms < 0:
            raise ValueError("Calculation duration cannot be negative")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "median_value": self.median_value,
            "strategy_used": self.strategy_used.value,
            "calculation_duration_ms": self.calculation_duration_ms,
            "confidence": self.confidence,
            "quality": self.quality,
            "flagged_for_review": self.flagged_for_review,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryRecord":
        """Create a HistoryRecord from a dictionary."""
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            median_value=data["median_value"],
            strategy_used=StrategyType(data["strategy_used"]),
            calculation_duration_ms=data["calculation_duration_ms"],
            confidence=data["confidence"],
            quality=data["quality"],
            flagged_for_review=data.get("flagged_for_review", False),
        )
