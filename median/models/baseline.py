"""Baseline models for statistical computations."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class BaselineMetrics:
    """Population statistics over a sequence of values.

    Used both for a score set's own distribution and for the distribution
    of historical medians.
    """

    mean: float
    std: float  # Population standard deviation
    min_value: float
    max_value: float
    sample_count: int

    def __post_init__(self) -> None:
        """Validate baseline metrics constraints."""
        if self.std < 0:
            raise ValueError("Standard deviation cannot be negative")
        if self.sample_count < 0:
            raise ValueError("Sample count cannot be negative")
        if self.min_value > self.max_value:
            raise ValueError("Min value cannot be greater than max value")

    def z_score(self, value: float) -> float:
        """Calculate z-score for a given value relative to this baseline."""
        if self.std == 0:
            if value == self.mean:
                return 0.0
            return float("inf") if value > self.mean else float("-inf")
        return (value - self.mean) / self.std

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "mean": self.mean,
            "std": self.std,
            "min_value": self.min_value,
            "max_value": self.max_value,
            "sample_count": self.sample_count,
        }
