"""Statistical baseline calculator implementation."""

import statistics
from typing import Sequence

from median.models.baseline import BaselineMetrics


class StatisticalBaselineCalculator:
    """Computes baseline metrics using standard statistical methods.

    Uses population stdev (not sample). The result validator's spread band
    and the detectors' z-scores are both computed from this value.
    """

    _MIN_SAMPLES = 1

    def compute(self, values: Sequence[float]) -> BaselineMetrics:
        """Compute baseline metrics from a sequence of values.

        Args:
            values: Sequence of numeric values to compute baseline from

        Returns:
            Computed baseline metrics

        Raises:
            ValueError: If fewer than MIN_SAMPLES values provided
        """
        values_list = list(values)
        n = len(values_list)

        if n < self._MIN_SAMPLES:
            raise ValueError(
                f"Insufficient data: need at least {self._MIN_SAMPLES} samples, got {n}"
            )

        return BaselineMetrics(
            mean=statistics.fmean(values_list),
            std=statistics.pstdev(values_list),
            min_value=min(values_list),
            max_value=max(values_list),
            sample_count=n,
        )


def population_std(values: Sequence[float]) -> float:
    """Population standard deviation, 0.0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    return statistics.pstdev(values)


def severity_from_z(z_score: float, scale: float = 3.0) -> float:
    """Map an absolute z-score onto a [0, 1] severity."""
    return min(abs(z_score) / scale, 1.0)
