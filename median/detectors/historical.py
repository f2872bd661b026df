"""Historical median deviation detector implementation."""

from median.baselines.statistical import StatisticalBaselineCalculator, severity_from_z
from median.config.engine_config import EngineConfig
from median.config.settings import DetectorName
from median.detectors.interface import AnomalyDetector, DetectionContext
from median.models.anomaly_report import AnomalyFinding, AnomalyKind


class HistoricalDeviationDetector(AnomalyDetector):
    """Detects a median far from the medians of previous periods.

    Algorithm:
    1. Skip (empty report) when fewer than min_history records exist
    2. Compute mean and population std of the historical medians
    3. z = (median - mean) / std; flag if |z| > threshold

    When every historical median is identical, any different median has an
    infinite z-score and is reported at full severity.
    """

    _calculator = StatisticalBaselineCalculator()

    def __init__(self, config: EngineConfig, min_history: int = 5) -> None:
        super().__init__(config)
        self._min_history = min_history

    @property
    def name(self) -> DetectorName:
        return DetectorName.HISTORICAL_DEVIATION

    @property
    def min_history(self) -> int:
        return self._min_history

    def _find(self, context: DetectionContext, threshold: float) -> list[AnomalyFinding]:
        if len(context.history) < self._min_history:
            return []

        baseline = self._calculator.compute([r.median_value for r in context.history])
        median = context.result.median_value
        z_score = baseline.z_score(median)
        if abs(z_score) <= threshold:
            return []

        return [
            AnomalyFinding(
                kind=AnomalyKind.HISTORICAL_MEDIAN,
                severity=severity_from_z(z_score),
                details={
                    "median_value": median,
                    "historical_mean": baseline.mean,
                    "historical_std": baseline.std,
                    "z_score": z_score,
                    "history_size": baseline.sample_count,
                    "threshold": threshold,
                },
            )
        ]
