"""Detector registry for managing and running anomaly detectors."""

import logging

from median.config.engine_config import EngineConfig
from median.config.settings import DetectorName, Settings
from median.detectors.historical import HistoricalDeviationDetector
from median.detectors.interface import AnomalyDetector, DetectionContext
from median.detectors.pattern import PatternClusteringDetector
from median.detectors.projection import ProjectionVarianceDetector
from median.detectors.statistical_outlier import StatisticalOutlierDetector
from median.models.anomaly_report import AnomalyReport

logger = logging.getLogger(__name__)


class DetectorRegistry:
    """Registry for managing anomaly detector instances.

    Provides:
    - The four built-in detectors in a fixed execution order
    - Batch detection across all enabled detectors
    - Detector lookup and replacement by name

    A detector that raises is isolated: its failure is logged and recorded
    as an empty report with the error set, and the remaining detectors
    still run.
    """

    def __init__(self, settings: Settings, config: EngineConfig) -> None:
        self._config = config
        self._detectors: dict[DetectorName, AnomalyDetector] = {
            DetectorName.STATISTICAL_OUTLIER: StatisticalOutlierDetector(config),
            DetectorName.HISTORICAL_DEVIATION: HistoricalDeviationDetector(
                config, min_history=settings.min_history_for_deviation
            ),
            DetectorName.PATTERN_CLUSTERING: PatternClusteringDetector(config),
            DetectorName.PROJECTION_VARIANCE: ProjectionVarianceDetector(config),
        }

    def get_detector(self, name: DetectorName) -> AnomalyDetector:
        """Get a detector by name."""
        return self._detectors[name]

    def register_detector(self, name: DetectorName, detector: AnomalyDetector) -> None:
        """Replace a built-in detector, keeping its position in the order.

        Args:
            name: Name of the detector slot
            detector: The detector instance
        """
        if detector.name != name:
            raise ValueError(
                f"Detector name {detector.name.value} does not match "
                f"registration name {name.value}"
            )
        self._detectors[name] = detector

    def list_enabled(self) -> list[DetectorName]:
        """List enabled detectors in execution order."""
        return [name for name in self._detectors if self._config.detector(name).enabled]

    def detect_all(self, context: DetectionContext) -> list[AnomalyReport]:
        """Run all enabled detectors on a result.

        Args:
            context: The result under inspection plus prior history

        Returns:
            One report per enabled detector, in execution order
        """
        reports = []
        for name in self.list_enabled():
            detector = self._detectors[name]
            try:
                reports.append(detector.detect(context))
            except Exception as exc:
                logger.exception("Detector %s failed; abstaining", name.value)
                reports.append(
                    AnomalyReport(
                        detector_name=name.value,
                        confidence=0.0,
                        error=f"{type(exc).__name__}: {exc}",
                    )
                )
        return reports
