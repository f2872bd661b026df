"""Interface for anomaly detectors."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from median.config.engine_config import DetectorTuning, EngineConfig
from median.config.settings import DetectorName
from median.models.anomaly_report import AnomalyFinding, AnomalyReport
from median.models.history import HistoryRecord
from median.models.scores import MedianResult


@dataclass(frozen=True)
class DetectionContext:
    """Read-only input to every detector for one calculation."""

    result: MedianResult
    history: tuple[HistoryRecord, ...] = ()

    @classmethod
    def create(
        cls,
        result: MedianResult,
        history: Sequence[HistoryRecord] = (),
    ) -> "DetectionContext":
        """Create a context from any history sequence."""
        return cls(result=result, history=tuple(history))


class AnomalyDetector(ABC):
    """Abstract interface for anomaly detection algorithms.

    All implementations MUST be:
    - Deterministic: Same context and tuning produce identical reports
    - Read-only: Never mutate the result or the history
    - Explainable: Findings include the values that triggered them

    CRITICAL: Detectors produce advisory findings only.
    They never block or alter a median result.

    Tuning is read from the shared EngineConfig at detection time, so a
    sensitivity change made by the self-tuning loop applies to the next
    calculation.
    """

    def __init__(self, config: EngineConfig) -> None:
        self._config = config

    @property
    @abstractmethod
    def name(self) -> DetectorName:
        """Get the detector name."""
        ...

    @property
    def tuning(self) -> DetectorTuning:
        """Get the detector's current tuning snapshot."""
        return self._config.detector(self.name)

    def detect(self, context: DetectionContext) -> AnomalyReport:
        """Inspect a result and report any suspicious observations.

        Args:
            context: The result under inspection plus prior history

        Returns:
            Report carrying zero or more findings
        """
        tuning = self.tuning
        findings = self._find(context, tuning.effective_threshold)
        return AnomalyReport(
            detector_name=self.name.value,
            anomalies=tuple(findings),
            confidence=tuning.confidence,
        )

    @abstractmethod
    def _find(self, context: DetectionContext, threshold: float) -> list[AnomalyFinding]:
        """Produce findings for a context at the given effective threshold."""
        ...
