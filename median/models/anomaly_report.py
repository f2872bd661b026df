"""Anomaly finding, report and verdict models."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class AnomalyKind(str, Enum):
    """Kinds of findings the detectors can produce.

    - STATISTICAL_OUTLIER: A score far from the set's own mean
    - HISTORICAL_MEDIAN: A median far from recent medians
    - SCORE_CLUSTERING: Unusually large gaps between sorted scores
    - PROJECTION_VARIANCE: A score far from its projection
    """

    STATISTICAL_OUTLIER = "statistical_outlier"
    HISTORICAL_MEDIAN = "historical_median_anomaly"
    SCORE_CLUSTERING = "score_clustering"
    PROJECTION_VARIANCE = "projection_variance"


def _json_safe(value: Any) -> Any:
    """Replace non-finite floats so details stay JSON serializable."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


@dataclass(frozen=True)
class AnomalyFinding:
    """A single suspicious observation reported by a detector.

    Findings are informational only; they never block a result.
    """

    kind: AnomalyKind
    severity: float
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate finding constraints."""
        if not 0.0 <= self.severity <= 1.0:
            raise ValueError("Severity must be between 0.0 and 1.0")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind.value,
            "severity": self.severity,
            "details": _json_safe(self.details),
        }


@dataclass(frozen=True)
class AnomalyReport:
    """Output of one detector for one median result."""

    detector_name: str
    anomalies: tuple[AnomalyFinding, ...] = ()
    confidence: float = 1.0
    error: str = ""  # Set when the detector failed and abstained

    def __post_init__(self) -> None:
        """Validate report constraints."""
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError("Confidence must be between 0.0 and 1.0")

    @property
    def severity(self) -> float:
        """Get the highest finding severity (0.0 if none)."""
        return max((a.severity for a in self.anomalies), default=0.0)

    @property
    def has_anomalies(self) -> bool:
        """Check if this detector reported anything."""
        return len(self.anomalies) > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "detector_name": self.detector_name,
            "anomalies": [a.to_dict() for a in self.anomalies],
            "severity": self.severity,
            "confidence": self.confidence,
            "has_anomalies": self.has_anomalies,
            "error": self.error,
        }


@dataclass(frozen=True)
class AggregatedAnomalyVerdict:
    """Union of all detector reports for one median result."""

    has_anomalies: bool
    severity: float
    findings: tuple[AnomalyFinding, ...] = ()
    reports: tuple[AnomalyReport, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "has_anomalies": self.has_anomalies,
            "severity": self.severity,
            "findings": [f.to_dict() for f in self.findings],
            "reports": [r.to_dict() for r in self.reports],
        }
