"""Projection variance detector implementation."""

from median.config.settings import DetectorName
from median.detectors.interface import AnomalyDetector, DetectionContext
from median.models.anomaly_report import AnomalyFinding, AnomalyKind


class ProjectionVarianceDetector(AnomalyDetector):
    """Detects scores far from their projected score.

    variance = |score - projected| / |projected|, for nonzero projections.
    Entries whose variance exceeds the threshold each get one finding with
    severity min(variance, 1).
    """

    @property
    def name(self) -> DetectorName:
        return DetectorName.PROJECTION_VARIANCE

    def _find(self, context: DetectionContext, threshold: float) -> list[AnomalyFinding]:
        findings = []
        for entry in context.result.ranked_entries:
            projected = entry.projected_score
            if projected == 0:
                continue

            variance = abs(entry.score - projected) / abs(projected)
            if variance <= threshold:
                continue

            findings.append(
                AnomalyFinding(
                    kind=AnomalyKind.PROJECTION_VARIANCE,
                    severity=min(variance, 1.0),
                    details={
                        "identifier": entry.identifier,
                        "score": entry.score,
                        "projected_score": projected,
                        "variance": variance,
                        "threshold": threshold,
                    },
                )
            )
        return findings
