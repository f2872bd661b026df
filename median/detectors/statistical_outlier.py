"""Statistical outlier detector implementation."""

from median.baselines.statistical import StatisticalBaselineCalculator, severity_from_z
from median.config.settings import DetectorName
from median.detectors.interface import AnomalyDetector, DetectionContext
from median.models.anomaly_report import AnomalyFinding, AnomalyKind


class StatisticalOutlierDetector(AnomalyDetector):
    """Detects individual scores far from the score set's own mean.

    Algorithm:
    1. Compute mean and population std of the period's scores
    2. For each score, z = (score - mean) / std
    3. If |z| > threshold, report one finding for that entry

    A set with zero spread has no outliers.
    """

    _calculator = StatisticalBaselineCalculator()

    @property
    def name(self) -> DetectorName:
        return DetectorName.STATISTICAL_OUTLIER

    def _find(self, context: DetectionContext, threshold: float) -> list[AnomalyFinding]:
        entries = context.result.ranked_entries
        if not entries:
            return []

        baseline = self._calculator.compute([e.score for e in entries])
        if baseline.std == 0:
            return []

        findings = []
        for entry in entries:
            z_score = baseline.z_score(entry.score)
            if abs(z_score) <= threshold:
                continue
            findings.append(
                AnomalyFinding(
                    kind=AnomalyKind.STATISTICAL_OUTLIER,
                    severity=severity_from_z(z_score),
                    details={
                        "identifier": entry.identifier,
                        "score": entry.score,
                        "z_score": z_score,
                        "mean": baseline.mean,
                        "std_dev": baseline.std,
                        "threshold": threshold,
                    },
                )
            )
        return findings
