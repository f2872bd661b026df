"""Score clustering detector implementation."""

import statistics

from median.config.settings import DetectorName
from median.detectors.interface import AnomalyDetector, DetectionContext
from median.models.anomaly_report import AnomalyFinding, AnomalyKind


class PatternClusteringDetector(AnomalyDetector):
    """Detects unusually large gaps between consecutive sorted scores.

    A large gap means the scores split into clusters, which usually
    points at a data problem (a missing game, a partial update).

    Algorithm:
    1. Sort scores ascending and take consecutive gaps
    2. A gap is large when it exceeds threshold x the mean gap
    3. Report one finding with severity min(large_gaps / 3, 1)
    """

    _SEVERITY_SCALE = 3.0

    @property
    def name(self) -> DetectorName:
        return DetectorName.PATTERN_CLUSTERING

    def _find(self, context: DetectionContext, threshold: float) -> list[AnomalyFinding]:
        scores = sorted(context.result.scores)
        gaps = [high - low for low, high in zip(scores, scores[1:])]
        if not gaps:
            return []

        mean_gap = statistics.fmean(gaps)
        if mean_gap == 0:
            return []

        limit = threshold * mean_gap
        large_gaps = [gap for gap in gaps if gap > limit]
        if not large_gaps:
            return []

        return [
            AnomalyFinding(
                kind=AnomalyKind.SCORE_CLUSTERING,
                severity=min(len(large_gaps) / self._SEVERITY_SCALE, 1.0),
                details={
                    "large_gaps": large_gaps,
                    "mean_gap": mean_gap,
                    "gap_limit": limit,
                    "threshold": threshold,
                },
            )
        ]
