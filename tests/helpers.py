"""Score sets, records and stub strategies shared by the test modules."""

from datetime import datetime, timezone
from typing import Sequence

from median.models import HistoryRecord, ScoreEntry, ScoreSet, StrategyType
from median.strategies import MedianStrategy

SCENARIO_A_SCORES = [
    124.20, 117.50, 111.50, 107.30, 101.50, 97.40,
    94.30, 91.60, 87.20, 83.30, 78.70, 74.42,
]
TIED_MIDPOINT_SCORES = [130, 125, 118, 112, 105, 100, 100, 95, 88, 80, 75, 70]
IDENTICAL_SCORES = [100.0] * 12
# 250 sits ~3.3 population standard deviations above the mean, the
# largest single outlier possible among 12 scores
OUTLIER_SCORES = [100, 101, 99, 102, 98, 100, 101, 99, 100, 102, 98, 250]


def build_score_set(
    scores: Sequence[float],
    projections: Sequence[float | None] | None = None,
) -> ScoreSet:
    """Create a score set with identifiers team-01, team-02, ... in input order."""
    projections = projections or [None] * len(scores)
    return ScoreSet.of(
        ScoreEntry.create(f"team-{i:02d}", score, projected)
        for i, (score, projected) in enumerate(zip(scores, projections), start=1)
    )


def build_records(scores: Sequence[float]) -> list[dict]:
    """Create raw mapping records as a client would send them."""
    return [
        {"identifier": f"team-{i:02d}", "score": score}
        for i, score in enumerate(scores, start=1)
    ]


def create_test_record(
    median_value: float = 95.85,
    strategy: StrategyType = StrategyType.STANDARD,
    duration_ms: float = 2.0,
    flagged: bool = False,
    timestamp: datetime | None = None,
) -> HistoryRecord:
    """Create a test history record."""
    return HistoryRecord(
        median_value=median_value,
        strategy_used=strategy,
        calculation_duration_ms=duration_ms,
        confidence=1.0,
        quality=1.0,
        timestamp=timestamp or datetime.now(timezone.utc),
        flagged_for_review=flagged,
    )


class OffsetStrategy(MedianStrategy):
    """Strategy that reports the positional median shifted by an offset."""

    def __init__(self, strategy_type: StrategyType, offset: float = 10.0) -> None:
        super().__init__()
        self._strategy_type = strategy_type
        self._offset = offset
        self.calls = 0

    @property
    def strategy_type(self) -> StrategyType:
        return self._strategy_type

    def compute_median(self, entries):
        self.calls += 1
        scores = sorted((e.score for e in entries), reverse=True)
        mid = len(scores) // 2
        return (scores[mid - 1] + scores[mid]) / 2 + self._offset, scores[mid - 1], scores[mid]
