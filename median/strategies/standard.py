"""Standard positional median strategy."""

from median.models.scores import ScoreEntry, StrategyType
from median.strategies.interface import MedianStrategy


class StandardMedianStrategy(MedianStrategy):
    """Primary strategy: average of the two scores flanking the midpoint.

    Algorithm:
    1. Sort scores high to low
    2. Take positions N//2 - 1 and N//2 (ranks 6 and 7 for N = 12)
    3. Median = their average, rounded to the configured precision
    """

    @property
    def strategy_type(self) -> StrategyType:
        return StrategyType.STANDARD

    def compute_median(self, entries: list[ScoreEntry]) -> tuple[float, float, float]:
        if len(entries) < 2:
            raise ValueError("Standard median requires at least 2 entries")

        scores = sorted((e.score for e in entries), reverse=True)
        mid = len(scores) // 2
        lower_mid, upper_mid = scores[mid - 1], scores[mid]
        return (lower_mid + upper_mid) / 2, lower_mid, upper_mid
