"""Order-statistic median strategy."""

from median.models.scores import ScoreEntry, StrategyType
from median.strategies.interface import MedianStrategy


class StatisticalMedianStrategy(MedianStrategy):
    """First fallback: the textbook median.

    Sorts ascending; even N averages the two central values, odd N takes
    the single central value. Does not assume N is even.
    """

    @property
    def strategy_type(self) -> StrategyType:
        return StrategyType.STATISTICAL

    def compute_median(self, entries: list[ScoreEntry]) -> tuple[float, float, float]:
        scores = sorted(e.score for e in entries)
        n = len(scores)
        mid = n // 2

        if n % 2 == 1:
            central = scores[mid]
            return central, central, central

        below, above = scores[mid - 1], scores[mid]
        return (below + above) / 2, above, below
