"""Interface for median calculation strategies."""

import statistics
from abc import ABC, abstractmethod

from median.models.scores import (
    DerivedStats,
    MedianResult,
    Outcome,
    RankedEntry,
    ScoreEntry,
    ScoreSet,
    StrategyType,
    round_score,
)


class MedianStrategy(ABC):
    """Abstract interface for median calculation strategies.

    All implementations MUST be:
    - Deterministic: Same score set produces an identical result
    - Pure: No side effects, no external state
    - Total over valid input: only raise ValueError for input that input
      validation would have rejected

    Subclasses compute the median value; ranking, margins, outcomes and
    statistics are shared here so every strategy reports them the same way.
    """

    def __init__(self, precision: int = 2) -> None:
        self._precision = precision

    @property
    @abstractmethod
    def strategy_type(self) -> StrategyType:
        """Get the strategy identifier."""
        ...

    @abstractmethod
    def compute_median(self, entries: list[ScoreEntry]) -> tuple[float, float, float]:
        """Compute the raw median value.

        Args:
            entries: Score entries in input order

        Returns:
            (median, lower_mid, upper_mid) where the mids are the flanking
            scores in rank order (lower_mid ranks higher)
        """
        ...

    def calculate(self, score_set: ScoreSet) -> MedianResult:
        """Calculate a median result for a score set.

        Args:
            score_set: A validated score set

        Returns:
            The median result produced by this strategy

        Raises:
            ValueError: If the score set is empty or otherwise unusable
        """
        entries = list(score_set.entries)
        if not entries:
            raise ValueError("Cannot calculate a median for an empty score set")

        raw_median, lower, upper = self.compute_median(entries)
        median = self._round(raw_median)

        ranked = self._rank(entries, median)
        return MedianResult(
            median_value=median,
            ranked_entries=tuple(ranked),
            strategy_used=self.strategy_type,
            derived_stats=self._derive_stats(ranked, median),
            lower_mid_score=lower,
            upper_mid_score=upper,
            metadata=self._result_metadata(entries),
        )

    def _result_metadata(self, entries: list[ScoreEntry]) -> dict:
        """Extra strategy-specific context attached to the result."""
        return {}

    def _round(self, value: float) -> float:
        return round_score(value, self._precision)

    def _rank(self, entries: list[ScoreEntry], median: float) -> list[RankedEntry]:
        # sorted() is stable with reverse=True, so equal scores keep input order
        ordered = sorted(entries, key=lambda e: e.score, reverse=True)
        ranked = []
        for position, entry in enumerate(ordered, start=1):
            margin = self._round(entry.score - median)
            ranked.append(
                RankedEntry(
                    identifier=entry.identifier,
                    score=entry.score,
                    projected_score=entry.projected_score,
                    rank=position,
                    margin_vs_median=margin,
                    outcome=Outcome.from_margin(margin),
                )
            )
        return ranked

    def _derive_stats(self, ranked: list[RankedEntry], median: float) -> DerivedStats:
        scores = [r.score for r in ranked]
        high = max(scores)
        low = min(scores)
        mean = statistics.fmean(scores)
        std = statistics.pstdev(scores) if len(scores) > 1 else 0.0
        avg_margin = statistics.fmean(abs(r.margin_vs_median) for r in ranked)

        return DerivedStats(
            high_score=high,
            low_score=low,
            spread=self._round(high - low),
            mean=self._round(mean),
            std_dev=std,
            wins=sum(1 for r in ranked if r.outcome == Outcome.WIN),
            losses=sum(1 for r in ranked if r.outcome == Outcome.LOSS),
            ties=sum(1 for r in ranked if r.outcome == Outcome.TIE),
            avg_margin_vs_median=self._round(avg_margin),
            median_as_percent_of_average=self._round(median / mean * 100) if mean else 0.0,
        )
