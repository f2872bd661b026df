"""Weighted median strategy."""

import math
from typing import Mapping

from median.models.scores import ScoreEntry, StrategyType
from median.strategies.interface import MedianStrategy


class WeightedMedianStrategy(MedianStrategy):
    """Last fallback: the weighted median.

    Algorithm:
    1. Pair each entry with its weight (1.0 unless given by identifier)
    2. Sort ascending by score, ties in input order
    3. Accumulate weights until the running total reaches half the total
    4. If the running total lands exactly on the half-weight boundary,
       average this score with the next positive-weight score; otherwise
       take this score

    A running total of exactly half leaves positive weight above it, so
    step 4 always finds a next score. Zero-weight entries never straddle
    the boundary.
    With unit weights and even N this equals the statistical median.
    """

    _BOUNDARY_TOLERANCE = 1e-9

    def __init__(
        self,
        weights: Mapping[str, float] | None = None,
        precision: int = 2,
    ) -> None:
        super().__init__(precision=precision)
        self._weights = dict(weights or {})

    @property
    def strategy_type(self) -> StrategyType:
        return StrategyType.WEIGHTED

    def with_weights(self, weights: Mapping[str, float] | None) -> "WeightedMedianStrategy":
        """Return a copy of this strategy using different weights."""
        return WeightedMedianStrategy(weights=weights, precision=self._precision)

    def weight_for(self, identifier: str) -> float:
        """Get the weight for an entry (1.0 when unspecified)."""
        return self._weights.get(identifier, 1.0)

    def compute_median(self, entries: list[ScoreEntry]) -> tuple[float, float, float]:
        weighted = [(e.score, self.weight_for(e.identifier)) for e in entries]
        for score, weight in weighted:
            if not math.isfinite(weight) or weight < 0:
                raise ValueError(f"Weights must be finite and non-negative, got {weight}")

        total = sum(w for _, w in weighted)
        if total <= 0:
            raise ValueError("Total weight must be positive")

        weighted.sort(key=lambda pair: pair[0])
        half = total / 2
        cumulative = 0.0

        for index, (score, weight) in enumerate(weighted):
            cumulative += weight
            if math.isclose(cumulative, half, rel_tol=self._BOUNDARY_TOLERANCE):
                next_score = next(s for s, w in weighted[index + 1 :] if w > 0)
                return (score + next_score) / 2, next_score, score
            if cumulative > half:
                return score, score, score

        # Unreachable: cumulative ends at total > half
        raise ValueError("Weighted median did not converge")

    def _result_metadata(self, entries: list[ScoreEntry]) -> dict:
        return {"weights": {e.identifier: self.weight_for(e.identifier) for e in entries}}
