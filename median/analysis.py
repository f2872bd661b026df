"""Read-only analysis helpers over median results."""

from dataclasses import dataclass
from typing import Any

from median.models.scores import MedianResult, Outcome, RankedEntry, ScoreSet, round_score
from median.strategies.interface import MedianStrategy


@dataclass(frozen=True)
class ScoreChangeImpact:
    """Effect of changing one entry's score on the median."""

    identifier: str
    original_score: float
    new_score: float
    original_median: float
    new_median: float
    median_change: float
    changes_median: bool
    original_outcome: Outcome
    new_outcome: Outcome

    @property
    def changes_outcome(self) -> bool:
        return self.original_outcome != self.new_outcome

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "identifier": self.identifier,
            "original_score": self.original_score,
            "new_score": self.new_score,
            "original_median": self.original_median,
            "new_median": self.new_median,
            "median_change": self.median_change,
            "changes_median": self.changes_median,
            "original_outcome": self.original_outcome.value,
            "new_outcome": self.new_outcome.value,
            "changes_outcome": self.changes_outcome,
        }


def score_change_impact(
    strategy: MedianStrategy,
    score_set: ScoreSet,
    identifier: str,
    new_score: float,
    precision: int = 2,
) -> ScoreChangeImpact:
    """Recalculate the median as if one entry had scored differently.

    Nothing is recorded; both results come straight from the strategy.

    Raises:
        KeyError: If the identifier is not in the score set
    """
    original = strategy.calculate(score_set)
    changed = strategy.calculate(score_set.with_score(identifier, new_score))

    before = original.entry(identifier)
    after = changed.entry(identifier)
    change = round_score(changed.median_value - original.median_value, precision)
    return ScoreChangeImpact(
        identifier=identifier,
        original_score=before.score,
        new_score=after.score,
        original_median=original.median_value,
        new_median=changed.median_value,
        median_change=change,
        changes_median=change != 0,
        original_outcome=before.outcome,
        new_outcome=after.outcome,
    )


def close_to_median(result: MedianResult, threshold: float = 5.0) -> list[RankedEntry]:
    """Entries whose absolute margin is within threshold, closest first."""
    close = [e for e in result.ranked_entries if abs(e.margin_vs_median) <= threshold]
    return sorted(close, key=lambda e: abs(e.margin_vs_median))


def summarize(result: MedianResult) -> dict[str, Any]:
    """Build a display-ready summary of a result."""
    stats = result.derived_stats
    return {
        "summary": {
            "median": result.median_value,
            "strategy": result.strategy_used.value,
            "wins": stats.wins,
            "losses": stats.losses,
            "ties": stats.ties,
            "spread": stats.spread,
            "average_margin": stats.avg_margin_vs_median,
            "flagged_for_review": result.flagged_for_review,
        },
        "standings": [
            {
                "rank": e.rank,
                "identifier": e.identifier,
                "score": e.score,
                "margin": e.margin_vs_median,
                "outcome": e.outcome.value,
            }
            for e in result.ranked_entries
        ],
        "formula": (
            f"({result.lower_mid_score} + {result.upper_mid_score}) / 2 = "
            f"{result.median_value}"
        ),
    }
