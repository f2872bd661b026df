"""Score and median result models."""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Iterable, Mapping


class Outcome(str, Enum):
    """Result of an entry compared against the period median."""

    WIN = "WIN"
    LOSS = "LOSS"
    TIE = "TIE"

    @classmethod
    def from_margin(cls, margin: float) -> "Outcome":
        """Classify a (rounded) margin versus the median."""
        if margin > 0:
            return cls.WIN
        if margin < 0:
            return cls.LOSS
        return cls.TIE


class StrategyType(str, Enum):
    """Median calculation strategies.

    The member order is the fallback order: the standard strategy is
    primary, statistical is tried next, weighted last.
    """

    STANDARD = "standard"
    STATISTICAL = "statistical"
    WEIGHTED = "weighted"


FALLBACK_ORDER: tuple[StrategyType, ...] = (
    StrategyType.STANDARD,
    StrategyType.STATISTICAL,
    StrategyType.WEIGHTED,
)


def round_score(value: float, precision: int = 2) -> float:
    """Round half away from zero to a fixed number of decimal places.

    Goes through the shortest repr of the float so that binary noise such
    as 95.85000000000001 does not leak into the rounded value.
    """
    quantum = Decimal(1).scaleb(-precision)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class ScoreEntry:
    """One competitor's observation for a period.

    Immutable once constructed. Range and finiteness are checked by
    ScoreSetValidator, not here, so that invalid candidates can still be
    described and reported.
    """

    identifier: str
    score: float
    projected_score: float

    @classmethod
    def create(
        cls,
        identifier: str,
        score: float,
        projected_score: float | None = None,
    ) -> "ScoreEntry":
        """Create an entry, defaulting the projection to the actual score."""
        return cls(
            identifier=identifier,
            score=score,
            projected_score=score if projected_score is None else projected_score,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScoreEntry":
        """Create a ScoreEntry from a dictionary."""
        return cls.create(
            identifier=data.get("identifier"),  # type: ignore[arg-type]
            score=data.get("score"),  # type: ignore[arg-type]
            projected_score=data.get("projected_score"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "identifier": self.identifier,
            "score": self.score,
            "projected_score": self.projected_score,
        }


@dataclass(frozen=True)
class ScoreSet:
    """The group of competitor scores for one calculation period.

    Order of entries is irrelevant to the median but is preserved so that
    rank assignment among equal scores stays deterministic.
    """

    entries: tuple[ScoreEntry, ...]

    @classmethod
    def of(cls, entries: Iterable[ScoreEntry]) -> "ScoreSet":
        """Create a ScoreSet from any iterable of entries."""
        return cls(entries=tuple(entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    @property
    def scores(self) -> list[float]:
        """Get the raw scores in input order."""
        return [e.score for e in self.entries]

    def with_score(self, identifier: str, score: float) -> "ScoreSet":
        """Return a copy with one entry's score replaced."""
        if identifier not in {e.identifier for e in self.entries}:
            raise KeyError(f"Unknown identifier: {identifier}")
        return ScoreSet(
            entries=tuple(
                ScoreEntry(e.identifier, score, e.projected_score)
                if e.identifier == identifier
                else e
                for e in self.entries
            )
        )


@dataclass(frozen=True)
class RankedEntry:
    """A score entry placed against the median."""

    identifier: str
    score: float
    projected_score: float
    rank: int  # 1 = highest score
    margin_vs_median: float
    outcome: Outcome

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "identifier": self.identifier,
            "score": self.score,
            "projected_score": self.projected_score,
            "rank": self.rank,
            "margin_vs_median": self.margin_vs_median,
            "outcome": self.outcome.value,
        }


@dataclass(frozen=True)
class DerivedStats:
    """Summary statistics over a ranked score set."""

    high_score: float
    low_score: float
    spread: float
    mean: float
    std_dev: float  # Population standard deviation
    wins: int
    losses: int
    ties: int
    avg_margin_vs_median: float = 0.0
    median_as_percent_of_average: float = 0.0

    @property
    def total(self) -> int:
        """Get the number of classified entries."""
        return self.wins + self.losses + self.ties

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "high_score": self.high_score,
            "low_score": self.low_score,
            "spread": self.spread,
            "mean": self.mean,
            "std_dev": self.std_dev,
            "wins": self.wins,
            "losses": self.losses,
            "ties": self.ties,
            "avg_margin_vs_median": self.avg_margin_vs_median,
            "median_as_percent_of_average": self.median_as_percent_of_average,
        }


@dataclass(frozen=True)
class MedianResult:
    """Output of a median strategy.

    The result carries no timestamp so that repeated calculations over the
    same ScoreSet compare equal.
    """

    median_value: float
    ranked_entries: tuple[RankedEntry, ...]
    strategy_used: StrategyType
    derived_stats: DerivedStats
    # Flanking scores in rank order: ranks N//2 and N//2 + 1 for the standard strategy
    lower_mid_score: float
    upper_mid_score: float
    flagged_for_review: bool = False
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def scores(self) -> list[float]:
        """Get the scores in rank order."""
        return [e.score for e in self.ranked_entries]

    def entry(self, identifier: str) -> RankedEntry:
        """Look up a ranked entry by identifier."""
        for ranked in self.ranked_entries:
            if ranked.identifier == identifier:
                return ranked
        raise KeyError(f"Unknown identifier: {identifier}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "median_value": self.median_value,
            "strategy_used": self.strategy_used.value,
            "lower_mid_score": self.lower_mid_score,
            "upper_mid_score": self.upper_mid_score,
            "flagged_for_review": self.flagged_for_review,
            "ranked_entries": [e.to_dict() for e in self.ranked_entries],
            "derived_stats": self.derived_stats.to_dict(),
            "metadata": self.metadata,
        }
