"""Post-calculation validation of median results."""

import math
from typing import Callable

from median.baselines.statistical import population_std
from median.config.settings import Settings
from median.models.scores import MedianResult, round_score
from median.models.validation import IssueKind, ValidationIssue, ValidationOutcome

Rule = Callable[[MedianResult], "ValidationIssue | None"]

# Absorbs binary noise when comparing decimal quantities such as 95.86 - 95.85
_FLOAT_SLACK = 1e-9


class ResultValidator:
    """Checks a MedianResult for internal consistency and plausibility.

    Every rule runs independently and all violations are collected.

    Rules:
    - median_range: median within [0, max_score]
    - entry_count: one ranked entry per configured team
    - calculation_accuracy: the standard positional median recomputed from
      the ranked scores, rounded to the configured precision, matches
      median_value within tolerance, whichever strategy produced the result
    - score_spread: population std of scores strictly inside spread_bounds
      (plausibility rule; see validate())
    """

    def __init__(self, settings: Settings) -> None:
        self._team_count = settings.team_count
        self._max_score = settings.max_score
        self._precision = settings.rounding_precision
        self._tolerance = settings.median_tolerance
        self._spread_low, self._spread_high = settings.spread_bounds

        self._consistency_rules: list[Rule] = [
            self._check_median_range,
            self._check_entry_count,
            self._check_calculation_accuracy,
        ]
        self._plausibility_rules: list[Rule] = [
            self._check_score_spread,
        ]

    def validate(
        self,
        result: MedianResult,
        enforce_plausibility: bool = True,
    ) -> ValidationOutcome:
        """Validate a median result.

        Args:
            result: The result to check
            enforce_plausibility: Also apply the spread band. The engine
                enforces it for the primary strategy only.

        Returns:
            Outcome listing every violated rule
        """
        rules = list(self._consistency_rules)
        if enforce_plausibility:
            rules.extend(self._plausibility_rules)

        errors = [issue for issue in (rule(result) for rule in rules) if issue is not None]
        return ValidationOutcome(errors=tuple(errors))

    def check_plausibility(self, result: MedianResult) -> ValidationOutcome:
        """Apply only the plausibility rules."""
        errors = [
            issue
            for issue in (rule(result) for rule in self._plausibility_rules)
            if issue is not None
        ]
        return ValidationOutcome(errors=tuple(errors))

    def _check_median_range(self, result: MedianResult) -> ValidationIssue | None:
        median = result.median_value
        if math.isfinite(median) and 0 <= median <= self._max_score:
            return None
        return ValidationIssue(
            kind=IssueKind.RANGE,
            message=f"Median {median} outside [0, {self._max_score}]",
        )

    def _check_entry_count(self, result: MedianResult) -> ValidationIssue | None:
        count = len(result.ranked_entries)
        if count == self._team_count:
            return None
        return ValidationIssue(
            kind=IssueKind.COUNT,
            message=f"Expected {self._team_count} ranked entries, got {count}",
        )

    def _check_calculation_accuracy(self, result: MedianResult) -> ValidationIssue | None:
        scores = sorted(result.scores, reverse=True)
        n = len(scores)
        if n < 2:
            return ValidationIssue(
                kind=IssueKind.CONSISTENCY,
                message="Cannot recompute positional median from fewer than 2 scores",
            )

        expected = round_score((scores[n // 2 - 1] + scores[n // 2]) / 2, self._precision)
        if abs(expected - result.median_value) <= self._tolerance + _FLOAT_SLACK:
            return None
        return ValidationIssue(
            kind=IssueKind.CONSISTENCY,
            message=(
                f"Median {result.median_value} does not match recomputed "
                f"positional median {expected:.4f}"
            ),
        )

    def _check_score_spread(self, result: MedianResult) -> ValidationIssue | None:
        std = population_std(result.scores)
        if self._spread_low < std < self._spread_high:
            return None
        return ValidationIssue(
            kind=IssueKind.SPREAD,
            message=(
                f"Score standard deviation {std:.2f} outside "
                f"({self._spread_low}, {self._spread_high})"
            ),
        )
