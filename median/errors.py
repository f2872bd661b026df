"""Exception taxonomy for the median engine.

- InputError: the candidate score set is malformed. Terminal, never retried
  with another strategy.
- ResultValidationError: one strategy's result failed validation. Recovered
  by falling back to the next strategy.
- CalculationFailure: no strategy produced a trustworthy result. Terminal.

Anomaly findings and insufficient history are not errors.
"""

from typing import Sequence

from median.models.scores import StrategyType
from median.models.validation import ValidationIssue, ValidationOutcome


class MedianEngineError(Exception):
    """Base class for all engine errors."""


class InputError(MedianEngineError):
    """The candidate score set failed input validation."""

    def __init__(self, outcome: ValidationOutcome) -> None:
        self.outcome = outcome
        super().__init__(f"invalid input: {'; '.join(outcome.messages())}")

    @property
    def errors(self) -> tuple[ValidationIssue, ...]:
        return self.outcome.errors


class ResultValidationError(MedianEngineError):
    """A strategy's result failed result validation."""

    def __init__(self, strategy: StrategyType, outcome: ValidationOutcome) -> None:
        self.strategy = strategy
        self.outcome = outcome
        super().__init__(
            f"{strategy.value} result failed validation: {'; '.join(outcome.messages())}"
        )


class CalculationFailure(MedianEngineError):
    """Every strategy in the fallback chain failed."""

    def __init__(
        self,
        reason: str,
        attempts: Sequence[ResultValidationError] = (),
    ) -> None:
        self.reason = reason
        self.attempts = tuple(attempts)
        super().__init__(reason)

    @property
    def attempted_strategies(self) -> list[StrategyType]:
        return [a.strategy for a in self.attempts]
