"""Calculation engine: validation, strategy fallback, detection and recording."""

import logging
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping

from median.analysis import ScoreChangeImpact, score_change_impact
from median.config.engine_config import EngineConfig
from median.config.settings import Settings
from median.detectors.aggregator import aggregate
from median.detectors.interface import DetectionContext
from median.detectors.registry import DetectorRegistry
from median.engine.events import EventBus, EventName
from median.engine.health import HealthMonitor
from median.engine.tuning import FeedbackLedger, SelfTuningLoop
from median.errors import CalculationFailure, InputError, ResultValidationError
from median.models.anomaly_report import AggregatedAnomalyVerdict
from median.models.history import HistoryRecord
from median.models.scores import FALLBACK_ORDER, MedianResult, ScoreSet, StrategyType
from median.models.validation import IssueKind, ValidationIssue, ValidationOutcome
from median.store.interface import HistoryStore
from median.store.memory_store import MemoryHistoryStore
from median.strategies.interface import MedianStrategy
from median.strategies.registry import StrategyRegistry
from median.validators.input_validator import ScoreSetValidator
from median.validators.result_validator import ResultValidator

logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    """States a single calculation passes through."""

    VALIDATING_INPUT = "validating_input"
    CALCULATING = "calculating"
    VALIDATING_RESULT = "validating_result"
    FALLBACK = "fallback"
    DETECTING_ANOMALIES = "detecting_anomalies"
    RECORDING = "recording"
    DONE = "done"


@dataclass(frozen=True)
class CalculationOutcome:
    """A trusted median result plus everything learned producing it."""

    result: MedianResult
    verdict: AggregatedAnomalyVerdict
    attempts: tuple[ResultValidationError, ...]  # Failed strategy attempts, in order
    warnings: tuple[str, ...]
    states: tuple[EngineState, ...]
    duration_ms: float
    history_record: HistoryRecord

    @property
    def used_fallback(self) -> bool:
        return self.result.strategy_used != FALLBACK_ORDER[0]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "result": self.result.to_dict(),
            "verdict": self.verdict.to_dict(),
            "attempts": [
                {"strategy": a.strategy.value, **a.outcome.to_dict()} for a in self.attempts
            ],
            "warnings": list(self.warnings),
            "states": [s.value for s in self.states],
            "duration_ms": self.duration_ms,
            "used_fallback": self.used_fallback,
        }


class CalculationEngine:
    """Runs one calculation from raw candidate to recorded result.

    State machine:
        VALIDATING_INPUT -> CALCULATING -> VALIDATING_RESULT
            -> (FALLBACK -> CALCULATING -> VALIDATING_RESULT)*
            -> DETECTING_ANOMALIES -> RECORDING -> DONE

    Terminal failures:
    - InputError: the candidate failed input validation; no strategy runs
    - CalculationFailure: every strategy failed result validation

    The primary strategy's result must pass every result rule. Fallback
    results must pass the consistency rules; a spread violation on a
    fallback result is carried as a warning instead.

    The history append is the only write shared between concurrent
    calculations.
    """

    _QUALITY_SEVERITY_PENALTY = 0.5

    def __init__(
        self,
        settings: Settings,
        store: HistoryStore | None = None,
        config: EngineConfig | None = None,
        events: EventBus | None = None,
    ) -> None:
        self._settings = settings
        self._store = store if store is not None else MemoryHistoryStore(settings.history_capacity)
        self._config = config if config is not None else EngineConfig.from_settings(settings)
        self._events = events if events is not None else EventBus()

        self._input_validator = ScoreSetValidator(settings)
        self._result_validator = ResultValidator(settings)
        self._strategies = StrategyRegistry(settings, self._config)
        self._detectors = DetectorRegistry(settings, self._config)
        self._health = HealthMonitor(self._store, self._events, settings.health)
        self._tuning = SelfTuningLoop(
            self._store,
            self._config,
            FeedbackLedger(settings.tuning.feedback_window),
            settings,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def store(self) -> HistoryStore:
        return self._store

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def events(self) -> EventBus:
        return self._events

    @property
    def strategies(self) -> StrategyRegistry:
        return self._strategies

    @property
    def detectors(self) -> DetectorRegistry:
        return self._detectors

    @property
    def tuning(self) -> SelfTuningLoop:
        return self._tuning

    def calculate(
        self,
        candidate: Any,
        weights: Mapping[str, float] | None = None,
    ) -> CalculationOutcome:
        """Calculate, validate, inspect and record a median result.

        Args:
            candidate: ScoreSet, sequence of ScoreEntry, or sequence of mappings
            weights: Optional per-identifier weights for the weighted strategy

        Returns:
            The accepted result with its anomaly verdict

        Raises:
            InputError: If the candidate fails input validation
            CalculationFailure: If no strategy produced a valid result
        """
        started = time.perf_counter()
        states = [EngineState.VALIDATING_INPUT]

        input_outcome = self._input_validator.validate(candidate)
        if not input_outcome.is_valid:
            error = InputError(input_outcome)
            self._fail(
                str(error),
                kind="input",
                errors=[e.to_dict() for e in input_outcome.errors],
            )
            raise error
        score_set = self._input_validator.coerce(candidate)

        attempts: list[ResultValidationError] = []
        warnings: list[str] = []
        result: MedianResult | None = None

        for strategy in self._strategies.chain(weights):
            if attempts:
                states.append(EngineState.FALLBACK)
            states.append(EngineState.CALCULATING)

            candidate_result, failure = self._attempt(strategy, score_set, states)
            if failure is not None:
                logger.warning("%s", failure)
                attempts.append(failure)
                continue

            if strategy.strategy_type != FALLBACK_ORDER[0]:
                plausibility = self._result_validator.check_plausibility(candidate_result)
                warnings.extend(plausibility.messages())
            result = candidate_result
            break

        if result is None:
            error = CalculationFailure(
                "No strategy produced a valid median result", attempts=attempts
            )
            self._fail(
                str(error),
                kind="calculation",
                attempted=[s.value for s in error.attempted_strategies],
            )
            raise error

        states.append(EngineState.DETECTING_ANOMALIES)
        context = DetectionContext.create(result, self._store.recent())
        verdict = aggregate(self._detectors.detect_all(context))

        if verdict.severity > self._settings.review_threshold:
            result = replace(result, flagged_for_review=True)

        states.append(EngineState.RECORDING)
        duration_ms = (time.perf_counter() - started) * 1000
        record = self._record(result, verdict, duration_ms)

        if result.flagged_for_review:
            logger.warning(
                "Median %.2f flagged for review (severity %.2f)",
                result.median_value,
                verdict.severity,
            )
            self._events.publish(
                EventName.RESULT_FLAGGED_FOR_REVIEW,
                {
                    "median_value": result.median_value,
                    "severity": verdict.severity,
                    "findings": [f.to_dict() for f in verdict.findings],
                },
            )
        self._events.publish(EventName.RESULT_COMPUTED, record.to_dict())
        self._health.record_success(record.quality)

        states.append(EngineState.DONE)
        logger.info(
            "Median %.2f via %s in %.2f ms",
            result.median_value,
            result.strategy_used.value,
            duration_ms,
        )
        return CalculationOutcome(
            result=result,
            verdict=verdict,
            attempts=tuple(attempts),
            warnings=tuple(warnings),
            states=tuple(states),
            duration_ms=duration_ms,
            history_record=record,
        )

    def what_if(self, candidate: Any, identifier: str, new_score: float) -> ScoreChangeImpact:
        """Preview the median impact of changing one entry's score.

        Uses the primary strategy only and records nothing.

        Raises:
            InputError: If the candidate or the changed candidate is invalid
            KeyError: If the identifier is not in the score set
        """
        input_outcome = self._input_validator.validate(candidate)
        if not input_outcome.is_valid:
            raise InputError(input_outcome)
        score_set = self._input_validator.coerce(candidate)

        changed_outcome = self._input_validator.validate(score_set.with_score(identifier, new_score))
        if not changed_outcome.is_valid:
            raise InputError(changed_outcome)

        return score_change_impact(
            self._strategies.get_strategy(FALLBACK_ORDER[0]),
            score_set,
            identifier,
            new_score,
            precision=self._settings.rounding_precision,
        )

    def health_metrics(self) -> dict[str, Any]:
        """Get health score and recent history metrics."""
        return self._health.metrics()

    def _attempt(
        self,
        strategy: MedianStrategy,
        score_set: ScoreSet,
        states: list[EngineState],
    ) -> tuple[MedianResult | None, ResultValidationError | None]:
        strategy_type = strategy.strategy_type
        try:
            result = strategy.calculate(score_set)
        except ValueError as exc:
            issue = ValidationIssue(kind=IssueKind.CONSISTENCY, message=str(exc))
            return None, ResultValidationError(strategy_type, ValidationOutcome(errors=(issue,)))

        states.append(EngineState.VALIDATING_RESULT)
        outcome = self._result_validator.validate(
            result,
            enforce_plausibility=strategy_type == FALLBACK_ORDER[0],
        )
        if not outcome.is_valid:
            return None, ResultValidationError(strategy_type, outcome)
        return result, None

    def _record(
        self,
        result: MedianResult,
        verdict: AggregatedAnomalyVerdict,
        duration_ms: float,
    ) -> HistoryRecord:
        tuning = self._config.strategy(result.strategy_used)
        quality = tuning.quality * (1 - self._QUALITY_SEVERITY_PENALTY * verdict.severity)
        record = HistoryRecord(
            median_value=result.median_value,
            strategy_used=result.strategy_used,
            calculation_duration_ms=duration_ms,
            confidence=min(1.0, max(0.0, tuning.accuracy)),
            quality=min(1.0, max(0.0, quality)),
            flagged_for_review=result.flagged_for_review,
        )
        self._store.append(record)
        return record

    def _fail(self, reason: str, **payload: Any) -> None:
        logger.error("Median calculation failed: %s", reason)
        self._health.record_failure()
        self._events.publish(EventName.CALCULATION_FAILED, {"reason": reason, **payload})


def strategy_sequence(outcome: CalculationOutcome) -> list[StrategyType]:
    """Strategies tried for an outcome, in order, ending with the one used."""
    return [a.strategy for a in outcome.attempts] + [outcome.result.strategy_used]
