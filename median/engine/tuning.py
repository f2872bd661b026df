"""Self-tuning of strategy trust and detector sensitivity."""

import logging
import statistics
import threading
from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Any

from median.config.engine_config import EngineConfig, StrategyTuning
from median.config.settings import DetectorName, Settings, TuningConfig
from median.models.scores import StrategyType
from median.store.interface import HistoryStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectorOutcome:
    """A labelled outcome for one detector on one calculation.

    flagged: the detector reported at least one finding
    confirmed: an external reviewer confirmed a real anomaly
    """

    flagged: bool
    confirmed: bool

    @property
    def correct(self) -> bool:
        return self.flagged == self.confirmed

    @property
    def false_positive(self) -> bool:
        return self.flagged and not self.confirmed


@dataclass(frozen=True)
class DetectorPerformance:
    """Accuracy summary over a detector's recent labelled outcomes."""

    samples: int
    accuracy: float
    false_positive_rate: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "samples": self.samples,
            "accuracy": self.accuracy,
            "false_positive_rate": self.false_positive_rate,
        }


class FeedbackLedger:
    """Labelled detector outcomes supplied by an external reviewer.

    Only the most recent `window` outcomes per detector are retained.
    Detectors without feedback are never adjusted.
    """

    def __init__(self, window: int = 20) -> None:
        self._window = window
        self._outcomes: dict[DetectorName, deque[DetectorOutcome]] = defaultdict(
            lambda: deque(maxlen=self._window)
        )
        self._lock = threading.Lock()

    def record(self, detector: DetectorName, flagged: bool, confirmed: bool) -> None:
        """Record one labelled outcome for a detector."""
        with self._lock:
            self._outcomes[detector].append(DetectorOutcome(flagged=flagged, confirmed=confirmed))

    def outcomes(self, detector: DetectorName) -> list[DetectorOutcome]:
        with self._lock:
            return list(self._outcomes.get(detector, ()))

    def performance(self, detector: DetectorName) -> DetectorPerformance | None:
        """Summarize a detector's recent outcomes (None without feedback)."""
        outcomes = self.outcomes(detector)
        if not outcomes:
            return None

        samples = len(outcomes)
        return DetectorPerformance(
            samples=samples,
            accuracy=sum(1 for o in outcomes if o.correct) / samples,
            false_positive_rate=sum(1 for o in outcomes if o.false_positive) / samples,
        )


@dataclass(frozen=True)
class TuningReport:
    """What a self-tuning pass looked at and changed."""

    skipped: bool
    records_considered: int
    trust_weights: dict[StrategyType, float] = field(default_factory=dict)
    sensitivities: dict[DetectorName, float] = field(default_factory=dict)
    reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "skipped": self.skipped,
            "records_considered": self.records_considered,
            "trust_weights": {s.value: w for s, w in self.trust_weights.items()},
            "sensitivities": {d.value: s for d, s in self.sensitivities.items()},
            "reason": self.reason,
        }


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return min(high, max(low, value))


class SelfTuningLoop:
    """Adjusts EngineConfig from recent history and external feedback.

    Trust weight, per strategy seen in the recent window:
        0.7 * mean confidence + 0.3 * (1 - min(mean duration / ceiling, 1))
    clamped to trust_bounds.

    Detector sensitivity, per detector with labelled feedback:
        false-positive rate > limit  -> sensitivity - step
        otherwise accuracy > target  -> sensitivity + step
    bounded to sensitivity_bounds.

    All changes go through EngineConfig.update().
    """

    _CONFIDENCE_WEIGHT = 0.7
    _SPEED_WEIGHT = 0.3
    _ACCURACY_DECAY = 0.9

    def __init__(
        self,
        store: HistoryStore,
        config: EngineConfig,
        feedback: FeedbackLedger,
        settings: Settings,
    ) -> None:
        self._store = store
        self._config = config
        self._feedback = feedback
        self._tuning: TuningConfig = settings.tuning

    @property
    def feedback(self) -> FeedbackLedger:
        return self._feedback

    def run(self) -> TuningReport:
        """Run one tuning pass over the most recent history window."""
        recent = self._store.recent(self._tuning.window)
        if len(recent) < self._tuning.min_records:
            return TuningReport(
                skipped=True,
                records_considered=len(recent),
                reason=(
                    f"Need at least {self._tuning.min_records} history records, "
                    f"have {len(recent)}"
                ),
            )

        by_strategy: dict[StrategyType, list] = defaultdict(list)
        for record in recent:
            by_strategy[record.strategy_used].append(record)

        trust_weights = {}
        for strategy, records in by_strategy.items():
            mean_confidence = statistics.fmean(r.confidence for r in records)
            mean_duration = statistics.fmean(r.calculation_duration_ms for r in records)
            speed = 1 - min(mean_duration / self._tuning.duration_ceiling_ms, 1.0)
            trust_weights[strategy] = _clamp(
                self._CONFIDENCE_WEIGHT * mean_confidence + self._SPEED_WEIGHT * speed,
                self._tuning.trust_bounds,
            )

        sensitivities = {}
        for name in DetectorName:
            adjusted = self._adjusted_sensitivity(name)
            if adjusted is not None:
                sensitivities[name] = adjusted

        self._config.update(
            strategies={s: {"trust_weight": w} for s, w in trust_weights.items()},
            detectors={d: {"sensitivity": s} for d, s in sensitivities.items()},
        )
        logger.info(
            "Self-tuning applied over %d records: trust=%s sensitivity=%s",
            len(recent),
            {s.value: round(w, 3) for s, w in trust_weights.items()},
            {d.value: round(s, 3) for d, s in sensitivities.items()},
        )
        return TuningReport(
            skipped=False,
            records_considered=len(recent),
            trust_weights=trust_weights,
            sensitivities=sensitivities,
        )

    def incorporate_strategy_feedback(
        self,
        strategy: StrategyType,
        reported_accuracy: float,
    ) -> StrategyTuning:
        """Blend an externally reported accuracy into a strategy's accuracy.

        accuracy = 0.9 * accuracy + 0.1 * reported

        Raises:
            ValueError: If the reported accuracy is outside [0, 1]
        """
        if not 0.0 <= reported_accuracy <= 1.0:
            raise ValueError("Reported accuracy must be between 0.0 and 1.0")

        current = self._config.strategy(strategy).accuracy
        blended = self._ACCURACY_DECAY * current + (1 - self._ACCURACY_DECAY) * reported_accuracy
        self._config.update(strategies={strategy: {"accuracy": blended}})
        return self._config.strategy(strategy)

    def _adjusted_sensitivity(self, name: DetectorName) -> float | None:
        performance = self._feedback.performance(name)
        if performance is None:
            return None

        current = self._config.detector(name).sensitivity
        step = self._tuning.sensitivity_step
        if performance.false_positive_rate > self._tuning.false_positive_limit:
            target = current - step
        elif performance.accuracy > self._tuning.accuracy_target:
            target = current + step
        else:
            return None
        return _clamp(target, self._tuning.sensitivity_bounds)
