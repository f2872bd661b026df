"""Mutable, process-wide tunables owned by the calculation engine."""

import threading
from dataclasses import dataclass, replace
from typing import Any, Mapping

from median.config.settings import DetectorName, Settings
from median.models.scores import StrategyType


@dataclass(frozen=True)
class StrategyTuning:
    """Current trust parameters for one strategy."""

    accuracy: float
    trust_weight: float
    quality: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "accuracy": self.accuracy,
            "trust_weight": self.trust_weight,
            "quality": self.quality,
        }


@dataclass(frozen=True)
class DetectorTuning:
    """Current sensitivity parameters for one detector.

    The effective detection threshold is the configured base threshold
    scaled by baseline_sensitivity / sensitivity, so it equals the base
    threshold until the self-tuning loop moves the sensitivity.
    """

    enabled: bool
    threshold: float
    sensitivity: float
    baseline_sensitivity: float
    confidence: float

    @property
    def effective_threshold(self) -> float:
        return self.threshold * (self.baseline_sensitivity / self.sensitivity)

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "threshold": self.threshold,
            "effective_threshold": self.effective_threshold,
            "sensitivity": self.sensitivity,
            "confidence": self.confidence,
        }


class EngineConfig:
    """Strategy and detector tunables.

    Detectors and strategies read snapshots; only update() writes, and it
    swaps whole frozen values under a lock so readers never see a partially
    applied adjustment.
    """

    def __init__(
        self,
        strategies: Mapping[StrategyType, StrategyTuning],
        detectors: Mapping[DetectorName, DetectorTuning],
    ) -> None:
        missing = set(StrategyType) - set(strategies)
        if missing:
            raise ValueError(f"Missing strategy tuning for: {sorted(m.value for m in missing)}")
        missing_detectors = set(DetectorName) - set(detectors)
        if missing_detectors:
            raise ValueError(
                f"Missing detector tuning for: {sorted(m.value for m in missing_detectors)}"
            )
        self._strategies = dict(strategies)
        self._detectors = dict(detectors)
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "EngineConfig":
        """Build the initial tunables from static settings."""
        strategy_configs = {
            StrategyType.STANDARD: settings.standard_strategy,
            StrategyType.STATISTICAL: settings.statistical_strategy,
            StrategyType.WEIGHTED: settings.weighted_strategy,
        }
        strategies = {
            strategy: StrategyTuning(
                accuracy=config.accuracy,
                trust_weight=config.trust_weight,
                quality=config.quality,
            )
            for strategy, config in strategy_configs.items()
        }
        detectors = {}
        for name in DetectorName:
            config = settings.detector_config(name)
            detectors[name] = DetectorTuning(
                enabled=config.enabled,
                threshold=config.threshold,
                sensitivity=config.sensitivity,
                baseline_sensitivity=config.sensitivity,
                confidence=config.confidence,
            )
        return cls(strategies=strategies, detectors=detectors)

    def strategy(self, strategy: StrategyType) -> StrategyTuning:
        with self._lock:
            return self._strategies[strategy]

    def detector(self, name: DetectorName) -> DetectorTuning:
        with self._lock:
            return self._detectors[name]

    def strategies(self) -> dict[StrategyType, StrategyTuning]:
        with self._lock:
            return dict(self._strategies)

    def detectors(self) -> dict[DetectorName, DetectorTuning]:
        with self._lock:
            return dict(self._detectors)

    def update(
        self,
        strategies: Mapping[StrategyType, Mapping[str, float]] | None = None,
        detectors: Mapping[DetectorName, Mapping[str, float]] | None = None,
    ) -> None:
        """Apply field changes to strategy and detector tunables.

        Args:
            strategies: Field changes per strategy, e.g. {"trust_weight": 0.9}
            detectors: Field changes per detector, e.g. {"sensitivity": 0.75}

        Raises:
            TypeError: If a change names an unknown field
            ValueError: If a detector sensitivity is not positive
        """
        with self._lock:
            new_strategies = dict(self._strategies)
            for strategy, changes in (strategies or {}).items():
                new_strategies[strategy] = replace(new_strategies[strategy], **changes)

            new_detectors = dict(self._detectors)
            for name, changes in (detectors or {}).items():
                tuned = replace(new_detectors[name], **changes)
                if tuned.sensitivity <= 0:
                    raise ValueError("Detector sensitivity must be positive")
                new_detectors[name] = tuned

            self._strategies = new_strategies
            self._detectors = new_detectors

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        with self._lock:
            return {
                "strategies": {s.value: t.to_dict() for s, t in self._strategies.items()},
                "detectors": {d.value: t.to_dict() for d, t in self._detectors.items()},
            }
