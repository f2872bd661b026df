"""Unit tests for the self-tuning loop and feedback ledger."""

import pytest

from median.config import DetectorName, EngineConfig, Settings
from median.engine import FeedbackLedger, SelfTuningLoop
from median.models import HistoryRecord, StrategyType
from median.store import MemoryHistoryStore


def create_record(
    strategy: StrategyType = StrategyType.STANDARD,
    confidence: float = 1.0,
    duration_ms: float = 0.0,
) -> HistoryRecord:
    return HistoryRecord(
        median_value=95.85,
        strategy_used=strategy,
        calculation_duration_ms=duration_ms,
        confidence=confidence,
        quality=1.0,
    )


@pytest.fixture
def store() -> MemoryHistoryStore:
    return MemoryHistoryStore(capacity=100)


@pytest.fixture
def ledger() -> FeedbackLedger:
    return FeedbackLedger(window=20)


@pytest.fixture
def loop(
    store: MemoryHistoryStore,
    engine_config: EngineConfig,
    ledger: FeedbackLedger,
    settings: Settings,
) -> SelfTuningLoop:
    return SelfTuningLoop(store, engine_config, ledger, settings)


def fill(store: MemoryHistoryStore, count: int = 10, **kwargs) -> None:
    for _ in range(count):
        store.append(create_record(**kwargs))


class TestFeedbackLedger:
    """Tests for FeedbackLedger."""

    def test_no_feedback(self, ledger: FeedbackLedger) -> None:
        assert ledger.performance(DetectorName.STATISTICAL_OUTLIER) is None

    def test_performance(self, ledger: FeedbackLedger) -> None:
        ledger.record(DetectorName.STATISTICAL_OUTLIER, flagged=True, confirmed=True)
        ledger.record(DetectorName.STATISTICAL_OUTLIER, flagged=True, confirmed=False)
        ledger.record(DetectorName.STATISTICAL_OUTLIER, flagged=False, confirmed=True)
        ledger.record(DetectorName.STATISTICAL_OUTLIER, flagged=False, confirmed=False)

        performance = ledger.performance(DetectorName.STATISTICAL_OUTLIER)

        assert performance.samples == 4
        assert performance.accuracy == 0.5
        assert performance.false_positive_rate == 0.25

    def test_keeps_recent_window(self) -> None:
        ledger = FeedbackLedger(window=3)
        ledger.record(DetectorName.PATTERN_CLUSTERING, flagged=True, confirmed=False)
        for _ in range(3):
            ledger.record(DetectorName.PATTERN_CLUSTERING, flagged=True, confirmed=True)

        performance = ledger.performance(DetectorName.PATTERN_CLUSTERING)

        assert performance.samples == 3
        assert performance.false_positive_rate == 0.0


class TestSelfTuningLoop:
    """Tests for SelfTuningLoop."""

    def test_skips_with_too_little_history(self, loop: SelfTuningLoop, store: MemoryHistoryStore) -> None:
        fill(store, count=9)

        report = loop.run()

        assert report.skipped
        assert report.records_considered == 9
        assert report.trust_weights == {}

    def test_trust_weight_formula(
        self, loop: SelfTuningLoop, store: MemoryHistoryStore, engine_config: EngineConfig
    ) -> None:
        fill(store, count=6, strategy=StrategyType.STANDARD, confidence=1.0, duration_ms=0.0)
        fill(store, count=4, strategy=StrategyType.WEIGHTED, confidence=0.9, duration_ms=500.0)

        report = loop.run()

        assert not report.skipped
        assert report.trust_weights[StrategyType.STANDARD] == pytest.approx(1.0)
        assert report.trust_weights[StrategyType.WEIGHTED] == pytest.approx(0.78)
        assert StrategyType.STATISTICAL not in report.trust_weights
        assert engine_config.strategy(StrategyType.WEIGHTED).trust_weight == pytest.approx(0.78)
        assert engine_config.strategy(StrategyType.STATISTICAL).trust_weight == 0.8

    def test_trust_weight_clamped(
        self, loop: SelfTuningLoop, store: MemoryHistoryStore, engine_config: EngineConfig
    ) -> None:
        fill(store, count=10, confidence=0.0, duration_ms=5000.0)

        loop.run()

        assert engine_config.strategy(StrategyType.STANDARD).trust_weight == 0.1

    def test_uses_most_recent_window(self, loop: SelfTuningLoop, store: MemoryHistoryStore) -> None:
        fill(store, count=30, duration_ms=900.0)
        fill(store, count=20, duration_ms=0.0)

        report = loop.run()

        assert report.records_considered == 20
        assert report.trust_weights[StrategyType.STANDARD] == pytest.approx(1.0)

    def test_false_positives_lower_sensitivity(
        self,
        loop: SelfTuningLoop,
        store: MemoryHistoryStore,
        ledger: FeedbackLedger,
        engine_config: EngineConfig,
    ) -> None:
        fill(store)
        for _ in range(5):
            ledger.record(DetectorName.STATISTICAL_OUTLIER, flagged=True, confirmed=False)

        report = loop.run()

        assert report.sensitivities[DetectorName.STATISTICAL_OUTLIER] == pytest.approx(0.75)
        tuning = engine_config.detector(DetectorName.STATISTICAL_OUTLIER)
        assert tuning.sensitivity == pytest.approx(0.75)
        assert tuning.effective_threshold > 2.5

    def test_accurate_detector_gains_sensitivity(
        self,
        loop: SelfTuningLoop,
        store: MemoryHistoryStore,
        ledger: FeedbackLedger,
        engine_config: EngineConfig,
    ) -> None:
        fill(store)
        for _ in range(10):
            ledger.record(DetectorName.HISTORICAL_DEVIATION, flagged=False, confirmed=False)

        loop.run()

        assert engine_config.detector(DetectorName.HISTORICAL_DEVIATION).sensitivity == pytest.approx(0.75)

    def test_middling_accuracy_leaves_sensitivity(
        self,
        loop: SelfTuningLoop,
        store: MemoryHistoryStore,
        ledger: FeedbackLedger,
        engine_config: EngineConfig,
    ) -> None:
        fill(store)
        ledger.record(DetectorName.PATTERN_CLUSTERING, flagged=True, confirmed=True)
        ledger.record(DetectorName.PATTERN_CLUSTERING, flagged=False, confirmed=True)

        report = loop.run()

        assert DetectorName.PATTERN_CLUSTERING not in report.sensitivities
        assert engine_config.detector(DetectorName.PATTERN_CLUSTERING).sensitivity == 0.75

    def test_sensitivity_bounded(
        self,
        loop: SelfTuningLoop,
        store: MemoryHistoryStore,
        ledger: FeedbackLedger,
        engine_config: EngineConfig,
    ) -> None:
        fill(store)
        engine_config.update(detectors={DetectorName.PROJECTION_VARIANCE: {"sensitivity": 1.0}})
        ledger.record(DetectorName.PROJECTION_VARIANCE, flagged=True, confirmed=True)

        loop.run()

        assert engine_config.detector(DetectorName.PROJECTION_VARIANCE).sensitivity == 1.0

    def test_no_feedback_leaves_sensitivity(
        self, loop: SelfTuningLoop, store: MemoryHistoryStore, engine_config: EngineConfig
    ) -> None:
        fill(store)

        report = loop.run()

        assert report.sensitivities == {}
        assert engine_config.detector(DetectorName.STATISTICAL_OUTLIER).sensitivity == 0.8

    def test_strategy_feedback_blends_accuracy(
        self, loop: SelfTuningLoop, engine_config: EngineConfig
    ) -> None:
        tuning = loop.incorporate_strategy_feedback(StrategyType.STATISTICAL, 0.5)

        assert tuning.accuracy == pytest.approx(0.905)
        assert engine_config.strategy(StrategyType.STATISTICAL).accuracy == pytest.approx(0.905)

    def test_strategy_feedback_rejects_out_of_range(self, loop: SelfTuningLoop) -> None:
        with pytest.raises(ValueError):
            loop.incorporate_strategy_feedback(StrategyType.STANDARD, 1.5)

    def test_report_serializes(self, loop: SelfTuningLoop, store: MemoryHistoryStore) -> None:
        fill(store)

        data = loop.run().to_dict()

        assert data["skipped"] is False
        assert data["trust_weights"] == {"standard": pytest.approx(1.0)}
