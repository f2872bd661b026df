"""Calculation engine module."""

from median.engine.calculation_engine import (
    CalculationEngine,
    CalculationOutcome,
    EngineState,
    strategy_sequence,
)
from median.engine.events import EngineEvent, EventBus, EventName
from median.engine.health import HealthMonitor
from median.engine.tuning import (
    DetectorOutcome,
    DetectorPerformance,
    FeedbackLedger,
    SelfTuningLoop,
    TuningReport,
)

__all__ = [
    "CalculationEngine",
    "CalculationOutcome",
    "DetectorOutcome",
    "DetectorPerformance",
    "EngineEvent",
    "EngineState",
    "EventBus",
    "EventName",
    "FeedbackLedger",
    "HealthMonitor",
    "SelfTuningLoop",
    "TuningReport",
    "strategy_sequence",
]
