"""Median configuration module."""

from median.config.engine_config import DetectorTuning, EngineConfig, StrategyTuning
from median.config.settings import (
    DetectorConfig,
    DetectorName,
    FallbackPolicy,
    HealthConfig,
    Settings,
    StrategyConfig,
    TuningConfig,
    configure,
    get_settings,
    reset_settings,
)

__all__ = [
    "DetectorConfig",
    "DetectorName",
    "DetectorTuning",
    "EngineConfig",
    "FallbackPolicy",
    "HealthConfig",
    "Settings",
    "StrategyConfig",
    "StrategyTuning",
    "TuningConfig",
    "configure",
    "get_settings",
    "reset_settings",
]
