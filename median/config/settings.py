"""Median scoring service configuration settings."""

import os
from dataclasses import dataclass, field
from enum import Enum


class DetectorName(str, Enum):
    """Names of the anomaly detectors, in execution order."""

    STATISTICAL_OUTLIER = "statistical_outlier"
    HISTORICAL_DEVIATION = "historical_deviation"
    PATTERN_CLUSTERING = "pattern_clustering"
    PROJECTION_VARIANCE = "projection_variance"


class FallbackPolicy(str, Enum):
    """How secondary strategies are ordered after the primary fails."""

    FIXED = "fixed"  # standard -> statistical -> weighted
    TRUST_WEIGHTED = "trust_weighted"  # secondaries ordered by trust weight


@dataclass(frozen=True)
class DetectorConfig:
    """Configuration for an individual detector."""

    enabled: bool = True
    threshold: float = 2.0
    sensitivity: float = 0.8
    confidence: float = 0.9


@dataclass(frozen=True)
class StrategyConfig:
    """Initial trust parameters for a median strategy."""

    accuracy: float = 1.0  # Recorded as HistoryRecord.confidence
    trust_weight: float = 1.0
    quality: float = 1.0


@dataclass(frozen=True)
class TuningConfig:
    """Self-tuning loop parameters."""

    window: int = 20  # Most recent history records considered
    min_records: int = 10
    feedback_window: int = 20
    duration_ceiling_ms: float = 1000.0
    trust_bounds: tuple[float, float] = (0.1, 1.0)
    sensitivity_step: float = 0.05
    sensitivity_bounds: tuple[float, float] = (0.1, 1.0)
    accuracy_target: float = 0.9
    false_positive_limit: float = 0.2


@dataclass(frozen=True)
class HealthConfig:
    """Health monitoring parameters."""

    window: int = 10
    quality_floor: float = 0.8
    slow_calculation_ms: float = 100.0


@dataclass(frozen=True)
class Settings:
    """Global settings for the median scoring service."""

    # Algorithm versioning - MUST be updated when calculation logic changes
    algorithm_version: str = "1.0.0"

    # Service identification
    service_name: str = "median-scoring-service"
    service_version: str = "0.1.0"

    # Score set shape
    team_count: int = 12
    max_score: float = 300.0
    rounding_precision: int = 2

    # Result validation
    median_tolerance: float = 0.01
    spread_bounds: tuple[float, float] = (5.0, 50.0)

    # Review flagging
    review_threshold: float = 0.8

    # History
    history_capacity: int = 100
    min_history_for_deviation: int = 5

    fallback_policy: FallbackPolicy = FallbackPolicy.FIXED

    # Per-detector configurations
    statistical_detector: DetectorConfig = field(
        default_factory=lambda: DetectorConfig(threshold=2.5, sensitivity=0.8, confidence=0.9)
    )
    historical_detector: DetectorConfig = field(
        default_factory=lambda: DetectorConfig(threshold=2.0, sensitivity=0.7, confidence=0.85)
    )
    pattern_detector: DetectorConfig = field(
        default_factory=lambda: DetectorConfig(threshold=3.0, sensitivity=0.75, confidence=0.8)
    )
    projection_detector: DetectorConfig = field(
        default_factory=lambda: DetectorConfig(threshold=0.5, sensitivity=0.6, confidence=0.75)
    )

    # Per-strategy initial trust
    standard_strategy: StrategyConfig = field(
        default_factory=lambda: StrategyConfig(accuracy=1.0, trust_weight=1.0, quality=1.0)
    )
    statistical_strategy: StrategyConfig = field(
        default_factory=lambda: StrategyConfig(accuracy=0.95, trust_weight=0.8, quality=0.95)
    )
    weighted_strategy: StrategyConfig = field(
        default_factory=lambda: StrategyConfig(accuracy=0.9, trust_weight=0.6, quality=0.9)
    )

    tuning: TuningConfig = field(default_factory=TuningConfig)
    health: HealthConfig = field(default_factory=HealthConfig)

    # API settings
    api_prefix: str = "/api/v1"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    debug: bool = False

    def __post_init__(self) -> None:
        """Validate settings constraints."""
        if self.team_count < 2:
            raise ValueError("team_count must be at least 2")
        if self.max_score <= 0:
            raise ValueError("max_score must be positive")
        if self.history_capacity < 1:
            raise ValueError("history_capacity must be at least 1")
        low, high = self.spread_bounds
        if low >= high:
            raise ValueError("spread_bounds lower bound must be below upper bound")

    def detector_config(self, name: DetectorName) -> DetectorConfig:
        """Get the configuration for a detector by name."""
        mapping = {
            DetectorName.STATISTICAL_OUTLIER: self.statistical_detector,
            DetectorName.HISTORICAL_DEVIATION: self.historical_detector,
            DetectorName.PATTERN_CLUSTERING: self.pattern_detector,
            DetectorName.PROJECTION_VARIANCE: self.projection_detector,
        }
        return mapping[name]

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            algorithm_version=os.getenv("ALGORITHM_VERSION", "1.0.0"),
            team_count=int(os.getenv("TEAM_COUNT", "12")),
            max_score=float(os.getenv("MAX_SCORE", "300")),
            rounding_precision=int(os.getenv("ROUNDING_PRECISION", "2")),
            history_capacity=int(os.getenv("HISTORY_CAPACITY", "100")),
            review_threshold=float(os.getenv("REVIEW_THRESHOLD", "0.8")),
            fallback_policy=FallbackPolicy(os.getenv("FALLBACK_POLICY", "fixed")),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def configure(settings: Settings) -> None:
    """Configure the global settings (primarily for testing)."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to None (for testing)."""
    global _settings
    _settings = None
