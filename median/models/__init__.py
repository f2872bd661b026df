"""Median models module."""

from median.models.anomaly_report import (
    AggregatedAnomalyVerdict,
    AnomalyFinding,
    AnomalyKind,
    AnomalyReport,
)
from median.models.baseline import BaselineMetrics
from median.models.history import HistoryRecord
from median.models.scores import (
    FALLBACK_ORDER,
    DerivedStats,
    MedianResult,
    Outcome,
    RankedEntry,
    ScoreEntry,
    ScoreSet,
    StrategyType,
    round_score,
)
from median.models.validation import IssueKind, ValidationIssue, ValidationOutcome

__all__ = [
    # Scores and results
    "FALLBACK_ORDER",
    "DerivedStats",
    "MedianResult",
    "Outcome",
    "RankedEntry",
    "ScoreEntry",
    "ScoreSet",
    "StrategyType",
    "round_score",
    # Anomalies
    "AggregatedAnomalyVerdict",
    "AnomalyFinding",
    "AnomalyKind",
    "AnomalyReport",
    # Baselines
    "BaselineMetrics",
    # History
    "HistoryRecord",
    # Validation
    "IssueKind",
    "ValidationIssue",
    "ValidationOutcome",
]
