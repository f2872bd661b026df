"""Anomaly detectors module."""

from median.detectors.aggregator import aggregate
from median.detectors.historical import HistoricalDeviationDetector
from median.detectors.interface import AnomalyDetector, DetectionContext
from median.detectors.pattern import PatternClusteringDetector
from median.detectors.projection import ProjectionVarianceDetector
from median.detectors.registry import DetectorRegistry
from median.detectors.statistical_outlier import StatisticalOutlierDetector

__all__ = [
    "AnomalyDetector",
    "DetectionContext",
    "DetectorRegistry",
    "HistoricalDeviationDetector",
    "PatternClusteringDetector",
    "ProjectionVarianceDetector",
    "StatisticalOutlierDetector",
    "aggregate",
]
