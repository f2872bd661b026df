"""Baseline computation module."""

from median.baselines.statistical import (
    StatisticalBaselineCalculator,
    population_std,
    severity_from_z,
)

__all__ = [
    "StatisticalBaselineCalculator",
    "population_std",
    "severity_from_z",
]
