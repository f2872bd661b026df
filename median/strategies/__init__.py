"""Median calculation strategies module."""

from median.strategies.interface import MedianStrategy
from median.strategies.registry import StrategyRegistry
from median.strategies.standard import StandardMedianStrategy
from median.strategies.statistical import StatisticalMedianStrategy
from median.strategies.weighted import WeightedMedianStrategy

__all__ = [
    "MedianStrategy",
    "StandardMedianStrategy",
    "StatisticalMedianStrategy",
    "StrategyRegistry",
    "WeightedMedianStrategy",
]
