"""Strategy registry and fallback ordering."""

from typing import Mapping

from median.config.engine_config import EngineConfig
from median.config.settings import FallbackPolicy, Settings
from median.models.scores import FALLBACK_ORDER, StrategyType
from median.strategies.interface import MedianStrategy
from median.strategies.standard import StandardMedianStrategy
from median.strategies.statistical import StatisticalMedianStrategy
from median.strategies.weighted import WeightedMedianStrategy


class StrategyRegistry:
    """Registry for median strategies and the order they are tried in.

    Provides:
    - The three built-in strategies, configured with the rounding precision
    - The fallback chain for a calculation, optionally carrying weights
    - Replacement of a strategy by type (for custom implementations)

    The primary strategy always goes first. With the fixed policy the
    secondaries follow FALLBACK_ORDER; with the trust-weighted policy they
    are ordered by current trust weight, highest first.
    """

    def __init__(
        self,
        settings: Settings,
        config: EngineConfig,
    ) -> None:
        self._policy = settings.fallback_policy
        self._config = config
        self._strategies: dict[StrategyType, MedianStrategy] = {
            StrategyType.STANDARD: StandardMedianStrategy(precision=settings.rounding_precision),
            StrategyType.STATISTICAL: StatisticalMedianStrategy(
                precision=settings.rounding_precision
            ),
            StrategyType.WEIGHTED: WeightedMedianStrategy(precision=settings.rounding_precision),
        }

    @property
    def policy(self) -> FallbackPolicy:
        return self._policy

    def get_strategy(self, strategy_type: StrategyType) -> MedianStrategy:
        """Get the registered strategy for a type."""
        return self._strategies[strategy_type]

    def register_strategy(self, strategy: MedianStrategy) -> None:
        """Replace the strategy registered for the strategy's type."""
        self._strategies[strategy.strategy_type] = strategy

    def fallback_order(self) -> list[StrategyType]:
        """Get the strategy types in the order they should be attempted."""
        primary, *secondaries = FALLBACK_ORDER
        if self._policy == FallbackPolicy.TRUST_WEIGHTED:
            # sorted() is stable, so equal trust keeps the fixed order
            secondaries = sorted(
                secondaries,
                key=lambda s: self._config.strategy(s).trust_weight,
                reverse=True,
            )
        return [primary, *secondaries]

    def chain(self, weights: Mapping[str, float] | None = None) -> list[MedianStrategy]:
        """Get the strategies to attempt, in order.

        Args:
            weights: Optional per-identifier weights for the weighted strategy

        Returns:
            Strategy instances in fallback order
        """
        strategies = []
        for strategy_type in self.fallback_order():
            strategy = self._strategies[strategy_type]
            if weights and isinstance(strategy, WeightedMedianStrategy):
                strategy = strategy.with_weights(weights)
            strategies.append(strategy)
        return strategies
