"""Unit tests for median strategies."""

import pytest

from median.config import EngineConfig, FallbackPolicy, Settings
from median.models import Outcome, ScoreSet, StrategyType, round_score
from median.strategies import (
    StandardMedianStrategy,
    StatisticalMedianStrategy,
    StrategyRegistry,
    WeightedMedianStrategy,
)


class TestRoundScore:
    """Tests for half-up rounding."""

    def test_removes_binary_noise(self) -> None:
        assert round_score((97.40 + 94.30) / 2) == 95.85

    def test_rounds_half_away_from_zero(self) -> None:
        assert round_score(2.675) == 2.68
        assert round_score(-1.005) == -1.01

    def test_respects_precision(self) -> None:
        assert round_score(95.8549, precision=3) == 95.855
        assert round_score(95.85, precision=0) == 96.0


class TestStandardMedianStrategy:
    """Tests for the primary positional strategy."""

    @pytest.fixture
    def strategy(self) -> StandardMedianStrategy:
        return StandardMedianStrategy()

    def test_scenario_a_median(self, strategy: StandardMedianStrategy, scenario_a: ScoreSet) -> None:
        result = strategy.calculate(scenario_a)

        assert result.median_value == 95.85
        assert result.strategy_used == StrategyType.STANDARD
        assert result.lower_mid_score == 97.40
        assert result.upper_mid_score == 94.30

    def test_scenario_a_outcomes(self, strategy: StandardMedianStrategy, scenario_a: ScoreSet) -> None:
        result = strategy.calculate(scenario_a)

        above = result.entry("team-06")
        below = result.entry("team-07")
        assert above.outcome == Outcome.WIN
        assert above.margin_vs_median == 1.55
        assert below.outcome == Outcome.LOSS
        assert below.margin_vs_median == -1.55

    def test_ranks_descending(self, strategy: StandardMedianStrategy, scenario_a: ScoreSet) -> None:
        result = strategy.calculate(scenario_a)

        assert [e.rank for e in result.ranked_entries] == list(range(1, 13))
        assert result.scores == sorted(result.scores, reverse=True)
        assert result.ranked_entries[0].score == 124.20
        ranks = {e.rank: e.score for e in result.ranked_entries}
        assert result.median_value == round_score((ranks[6] + ranks[7]) / 2)

    def test_outcomes_partition(self, strategy: StandardMedianStrategy, scenario_a: ScoreSet) -> None:
        result = strategy.calculate(scenario_a)
        stats = result.derived_stats

        assert stats.wins == 6
        assert stats.losses == 6
        assert stats.ties == 0
        assert stats.total == len(scenario_a)
        for entry in result.ranked_entries:
            if entry.margin_vs_median > 0:
                assert entry.outcome == Outcome.WIN
            elif entry.margin_vs_median < 0:
                assert entry.outcome == Outcome.LOSS
            else:
                assert entry.outcome == Outcome.TIE

    def test_tied_midpoint(self, strategy: StandardMedianStrategy, tied_midpoint: ScoreSet) -> None:
        result = strategy.calculate(tied_midpoint)

        assert result.median_value == 100.0
        tied = [e for e in result.ranked_entries if e.score == 100]
        assert len(tied) == 2
        assert all(e.outcome == Outcome.TIE for e in tied)
        assert result.derived_stats.ties == 2

    def test_equal_scores_keep_input_order(self, strategy: StandardMedianStrategy, tied_midpoint: ScoreSet) -> None:
        result = strategy.calculate(tied_midpoint)

        assert result.entry("team-06").rank == 6
        assert result.entry("team-07").rank == 7

    def test_derived_stats(self, strategy: StandardMedianStrategy, scenario_a: ScoreSet) -> None:
        stats = strategy.calculate(scenario_a).derived_stats

        assert stats.high_score == 124.20
        assert stats.low_score == 74.42
        assert stats.spread == 49.78
        assert stats.mean == 97.41
        assert stats.std_dev == pytest.approx(14.888, abs=0.01)
        assert stats.median_as_percent_of_average == round_score(95.85 / (1168.92 / 12) * 100)

    def test_deterministic(self, strategy: StandardMedianStrategy, scenario_a: ScoreSet) -> None:
        assert strategy.calculate(scenario_a) == strategy.calculate(scenario_a)

    def test_rejects_single_entry(self, strategy: StandardMedianStrategy, make_score_set) -> None:
        with pytest.raises(ValueError):
            strategy.calculate(make_score_set([100.0]))

    def test_rejects_empty(self, strategy: StandardMedianStrategy) -> None:
        with pytest.raises(ValueError):
            strategy.calculate(ScoreSet.of([]))


class TestStatisticalMedianStrategy:
    """Tests for the order-statistic fallback."""

    def test_even_count_matches_standard(self, scenario_a: ScoreSet) -> None:
        result = StatisticalMedianStrategy().calculate(scenario_a)

        assert result.median_value == 95.85
        assert result.strategy_used == StrategyType.STATISTICAL
        assert result.lower_mid_score == 97.40
        assert result.upper_mid_score == 94.30

    def test_odd_count_takes_central_value(self, make_score_set) -> None:
        result = StatisticalMedianStrategy().calculate(make_score_set([5, 1, 9, 3, 7]))

        assert result.median_value == 5
        assert result.entry("team-01").outcome == Outcome.TIE

    def test_single_entry(self, make_score_set) -> None:
        result = StatisticalMedianStrategy().calculate(make_score_set([42.0]))

        assert result.median_value == 42.0
        assert result.derived_stats.std_dev == 0.0

    def test_deterministic(self, scenario_a: ScoreSet, tied_midpoint: ScoreSet) -> None:
        strategy = StatisticalMedianStrategy()

        assert strategy.calculate(scenario_a) == strategy.calculate(scenario_a)
        assert strategy.calculate(tied_midpoint) == strategy.calculate(tied_midpoint)


class TestWeightedMedianStrategy:
    """Tests for the weighted fallback."""

    def test_unit_weights_match_statistical(self, scenario_a: ScoreSet) -> None:
        result = WeightedMedianStrategy().calculate(scenario_a)

        assert result.median_value == 95.85
        assert result.strategy_used == StrategyType.WEIGHTED

    def test_heavy_weight_pulls_median(self, scenario_a: ScoreSet) -> None:
        result = WeightedMedianStrategy(weights={"team-01": 20.0}).calculate(scenario_a)

        assert result.median_value == 124.20

    def test_boundary_averages_with_next(self, make_score_set) -> None:
        score_set = make_score_set([10, 20, 30])
        weights = {"team-01": 1.0, "team-02": 1.0, "team-03": 2.0}

        result = WeightedMedianStrategy(weights=weights).calculate(score_set)

        assert result.median_value == 25.0

    def test_boundary_skips_zero_weight_neighbour(self, make_score_set) -> None:
        score_set = make_score_set([10, 20, 30])
        weights = {"team-01": 1.0, "team-02": 0.0, "team-03": 1.0}

        result = WeightedMedianStrategy(weights=weights).calculate(score_set)

        assert result.median_value == 20.0
        assert result.lower_mid_score == 30
        assert result.upper_mid_score == 10

    def test_deterministic(self, scenario_a: ScoreSet) -> None:
        strategy = WeightedMedianStrategy(weights={"team-01": 2.0, "team-12": 0.5})

        assert strategy.calculate(scenario_a) == strategy.calculate(scenario_a)

    def test_missing_weights_default_to_one(self, scenario_a: ScoreSet) -> None:
        strategy = WeightedMedianStrategy(weights={"team-01": 3.0})

        assert strategy.weight_for("team-01") == 3.0
        assert strategy.weight_for("team-02") == 1.0

    def test_weights_in_metadata(self, scenario_a: ScoreSet) -> None:
        result = WeightedMedianStrategy(weights={"team-01": 2.0}).calculate(scenario_a)

        assert result.metadata["weights"]["team-01"] == 2.0
        assert result.metadata["weights"]["team-12"] == 1.0

    def test_rejects_negative_weight(self, scenario_a: ScoreSet) -> None:
        with pytest.raises(ValueError):
            WeightedMedianStrategy(weights={"team-01": -1.0}).calculate(scenario_a)

    def test_rejects_zero_total_weight(self, make_score_set) -> None:
        score_set = make_score_set([10, 20])
        weights = {"team-01": 0.0, "team-02": 0.0}

        with pytest.raises(ValueError):
            WeightedMedianStrategy(weights=weights).calculate(score_set)


class TestStrategyRegistry:
    """Tests for fallback ordering."""

    def test_fixed_order(self, settings: Settings, engine_config: EngineConfig) -> None:
        registry = StrategyRegistry(settings, engine_config)

        assert registry.fallback_order() == [
            StrategyType.STANDARD,
            StrategyType.STATISTICAL,
            StrategyType.WEIGHTED,
        ]

    def test_fixed_order_ignores_trust(self, settings: Settings, engine_config: EngineConfig) -> None:
        engine_config.update(strategies={StrategyType.WEIGHTED: {"trust_weight": 1.0}})
        registry = StrategyRegistry(settings, engine_config)

        assert registry.fallback_order()[1] == StrategyType.STATISTICAL

    def test_trust_weighted_reorders_secondaries(self) -> None:
        settings = Settings(fallback_policy=FallbackPolicy.TRUST_WEIGHTED)
        config = EngineConfig.from_settings(settings)
        config.update(strategies={StrategyType.WEIGHTED: {"trust_weight": 0.9}})

        registry = StrategyRegistry(settings, config)

        assert registry.fallback_order() == [
            StrategyType.STANDARD,
            StrategyType.WEIGHTED,
            StrategyType.STATISTICAL,
        ]

    def test_chain_applies_weights(self, settings: Settings, engine_config: EngineConfig) -> None:
        registry = StrategyRegistry(settings, engine_config)

        chain = registry.chain(weights={"team-01": 5.0})

        assert [s.strategy_type for s in chain] == registry.fallback_order()
        assert chain[-1].weight_for("team-01") == 5.0
        assert registry.get_strategy(StrategyType.WEIGHTED).weight_for("team-01") == 1.0
