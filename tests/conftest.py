"""Shared fixtures for the median engine tests."""

from typing import Callable, Sequence

import pytest

from median.config import EngineConfig, Settings
from median.models import ScoreSet

from helpers import (
    IDENTICAL_SCORES,
    OUTLIER_SCORES,
    SCENARIO_A_SCORES,
    TIED_MIDPOINT_SCORES,
    build_records,
    build_score_set,
)


@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of the environment."""
    return Settings()


@pytest.fixture
def engine_config(settings: Settings) -> EngineConfig:
    """Fresh tunables built from the default settings."""
    return EngineConfig.from_settings(settings)


@pytest.fixture
def make_score_set() -> Callable[..., ScoreSet]:
    return build_score_set


@pytest.fixture
def make_records() -> Callable[[Sequence[float]], list[dict]]:
    return build_records


@pytest.fixture
def scenario_a(make_score_set) -> ScoreSet:
    return make_score_set(SCENARIO_A_SCORES)


@pytest.fixture
def tied_midpoint(make_score_set) -> ScoreSet:
    return make_score_set(TIED_MIDPOINT_SCORES)


@pytest.fixture
def identical(make_score_set) -> ScoreSet:
    return make_score_set(IDENTICAL_SCORES)


@pytest.fixture
def outlier_set(make_score_set) -> ScoreSet:
    return make_score_set(OUTLIER_SCORES)
