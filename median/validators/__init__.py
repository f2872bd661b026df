"""Score set and result validation module."""

from median.validators.input_validator import ScoreSetValidator
from median.validators.result_validator import ResultValidator

__all__ = [
    "ResultValidator",
    "ScoreSetValidator",
]
