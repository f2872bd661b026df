"""Unit tests for input and result validation."""

from dataclasses import replace

import pytest

from median.config import Settings
from median.models import IssueKind, ScoreEntry, ScoreSet
from median.strategies import StandardMedianStrategy, StatisticalMedianStrategy
from median.validators import ResultValidator, ScoreSetValidator

from helpers import SCENARIO_A_SCORES


class TestScoreSetValidator:
    """Tests for ScoreSetValidator."""

    @pytest.fixture
    def validator(self, settings: Settings) -> ScoreSetValidator:
        return ScoreSetValidator(settings)

    def test_accepts_score_set(self, validator: ScoreSetValidator, scenario_a: ScoreSet) -> None:
        assert validator.validate(scenario_a).is_valid

    def test_accepts_records(self, validator: ScoreSetValidator, make_records) -> None:
        records = make_records(SCENARIO_A_SCORES)

        assert validator.validate(records).is_valid
        assert validator.coerce(records).scores == SCENARIO_A_SCORES

    def test_accepts_entry_list(self, validator: ScoreSetValidator, scenario_a: ScoreSet) -> None:
        assert validator.validate(list(scenario_a.entries)).is_valid

    def test_eleven_entries_is_count_error(self, validator: ScoreSetValidator, make_score_set) -> None:
        outcome = validator.validate(make_score_set(SCENARIO_A_SCORES[:11]))

        assert not outcome.is_valid
        assert outcome.has_kind(IssueKind.COUNT)

    def test_rejects_non_sequence(self, validator: ScoreSetValidator) -> None:
        for candidate in (None, 42, "team-01", {"identifier": "team-01"}):
            outcome = validator.validate(candidate)
            assert [e.kind for e in outcome.errors] == [IssueKind.STRUCTURE]

    def test_rejects_mixed_shapes(self, validator: ScoreSetValidator, make_records) -> None:
        records = make_records(SCENARIO_A_SCORES)
        records[0] = ScoreEntry.create("team-01", 124.20)

        outcome = validator.validate(records)

        assert [e.kind for e in outcome.errors] == [IssueKind.STRUCTURE]

    @pytest.mark.parametrize(
        "bad_score",
        [float("nan"), float("inf"), -1.0, 300.01, True, "100", None],
    )
    def test_rejects_bad_score(self, validator: ScoreSetValidator, make_records, bad_score) -> None:
        records = make_records(SCENARIO_A_SCORES)
        records[3]["score"] = bad_score

        outcome = validator.validate(records)

        assert not outcome.is_valid
        assert outcome.errors[0].kind == IssueKind.FIELD
        assert outcome.errors[0].index == 3
        assert outcome.errors[0].field == "score"

    def test_accepts_boundary_scores(self, validator: ScoreSetValidator, make_records) -> None:
        records = make_records(SCENARIO_A_SCORES)
        records[0]["score"] = 300
        records[11]["score"] = 0

        assert validator.validate(records).is_valid

    def test_rejects_duplicate_identifier(self, validator: ScoreSetValidator, make_records) -> None:
        records = make_records(SCENARIO_A_SCORES)
        records[1]["identifier"] = "team-01"

        outcome = validator.validate(records)

        assert {e.index for e in outcome.errors} == {0, 1}
        assert all(e.field == "identifier" for e in outcome.errors)

    def test_rejects_blank_identifier(self, validator: ScoreSetValidator, make_records) -> None:
        records = make_records(SCENARIO_A_SCORES)
        records[5]["identifier"] = "   "

        outcome = validator.validate(records)

        assert outcome.errors[0].field == "identifier"

    def test_rejects_non_finite_projection(self, validator: ScoreSetValidator, make_records) -> None:
        records = make_records(SCENARIO_A_SCORES)
        records[2]["projected_score"] = float("inf")

        outcome = validator.validate(records)

        assert outcome.errors[0].field == "projected_score"

    def test_rejects_entry_without_projection(
        self, validator: ScoreSetValidator, scenario_a: ScoreSet
    ) -> None:
        entries = list(scenario_a.entries)
        entries[3] = ScoreEntry("team-04", entries[3].score, None)

        outcome = validator.validate(ScoreSet.of(entries))

        assert [(e.index, e.field) for e in outcome.errors] == [(3, "projected_score")]

    def test_record_without_projection_defaults_to_score(
        self, validator: ScoreSetValidator, make_records
    ) -> None:
        records = make_records(SCENARIO_A_SCORES)
        records[0]["projected_score"] = None

        assert validator.validate(records).is_valid
        assert validator.coerce(records).entries[0].projected_score == 124.20

    def test_collects_every_issue(self, validator: ScoreSetValidator, make_records) -> None:
        records = make_records(SCENARIO_A_SCORES[:11])
        records[0]["score"] = -5

        outcome = validator.validate(records)

        assert outcome.has_kind(IssueKind.COUNT)
        assert outcome.has_kind(IssueKind.FIELD)
        assert len(outcome.messages()) == 2

    def test_respects_team_count(self, make_score_set) -> None:
        validator = ScoreSetValidator(Settings(team_count=4))

        assert validator.validate(make_score_set([10, 20, 30, 40])).is_valid


class TestResultValidator:
    """Tests for ResultValidator."""

    @pytest.fixture
    def validator(self, settings: Settings) -> ResultValidator:
        return ResultValidator(settings)

    def test_accepts_scenario_a(self, validator: ResultValidator, scenario_a: ScoreSet) -> None:
        result = StandardMedianStrategy().calculate(scenario_a)

        assert validator.validate(result).is_valid

    def test_zero_spread_fails_plausibility(self, validator: ResultValidator, identical: ScoreSet) -> None:
        result = StandardMedianStrategy().calculate(identical)

        outcome = validator.validate(result)

        assert [e.kind for e in outcome.errors] == [IssueKind.SPREAD]

    def test_zero_spread_passes_consistency_rules(
        self, validator: ResultValidator, identical: ScoreSet
    ) -> None:
        result = StatisticalMedianStrategy().calculate(identical)

        assert validator.validate(result, enforce_plausibility=False).is_valid
        assert not validator.check_plausibility(result).is_valid

    def test_wide_spread_fails_plausibility(self, validator: ResultValidator, make_score_set) -> None:
        result = StandardMedianStrategy().calculate(make_score_set([0, 300] * 6))

        assert validator.validate(result).has_kind(IssueKind.SPREAD)

    def test_detects_wrong_median(self, validator: ResultValidator, scenario_a: ScoreSet) -> None:
        result = replace(StandardMedianStrategy().calculate(scenario_a), median_value=90.0)

        outcome = validator.validate(result)

        assert [e.kind for e in outcome.errors] == [IssueKind.CONSISTENCY]

    def test_tolerates_rounding(self, validator: ResultValidator, scenario_a: ScoreSet) -> None:
        result = replace(StandardMedianStrategy().calculate(scenario_a), median_value=95.86)

        assert validator.validate(result).is_valid

    @pytest.mark.parametrize(("precision", "expected"), [(1, 95.9), (0, 96.0)])
    def test_consistency_follows_rounding_precision(
        self, scenario_a: ScoreSet, precision: int, expected: float
    ) -> None:
        validator = ResultValidator(Settings(rounding_precision=precision))
        result = StandardMedianStrategy(precision=precision).calculate(scenario_a)

        assert result.median_value == expected
        assert validator.validate(result).is_valid

    def test_detects_out_of_range_median(self, validator: ResultValidator, scenario_a: ScoreSet) -> None:
        result = replace(StandardMedianStrategy().calculate(scenario_a), median_value=-1.0)

        outcome = validator.validate(result)

        assert outcome.has_kind(IssueKind.RANGE)
        assert outcome.has_kind(IssueKind.CONSISTENCY)

    def test_detects_missing_entries(self, validator: ResultValidator, scenario_a: ScoreSet) -> None:
        result = StandardMedianStrategy().calculate(scenario_a)
        truncated = replace(result, ranked_entries=result.ranked_entries[:11])

        assert validator.validate(truncated).has_kind(IssueKind.COUNT)
