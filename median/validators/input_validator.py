"""Pre-calculation validation of candidate score sets."""

import math
from collections import Counter
from numbers import Real
from typing import Any, Mapping, Sequence

from median.config.settings import Settings
from median.models.scores import ScoreEntry, ScoreSet
from median.models.validation import IssueKind, ValidationIssue, ValidationOutcome


class ScoreSetValidator:
    """Checks a candidate group of scores before any strategy runs.

    Accepts a ScoreSet, a sequence of ScoreEntry, or a sequence of mappings
    with identifier / score / projected_score keys. Mixed shapes are a
    structure error.

    Pure: no side effects, same candidate gives the same outcome.
    """

    def __init__(self, settings: Settings) -> None:
        self._team_count = settings.team_count
        self._max_score = settings.max_score

    def validate(self, candidate: Any) -> ValidationOutcome:
        """Validate a candidate score set.

        Args:
            candidate: The raw candidate

        Returns:
            Outcome listing every structure, count and field issue
        """
        entries, structure_issue = self._extract_entries(candidate)
        if structure_issue is not None:
            return ValidationOutcome(errors=(structure_issue,))

        errors: list[ValidationIssue] = []

        if len(entries) != self._team_count:
            errors.append(
                ValidationIssue(
                    kind=IssueKind.COUNT,
                    message=f"Expected exactly {self._team_count} entries, got {len(entries)}",
                )
            )

        identifiers = [self._field(e, "identifier") for e in entries]
        counts = Counter(i for i in identifiers if isinstance(i, str))

        for index, entry in enumerate(entries):
            errors.extend(self._check_identifier(index, identifiers[index], counts))
            errors.extend(self._check_score(index, self._field(entry, "score")))
            projected = self._field(entry, "projected_score")
            # Mappings may omit the projection; ScoreEntry objects always carry one
            if projected is None and isinstance(entry, Mapping):
                continue
            if not self._is_finite_number(projected):
                errors.append(
                    ValidationIssue(
                        kind=IssueKind.FIELD,
                        message=f"Entry {index}: projected score must be a finite number",
                        index=index,
                        field="projected_score",
                    )
                )

        return ValidationOutcome(errors=tuple(errors))

    def coerce(self, candidate: Any) -> ScoreSet:
        """Convert a candidate that has passed validation into a ScoreSet."""
        if isinstance(candidate, ScoreSet):
            return candidate
        return ScoreSet(
            entries=tuple(
                e if isinstance(e, ScoreEntry) else ScoreEntry.from_dict(e) for e in candidate
            )
        )

    @staticmethod
    def _extract_entries(
        candidate: Any,
    ) -> tuple[Sequence[Any], ValidationIssue | None]:
        if isinstance(candidate, ScoreSet):
            return candidate.entries, None

        if isinstance(candidate, (str, bytes)) or not isinstance(candidate, Sequence):
            return (), ValidationIssue(
                kind=IssueKind.STRUCTURE,
                message="Score set must be a sequence of score entries",
            )

        if all(isinstance(e, ScoreEntry) for e in candidate):
            return candidate, None
        if all(isinstance(e, Mapping) for e in candidate):
            return candidate, None

        return (), ValidationIssue(
            kind=IssueKind.STRUCTURE,
            message="Score set entries must all be ScoreEntry objects or all be mappings",
        )

    @staticmethod
    def _field(entry: Any, name: str) -> Any:
        if isinstance(entry, Mapping):
            return entry.get(name)
        return getattr(entry, name, None)

    @staticmethod
    def _is_finite_number(value: Any) -> bool:
        return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)

    def _check_identifier(
        self,
        index: int,
        identifier: Any,
        counts: Counter,
    ) -> list[ValidationIssue]:
        if not isinstance(identifier, str) or not identifier.strip():
            return [
                ValidationIssue(
                    kind=IssueKind.FIELD,
                    message=f"Entry {index}: missing identifier",
                    index=index,
                    field="identifier",
                )
            ]
        if counts[identifier] > 1:
            return [
                ValidationIssue(
                    kind=IssueKind.FIELD,
                    message=f"Entry {index}: duplicate identifier {identifier!r}",
                    index=index,
                    field="identifier",
                )
            ]
        return []

    def _check_score(self, index: int, score: Any) -> list[ValidationIssue]:
        if not self._is_finite_number(score):
            return [
                ValidationIssue(
                    kind=IssueKind.FIELD,
                    message=f"Entry {index}: score must be a finite number",
                    index=index,
                    field="score",
                )
            ]
        if not 0 <= score <= self._max_score:
            return [
                ValidationIssue(
                    kind=IssueKind.FIELD,
                    message=f"Entry {index}: score {score} outside [0, {self._max_score}]",
                    index=index,
                    field="score",
                )
            ]
        return []
