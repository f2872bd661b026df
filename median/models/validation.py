"""Validation outcome models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class IssueKind(str, Enum):
    """Categories of validation issues.

    Input-level kinds (structure, count, field) are never retried with a
    different strategy. Result-level kinds (range, count, consistency,
    spread) trigger the fallback chain.
    """

    STRUCTURE = "structure"
    COUNT = "count"
    FIELD = "field"
    RANGE = "range"
    CONSISTENCY = "consistency"
    SPREAD = "spread"


@dataclass(frozen=True)
class ValidationIssue:
    """A single rule violation."""

    kind: IssueKind
    message: str
    index: int | None = None  # Entry position, for field issues
    field: str = ""

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "index": self.index,
            "field": self.field,
        }


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of running a validator."""

    errors: tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        """Check if no rule was violated."""
        return not self.errors

    def has_kind(self, kind: IssueKind) -> bool:
        """Check if any issue of the given kind was raised."""
        return any(e.kind == kind for e in self.errors)

    def messages(self) -> list[str]:
        """Get the human-readable issue messages."""
        return [str(e) for e in self.errors]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "is_valid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
        }
