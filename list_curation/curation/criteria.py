"""
Curation Criteria

Caller-supplied strategies for one curation run and the ordered permission
scale they are checked against.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Sequence
from dataclasses import dataclass, field
from typing import Any

from list_curation.core.exceptions import InvalidCriteriaError
from list_curation.curation.models import Record

Predicate = Callable[[Record], bool]
RankingFn = Callable[[Record], Any]
TieBreakFn = Callable[[Record], Any]


@dataclass(frozen=True)
class PermissionScale:
    """Ordered permission domain, lowest access first.

    A level satisfies a requirement when it sits at or after the required
    level in ``levels``.
    """

    levels: tuple[Hashable, ...]

    def __post_init__(self) -> None:
        if not self.levels:
            raise InvalidCriteriaError("permission scale must not be empty")
        if len(set(self.levels)) != len(self.levels):
            raise InvalidCriteriaError("permission scale must not repeat a level")

    @classmethod
    def of(cls, levels: Sequence[Hashable]) -> PermissionScale:
        return cls(tuple(levels))

    def contains(self, level: Hashable) -> bool:
        return level in self.levels

    def position(self, level: Hashable) -> int:
        """Return the index of ``level`` on the scale.

        Raises:
            InvalidCriteriaError: If the level is not on the scale
        """
        try:
            return self.levels.index(level)
        except ValueError:
            raise InvalidCriteriaError(
                f"permission level {level!r} is outside the scale {list(self.levels)}"
            ) from None

    def satisfies(self, level: Hashable, required: Hashable) -> bool:
        """Check whether ``level`` meets ``required``.

        Levels not on the scale never satisfy a requirement.
        """
        if not self.contains(level):
            return False
        return self.levels.index(level) >= self.position(required)


DEFAULT_SCALE = PermissionScale((0, 1, 2, 3))


def accept_all(record: Record) -> bool:  # noqa: ARG001
    return True


def by_score(record: Record) -> float | None:
    """Rank by the record's precomputed score."""
    return record.score


def by_identifier(record: Record) -> str:
    """Tie-break on ascending identifier."""
    return record.id


@dataclass(frozen=True)
class Criteria:
    """Filter, rank and limit configuration for one curation run.

    Attributes:
        eligibility: Predicate selecting candidate records
        required_level: Minimum permission level, None to skip the check
        ranking: Function mapping a record to a numeric rank
        tie_break: Ascending secondary sort key for equal ranks
        max_count: Maximum number of entries; values <= 0 yield no entries
        scale: Permission domain required_level is checked against
    """

    eligibility: Predicate = accept_all
    required_level: Hashable | None = None
    ranking: RankingFn = by_score
    tie_break: TieBreakFn = by_identifier
    max_count: int = 10
    scale: PermissionScale = field(default=DEFAULT_SCALE)

    def validate(self) -> None:
        """Check the criteria before any record is touched.

        Raises:
            InvalidCriteriaError: If a strategy is not callable, max_count is
                not an integer, or required_level is outside the scale
        """
        for name in ("eligibility", "ranking", "tie_break"):
            if not callable(getattr(self, name)):
                raise InvalidCriteriaError(f"{name} must be callable")

        if isinstance(self.max_count, bool) or not isinstance(self.max_count, int):
            raise InvalidCriteriaError(
                f"max_count must be an integer, got {type(self.max_count).__name__}"
            )

        if not isinstance(self.scale, PermissionScale):
            raise InvalidCriteriaError("scale must be a PermissionScale")

        if self.required_level is not None:
            self.scale.position(self.required_level)
