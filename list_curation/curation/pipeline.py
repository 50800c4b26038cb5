"""
Curation Pipeline

Pure stage functions turning raw records into a bounded, ranked list:

    select_eligible -> restrict_by_permission -> rank_records -> order
    -> limit -> project

No stage mutates its input or keeps state between calls, so identical
inputs always produce identical output.
"""

from __future__ import annotations

import math
from collections.abc import Hashable, Iterable, Sequence
from decimal import Decimal
from numbers import Real
from types import MappingProxyType
from typing import Any, TypeVar

from list_curation.core.exceptions import (
    DuplicateRecordError,
    InputTooLargeError,
    RankingUndefinedError,
)
from list_curation.curation.criteria import (
    DEFAULT_SCALE,
    Criteria,
    PermissionScale,
    Predicate,
    RankingFn,
    TieBreakFn,
    by_identifier,
)
from list_curation.curation.models import (
    CurationResult,
    DroppedRecord,
    RankedRecord,
    Record,
    ResultEntry,
)

T = TypeVar("T")

# Failures of a ranking function that mean "no rank for this record"
_RANKING_FAILURES = (LookupError, TypeError, ValueError, ArithmeticError)


def select_eligible(records: Iterable[Record], predicate: Predicate) -> list[Record]:
    """Keep records the eligibility predicate accepts, preserving order."""
    return [r for r in records if predicate(r)]


def restrict_by_permission(
    records: Iterable[Record],
    required_level: Hashable | None,
    scale: PermissionScale = DEFAULT_SCALE,
) -> list[Record]:
    """Keep records whose permission level meets ``required_level``.

    Args:
        records: Candidate records
        required_level: Minimum level on ``scale``; None keeps every record
        scale: Ordered permission domain

    Returns:
        Records at or above the required level, in input order

    Raises:
        InvalidCriteriaError: If required_level is not on the scale
    """
    if required_level is None:
        return list(records)
    scale.position(required_level)
    return [r for r in records if scale.satisfies(r.permission_level, required_level)]


def compute_rank(record: Record, ranking_fn: RankingFn) -> float:
    """Apply ``ranking_fn`` to one record.

    Raises:
        RankingUndefinedError: If the function fails or returns None, a bool,
            a non-numeric value, NaN or infinity
    """
    try:
        value: Any = ranking_fn(record)
    except _RANKING_FAILURES as e:
        raise RankingUndefinedError(record.id, f"{type(e).__name__}: {e}") from e

    if value is None:
        raise RankingUndefinedError(record.id, "ranking returned None")
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        raise RankingUndefinedError(
            record.id, f"ranking returned non-numeric {type(value).__name__}"
        )

    try:
        rank = float(value)
    except OverflowError:
        rank = math.inf
    except ValueError:
        rank = math.nan
    if math.isnan(rank):
        raise RankingUndefinedError(record.id, "ranking returned NaN")
    # Ranks must survive JSON serialization
    if math.isinf(rank):
        raise RankingUndefinedError(record.id, "ranking returned a non-finite value")
    return rank


def rank_records(
    records: Iterable[Record],
    ranking_fn: RankingFn,
) -> tuple[list[RankedRecord], list[DroppedRecord]]:
    """Rank every record, excluding those whose rank is undefined.

    Returns:
        Tuple of (ranked records in input order, dropped records)
    """
    ranked: list[RankedRecord] = []
    dropped: list[DroppedRecord] = []
    for record in records:
        try:
            ranked.append(RankedRecord(record=record, rank=compute_rank(record, ranking_fn)))
        except RankingUndefinedError as e:
            dropped.append(DroppedRecord(id=e.record_id, reason=e.reason))
    return ranked, dropped


def order(
    ranked: Iterable[RankedRecord],
    tie_break: TieBreakFn = by_identifier,
) -> list[RankedRecord]:
    """Sort by rank descending, equal ranks by ascending ``tie_break`` key."""
    return sorted(ranked, key=lambda r: (-r.rank, tie_break(r.record)))


def limit(items: Sequence[T], max_count: int) -> list[T]:
    """Take the first ``max_count`` items; non-positive counts yield nothing."""
    if max_count <= 0:
        return []
    return list(items[:max_count])


def project(ranked: RankedRecord, position: int) -> ResultEntry:
    """Map a ranked record to its display shape without touching the record.

    Record fields take precedence over free-form attributes of the same name.
    """
    record = ranked.record
    attributes = {
        **dict(record.attributes),
        "status": record.status,
        "permission_level": record.permission_level,
        "tags": sorted(record.tags),
        "timestamp": record.timestamp,
        "score": record.score,
    }
    return ResultEntry(
        id=record.id,
        label=record.label,
        position=position,
        rank=ranked.rank,
        attributes=MappingProxyType(attributes),
    )


def ensure_unique_ids(records: Sequence[Record]) -> None:
    """Raise DuplicateRecordError on the first repeated identifier."""
    seen: set[str] = set()
    for record in records:
        if record.id in seen:
            raise DuplicateRecordError(record.id)
        seen.add(record.id)


def curate(
    records: Sequence[Record],
    criteria: Criteria,
    max_records: int | None = None,
) -> CurationResult:
    """Run the full pipeline over ``records``.

    Criteria and input checks run before any filtering.

    Args:
        records: Input records with unique identifiers
        criteria: Strategies and limits for this run
        max_records: Optional upper bound on len(records)

    Returns:
        CurationResult with ordered entries and records dropped by ranking

    Raises:
        InvalidCriteriaError: If criteria are malformed
        DuplicateRecordError: If two records share an identifier
        InputTooLargeError: If len(records) exceeds max_records
    """
    criteria.validate()
    if max_records is not None and len(records) > max_records:
        raise InputTooLargeError(len(records), max_records)
    ensure_unique_ids(records)

    eligible = select_eligible(records, criteria.eligibility)
    permitted = restrict_by_permission(eligible, criteria.required_level, criteria.scale)
    ranked, dropped = rank_records(permitted, criteria.ranking)
    bounded = limit(order(ranked, criteria.tie_break), criteria.max_count)

    return CurationResult(
        entries=tuple(project(r, position) for position, r in enumerate(bounded, start=1)),
        dropped=tuple(dropped),
        eligible_count=len(eligible),
        permitted_count=len(permitted),
    )
