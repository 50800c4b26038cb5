"""
Curation Presets

Ready-made eligibility predicates and ranking functions for the two list
features the service backs: user lists and post feeds.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import timezone
from numbers import Real
from typing import Any

from list_curation.curation.criteria import Predicate, RankingFn, by_identifier, by_score
from list_curation.curation.models import Record

__all__ = [
    "active_only",
    "all_of",
    "by_identifier",
    "by_recency",
    "by_score",
    "weighted",
    "with_any_interest",
    "with_status",
]

# Record fields a weighted ranking may reference besides free-form attributes
_FIELD_NAMES = ("score", "permission_level")


def with_status(*statuses: str) -> Predicate:
    """Build a predicate accepting records in any of ``statuses``."""
    allowed = frozenset(statuses)

    def predicate(record: Record) -> bool:
        return record.status in allowed

    return predicate


active_only: Predicate = with_status("active")


def with_any_interest(interests: Iterable[str]) -> Predicate:
    """Build a predicate accepting records sharing at least one tag.

    Matching is case-insensitive. An empty interest set accepts nothing.
    """
    wanted = frozenset(i.casefold() for i in interests)

    def predicate(record: Record) -> bool:
        return any(tag.casefold() in wanted for tag in record.tags)

    return predicate


def all_of(*predicates: Predicate) -> Predicate:
    """Combine predicates; a record must satisfy every one of them."""

    def predicate(record: Record) -> bool:
        return all(p(record) for p in predicates)

    return predicate


def by_recency(record: Record) -> float | None:
    """Rank newer records first.

    Naive timestamps are read as UTC.
    """
    if record.timestamp is None:
        return None
    ts = record.timestamp
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.timestamp()


def _resolve(record: Record, name: str) -> Any:
    if name in _FIELD_NAMES:
        return getattr(record, name)
    return record.attributes[name]


def weighted(weights: Mapping[str, float]) -> RankingFn:
    """Build a ranking function summing weighted numeric attributes.

    ``score`` and ``permission_level`` resolve to the record fields, every
    other name to ``record.attributes``. A missing or non-numeric value makes
    the rank undefined for that record.

    Args:
        weights: Attribute name to weight

    Returns:
        Ranking function usable as Criteria.ranking
    """
    items = tuple(weights.items())

    def ranking(record: Record) -> float | None:
        total = 0.0
        for name, weight in items:
            value = _resolve(record, name)
            if value is None or isinstance(value, bool) or not isinstance(value, Real):
                return None
            total += float(value) * weight
        return total

    return ranking
