"""
Curation Models

Data models for list curation: input records, ranked intermediates and
display-ready result entries.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class Record:
    """A domain record to curate (a user, a post).

    Attributes:
        id: Unique identifier within one curation run
        label: Display label (user name, post title)
        status: Lifecycle status used by eligibility predicates
        permission_level: Access level compared against a PermissionScale
        tags: Interest tags
        timestamp: Creation or activity time, used for recency ranking
        score: Precomputed relevance score, used by the default ranking
        attributes: Free-form attributes available to ranking functions
    """

    id: str
    label: str
    status: str = "active"
    permission_level: int = 0
    tags: frozenset[str] = frozenset()
    timestamp: datetime | None = None
    score: float | None = None
    attributes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RankedRecord:
    """A record paired with its computed rank."""

    record: Record
    rank: float

    @property
    def id(self) -> str:
        return self.record.id


@dataclass(frozen=True)
class DroppedRecord:
    """A record excluded by the ranking stage."""

    id: str
    reason: str


@dataclass(frozen=True)
class ResultEntry:
    """Display-ready projection of a curated record.

    Attributes:
        id: Identifier of the source record
        label: Display label
        position: 1-based position in the curated list
        rank: Rank the ordering was based on
        attributes: Read-only copy of the source record's attributes
    """

    id: str
    label: str
    position: int
    rank: float
    attributes: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class CurationResult:
    """Outcome of one curation run.

    Attributes:
        entries: Curated entries in display order
        dropped: Records excluded because their rank was undefined
        eligible_count: Records accepted by the eligibility predicate
        permitted_count: Eligible records that passed the permission check
    """

    entries: tuple[ResultEntry, ...] = ()
    dropped: tuple[DroppedRecord, ...] = ()
    eligible_count: int = 0
    permitted_count: int = 0

    @property
    def ids(self) -> list[str]:
        return [entry.id for entry in self.entries]

    @property
    def is_partial(self) -> bool:
        """True when at least one record was dropped during ranking."""
        return bool(self.dropped)

    def __len__(self) -> int:
        return len(self.entries)
