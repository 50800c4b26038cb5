"""
Curation Endpoint

POST /v1/curate - run the curation pipeline over a posted record list.

Ranking and eligibility are chosen declaratively in the request body and
compiled into a Criteria from the preset strategies.

Patterns Applied:
- FastAPI router pattern
- Pydantic request/response models
- Dependency injection for settings and curator
"""

import time
from datetime import datetime
from functools import lru_cache
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, model_validator

from list_curation.core.config import Settings, get_settings
from list_curation.core.exceptions import InputTooLargeError, InvalidCriteriaError
from list_curation.core.logging import get_logger
from list_curation.curation import presets
from list_curation.curation.criteria import Criteria, PermissionScale, Predicate, RankingFn
from list_curation.curation.curator import ListCurator
from list_curation.curation.models import CurationResult, Record

logger = get_logger(__name__)

# =============================================================================
# Request/Response Models
# =============================================================================


class RecordIn(BaseModel):
    """A record as posted by the caller."""

    id: str = Field(..., min_length=1)
    label: str = ""
    status: str = "active"
    permission_level: int = 0
    tags: list[str] = Field(default_factory=list)
    timestamp: datetime | None = None
    score: float | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)

    def to_record(self) -> Record:
        return Record(
            id=self.id,
            label=self.label or self.id,
            status=self.status,
            permission_level=self.permission_level,
            tags=frozenset(self.tags),
            timestamp=self.timestamp,
            score=self.score,
            attributes=dict(self.attributes),
        )


class CriteriaIn(BaseModel):
    """Declarative curation criteria."""

    statuses: list[str] | None = Field(
        default_factory=lambda: ["active"],
        description="Accepted statuses; null disables the status filter",
    )
    interests: list[str] | None = Field(
        default=None, description="Keep records sharing at least one tag"
    )
    required_level: int | None = None
    ranking: Literal["score", "recency", "weighted"] = "score"
    weights: dict[str, float] | None = None
    max_count: int | None = Field(default=None, description="Defaults to the service setting")

    @model_validator(mode="after")
    def _weights_for_weighted(self) -> "CriteriaIn":
        if self.ranking == "weighted" and not self.weights:
            raise ValueError("weights are required when ranking is 'weighted'")
        return self


class CurateRequest(BaseModel):
    """Request body for the curate endpoint."""

    records: list[RecordIn]
    criteria: CriteriaIn = Field(default_factory=CriteriaIn)


class ResultEntryOut(BaseModel):
    id: str
    label: str
    position: int
    rank: float
    attributes: dict[str, Any]


class DroppedOut(BaseModel):
    id: str
    reason: str


class CurateMetadata(BaseModel):
    processing_time_ms: float
    total_input: int
    total_results: int


class CurateResponse(BaseModel):
    """Response from the curate endpoint."""

    entries: list[ResultEntryOut]
    dropped: list[DroppedOut]
    metadata: CurateMetadata


# =============================================================================
# Dependencies
# =============================================================================


@lru_cache
def cached_settings() -> Settings:
    return get_settings()


def get_curator(settings: Settings = Depends(cached_settings)) -> ListCurator:
    return ListCurator(max_records=settings.max_records)


def build_criteria(body: CriteriaIn, settings: Settings) -> Criteria:
    """Compile declarative criteria into pipeline strategies."""
    predicates: list[Predicate] = []
    if body.statuses is not None:
        predicates.append(presets.with_status(*body.statuses))
    if body.interests is not None:
        predicates.append(presets.with_any_interest(body.interests))

    ranking: RankingFn
    if body.ranking == "recency":
        ranking = presets.by_recency
    elif body.ranking == "weighted":
        ranking = presets.weighted(body.weights or {})
    else:
        ranking = presets.by_score

    return Criteria(
        eligibility=presets.all_of(*predicates),
        required_level=body.required_level,
        ranking=ranking,
        max_count=body.max_count if body.max_count is not None else settings.default_max_count,
        scale=PermissionScale.of(settings.permission_levels),
    )


def _to_response(result: CurationResult, total_input: int, elapsed_ms: float) -> CurateResponse:
    return CurateResponse(
        entries=[
            ResultEntryOut(
                id=e.id,
                label=e.label,
                position=e.position,
                rank=e.rank,
                attributes=dict(e.attributes),
            )
            for e in result.entries
        ],
        dropped=[DroppedOut(id=d.id, reason=d.reason) for d in result.dropped],
        metadata=CurateMetadata(
            processing_time_ms=elapsed_ms,
            total_input=total_input,
            total_results=len(result.entries),
        ),
    )


# =============================================================================
# Router
# =============================================================================

curate_router = APIRouter(prefix="/v1", tags=["curation"])


@curate_router.post("/curate", response_model=CurateResponse)
def curate(
    request: CurateRequest,
    settings: Settings = Depends(cached_settings),
    curator: ListCurator = Depends(get_curator),
) -> CurateResponse:
    """Filter, permission-check, rank and bound the posted records.

    Returns:
        CurateResponse with ordered entries, dropped records and metadata

    Raises:
        HTTPException: 400 for invalid criteria, 413 for oversized input
    """
    start_time = time.perf_counter()

    try:
        criteria = build_criteria(request.criteria, settings)
        records = [r.to_record() for r in request.records]
        result = curator.curate(records, criteria)
    except InputTooLargeError as e:
        raise HTTPException(status_code=413, detail=str(e)) from e
    except InvalidCriteriaError as e:
        logger.info("curation_invalid_criteria", error=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    elapsed_ms = (time.perf_counter() - start_time) * 1000
    return _to_response(result, len(request.records), elapsed_ms)
