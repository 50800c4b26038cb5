"""
List Curator

Service-facing wrapper around the curation pipeline: applies the configured
input bound, logs dropped records and traces each run.

Patterns Applied:
- Pure functions for curation logic (curation.pipeline)
- Structured logging with keyword context
"""

from __future__ import annotations

from collections.abc import Sequence

from list_curation.core.exceptions import InputTooLargeError
from list_curation.core.logging import get_logger
from list_curation.core.tracing import get_tracer, record_counts
from list_curation.curation import pipeline
from list_curation.curation.criteria import Criteria
from list_curation.curation.models import CurationResult, Record

logger = get_logger(__name__)
tracer = get_tracer(__name__)


class ListCurator:
    """Curates record lists for display.

    Holds no per-run state; one instance can serve concurrent requests.

    Attributes:
        max_records: Largest accepted input size
    """

    def __init__(self, max_records: int = 10_000) -> None:
        """Initialize the list curator.

        Args:
            max_records: Largest accepted input size
        """
        self.max_records = max_records

    def curate(
        self,
        records: Sequence[Record],
        criteria: Criteria,
    ) -> CurationResult:
        """Curate records: filter, check permission, rank, order, bound.

        Args:
            records: Raw records
            criteria: Strategies and limits for this run

        Returns:
            CurationResult with ordered entries and dropped records

        Raises:
            InvalidCriteriaError: If criteria are malformed
            InputTooLargeError: If more than max_records records are supplied
        """
        with tracer.start_as_current_span("curate") as span:
            record_counts(span, {"input_count": len(records)})

            if len(records) > self.max_records:
                logger.warning(
                    "curation_rejected",
                    reason="input_too_large",
                    input_count=len(records),
                    max_records=self.max_records,
                )
                raise InputTooLargeError(len(records), self.max_records)

            result = pipeline.curate(records, criteria)

            for dropped in result.dropped:
                logger.warning("record_dropped", record_id=dropped.id, reason=dropped.reason)

            counts = {
                "input_count": len(records),
                "eligible_count": result.eligible_count,
                "permitted_count": result.permitted_count,
                "result_count": len(result.entries),
                "dropped_count": len(result.dropped),
            }
            record_counts(span, {**counts, "max_count": criteria.max_count})

        logger.info("curation_completed", **counts)
        return result
