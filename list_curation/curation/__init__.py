"""
List Curation Module

Filters, permission-checks, ranks and bounds record lists for display.
"""

from list_curation.curation.criteria import DEFAULT_SCALE, Criteria, PermissionScale
from list_curation.curation.curator import ListCurator
from list_curation.curation.models import (
    CurationResult,
    DroppedRecord,
    RankedRecord,
    Record,
    ResultEntry,
)
from list_curation.curation.pipeline import (
    compute_rank,
    curate,
    limit,
    order,
    project,
    rank_records,
    restrict_by_permission,
    select_eligible,
)

__all__ = [
    "DEFAULT_SCALE",
    "Criteria",
    "CurationResult",
    "DroppedRecord",
    "ListCurator",
    "PermissionScale",
    "RankedRecord",
    "Record",
    "ResultEntry",
    "compute_rank",
    "curate",
    "limit",
    "order",
    "project",
    "rank_records",
    "restrict_by_permission",
    "select_eligible",
]
