"""
GET /api/v1/download endpoint.

Exports the filtered actions as CSV or JSON. Accepts the same filter
parameters as /api/v1/actions, so "download what I'm looking at" is the
current view's query string plus ``fmt``.
"""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from actions.export import export_actions
from actions.filters import filter_actions
from actions.schema import FilterCriteria
from api.models import ErrorResponse
from api.params import filter_criteria
from api.store import ActionStore, get_store
from utils.query import criteria_to_query_string

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/download", tags=["download"])


@router.get(
    "",
    responses={
        200: {"content": {"text/csv": {}, "application/json": {}}},
        503: {"model": ErrorResponse, "description": "Action data unavailable"},
    },
    summary="Download filtered actions as CSV or JSON",
)
def download(
    fmt: str = Query("csv", pattern="^(csv|json)$", description="Output format"),
    criteria: FilterCriteria = Depends(filter_criteria),
    store: ActionStore = Depends(get_store),
) -> Response:
    """Return the filtered actions as an attachment named ``climate-actions-<date>.<fmt>``."""
    snapshot = store.snapshot()
    actions = filter_actions(snapshot.actions, criteria)
    payload = export_actions(actions, fmt)
    logger.info("export fmt=%s rows=%d filters=%s",
                fmt, len(actions), criteria_to_query_string(criteria) or "none")
    return Response(
        content=payload.content,
        media_type=payload.media_type,
        headers={
            "Content-Disposition": f"attachment; filename={payload.filename}",
            "X-Total-Count": str(len(actions)),
        },
    )
