"""
Action read and status-update endpoints.

    GET  /api/actions          raw records from the source chain
    POST /api/update-status    record a status change
    GET  /api/v1/actions       validated, sorted, filtered records

The first two are the collaborator endpoints the dashboard client talks to;
they keep their original unversioned paths.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from actions.filters import filter_actions
from actions.schema import FilterCriteria
from api.models import (
    ActionListResponse,
    ErrorResponse,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from api.params import filter_criteria
from api.sources import SourceUnavailableError
from api.store import ActionStore, get_store
from utils.query import criteria_location, criteria_to_params

logger = logging.getLogger(__name__)

router = APIRouter(tags=["actions"])
v1_router = APIRouter(prefix="/actions", tags=["actions"])


def _unavailable(detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"error": "Data unavailable", "detail": detail, "status_code": 503},
    )


@router.get(
    "/api/actions",
    summary="Raw action records",
    responses={500: {"description": "Every data source failed"}},
)
def read_actions(store: ActionStore = Depends(get_store)):
    """Return the raw action records: spreadsheet first, static snapshot second.

    Records are returned as the source holds them, with logged status
    updates applied. Validation happens in the consumer.
    """
    try:
        return store.raw()
    except SourceUnavailableError:
        return JSONResponse(status_code=500,
                            content={"error": "Failed to load actions data"})


@router.post(
    "/api/update-status",
    response_model=StatusUpdateResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Unknown action id"},
        422: {"description": "Status outside the allowed set"},
        503: {"model": ErrorResponse, "description": "Action data unavailable"},
    },
    summary="Update an action's status",
)
def update_status(
    body: StatusUpdateRequest,
    store: ActionStore = Depends(get_store),
) -> StatusUpdateResponse:
    """Log a status change and make it visible to the next read.

    The change is written to the status log before the response is sent and
    the cached data is invalidated, so a reload right after a successful
    update always reflects it.
    """
    try:
        record = store.find(body.action_id)
    except SourceUnavailableError:
        return _unavailable("Failed to load actions data")
    if record is None:
        raise HTTPException(status_code=404,
                            detail=f"Action '{body.action_id}' not found")

    try:
        store.chain.status_log.append(body.action_id, body.new_status.value)
    except (SourceUnavailableError, OSError) as exc:
        logger.error("status update for %s not recorded: %s", body.action_id, exc)
        return _unavailable("Failed to record status update")
    store.invalidate()
    logger.info("status of %s changed from %s to %s",
                body.action_id, record.get("status"), body.new_status.value)
    return StatusUpdateResponse(success=True, message="Status updated successfully")


@v1_router.get(
    "",
    response_model=ActionListResponse,
    response_model_exclude_none=True,
    responses={503: {"model": ErrorResponse, "description": "Action data unavailable"}},
    summary="Filtered actions in display order",
)
def list_actions(
    criteria: FilterCriteria = Depends(filter_criteria),
    store: ActionStore = Depends(get_store),
) -> ActionListResponse:
    """Return validated actions matching the filters, sorted by status priority, city, name.

    An empty ``items`` list means nothing matched; it is not an error.
    """
    snapshot = store.snapshot()
    items = store.views.get_or_compute(
        ("actions", snapshot.version, criteria),
        lambda: filter_actions(snapshot.actions, criteria),
    )
    return ActionListResponse(
        total=len(items),
        filters=criteria_to_params(criteria),
        location=criteria_location(criteria),
        items=items,
    )
