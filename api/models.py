"""
Pydantic request/response models for the API.

Record and KPI shapes come from ``actions``; this module only wraps them for
transport. Response models serialize by alias, so JSON keys keep the
camelCase wire names the spreadsheet and the static snapshot use.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from actions.kpis import KpiSummary
from actions.schema import Action, Status


# ── Status updates ────────────────────────────────────────────────────────────

class StatusUpdateRequest(BaseModel):
    """Body of POST /api/update-status."""
    model_config = ConfigDict(populate_by_name=True)

    action_id: str = Field(..., alias="actionId", min_length=1, examples=["SER-004"])
    new_status: Status = Field(..., alias="newStatus", examples=["In progress"])


class StatusUpdateResponse(BaseModel):
    """Acknowledgement of a status update."""
    success: bool = Field(..., examples=[True])
    message: str = Field(..., examples=["Status updated successfully"])


# ── Filtered views ────────────────────────────────────────────────────────────

class ActionListResponse(BaseModel):
    """Response body for GET /api/v1/actions."""
    model_config = ConfigDict(populate_by_name=True)

    total: int = Field(..., description="Number of actions matching the filters", examples=[12])
    filters: dict[str, str] = Field(
        ..., description="Active filters in shareable query-parameter form",
        examples=[{"sector": "Waste,IPPU"}])
    location: str = Field(..., description="Shareable location for this view",
                          examples=["/?sector=Waste%2CIPPU"])
    items: list[Action] = Field(..., description="Matching actions in display order")


class DashboardSummaryResponse(BaseModel):
    """Response body for GET /api/v1/dashboard/summary."""
    model_config = ConfigDict(populate_by_name=True)

    kpis: KpiSummary
    category_shares: dict[str, float] = Field(
        ..., alias="categoryShares",
        description="Percent of filtered actions per category; 0 when nothing matches",
        examples=[{"Mitigation": 62.5, "Adaptation": 37.5}])
    cities: list[str] = Field(..., description="Cities available for the city picker")
    active_filters: int = Field(..., alias="activeFilters", examples=[2])
    filters: dict[str, str]


# ── Error model ───────────────────────────────────────────────────────────────

class ErrorResponse(BaseModel):
    """Standard error response body."""
    error: str = Field(..., description="Short error category", examples=["Data unavailable"])
    detail: str | None = Field(None, description="Human-readable detail")
    status_code: int = Field(..., ge=400, le=599, examples=[503])
