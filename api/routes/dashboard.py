"""Dashboard summary endpoint: KPI cards, chart counts and filter options."""

from fastapi import APIRouter, Depends

from actions.filters import available_cities, filter_actions
from actions.kpis import calculate_kpis
from actions.schema import Category, FilterCriteria
from api.models import DashboardSummaryResponse, ErrorResponse
from api.params import filter_criteria
from api.store import ActionStore, get_store
from utils.query import criteria_to_params

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _summarize(snapshot, criteria: FilterCriteria) -> DashboardSummaryResponse:
    filtered = filter_actions(snapshot.actions, criteria)
    kpis = calculate_kpis(filtered)
    return DashboardSummaryResponse(
        kpis=kpis,
        category_shares={c.value: round(kpis.category_share(c), 1) for c in Category},
        # Picker lists every city in the data, not just those left after filtering
        cities=available_cities(snapshot.actions),
        active_filters=criteria.active_count,
        filters=criteria_to_params(criteria),
    )


@router.get(
    "/summary",
    response_model=DashboardSummaryResponse,
    responses={503: {"model": ErrorResponse, "description": "Action data unavailable"}},
    summary="Dashboard summary statistics",
)
def dashboard_summary(
    criteria: FilterCriteria = Depends(filter_criteria),
    store: ActionStore = Depends(get_store),
) -> DashboardSummaryResponse:
    """Return KPIs for the actions matching the filters.

    Includes:
    - Distinct cities and total actions
    - Mitigation / adaptation counts and their percentage shares
    - Counts for every sector and every status (zero when absent)
    - The city list for the picker and the number of active filters

    Results are cached per (snapshot version, filters) and dropped whenever
    the data is reloaded.
    """
    snapshot = store.snapshot()
    return store.views.get_or_compute(
        ("summary", snapshot.version, criteria),
        lambda: _summarize(snapshot, criteria),
    )
