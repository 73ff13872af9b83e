"""
Shared query-parameter dependency for the filtered-view routes.

The parameters are the same ones the dashboard puts in its address bar, so a
shared link and an API call describe a view identically.
"""

from fastapi import Query

from actions.schema import FilterCriteria
from utils.query import criteria_from_params


def filter_criteria(
    city: str | None = Query(None, description="Exact city name", examples=["Serra"]),
    category: str | None = Query(None, description="Comma-separated categories",
                                 examples=["Mitigation"]),
    sector: str | None = Query(None, description="Comma-separated sectors",
                               examples=["Waste,IPPU"]),
    cost: str | None = Query(None, description="Comma-separated cost tiers",
                             examples=["Low,Medium"]),
    status: str | None = Query(None, description="Comma-separated statuses",
                               examples=["In progress"]),
    search: str | None = Query(None, description="Case-insensitive substring search",
                               examples=["solar"]),
) -> FilterCriteria:
    """FastAPI dependency: build FilterCriteria from the shareable query parameters."""
    raw = {"city": city, "category": category, "sector": sector,
           "cost": cost, "status": status, "search": search}
    return criteria_from_params({k: v for k, v in raw.items() if v is not None})
