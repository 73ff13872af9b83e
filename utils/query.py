"""Shareable filter state: FilterCriteria <-> URL query parameters.

The encoding is the bookmark/share contract for a filtered view::

    city=Serra&category=Mitigation&sector=Waste,IPPU&cost=Low&status=Completed&search=solar

Multi-value facets are comma-joined. Empty facets, a missing city and blank
search are omitted, so empty criteria encode to no parameters at all.
"""

import logging
from collections.abc import Mapping
from enum import Enum
from urllib.parse import parse_qsl, urlencode

from actions.schema import Category, CostTier, FilterCriteria, Sector, Status

logger = logging.getLogger(__name__)

# query parameter -> (FilterCriteria attribute, enum type)
FACET_PARAMS: dict[str, tuple[str, type[Enum]]] = {
    "category": ("categories", Category),
    "sector": ("sectors", Sector),
    "cost": ("cost_tiers", CostTier),
    "status": ("statuses", Status),
}

PARAM_ORDER = ("city", "category", "sector", "cost", "status", "search")


def criteria_to_params(criteria: FilterCriteria) -> dict[str, str]:
    """Encode *criteria* as query parameters in a stable key order."""
    params: dict[str, str] = {}
    if criteria.city:
        params["city"] = criteria.city
    for param, (attr, _) in FACET_PARAMS.items():
        values = getattr(criteria, attr)
        if values:
            params[param] = ",".join(v.value for v in values)
    if criteria.search:
        params["search"] = criteria.search
    return {k: params[k] for k in PARAM_ORDER if k in params}


def _parse_facet(raw: str, enum_type: type[Enum]) -> tuple:
    known = {m.value: m for m in enum_type}
    values = []
    for part in raw.split(","):
        if part in known:
            values.append(known[part])
        elif part:
            logger.debug("ignoring unknown %s value %r", enum_type.__name__, part)
    return tuple(values)


def criteria_from_params(params: Mapping[str, str]) -> FilterCriteria:
    """Decode query parameters into FilterCriteria.

    Values outside a facet's closed set are dropped rather than rejected, so
    an old or hand-edited link still opens with whatever part of it is valid.
    Unrelated parameters are ignored.
    """
    data: dict = {}
    city = params.get("city")
    if city:
        data["city"] = city
    for param, (attr, enum_type) in FACET_PARAMS.items():
        raw = params.get(param)
        if raw:
            data[attr] = _parse_facet(raw, enum_type)
    search = params.get("search")
    if search:
        data["search"] = search
    return FilterCriteria.model_validate(data)


def criteria_to_query_string(criteria: FilterCriteria) -> str:
    """Return ``?``-less query string for *criteria*; empty criteria give ''."""
    return urlencode(criteria_to_params(criteria))


def criteria_from_query_string(query: str) -> FilterCriteria:
    """Parse a query string (leading ``?`` allowed) into FilterCriteria."""
    return criteria_from_params(dict(parse_qsl(query.lstrip("?"))))


def criteria_location(criteria: FilterCriteria, path: str = "/") -> str:
    """Return the addressable location for *criteria*, e.g. ``/?sector=Waste``."""
    query = criteria_to_query_string(criteria)
    return f"{path}?{query}" if query else path
