"""
Filter engine for climate actions.

``filter_actions()`` keeps the records that satisfy every active facet of a
``FilterCriteria`` plus an optional free-text query. Facets are ANDed
together; the values selected within one facet are ORed. Search is a literal,
case-insensitive substring match over city, action name, description and
tags; there is no tokenization or fuzzy matching.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from actions.schema import Action, FilterCriteria
from utils.strings import collation_key

# Facet name -> FilterCriteria attribute holding its selected values
MULTI_VALUE_FACETS = {
    "categories": "categories",
    "sectors": "sectors",
    "costTiers": "cost_tiers",
    "statuses": "statuses",
}


def search_haystack(action: Action) -> str:
    """Return the lowercased text that free-text search runs against."""
    parts = [action.city, action.action_name, action.description, *(action.tags or ())]
    return " ".join(parts).lower()


def matches(action: Action, criteria: FilterCriteria, query: str = "") -> bool:
    """Return True if *action* passes every active facet and the search query.

    ``query`` must already be trimmed and lowercased.
    """
    if criteria.city and action.city != criteria.city:
        return False
    if criteria.categories and action.category not in criteria.categories:
        return False
    if criteria.sectors and action.sector not in criteria.sectors:
        return False
    if criteria.cost_tiers and action.cost_tier not in criteria.cost_tiers:
        return False
    if criteria.statuses and action.status not in criteria.statuses:
        return False
    if query and query not in search_haystack(action):
        return False
    return True


def filter_actions(
    actions: Iterable[Action],
    criteria: FilterCriteria | None = None,
    search_text: str | None = None,
) -> list[Action]:
    """Return the actions matching *criteria* and *search_text*, in input order.

    Args:
        actions: Records to filter; never modified.
        criteria: Facet selection. None means no facet restrictions.
        search_text: Free-text query. When None, ``criteria.search`` is used.
            Blank text (after trimming) imposes no restriction.

    Returns:
        A new list; empty when nothing matches.
    """
    criteria = criteria or FilterCriteria()
    if search_text is None:
        search_text = criteria.search or ""
    query = search_text.strip().lower()
    return [a for a in actions if matches(a, criteria, query)]


def available_cities(actions: Iterable[Action]) -> list[str]:
    """Distinct city names in display order, for the city picker."""
    return sorted({a.city for a in actions}, key=collation_key)


def toggle_facet(criteria: FilterCriteria, facet: str, value: Any) -> FilterCriteria:
    """Return new criteria with *value* added to or removed from *facet*.

    Args:
        criteria: Current selection (unchanged).
        facet: One of ``categories``, ``sectors``, ``costTiers``, ``statuses``
            (snake_case ``cost_tiers`` is accepted too).
        value: Enum member or its string value.

    Raises:
        ValueError: Unknown facet name, or a value outside the facet's domain.
    """
    attr = MULTI_VALUE_FACETS.get(facet, facet)
    if attr not in MULTI_VALUE_FACETS.values():
        raise ValueError(f"Unknown facet: {facet!r}")
    current = getattr(criteria, attr)
    if value in current:
        updated = tuple(v for v in current if v != value)
    else:
        updated = (*current, value)
    data = criteria.model_dump()
    data[attr] = updated
    return FilterCriteria.model_validate(data)
