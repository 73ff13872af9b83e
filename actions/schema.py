"""
Record schema for climate actions.

Defines the closed enumerations (category, sector, cost tier, status), the
``Action`` record, the ``FilterCriteria`` a user builds while browsing, and
``validate_actions()``, the single entry point for untrusted payloads.

Field names are snake_case in Python and keep their camelCase wire names as
aliases, so records read from and dumped to JSON match the spreadsheet and
the static snapshot exactly.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    TypeAdapter,
    ValidationError,
    field_validator,
)

logger = logging.getLogger(__name__)


# ── Enumerated domains ────────────────────────────────────────────────────────

class Category(str, Enum):
    MITIGATION = "Mitigation"
    ADAPTATION = "Adaptation"


class Sector(str, Enum):
    AFOLU = "AFOLU"
    STATIONARY_ENERGY = "Stationary Energy"
    TRANSPORTATION = "Transportation"
    WASTE = "Waste"
    IPPU = "IPPU"


class CostTier(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Status(str, Enum):
    """Action lifecycle status, in the order the statuses are presented."""
    NOT_STARTED = "Not started"
    READY_TO_START = "Ready to start"
    IN_PROGRESS = "In progress"
    COMPLETED = "Completed"
    ON_HOLD = "On hold"


REQUIRED_FIELDS = (
    "id", "city", "country", "actionName", "category", "sector",
    "costTier", "status", "description", "lastUpdated",
)


# ── Records ───────────────────────────────────────────────────────────────────

class StatusHistoryEntry(BaseModel):
    """One entry of an action's status log."""
    model_config = ConfigDict(frozen=True)

    date: str = Field(..., description="Date the status took effect", examples=["2025-03-14"])
    status: Status


class Action(BaseModel):
    """A single climate action tracked for a city.

    Instances are frozen; a loaded collection is a snapshot and derived views
    (filtered, sorted) are new lists of the same objects.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(..., description="Externally assigned identifier", examples=["SER-004"])
    city: str = Field(..., examples=["Serra"])
    country: str = Field(..., examples=["Brazil"])
    action_name: str = Field(..., alias="actionName", examples=["Landfill gas capture"])
    category: Category
    sector: Sector
    cost_tier: CostTier = Field(..., alias="costTier")
    investment_usd: StrictInt | StrictFloat | None = Field(
        None, alias="investmentUSD", description="Estimated investment in USD")
    status: Status
    reduction_potential_pct: str | None = Field(
        None, alias="reductionPotentialPct", examples=["15-20%"])
    implementation_time_years: str | None = Field(
        None, alias="implementationTimeYears", examples=["2-3"])
    description: str
    owner: str | None = None
    last_updated: str = Field(..., alias="lastUpdated", examples=["2025-03-14"])
    status_history: tuple[StatusHistoryEntry, ...] | None = Field(
        None, description="Most recent entry first")
    tags: tuple[str, ...] | None = None

    def to_record(self) -> dict[str, Any]:
        """Return the JSON-ready wire form, omitting absent optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FilterCriteria(BaseModel):
    """A user's current facet selection plus free-text search.

    An empty facet tuple means "no restriction on this facet".
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    city: str | None = None
    categories: tuple[Category, ...] = ()
    sectors: tuple[Sector, ...] = ()
    cost_tiers: tuple[CostTier, ...] = Field((), alias="costTiers")
    statuses: tuple[Status, ...] = ()
    search: str | None = None

    @field_validator("categories", "sectors", "cost_tiers", "statuses", mode="before")
    @classmethod
    def none_is_empty(cls, value: Any) -> Any:
        return () if value is None else value

    @property
    def active_count(self) -> int:
        """Number of facets (including search) currently restricting results."""
        facets = (self.categories, self.sectors, self.cost_tiers, self.statuses)
        count = sum(1 for values in facets if values)
        if self.city:
            count += 1
        if self.search and self.search.strip():
            count += 1
        return count

    @property
    def is_empty(self) -> bool:
        return self.active_count == 0


# ── Validation boundary ───────────────────────────────────────────────────────

class ActionValidationError(ValueError):
    """Raised when a payload does not conform to the action schema.

    Attributes:
        index: Position of the first invalid record, or None when the payload
            itself is not a list.
        field: Wire name of the offending field, or None.
        reason: Validator message for the first violation.
    """

    def __init__(self, reason: str, index: int | None = None, field: str | None = None):
        self.index = index
        self.field = field
        self.reason = reason
        where = []
        if index is not None:
            where.append(f"record {index}")
        if field is not None:
            where.append(f"field '{field}'")
        prefix = ", ".join(where) or "payload"
        super().__init__(f"Invalid actions data at {prefix}: {reason}")


_ACTION_LIST = TypeAdapter(list[Action])

# Wire names a validation error location may legitimately contain
_LOC_NAMES = frozenset(
    [f.alias or name for name, f in Action.model_fields.items()]
    + list(Action.model_fields)
    + list(StatusHistoryEntry.model_fields)
)


def error_field(loc: tuple) -> str | None:
    """Return the dotted field path for a pydantic error location.

    Positions inside lists are kept; union-member tags pydantic inserts
    (``int``, ``float``, ``tuple[...]``) are dropped, so a bad
    ``investmentUSD`` is reported as ``investmentUSD``, not
    ``investmentUSD.int``.
    """
    parts = [str(p) for p in loc if isinstance(p, int) or p in _LOC_NAMES]
    return ".".join(parts) or None


def validate_actions(payload: Any) -> list[Action]:
    """Validate a decoded payload and return it as a list of ``Action``.

    The whole payload is rejected on the first invalid record; there is no
    partial acceptance.

    Raises:
        ActionValidationError: naming the first structural violation.
    """
    try:
        return _ACTION_LIST.validate_python(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        loc = first.get("loc", ())
        index = loc[0] if loc and isinstance(loc[0], int) else None
        field = error_field(loc[1:]) if index is not None else error_field(loc)
        logger.warning("actions payload rejected: %s errors, first at %s",
                       exc.error_count(), loc)
        raise ActionValidationError(first["msg"], index=index, field=field) from exc
