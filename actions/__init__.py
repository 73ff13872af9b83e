"""Climate actions data pipeline: schema, filtering, sorting, KPIs, export, loading."""

from actions.schema import (
    Action,
    ActionValidationError,
    Category,
    CostTier,
    FilterCriteria,
    Sector,
    Status,
    StatusHistoryEntry,
    validate_actions,
)
from actions.filters import available_cities, filter_actions, toggle_facet
from actions.sorting import STATUS_PRIORITY, sort_actions
from actions.kpis import KpiSummary, calculate_kpis
from actions.export import CSV_HEADERS, ExportPayload, export_actions, export_filename
from actions.loader import (
    ActionLoader,
    DataUnavailableError,
    StatusUpdateError,
    load_actions,
)

__all__ = [
    # Schema
    "Action",
    "ActionValidationError",
    "Category",
    "CostTier",
    "FilterCriteria",
    "Sector",
    "Status",
    "StatusHistoryEntry",
    "validate_actions",
    # Filtering / sorting
    "available_cities",
    "filter_actions",
    "toggle_facet",
    "STATUS_PRIORITY",
    "sort_actions",
    # KPIs
    "KpiSummary",
    "calculate_kpis",
    # Export
    "CSV_HEADERS",
    "ExportPayload",
    "export_actions",
    "export_filename",
    # Loading
    "ActionLoader",
    "DataUnavailableError",
    "StatusUpdateError",
    "load_actions",
]
