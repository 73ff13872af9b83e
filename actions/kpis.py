"""
KPI aggregation for the dashboard header cards and charts.

``calculate_kpis()`` reports raw counts only. Sector and status counts always
carry every known value (zero when absent) so charts have a stable shape.
Percentages are left to the consumer; see ``utils.formatting.safe_percent``.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from actions.schema import Action, Category, Sector, Status
from utils.formatting import safe_percent


class KpiSummary(BaseModel):
    """Aggregate counts over a (usually filtered) set of actions."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total_cities: int = Field(0, alias="totalCities", description="Distinct city names")
    total_actions: int = Field(0, alias="totalActions")
    mitigation_actions: int = Field(0, alias="mitigationActions")
    adaptation_actions: int = Field(0, alias="adaptationActions")
    sector_counts: dict[Sector, int] = Field(
        default_factory=lambda: dict.fromkeys(Sector, 0), alias="sectorCounts")
    status_counts: dict[Status, int] = Field(
        default_factory=lambda: dict.fromkeys(Status, 0), alias="statusCounts")

    def category_share(self, category: Category) -> float:
        """Percentage of actions in *category*; 0.0 when there are none."""
        part = (self.mitigation_actions if category is Category.MITIGATION
                else self.adaptation_actions)
        return safe_percent(part, self.total_actions)


def calculate_kpis(actions: Iterable[Action]) -> KpiSummary:
    """Summarize *actions*: city and action totals, category, sector and status counts.

    Empty input yields zero for every count.
    """
    actions = list(actions)
    categories = Counter(a.category for a in actions)
    sectors = Counter(a.sector for a in actions)
    statuses = Counter(a.status for a in actions)

    return KpiSummary(
        total_cities=len({a.city for a in actions}),
        total_actions=len(actions),
        mitigation_actions=categories[Category.MITIGATION],
        adaptation_actions=categories[Category.ADAPTATION],
        sector_counts={s: sectors[s] for s in Sector},
        status_counts={s: statuses[s] for s in Status},
    )
