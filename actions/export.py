"""
CSV and JSON export of climate actions.

The CSV column set and order are fixed; people import these files into
spreadsheets and depend on them. Free-text columns are always quoted with
embedded quotes doubled. Code-like columns (ID, Category, Cost Tier,
Investment USD, Last Updated) are written bare and only quoted when they
contain a delimiter, quote or newline.

Export only produces bytes and a filename; delivering them (an HTTP
response, a file on disk) is up to the caller.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timezone

from actions.schema import Action

CSV_COLUMNS: list[tuple[str, bool, Callable[[Action], object]]] = [
    # (header, always_quote, getter)
    ("ID", False, lambda a: a.id),
    ("City", True, lambda a: a.city),
    ("Country", True, lambda a: a.country),
    ("Action Name", True, lambda a: a.action_name),
    ("Category", False, lambda a: a.category.value),
    ("Sector", True, lambda a: a.sector.value),
    ("Cost Tier", False, lambda a: a.cost_tier.value),
    ("Investment USD", False, lambda a: a.investment_usd),
    ("Status", True, lambda a: a.status.value),
    ("Reduction Potential", True, lambda a: a.reduction_potential_pct),
    ("Implementation Time", True, lambda a: a.implementation_time_years),
    ("Description", True, lambda a: a.description),
    ("Owner", True, lambda a: a.owner),
    ("Last Updated", False, lambda a: a.last_updated),
    ("Tags", True, lambda a: "; ".join(a.tags or ())),
]

CSV_HEADERS = [header for header, _, _ in CSV_COLUMNS]

FORMATS = {
    "csv": "text/csv; charset=utf-8",
    "json": "application/json",
}


@dataclass(frozen=True)
class ExportPayload:
    """A serialized export ready to hand to the user."""
    filename: str
    media_type: str
    content: str


def _csv_field(value: object, always_quote: bool) -> str:
    if value is None:
        text = ""
    elif isinstance(value, float) and value.is_integer():
        text = str(int(value))
    else:
        text = str(value)
    if always_quote or any(c in text for c in ',"\r\n'):
        return '"' + text.replace('"', '""') + '"'
    return text


def to_csv(actions: Iterable[Action]) -> str:
    """Serialize *actions* as CSV: one header row, one row per action, ``\\n`` separated."""
    lines = [",".join(CSV_HEADERS)]
    for action in actions:
        lines.append(",".join(
            _csv_field(getter(action), quoted) for _, quoted, getter in CSV_COLUMNS
        ))
    return "\n".join(lines)


def to_json(actions: Iterable[Action]) -> str:
    """Serialize *actions* as a pretty-printed JSON array of wire-form records."""
    return json.dumps([a.to_record() for a in actions], indent=2, ensure_ascii=False)


def export_filename(fmt: str, today: date | None = None) -> str:
    """Return ``climate-actions-<YYYY-MM-DD>.<fmt>`` for *today* (UTC by default)."""
    today = today or datetime.now(timezone.utc).date()
    return f"climate-actions-{today.isoformat()}.{fmt}"


def export_actions(actions: Sequence[Action], fmt: str = "csv",
                   today: date | None = None) -> ExportPayload:
    """Serialize *actions* in *fmt* ("csv" or "json").

    Raises:
        ValueError: unsupported format.
    """
    fmt = fmt.lower()
    if fmt not in FORMATS:
        raise ValueError(
            f"Unsupported export format: '{fmt}'. Must be one of: {', '.join(FORMATS)}"
        )
    content = to_csv(actions) if fmt == "csv" else to_json(actions)
    return ExportPayload(
        filename=export_filename(fmt, today),
        media_type=FORMATS[fmt],
        content=content,
    )
