#!/usr/bin/env python3
"""
Build the static actions snapshot from a CSV export of the spreadsheet.

The API falls back to this snapshot whenever Google Sheets is unavailable.
Rows go through the same header mapping as the live spreadsheet read, and
every row is validated before anything is written: one bad row fails the
build, and the report lists every problem found, not just the first.

Usage:
    python build_actions_data.py                                # data/actions.csv -> public/actions.json
    python build_actions_data.py --csv exports/march.csv --out public/actions.json
    python build_actions_data.py --check                        # validate only
"""

from __future__ import annotations

import argparse
import csv
import json
import logging
import sys
from collections import Counter
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from actions.schema import Action, error_field
from api.sources import record_from_row
from utils.patterns import ISO_DATE
from utils.validation import ValidationIssue, ValidationRegistry, ValidationResult

logger = logging.getLogger("build_actions_data")


def read_csv_records(csv_path: Path) -> list[dict[str, Any]]:
    """Read *csv_path* and map each non-empty row to a wire-form record."""
    with open(csv_path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        records = []
        for row in reader:
            if not any((v or "").strip() for v in row.values() if isinstance(v, str)):
                continue
            records.append(record_from_row(row))
    return records


# ── Checks ────────────────────────────────────────────────────────────────────

def check_schema(records: list[dict[str, Any]]) -> list[ValidationIssue]:
    """Every record must satisfy the Action schema."""
    issues = []
    for i, record in enumerate(records):
        try:
            Action.model_validate(record)
        except ValidationError as exc:
            first = exc.errors()[0]
            field = error_field(first["loc"]) or "record"
            issues.append(ValidationIssue(
                "schema", "error",
                f"row {i + 2} (id={record.get('id', '?')}): {field}: {first['msg']}",
                sample=first.get("input"),
            ))
    return issues


def check_duplicate_ids(records: list[dict[str, Any]]) -> list[ValidationIssue]:
    """Action ids must be unique across the snapshot."""
    counts = Counter(r.get("id") for r in records)
    return [
        ValidationIssue("duplicate_ids", "error", f"id '{action_id}' appears {n} times",
                        sample=action_id, count=n)
        for action_id, n in counts.items() if n > 1
    ]


def check_last_updated(records: list[dict[str, Any]]) -> list[ValidationIssue]:
    """lastUpdated should be an ISO date; other formats still load but sort oddly."""
    bad = [r for r in records
           if isinstance(r.get("lastUpdated"), str) and not ISO_DATE.match(r["lastUpdated"])]
    if not bad:
        return []
    return [ValidationIssue(
        "last_updated_format", "warning",
        "lastUpdated is not an ISO date (YYYY-MM-DD)",
        sample=bad[0]["lastUpdated"], count=len(bad),
    )]


def build_registry() -> ValidationRegistry:
    registry = ValidationRegistry()
    registry.register("schema", check_schema)
    registry.register("duplicate_ids", check_duplicate_ids)
    registry.register("last_updated_format", check_last_updated)
    return registry


def build_snapshot(csv_path: Path, out_path: Path,
                   check_only: bool = False) -> ValidationResult:
    """Validate the CSV and, if it has no errors, write the JSON snapshot.

    Raises:
        OSError: the CSV cannot be read or the snapshot cannot be written.
    """
    records = read_csv_records(csv_path)
    result = build_registry().run_all(records)
    if not result.is_valid():
        logger.error("%s has %d error(s); snapshot not written",
                     csv_path, result.error_count())
        return result
    if not check_only:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(records, indent=2, ensure_ascii=False),
                            encoding="utf-8")
        logger.info("wrote %d actions to %s", len(records), out_path)
    return result


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Convert the actions CSV into the static JSON snapshot.",
    )
    parser.add_argument("--csv", type=Path, default=Path("data/actions.csv"),
                        help="Input CSV (default: data/actions.csv)")
    parser.add_argument("--out", type=Path, default=Path("public/actions.json"),
                        help="Output JSON (default: public/actions.json)")
    parser.add_argument("--check", action="store_true",
                        help="Validate only; do not write the snapshot")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    try:
        result = build_snapshot(args.csv, args.out, check_only=args.check)
    except OSError as exc:
        logger.error("could not build snapshot: %s", exc)
        return 1
    print(result.summary_text())
    return 0 if result.is_valid() else 1


if __name__ == "__main__":
    sys.exit(main())
