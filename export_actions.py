#!/usr/bin/env python3
"""
Export climate actions to a CSV or JSON file from the command line.

Loads from the API (ACTIONS_API_URL) or from a local snapshot, applies the
same filters a shared dashboard link carries, and writes
climate-actions-<date>.<fmt> into the output directory.

Usage:
    python export_actions.py                                   # CSV of everything
    python export_actions.py --format json --filters "sector=Waste&status=Completed"
    python export_actions.py --file public/actions.json --filters "?city=Serra"
    python export_actions.py --url http://dashboard.internal:8000 --out-dir exports/
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from actions.export import export_actions
from actions.filters import filter_actions
from actions.loader import ActionLoader, DataUnavailableError, load_actions
from utils.config import ClientConfig
from utils.formatting import format_count, format_share, format_usd
from utils.query import criteria_from_query_string

logger = logging.getLogger("export_actions")


def main(argv: list[str] | None = None) -> int:
    cfg = ClientConfig.from_env()
    parser = argparse.ArgumentParser(
        description="Export filtered climate actions to CSV or JSON.",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--url", default=cfg.base_url,
                        help=f"API base URL (default: {cfg.base_url})")
    source.add_argument("--file", type=Path, default=None,
                        help="Read a local JSON snapshot instead of the API")
    parser.add_argument("--format", dest="fmt", choices=["csv", "json"], default="csv")
    parser.add_argument("--filters", default="",
                        help="Filters in shareable-link form, e.g. 'sector=Waste&cost=Low'")
    parser.add_argument("--out-dir", type=Path, default=Path("."),
                        help="Directory for the export file (default: current)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    try:
        if args.file is not None:
            actions = load_actions(lambda: json.loads(args.file.read_text(encoding="utf-8")))
        else:
            with ActionLoader(args.url, timeout=cfg.timeout) as loader:
                actions = loader.load()
    except DataUnavailableError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    criteria = criteria_from_query_string(args.filters)
    matched = filter_actions(actions, criteria)
    if not matched:
        logger.info("no actions match the filters; writing an empty export")

    payload = export_actions(matched, args.fmt)
    args.out_dir.mkdir(parents=True, exist_ok=True)
    out_path = args.out_dir / payload.filename
    out_path.write_text(payload.content, encoding="utf-8")
    invested = sum(a.investment_usd or 0 for a in matched)
    print(f"Exported {format_count(len(matched))} of {format_count(len(actions))} actions "
          f"({format_share(len(matched), len(actions))}, "
          f"{format_usd(invested)} estimated investment) to {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
