#!/usr/bin/env python3
"""
Climate Actions Dashboard — launch the API server.

Usage:
    python main.py                          # http://127.0.0.1:8000
    python main.py --port 9000              # http://127.0.0.1:9000
    python main.py --host 0.0.0.0           # listen on every interface
    python main.py --static /path/to/actions.json
    python main.py --reload                 # auto-reload on code changes

Defaults come from ``utils.config.AppConfig`` (APP_HOST, APP_PORT,
ACTIONS_STATIC_PATH, ...), the same settings the app factory reads.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from utils.config import AppConfig


def main() -> None:
    cfg = AppConfig.from_env()
    parser = argparse.ArgumentParser(
        description="Launch the Climate Actions Dashboard API.",
    )
    parser.add_argument(
        "--host", default=cfg.api_host,
        help=f"Bind address (default: {cfg.api_host}, from APP_HOST)",
    )
    parser.add_argument(
        "--port", type=int, default=cfg.api_port,
        help=f"Port to listen on (default: {cfg.api_port}, from APP_PORT)",
    )
    parser.add_argument(
        "--static", type=Path, default=None,
        help=f"Fallback JSON snapshot (default: {cfg.static_path}, from ACTIONS_STATIC_PATH)",
    )
    parser.add_argument(
        "--reload", action="store_true",
        help="Enable auto-reload on file changes (development mode)",
    )
    args = parser.parse_args()

    # The app factory builds its own AppConfig from the environment
    if args.static is not None:
        os.environ["ACTIONS_STATIC_PATH"] = str(args.static)
        cfg = AppConfig.from_env()

    if not cfg.sheets_configured and not cfg.static_path.exists():
        print(f"Warning: Google Sheets is not configured and {cfg.static_path} does not exist")
        print("  Set GOOGLE_SHEETS_API_KEY and GOOGLE_SHEETS_ID, or run")
        print("  'python build_actions_data.py' to build the static snapshot.")
        print()

    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn is not installed.")
        print("  pip install uvicorn[standard]")
        sys.exit(1)

    url = f"http://{'localhost' if args.host == '0.0.0.0' else args.host}:{args.port}"
    print(f"Starting Climate Actions API at {url}")
    print(f"Data: {'Google Sheets, then ' if cfg.sheets_configured else ''}{cfg.static_path}")
    print()

    uvicorn.run(
        "api.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
