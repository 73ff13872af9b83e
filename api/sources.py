"""
Action data sources behind GET /api/actions.

The read path is a fallback chain: the Google Sheets values API first, then
the static JSON snapshot. From a caller's point of view it is one logical
read; ``SourceUnavailableError`` is raised only when every source fails.

Status updates are appended to a local JSON log and overlaid onto every read,
so a successful POST /api/update-status is visible to the very next GET.

Rows from the spreadsheet (and from the CSV the snapshot is built from) are
mapped to wire-form records by ``record_from_row()``.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from urllib.parse import quote

import requests

from utils.config import AppConfig
from utils.http import SessionManager, get_json
from utils.strings import normalize_whitespace, safe_int, split_tags

logger = logging.getLogger(__name__)

SHEETS_VALUES_URL = "https://sheets.googleapis.com/v4/spreadsheets/{sheet_id}/values/{range}"

# lowercased header -> record field
_TEXT_FIELDS = {
    "id": "id",
    "city": "city",
    "country": "country",
    "actionname": "actionName",
    "category": "category",
    "sector": "sector",
    "costtier": "costTier",
    "status": "status",
    "description": "description",
    "lastupdated": "lastUpdated",
}
_OPTIONAL_TEXT_FIELDS = {
    "reductionpotentialpct": "reductionPotentialPct",
    "implementationtimeyears": "implementationTimeYears",
    "owner": "owner",
}
_LOG_KEYS = ("actionId", "newStatus", "date")


class SourceUnavailableError(RuntimeError):
    """Every source in the read chain failed."""


class StatusLogError(SourceUnavailableError):
    """The status log exists but cannot be parsed."""


def record_from_row(row: dict[str, Any]) -> dict[str, Any]:
    """Map one header->cell row to a wire-form action record.

    Headers match case-insensitively and ignore whitespace, so "Action Name"
    and "actionName" name the same column.
    A missing column leaves its field out so the schema names it later;
    blank optional fields are omitted.
    Unknown headers are ignored.
    """
    cells = {normalize_whitespace(str(k)).replace(" ", "").lower(): v
             for k, v in row.items() if k is not None}
    record: dict[str, Any] = {}
    for header, field in _TEXT_FIELDS.items():
        if header in cells:
            value = cells[header]
            record[field] = value.strip() if isinstance(value, str) else value
    for header, field in _OPTIONAL_TEXT_FIELDS.items():
        value = cells.get(header)
        if isinstance(value, str):
            value = value.strip()
        if value:
            record[field] = value
    investment = safe_int(cells.get("investmentusd"))
    if investment is not None:
        record["investmentUSD"] = investment
    tags = split_tags(cells.get("tags"))
    if tags:
        record["tags"] = tags
    return record


def rows_to_records(rows: list[list[Any]]) -> list[dict[str, Any]]:
    """Convert a values grid (first row headers) to records, dropping rows without an id."""
    if not rows:
        return []
    headers = [str(h) for h in rows[0]]
    records = []
    for row in rows[1:]:
        padded = list(row) + [""] * (len(headers) - len(row))
        record = record_from_row(dict(zip(headers, padded)))
        if record.get("id"):
            records.append(record)
    return records


class SheetsSource:
    """Reads action rows from a Google Sheets range via the v4 values API."""

    name = "google_sheets"

    def __init__(self, api_key: str | None, sheet_id: str | None,
                 cell_range: str = "Actions!A:O", timeout: float = 15.0,
                 session_manager: SessionManager | None = None) -> None:
        self.api_key = api_key
        self.sheet_id = sheet_id
        self.cell_range = cell_range
        self.timeout = timeout
        self._sessions = session_manager or SessionManager()

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.sheet_id)

    def read(self) -> list[dict[str, Any]]:
        """Return the sheet's records.

        Raises:
            SourceUnavailableError: credentials missing or the sheet is empty.
            requests.RequestException: transport failure or non-2xx status.
        """
        if not self.configured:
            raise SourceUnavailableError("Google Sheets credentials not configured")
        url = SHEETS_VALUES_URL.format(
            sheet_id=quote(self.sheet_id, safe=""),
            range=quote(self.cell_range, safe="!:"),
        )
        logger.info("reading Google Sheets range %s", self.cell_range)
        data = get_json(self._sessions.session, url, self.timeout,
                        params={"key": self.api_key})
        rows = data.get("values") if isinstance(data, dict) else None
        if not rows:
            raise SourceUnavailableError("No data found in Google Sheets")
        return rows_to_records(rows)


class StaticFileSource:
    """Reads the JSON snapshot written by build_actions_data.py."""

    name = "static_file"

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def read(self) -> list[Any]:
        """Return the decoded snapshot.

        Raises:
            OSError: file missing or unreadable.
            ValueError: not JSON, or not a JSON array.
        """
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError(f"{self.path} does not contain a JSON array")
        return data


class StatusLog:
    """Append-only JSON log of status updates, overlaid onto source reads.

    Each entry is ``{"actionId", "newStatus", "date"}``. Reads and writes share
    one lock and writes replace the file atomically. An unreadable log raises
    ``StatusLogError``; it is never read as empty or overwritten.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> list[dict[str, str]]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.error("status log %s unreadable: %s", self.path, exc)
            raise StatusLogError(f"Status log {self.path} is unreadable") from exc
        if not isinstance(data, list) or not all(
            isinstance(e, dict) and all(isinstance(e.get(k), str) for k in _LOG_KEYS)
            for e in data
        ):
            logger.error("status log %s has an unexpected shape", self.path)
            raise StatusLogError(f"Status log {self.path} is malformed")
        return data

    def _write(self, entries: list[dict[str, str]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp",
                                        dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(entries, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def entries(self) -> list[dict[str, str]]:
        """Return every logged change, oldest first.

        Raises:
            StatusLogError: the log exists but cannot be parsed.
        """
        with self._lock:
            return self._read()

    def append(self, action_id: str, new_status: str,
               when: datetime | None = None) -> dict[str, str]:
        """Record a status change and return the stored entry.

        Raises:
            StatusLogError: the existing log cannot be parsed; it is left
                untouched.
        """
        when = when or datetime.now(timezone.utc)
        entry = {
            "actionId": action_id,
            "newStatus": new_status,
            "date": when.date().isoformat(),
        }
        with self._lock:
            existing = self._read()
            existing.append(entry)
            self._write(existing)
        logger.info("status update logged: %s -> %s", action_id, new_status)
        return entry

    def apply(self, records: list[Any]) -> list[Any]:
        """Return *records* with logged status changes applied, oldest first.

        Each applied change sets ``status`` and ``lastUpdated`` and prepends
        a ``{date, status}`` entry to ``status_history``. Records are copied,
        never modified in place; non-dict items pass through untouched.
        """
        entries = self.entries()
        if not entries:
            return records
        by_id: dict[str, list[dict[str, str]]] = {}
        for entry in entries:
            by_id.setdefault(str(entry.get("actionId")), []).append(entry)

        result = []
        for record in records:
            changes = by_id.get(record.get("id")) if isinstance(record, dict) else None
            if not changes:
                result.append(record)
                continue
            updated = dict(record)
            history = list(updated.get("status_history") or [])
            for change in changes:
                updated["status"] = change["newStatus"]
                updated["lastUpdated"] = change["date"]
                history.insert(0, {"date": change["date"], "status": change["newStatus"]})
            updated["status_history"] = history
            result.append(updated)
        return result


class ActionSourceChain:
    """The collaborator's read path: spreadsheet, then static snapshot, plus the status overlay."""

    def __init__(self, sheets: SheetsSource, static: StaticFileSource,
                 status_log: StatusLog) -> None:
        self.sheets = sheets
        self.static = static
        self.status_log = status_log

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "ActionSourceChain":
        return cls(
            SheetsSource(cfg.sheets_api_key, cfg.sheets_id, cfg.sheets_range,
                         timeout=cfg.http_timeout),
            StaticFileSource(cfg.static_path),
            StatusLog(cfg.status_log_path),
        )

    def read(self) -> list[Any]:
        """Return raw records from the first source that succeeds.

        Raises:
            SourceUnavailableError: both sources failed.
        """
        try:
            records = self.sheets.read()
            source = self.sheets.name
        except (SourceUnavailableError, requests.RequestException, ValueError) as exc:
            logger.warning("Google Sheets unavailable, falling back to %s: %s",
                           self.static.path, exc)
            try:
                records = self.static.read()
                source = self.static.name
            except (OSError, ValueError) as fallback_exc:
                logger.error("static snapshot unavailable: %s", fallback_exc)
                raise SourceUnavailableError("Failed to load actions data") from fallback_exc
        logger.info("read %d raw actions from %s", len(records), source)
        return self.status_log.apply(records)

    def describe(self) -> dict[str, Any]:
        """Source configuration summary for the health endpoint."""
        return {
            "google_sheets": self.sheets.configured,
            "static_file": str(self.static.path),
            "static_file_exists": self.static.path.exists(),
            "status_log": str(self.status_log.path),
        }
