"""
Action snapshot management for the API.

``ActionStore`` wraps the source chain with two caches:

- the raw read, so the spreadsheet is not hit on every request
  (``SOURCE_CACHE_TTL`` seconds);
- the validated, sorted snapshot built from that read.

Snapshots are immutable and carry a ``version`` that increases every time a
new one is built. Derived views (filtered lists, KPI summaries) are cached
under ``(version, criteria)`` so they can never outlive the data they were
computed from. A status update calls ``invalidate()``, which drops both
caches and makes the next request rebuild.

Routes get the store through the ``get_store`` dependency::

    from api.store import get_store

    @router.get("/example")
    def example(store: ActionStore = Depends(get_store)):
        snapshot = store.snapshot()
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Any

from actions.loader import DataUnavailableError, LOAD_FAILED_MESSAGE, load_actions
from actions.schema import Action
from api.sources import ActionSourceChain, SourceUnavailableError
from utils.cache import TTLCache
from utils.config import AppConfig

logger = logging.getLogger(__name__)

_RAW_KEY = "raw"
_SNAPSHOT_KEY = "snapshot"


@dataclass(frozen=True)
class Snapshot:
    """One validated, sorted load of the action collection."""
    version: int
    actions: tuple[Action, ...]


class ActionStore:
    """Cached access to raw records and validated snapshots.

    Every ``invalidate()`` bumps a generation counter. A read or snapshot
    build that started under an older generation still returns its result
    to its caller but never caches it, so data read before a status write
    cannot outlive the write.
    """

    def __init__(self, chain: ActionSourceChain, ttl_seconds: float = 60.0) -> None:
        self.chain = chain
        self._cache = TTLCache(maxsize=2, ttl_seconds=ttl_seconds)
        self.views = TTLCache(maxsize=256, ttl_seconds=ttl_seconds)
        self._versions = itertools.count(1)
        self._generation = 0
        self._lock = threading.Lock()
        self._generation_lock = threading.Lock()

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "ActionStore":
        return cls(ActionSourceChain.from_config(cfg), ttl_seconds=cfg.source_cache_ttl)

    def _cache_if_current(self, key: str, value: Any, generation: int) -> bool:
        with self._generation_lock:
            if generation != self._generation:
                logger.debug("discarding %s read from generation %d (now %d)",
                             key, generation, self._generation)
                return False
            self._cache.set(key, value)
            return True

    def raw(self) -> list[Any]:
        """Raw records as served by GET /api/actions.

        Raises:
            SourceUnavailableError: every source failed.
        """
        cached = self._cache.get(_RAW_KEY)
        if cached is not None:
            return cached
        generation = self._generation
        records = self.chain.read()
        self._cache_if_current(_RAW_KEY, records, generation)
        return records

    def snapshot(self) -> Snapshot:
        """Return the current validated, sorted snapshot.

        Raises:
            DataUnavailableError: sources failed or the data is invalid.
        """
        cached = self._cache.get(_SNAPSHOT_KEY)
        if cached is not None:
            return cached
        with self._lock:
            cached = self._cache.get(_SNAPSHOT_KEY)
            if cached is not None:
                return cached
            generation = self._generation
            try:
                actions = load_actions(self.raw)
            except SourceUnavailableError as exc:
                raise DataUnavailableError(LOAD_FAILED_MESSAGE) from exc
            snapshot = Snapshot(version=next(self._versions), actions=tuple(actions))
            if self._cache_if_current(_SNAPSHOT_KEY, snapshot, generation):
                logger.info("built snapshot v%d with %d actions",
                            snapshot.version, len(snapshot.actions))
            return snapshot

    def find(self, action_id: str) -> dict[str, Any] | None:
        """Return the raw record with *action_id*, or None."""
        for record in self.raw():
            if isinstance(record, dict) and str(record.get("id")) == action_id:
                return record
        return None

    def invalidate(self) -> None:
        """Drop cached reads, snapshots and derived views."""
        with self._generation_lock:
            self._generation += 1
            self._cache.clear()
            self.views.clear()
        logger.debug("action store invalidated (generation %d)", self._generation)

    def cache_stats(self) -> dict[str, Any]:
        """Hit/miss counters for the health endpoint."""
        return {
            "generation": self._generation,
            "sources": self._cache.stats(),
            "views": self.views.stats(),
        }


_store: ActionStore | None = None
_store_lock = threading.Lock()


def set_store(store: ActionStore | None) -> None:
    """Install the store used by ``get_store`` (called by ``create_app``)."""
    global _store
    _store = store


def get_store() -> ActionStore:
    """FastAPI dependency: return the process-wide ActionStore."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = ActionStore.from_config(AppConfig.from_env())
    return _store
