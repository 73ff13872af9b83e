"""
Tests for api/store.py — cached reads, snapshots and invalidation.
"""
import json
import sys
import threading
from pathlib import Path
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from actions.loader import DataUnavailableError
from api.sources import ActionSourceChain, SheetsSource, StaticFileSource, StatusLog
from api.sources import SourceUnavailableError
from api.store import ActionStore
from conftest import make_record


@pytest.fixture()
def store(tmp_path, snapshot_file):
    chain = ActionSourceChain(SheetsSource(None, None), StaticFileSource(snapshot_file),
                              StatusLog(tmp_path / "status.json"))
    return ActionStore(chain, ttl_seconds=60)


class TestActionStore:
    def test_raw_is_cached(self, store):
        store.chain = MagicMock(wraps=store.chain)
        store.raw()
        store.raw()
        assert store.chain.read.call_count == 1

    def test_snapshot_sorted_and_versioned(self, store):
        snapshot = store.snapshot()
        assert snapshot.version == 1
        assert [a.id for a in snapshot.actions] == ["3", "2", "1", "4", "5"]
        assert store.snapshot() is snapshot

    def test_invalidate_bumps_version(self, store):
        first = store.snapshot()
        store.invalidate()
        second = store.snapshot()
        assert second.version == first.version + 1

    def test_invalidate_drops_views(self, store):
        store.views.set(("summary", 1, None), "cached")
        store.invalidate()
        assert store.views.get(("summary", 1, None)) is None

    def test_find(self, store):
        assert store.find("2")["city"] == "Recife"
        assert store.find("missing") is None

    def test_status_update_visible_after_invalidate(self, store):
        store.snapshot()
        store.chain.status_log.append("4", "Ready to start")
        store.invalidate()
        assert store.snapshot().actions[0].id == "3"
        assert {a.id: a.status.value for a in store.snapshot().actions}["4"] == "Ready to start"

    def test_invalid_snapshot(self, store, snapshot_file, sample_records):
        sample_records[0]["category"] = "Resilience"
        snapshot_file.write_text(json.dumps(sample_records), encoding="utf-8")
        with pytest.raises(DataUnavailableError):
            store.snapshot()

    def test_sources_down(self, store, tmp_path):
        store.chain.static = StaticFileSource(tmp_path / "gone.json")
        with pytest.raises(SourceUnavailableError):
            store.raw()
        with pytest.raises(DataUnavailableError):
            store.snapshot()


class _BlockingChain:
    """Source chain whose first read blocks until released."""

    def __init__(self, status):
        self.status = status
        self.entered = threading.Event()
        self.release = threading.Event()
        self.calls = 0

    def read(self):
        self.calls += 1
        records = [make_record(id="1", status=self.status)]
        if self.calls == 1:
            self.entered.set()
            self.release.wait(timeout=5)
        return records


class TestInvalidateDuringRead:
    def _race(self, store, chain, call):
        results = []
        worker = threading.Thread(target=lambda: results.append(call()))
        worker.start()
        assert chain.entered.wait(timeout=5)
        chain.status = "Completed"
        store.invalidate()
        chain.release.set()
        worker.join(timeout=5)
        return results[0]

    def test_stale_raw_read_not_cached(self):
        chain = _BlockingChain("Not started")
        store = ActionStore(chain, ttl_seconds=60)
        stale = self._race(store, chain, store.raw)
        assert stale[0]["status"] == "Not started"
        assert store.raw()[0]["status"] == "Completed"

    def test_stale_snapshot_not_cached(self):
        chain = _BlockingChain("Not started")
        store = ActionStore(chain, ttl_seconds=60)
        stale = self._race(store, chain, store.snapshot)
        assert stale.actions[0].status.value == "Not started"
        fresh = store.snapshot()
        assert fresh.actions[0].status.value == "Completed"
        assert fresh.version > stale.version

    def test_cache_stats(self, store):
        store.raw()
        store.raw()
        stats = store.cache_stats()
        assert stats["sources"]["hits"] == 1
        store.invalidate()
        assert store.cache_stats()["generation"] == 1
