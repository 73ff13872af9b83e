"""
API endpoint tests.

Uses FastAPI TestClient (backed by httpx) with a temporary static snapshot
and status log; Google Sheets is disabled. Each test group covers one
endpoint: happy path, filters, invalid input and unavailable data.
"""

import json

import pytest

# FastAPI TestClient requires fastapi + httpx; skip the entire module if not installed
pytest.importorskip("fastapi")
pytest.importorskip("httpx")

from fastapi.testclient import TestClient  # noqa: E402


def _client_for(app_config):
    from api.app import create_app
    return TestClient(create_app(config=app_config), raise_server_exceptions=False)


@pytest.fixture()
def broken_client(app_config, tmp_path):
    """Client whose static snapshot is missing and Sheets is not configured."""
    app_config.static_path = tmp_path / "missing.json"
    with _client_for(app_config) as c:
        yield c


@pytest.fixture()
def invalid_client(app_config, snapshot_file, sample_records):
    """Client whose snapshot contains one record with an unknown status."""
    sample_records[2]["status"] = "Done"
    snapshot_file.write_text(json.dumps(sample_records), encoding="utf-8")
    with _client_for(app_config) as c:
        yield c


# ── /health ───────────────────────────────────────────────────────────────────

class TestHealth:
    def test_health_ok(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["sources"]["static_file_exists"] is True
        assert body["sources"]["google_sheets"] is False

    def test_health_reports_cache(self, client):
        client.get("/api/actions")
        client.get("/api/actions")
        cache = client.get("/health").json()["cache"]
        assert cache["sources"]["hits"] >= 1
        assert cache["generation"] == 0
        client.post("/api/update-status", json={"actionId": "4", "newStatus": "Completed"})
        assert client.get("/health").json()["cache"]["generation"] == 1

    def test_health_no_source(self, broken_client):
        resp = broken_client.get("/health")
        assert resp.status_code == 503
        assert resp.json()["status"] == "no_data_source"


# ── /api/actions ──────────────────────────────────────────────────────────────

class TestReadActions:
    def test_returns_raw_records(self, client, sample_records):
        resp = client.get("/api/actions")
        assert resp.status_code == 200
        assert resp.json() == sample_records

    def test_invalid_records_passed_through(self, invalid_client):
        resp = invalid_client.get("/api/actions")
        assert resp.status_code == 200
        assert resp.json()[2]["status"] == "Done"

    def test_all_sources_failed(self, broken_client):
        resp = broken_client.get("/api/actions")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to load actions data"}


# ── /api/update-status ────────────────────────────────────────────────────────

class TestUpdateStatus:
    def test_success(self, client):
        resp = client.post("/api/update-status",
                           json={"actionId": "4", "newStatus": "In progress"})
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Status updated successfully"}

    def test_read_your_writes(self, client):
        client.get("/api/v1/actions")  # warm the caches
        client.post("/api/update-status", json={"actionId": "4", "newStatus": "Completed"})

        raw = {r["id"]: r for r in client.get("/api/actions").json()}
        assert raw["4"]["status"] == "Completed"
        assert raw["4"]["status_history"][0]["status"] == "Completed"

        summary = client.get("/api/v1/dashboard/summary").json()
        assert summary["kpis"]["statusCounts"]["Completed"] == 2
        assert summary["kpis"]["statusCounts"]["Not started"] == 0

    def test_update_changes_sort_position(self, client):
        client.post("/api/update-status", json={"actionId": "5", "newStatus": "Ready to start"})
        ids = [a["id"] for a in client.get("/api/v1/actions").json()["items"]]
        # Campinas before Serra within "Ready to start"
        assert ids[:2] == ["3", "5"]

    def test_status_log_written(self, client, app_config):
        client.post("/api/update-status", json={"actionId": "2", "newStatus": "On hold"})
        entries = json.loads(app_config.status_log_path.read_text(encoding="utf-8"))
        assert entries[-1]["actionId"] == "2"
        assert entries[-1]["newStatus"] == "On hold"

    def test_unknown_action(self, client):
        resp = client.post("/api/update-status",
                           json={"actionId": "nope", "newStatus": "Completed"})
        assert resp.status_code == 404

    def test_invalid_status(self, client):
        resp = client.post("/api/update-status",
                           json={"actionId": "1", "newStatus": "Done"})
        assert resp.status_code == 422

    def test_missing_fields(self, client):
        resp = client.post("/api/update-status", json={"actionId": "1"})
        assert resp.status_code == 422

    def test_empty_action_id(self, client):
        resp = client.post("/api/update-status",
                           json={"actionId": "", "newStatus": "Completed"})
        assert resp.status_code == 422

    def test_data_unavailable(self, broken_client):
        resp = broken_client.post("/api/update-status",
                                  json={"actionId": "1", "newStatus": "Completed"})
        assert resp.status_code == 503

    def test_corrupt_status_log_preserved(self, client, app_config):
        app_config.status_log_path.write_text("[{", encoding="utf-8")
        resp = client.post("/api/update-status",
                           json={"actionId": "1", "newStatus": "Completed"})
        assert resp.status_code == 503
        assert app_config.status_log_path.read_text(encoding="utf-8") == "[{"

    def test_failed_write_not_reported_as_success(self, client):
        from unittest.mock import patch
        with patch("api.sources.StatusLog.append", side_effect=OSError("read-only")):
            resp = client.post("/api/update-status",
                               json={"actionId": "4", "newStatus": "Completed"})
        assert resp.status_code == 503
        assert resp.json()["detail"] == "Failed to record status update"
        item = next(a for a in client.get("/api/v1/actions").json()["items"] if a["id"] == "4")
        assert item["status"] == "Not started"


# ── /api/v1/actions ───────────────────────────────────────────────────────────

class TestListActions:
    def test_default_order(self, client):
        body = client.get("/api/v1/actions").json()
        assert body["total"] == 5
        assert [a["id"] for a in body["items"]] == ["3", "2", "1", "4", "5"]
        assert body["filters"] == {}
        assert body["location"] == "/"

    def test_items_use_wire_names(self, client):
        item = client.get("/api/v1/actions").json()["items"][0]
        assert item["actionName"] == "Rooftop solar on schools"
        assert item["costTier"] == "Low"
        assert "investmentUSD" not in item

    def test_facet_filters(self, client):
        body = client.get("/api/v1/actions",
                          params={"category": "Mitigation", "cost": "High"}).json()
        assert [a["id"] for a in body["items"]] == ["1", "4"]
        assert body["filters"] == {"category": "Mitigation", "cost": "High"}

    def test_multi_value_facet(self, client):
        body = client.get("/api/v1/actions", params={"sector": "Waste,Transportation"}).json()
        assert body["total"] == 2

    def test_city_and_search(self, client):
        body = client.get("/api/v1/actions", params={"city": "Serra", "search": "solar"}).json()
        assert [a["id"] for a in body["items"]] == ["5"]
        assert body["location"] == "/?city=Serra&search=solar"

    def test_unknown_facet_value_ignored(self, client):
        body = client.get("/api/v1/actions", params={"sector": "Oceans"}).json()
        assert body["total"] == 5

    def test_no_matches(self, client):
        resp = client.get("/api/v1/actions", params={"sector": "IPPU"})
        assert resp.status_code == 200
        assert resp.json()["items"] == []

    def test_invalid_data(self, invalid_client):
        resp = invalid_client.get("/api/v1/actions")
        assert resp.status_code == 503
        body = resp.json()
        assert body["error"] == "Data unavailable"
        assert "Failed to load climate actions data" in body["detail"]

    def test_data_unavailable(self, broken_client):
        assert broken_client.get("/api/v1/actions").status_code == 503


# ── /api/v1/dashboard/summary ─────────────────────────────────────────────────

class TestDashboardSummary:
    def test_unfiltered(self, client):
        body = client.get("/api/v1/dashboard/summary").json()
        kpis = body["kpis"]
        assert kpis["totalCities"] == 3
        assert kpis["totalActions"] == 5
        assert kpis["mitigationActions"] == 3
        assert kpis["adaptationActions"] == 2
        assert kpis["sectorCounts"]["IPPU"] == 0
        assert body["categoryShares"] == {"Mitigation": 60.0, "Adaptation": 40.0}
        assert body["cities"] == ["Campinas", "Recife", "Serra"]
        assert body["activeFilters"] == 0

    def test_filtered(self, client):
        body = client.get("/api/v1/dashboard/summary", params={"city": "Recife"}).json()
        assert body["kpis"]["totalActions"] == 2
        assert body["kpis"]["totalCities"] == 1
        assert body["cities"] == ["Campinas", "Recife", "Serra"]
        assert body["activeFilters"] == 1
        assert body["filters"] == {"city": "Recife"}

    def test_empty_result_shares_are_zero(self, client):
        body = client.get("/api/v1/dashboard/summary", params={"sector": "IPPU"}).json()
        assert body["kpis"]["totalActions"] == 0
        assert body["categoryShares"] == {"Mitigation": 0.0, "Adaptation": 0.0}


# ── /api/v1/download ──────────────────────────────────────────────────────────

class TestDownload:
    def test_csv(self, client):
        resp = client.get("/api/v1/download")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        disposition = resp.headers["content-disposition"]
        assert disposition.startswith("attachment; filename=climate-actions-")
        assert disposition.endswith(".csv")
        assert resp.headers["x-total-count"] == "5"
        lines = resp.text.split("\n")
        assert lines[0].startswith("ID,City,Country,Action Name")
        assert len(lines) == 6

    def test_csv_rows_in_display_order(self, client):
        lines = client.get("/api/v1/download").text.split("\n")
        assert [line.split(",")[0] for line in lines[1:]] == ["3", "2", "1", "4", "5"]

    def test_json_filtered(self, client):
        resp = client.get("/api/v1/download", params={"fmt": "json", "city": "Serra"})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("application/json")
        assert resp.headers["content-disposition"].endswith(".json")
        assert [r["id"] for r in resp.json()] == ["1", "5"]

    def test_empty_export(self, client):
        resp = client.get("/api/v1/download", params={"sector": "IPPU"})
        assert resp.status_code == 200
        assert resp.headers["x-total-count"] == "0"
        assert "\n" not in resp.text

    def test_invalid_format(self, client):
        assert client.get("/api/v1/download", params={"fmt": "xlsx"}).status_code == 422
