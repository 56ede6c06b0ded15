# tests/test_health.py

from __future__ import annotations

from sqlalchemy.exc import OperationalError


def test_health_reports_database_and_process_stats(client) -> None:
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "ok"
    assert body["database"] == "connected"
    assert body["timestamp"].endswith("Z")
    assert body["response_time_ms"] >= 0
    assert body["uptime_seconds"] >= 0
    assert body["memory"]["max_rss_mb"] > 0


def test_health_needs_no_session(client) -> None:
    assert client.get("/api/health").status_code == 200


def test_health_reports_unreachable_database(client, monkeypatch) -> None:
    def broken_ping():
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr("taskhub.utils.db.ping", broken_ping)

    resp = client.get("/api/health")
    assert resp.status_code == 503
    body = resp.get_json()
    assert body["status"] == "error"
    assert body["database"] == "disconnected"
    assert "database is locked" in body["error"]


def test_health_without_resource_module(client, monkeypatch) -> None:
    monkeypatch.setattr("taskhub.app.resource", None)

    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["database"] == "connected"
    assert body["memory"] is None
