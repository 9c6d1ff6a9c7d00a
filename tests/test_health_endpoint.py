from __future__ import annotations

from contextlib import contextmanager

from services.metrics import increment_payout_run


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["ok"] is True
    assert body["env"] == "dev"
    assert "gateway" in body


def test_readyz_reports_db_failure(client, monkeypatch):
    @contextmanager
    def broken_conn():
        raise RuntimeError("DATABASE_URL is not set.")
        yield

    monkeypatch.setattr("routes.health.get_conn", broken_conn)

    r = client.get("/readyz")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["ready"] is False
    assert body["db_ok"] is False
    assert "DATABASE_URL" in body["db_error"]


def test_metrics_exposes_payout_counters(client):
    increment_payout_run("success")

    r = client.get("/metrics")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/plain")
    assert 'payout_runs_total{result="success"} 1' in r.text


def test_readyz_checks_migration_revision(client, monkeypatch):
    @contextmanager
    def fake_conn():
        yield object()

    monkeypatch.setattr("routes.health.get_conn", fake_conn)
    monkeypatch.setattr("routes.health.current_revision", lambda conn: "0001_create_payout_configs")

    body = client.get("/readyz").json()
    assert body["ready"] is True
    assert body["migrated"] is True

    monkeypatch.setattr("routes.health.current_revision", lambda conn: None)

    body = client.get("/readyz").json()
    assert body["db_ok"] is True
    assert body["ready"] is False
