from taskboard.config import settings
from taskboard.routes import health

def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}

def test_ready_when_schema_is_migrated(client, monkeypatch):
    monkeypatch.setattr(health, "db_ping", lambda: True)
    monkeypatch.setattr(health, "missing_tables", lambda: [])

    r = client.get("/ready")
    assert r.status_code == 200
    # rate limiting is off in tests, so redis is not consulted
    assert r.json() == {"status": "ok", "checks": {"db": True}}

def test_ready_reports_unmigrated_tables(client, monkeypatch):
    monkeypatch.setattr(health, "db_ping", lambda: True)
    monkeypatch.setattr(health, "missing_tables", lambda: ["tasks", "task_assignees"])

    r = client.get("/ready")
    assert r.status_code == 503
    body = r.json()
    assert body["status"] == "unready"
    assert body["checks"] == {"db": False}
    assert body["errors"]["db"] == "missing tables: tasks, task_assignees"

def test_ready_reports_unreachable_database(client, monkeypatch):
    monkeypatch.setattr(health, "db_ping", lambda: False)

    r = client.get("/ready")
    assert r.status_code == 503
    assert r.json()["errors"]["db"] == "database unreachable"

def test_ready_checks_redis_when_rate_limiting(client, monkeypatch):
    monkeypatch.setattr(settings, "rate_limit_enabled", True)
    monkeypatch.setattr(health, "db_ping", lambda: True)
    monkeypatch.setattr(health, "missing_tables", lambda: [])
    monkeypatch.setattr(health, "redis_ping", lambda: False)

    r = client.get("/ready")
    assert r.status_code == 503
    body = r.json()
    assert body["checks"] == {"db": True, "redis": False}
    assert body["errors"] == {"redis": "redis unreachable"}
