from __future__ import annotations

from shipyard import build_info
from shipyard.routes import api


def test_health_check_returns_defaults(client, monkeypatch) -> None:
    monkeypatch.delenv("SHIPYARD_VERSION", raising=False)
    monkeypatch.delenv("SHIPYARD_COMMIT", raising=False)
    monkeypatch.delenv("SHIPYARD_BUILD_TIME", raising=False)
    monkeypatch.setattr(build_info, "_installed_version", lambda: None)

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "version": "dev",
        "commit": "unknown",
        "build_time": "unknown",
    }


def test_health_check_returns_env_override(client, monkeypatch) -> None:
    monkeypatch.setenv("SHIPYARD_VERSION", "0.1.0")
    monkeypatch.setenv("SHIPYARD_COMMIT", "abc123")
    monkeypatch.setenv("SHIPYARD_BUILD_TIME", "2026-01-01T00:00:00Z")

    response = client.get("/health")

    assert response.json() == {
        "status": "ok",
        "version": "0.1.0",
        "commit": "abc123",
        "build_time": "2026-01-01T00:00:00Z",
    }


def test_api_router_exposes_import_and_health() -> None:
    paths = {route.path for route in api.router.routes}
    assert "/health" in paths
    assert "/projects/{project_key}/import/application" in paths
