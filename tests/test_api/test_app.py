"""Tests for the health endpoint and app factory."""

from __future__ import annotations

from fastapi.testclient import TestClient
from fakes import ALICE

from daily_gm.api.app import create_app


def test_health_endpoint(gm_engine):
    """GET /health should return 200 with status ok."""
    with TestClient(create_app(engine=gm_engine)) as client:
        response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_app_has_openapi(gm_engine):
    with TestClient(create_app(engine=gm_engine)) as client:
        schema = client.get("/openapi.json").json()
    assert schema["info"]["title"] == "daily-gm"
    assert "/api/fetch-gms" in schema["paths"]


def test_lifespan_initializes_injected_engine(gm_engine):
    with TestClient(create_app(engine=gm_engine)):
        assert gm_engine.is_initialized


def test_engine_unavailable_before_startup(gm_engine):
    client = TestClient(create_app(engine=gm_engine), raise_server_exceptions=False)
    response = client.get(f"/api/stats/{ALICE}")
    assert response.status_code == 503
    assert response.json()["code"] == "engine-unavailable"


def test_metrics_endpoint(gm_engine):
    with TestClient(create_app(engine=gm_engine)) as client:
        client.get(f"/api/stats/{ALICE}")
        response = client.get("/metrics")
    assert response.status_code == 200
    assert "text/plain" in response.headers["content-type"]
    assert "dailygm_sync_total" in response.text
