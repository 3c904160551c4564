"""Unit tests for GET /health (app/health.py).

Covers:
  - 503 before app.state.ready, body {"error": {"status": "starting", ...}}
  - 200 after startup with rule set, per-kind target (ms) and cache stats
  - Cache stats reflect hits and misses served through the validators
"""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from app.config import Config
from app.main import create_app


def _client(monkeypatch: pytest.MonkeyPatch, config: Config) -> TestClient:
    monkeypatch.setattr("app.main.load_config", lambda: config)
    return TestClient(create_app())


@pytest.mark.asyncio
async def test_health_503_body_before_ready() -> None:
    transport = ASGITransport(app=create_app())  # type: ignore[arg-type]
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/health")

    assert response.status_code == 503
    error = response.json()["error"]
    assert error["status"] == "starting"
    assert "message" in error


def test_health_200_after_startup(
    monkeypatch: pytest.MonkeyPatch, production_config: Config
) -> None:
    production_config.email.target_latency_ns = 5_000_000

    with _client(monkeypatch, production_config) as client:
        response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["rule_set"] == "production"
    assert body["validators"]["email"]["target_latency_ms"] == 5.0
    assert body["validators"]["identifier"]["target_latency_ms"] == 10.0
    assert set(body["validators"]["email"]["cache"]) == {
        "hits",
        "misses",
        "evictions",
        "expirations",
        "size",
    }


def test_health_reports_stub_rule_set(
    monkeypatch: pytest.MonkeyPatch, stub_config: Config
) -> None:
    with _client(monkeypatch, stub_config) as client:
        assert client.get("/health").json()["rule_set"] == "stub"


def test_health_cache_stats_track_requests(
    monkeypatch: pytest.MonkeyPatch, production_config: Config
) -> None:
    with _client(monkeypatch, production_config) as client:
        client.get("/status/Steve")
        client.get("/status/Steve")
        client.get("/email/abc@mail.com")
        body = client.get("/health").json()

    identifier_cache = body["validators"]["identifier"]["cache"]
    assert identifier_cache["misses"] == 1
    assert identifier_cache["hits"] == 1
    assert identifier_cache["size"] == 1
    assert body["validators"]["email"]["cache"]["size"] == 1
