"""Unit tests for the FastAPI application factory + lifespan lifecycle.

Covers:
  - create_app() importable, independent instances, ready=False before startup
  - /health and validation routes return 503 before ready
  - Lifespan builds validators once from config (stub vs. production)
  - Shutdown resets ready and clears the result caches
  - Startup aborts on an invalid latency budget (ConfigurationError)
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from app.config import Config
from app.errors import ConfigurationError
from app.main import create_app, lifespan
from app.validation.factory import RuleSetKind, Validators

# ─── Helpers ──────────────────────────────────────────────────────────────────


def _patch_load_config(monkeypatch: pytest.MonkeyPatch, config: Config) -> None:
    """Patch load_config in app.main to return ``config`` (no file I/O)."""
    monkeypatch.setattr("app.main.load_config", lambda: config)


# ─── Factory ──────────────────────────────────────────────────────────────────


class TestCreateAppFactory:
    """The factory is importable and testable in isolation."""

    def test_create_app_returns_fastapi_instance(self) -> None:
        assert isinstance(create_app(), FastAPI)

    def test_create_app_multiple_calls_return_independent_instances(self) -> None:
        assert create_app() is not create_app()

    def test_create_app_initialises_ready_false(self) -> None:
        assert create_app().state.ready is False

    def test_docs_disabled_outside_debug(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEBUG", "false")
        application = create_app()
        assert application.docs_url is None
        assert application.openapi_url is None


# ─── 503 before ready ─────────────────────────────────────────────────────────


class TestNotReady:
    """Every route except / answers 503 until startup completes."""

    @pytest.mark.asyncio
    async def test_health_returns_503_before_ready(self) -> None:
        application = create_app()
        # ASGITransport sends HTTP requests without triggering the ASGI lifespan.
        transport = ASGITransport(app=application)  # type: ignore[arg-type]
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/health")

        assert response.status_code == 503
        # Our custom exception handler wraps HTTPException.detail in {"error": ...}
        assert response.json()["error"]["status"] == "starting"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/status/Steve", "/email/abc@mail.com"])
    async def test_validation_routes_return_503_before_ready(self, path: str) -> None:
        application = create_app()
        transport = ASGITransport(app=application)  # type: ignore[arg-type]
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get(path)

        assert response.status_code == 503

    @pytest.mark.asyncio
    async def test_root_served_before_ready(self) -> None:
        application = create_app()
        transport = ASGITransport(app=application)  # type: ignore[arg-type]
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["service"] == "EvenKeel"


# ─── Startup / shutdown ───────────────────────────────────────────────────────


class TestLifespan:
    """Startup builds the validators, shutdown tears them down."""

    def test_startup_sets_ready_and_state(
        self, monkeypatch: pytest.MonkeyPatch, production_config: Config
    ) -> None:
        _patch_load_config(monkeypatch, production_config)
        application = create_app()

        with TestClient(application):
            assert application.state.ready is True
            assert application.state.config is production_config
            validators = application.state.validators
            assert isinstance(validators, Validators)
            assert validators.rule_set is RuleSetKind.PRODUCTION

    def test_stub_rule_set_selected_at_startup(
        self, monkeypatch: pytest.MonkeyPatch, stub_config: Config
    ) -> None:
        _patch_load_config(monkeypatch, stub_config)
        application = create_app()

        with TestClient(application):
            assert application.state.validators.rule_set is RuleSetKind.STUB

    def test_openapi_metadata_from_config(
        self, monkeypatch: pytest.MonkeyPatch, production_config: Config
    ) -> None:
        production_config.api.title = "Validation API"
        production_config.api.contact_email = "ops@example.com"
        _patch_load_config(monkeypatch, production_config)
        application = create_app()

        with TestClient(application):
            assert application.title == "Validation API"
            assert application.contact == {"email": "ops@example.com"}

    def test_shutdown_resets_ready_and_clears_caches(
        self, monkeypatch: pytest.MonkeyPatch, production_config: Config
    ) -> None:
        _patch_load_config(monkeypatch, production_config)
        application = create_app()

        with TestClient(application) as client:
            assert client.get("/status/Steve").status_code == 200
            validators = application.state.validators
            assert len(validators.identifier.cache) == 1

        assert application.state.ready is False
        assert len(validators.identifier.cache) == 0

    @pytest.mark.asyncio
    async def test_invalid_budget_aborts_startup(
        self, monkeypatch: pytest.MonkeyPatch, production_config: Config
    ) -> None:
        production_config.identifier.target_latency_ns = 0
        _patch_load_config(monkeypatch, production_config)
        application = create_app()

        with pytest.raises(ConfigurationError):
            async with lifespan(application):
                pass
        assert application.state.ready is False
