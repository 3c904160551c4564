"""EvenKeel FastAPI application factory + lifespan lifecycle.

This module implements:
  - create_app() — testable application factory
  - lifespan — @asynccontextmanager startup/shutdown sequence
  - /health router — delegated to app/health.py
  - /status, /email routers — delegated to app/api/routes.py
  - /        route  — service discovery root
  - app = create_app() — module-level instance for uvicorn

Startup sequence:
  1. load_config()        → app.state.config
  2. build_validators()   → app.state.validators (rule set resolved ONCE here)
  3. OpenAPI metadata     → title / description / contact from config
  4. app.state.ready = True

Shutdown sequence (reverse):
  app.state.ready = False → clear result caches
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.routing import APIRouter

from app.api.middleware import RequestIdMiddleware
from app.api.routes import router as validation_router
from app.config import Config, load_config
from app.health import STARTING_DETAIL
from app.health import router as health_router
from app.validation.factory import Validators, build_validators
from app.utils.logger import configure_logging, get_logger

APP_VERSION: str = "1.0.0"

# ─── Logging Setup ────────────────────────────────────────────────────────────
# Configure logging at module import time (before any other imports that may log).
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO" if not DEBUG else "DEBUG")
JSON_LOGS = os.getenv("JSON_LOGS", "true").lower() == "true"

configure_logging(log_level=LOG_LEVEL, json_output=JSON_LOGS)
logger = get_logger(__name__)


root_router = APIRouter(tags=["root"])


# ─── Dependencies ─────────────────────────────────────────────────────────────


async def require_ready(request: Request) -> None:
    """FastAPI dependency: raises HTTP 503 if app.state.ready is not True.

    All validation routes consume this dependency. /health handles the 503
    case itself.
    """
    if not getattr(request.app.state, "ready", False):
        raise HTTPException(status_code=503, detail=STARTING_DETAIL)


# ─── Root Endpoint ────────────────────────────────────────────────────────────


@root_router.get("/")
async def root() -> dict[str, str]:
    """Root endpoint — service identity / discovery."""
    return {
        "service": "EvenKeel",
        "tagline": "Constant-latency identifier and email validation",
        "status": "/status/{user_identifier}",
        "email": "/email/{email_address}",
        "health": "/health",
    }


# ─── Lifespan ─────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan — startup and shutdown sequence.

    Any configuration error (SystemExit from load_config(), ConfigurationError
    from build_validators()) propagates, so the process exits before ready=True
    is ever set and no request is served with a bad budget.
    """
    logger.info("EvenKeel starting up...")

    # ── Step 1: Load configuration ────────────────────────────────────────────
    config: Config = load_config()
    app.state.config = config

    # ── Step 2: Build validators (stub vs. production resolved once) ─────────
    validators: Validators = build_validators(config)
    app.state.validators = validators

    # ── Step 3: OpenAPI metadata from config ─────────────────────────────────
    app.title = config.api.title
    app.description = config.api.description
    if config.api.contact_name or config.api.contact_email:
        app.contact = {
            key: value
            for key, value in (
                ("name", config.api.contact_name),
                ("email", config.api.contact_email),
            )
            if value
        }
    app.openapi_schema = None  # regenerate with the configured metadata

    # ── Step 4: Mark as ready ─────────────────────────────────────────────────
    app.state.ready = True
    logger.info("EvenKeel ready", rule_set=validators.rule_set.value)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────────
    logger.info("EvenKeel shutting down...")
    app.state.ready = False
    validators.caches.clear()
    logger.info("EvenKeel shutdown complete")


# ─── Application Factory ──────────────────────────────────────────────────────


def create_app() -> FastAPI:
    """Create and configure the EvenKeel FastAPI application.

    Call this function directly in unit tests to get an isolated app instance:
        app = create_app()

    The module-level `app` is created at import time for uvicorn:
        uvicorn app.main:app --host 127.0.0.1 --port 8080

    Returns:
        Configured FastAPI application with lifespan, routers, and middleware.
    """
    # Interactive docs only in local development; they expose the full schema.
    _debug = os.getenv("DEBUG", "false").lower() == "true"

    application = FastAPI(
        title="EvenKeel",
        description="Constant-latency validation of user identifiers and email addresses",
        version=APP_VERSION,
        lifespan=lifespan,
        docs_url="/docs" if _debug else None,
        redoc_url="/redoc" if _debug else None,
        openapi_url="/openapi.json" if _debug else None,
    )

    # Initialize ready flag before lifespan — ensures every route returns 503
    # on any request that arrives before startup completes.
    application.state.ready = False

    application.add_middleware(RequestIdMiddleware)

    application.include_router(root_router)
    application.include_router(health_router)
    application.include_router(validation_router, dependencies=[Depends(require_ready)])

    # Global exception handlers
    @application.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        logger.warning(
            "HTTP exception",
            status_code=exc.status_code,
            detail=exc.detail,
            path=str(request.url.path),
        )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @application.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.error(
            "Unhandled exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=str(request.url.path),
        )
        return JSONResponse(
            status_code=500, content={"error": "Internal server error"}
        )

    return application


# ─── Module-Level App (for uvicorn) ───────────────────────────────────────────

app = create_app()
