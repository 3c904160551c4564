"""Health endpoint for EvenKeel.

  GET /health — 503 until lifespan startup completes, then 200 with the
                active rule set and per-kind latency targets and cache stats.

Polled by container health probes and monitoring.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request

from app.constants import NANOSECONDS_IN_MILLISECOND
from app.validation.factory import Validators

router = APIRouter(tags=["health"])

STARTING_DETAIL: dict[str, str] = {
    "status": "starting",
    "message": "EvenKeel is starting up. Validators not built yet...",
}


@router.get("/health")
async def health(request: Request) -> dict[str, Any]:
    """Primary health check endpoint.

    Response body (200):
        {
          "status": "ok",
          "rule_set": "stub" | "production",
          "validators": {
            "email":      {"target_latency_ms": 10.0, "cache": {...}},
            "identifier": {"target_latency_ms": 10.0, "cache": {...}}
          }
        }

    Cache stats per kind: hits, misses, evictions, expirations, size.
    """
    if not getattr(request.app.state, "ready", False):
        raise HTTPException(status_code=503, detail=STARTING_DETAIL)

    validators: Validators = request.app.state.validators
    cache_stats = validators.caches.stats()

    return {
        "status": "ok",
        "rule_set": validators.rule_set.value,
        "validators": {
            validator.kind: {
                "target_latency_ms": validator.target_ns / NANOSECONDS_IN_MILLISECOND,
                "cache": cache_stats[validator.kind],
            }
            for validator in (validators.email, validators.identifier)
        },
    }
