"""HTTP response builders for validation Outcomes.

Provides the factory functions that turn an Outcome into the HTTP response
returned by ``/status/{user_identifier}`` and ``/email/{email_address}``:

  build_outcome_response():
      HTTP 200 when the Outcome is acceptable, HTTP 400 when it is not.
      Body is always the Outcome JSON: ``{"acceptable": bool, "reason": str|null}``.

  build_precondition_failed_response():
      HTTP 412 — the raw path value failed a length/blank precondition and
      never reached the validation core. Body has the same Outcome shape so
      clients parse one format.

The two are never confused: 412 means the core was not consulted, 400 means
the core rejected the value.
"""

from __future__ import annotations

from fastapi.responses import JSONResponse

from app.models.outcome import Outcome


def build_outcome_response(outcome: Outcome) -> JSONResponse:
    """Map a validation Outcome to HTTP 200 (acceptable) or 400 (rejected).

    Args:
        outcome: Outcome returned by a Validator facade.

    Returns:
        JSONResponse carrying the Outcome body.
    """
    return JSONResponse(
        status_code=200 if outcome.acceptable else 400,
        content=outcome.to_dict(),
    )


def build_precondition_failed_response(reason: str) -> JSONResponse:
    """Build the HTTP 412 response for values rejected before validation.

    Args:
        reason: Which precondition failed (e.g. the allowed length range).
                MUST NOT echo back the raw input value.

    Returns:
        JSONResponse with status_code=412 and a rejected Outcome body.
    """
    return JSONResponse(
        status_code=412,
        content=Outcome.rejected(reason).to_dict(),
    )
