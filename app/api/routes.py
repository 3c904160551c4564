"""Validation endpoints.

  GET /status/{user_identifier} — identifier must be 2–30 characters
  GET /email/{email_address}    — address must not be blank

Preconditions are checked HERE, before the validation core, and fail with
HTTP 412. Values that pass them are handed to the kind's Validator facade;
its Outcome maps to HTTP 200 (acceptable) or HTTP 400 (rejected).

Every request that reaches the facade is padded to the kind's target latency,
whether the Outcome was cached or freshly computed.
"""

from __future__ import annotations

from fastapi import APIRouter, Path, Request
from fastapi.responses import JSONResponse

from app.constants import IDENTIFIER_MAX_LENGTH, IDENTIFIER_MIN_LENGTH
from app.models.responses import build_outcome_response, build_precondition_failed_response
from app.validation.factory import Validators

router = APIRouter(tags=["validation"])

IDENTIFIER_LENGTH_REASON: str = (
    f"user identifier must be between {IDENTIFIER_MIN_LENGTH} "
    f"and {IDENTIFIER_MAX_LENGTH} characters"
)
EMAIL_BLANK_REASON: str = "email address must not be blank"


def _validators(request: Request) -> Validators:
    return request.app.state.validators


@router.get(
    "/status/{user_identifier}",
    summary="Check the status of the 'user identifier' supplied",
)
async def check_user_identifier(
    request: Request,
    user_identifier: str = Path(description="The 'user identifier' to be checked"),
) -> JSONResponse:
    if not IDENTIFIER_MIN_LENGTH <= len(user_identifier) <= IDENTIFIER_MAX_LENGTH:
        return build_precondition_failed_response(IDENTIFIER_LENGTH_REASON)

    outcome = await _validators(request).identifier.validate_async(user_identifier)
    return build_outcome_response(outcome)


@router.get(
    "/email/{email_address}",
    summary="Check the validity of the 'email address' supplied",
)
async def check_email_address(
    request: Request,
    email_address: str = Path(description="The 'email address' to be checked"),
) -> JSONResponse:
    if not email_address.strip():
        return build_precondition_failed_response(EMAIL_BLANK_REASON)

    outcome = await _validators(request).email.validate_async(email_address)
    return build_outcome_response(outcome)
