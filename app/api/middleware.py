"""Request ID middleware for EvenKeel.

Assigns a ULID to every request, binds it into the structlog context (so
every log line for the request carries ``request_id``) and returns it to the
client as ``X-EvenKeel-Request-ID``. A client-supplied ID is never trusted.
"""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.utils.logger import request_context
from app.utils.ulid import generate_ulid

REQUEST_ID_HEADER: str = "X-EvenKeel-Request-ID"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Starlette middleware tagging each request/response pair with a ULID.

    Registration (in create_app() in app/main.py):
        application.add_middleware(RequestIdMiddleware)
    """

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        with request_context(generate_ulid()) as request_id:
            request.state.request_id = request_id
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
