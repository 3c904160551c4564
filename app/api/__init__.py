"""EvenKeel HTTP API package.

  - routes.py     — GET /status/{user_identifier}, GET /email/{email_address}
  - middleware.py — RequestIdMiddleware (ULID per request, bound into logs)
"""
