"""ULID generation utility for EvenKeel.

Provides a single `generate_ulid()` function that returns a 26-character ULID
(Universally Unique Lexicographically Sortable Identifier) used as:
  - X-EvenKeel-Request-ID header value (set on every HTTP response)
  - request_id field bound into every structured log entry for that request

Uses the `python-ulid` library — do NOT hand-roll ULID generation.
"""

from __future__ import annotations

from ulid import ULID


def generate_ulid() -> str:
    """Generate a new ULID as a 26-character uppercase string.

    Returns:
        str: A 26-character ULID string in Crockford Base32
             (charset ``[0-9A-HJKMNP-TV-Z]``).

    Example::

        request_id = generate_ulid()
        assert len(request_id) == 26
    """
    return str(ULID())
