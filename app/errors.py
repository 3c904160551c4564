"""Exceptions shared across EvenKeel.

Only construction-time problems are exceptions. Rule evaluation, cache
operations and latency padding never raise to the caller.
"""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a component is constructed with an invalid setting.

    Examples: a non-positive target latency, cache TTL or cache capacity, or a
    cache namespace registered twice. Raised at startup, before any request
    is served.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
