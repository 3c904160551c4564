"""Unit tests for app/constants.py — shared latency, cache and input constants."""

from __future__ import annotations

from app.constants import (
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_TARGET_LATENCY_NS,
    EMAIL_REJECTED_REASON,
    IDENTIFIER_MAX_LENGTH,
    IDENTIFIER_MIN_LENGTH,
    IDENTIFIER_REJECTED_REASON,
    NANOSECONDS_IN_MILLISECOND,
)


class TestLatencyAndCacheConstants:
    """Verify the default budgets."""

    def test_default_target_latency_is_10ms(self) -> None:
        assert DEFAULT_TARGET_LATENCY_NS == 10 * NANOSECONDS_IN_MILLISECOND

    def test_default_cache_ttl_is_10_seconds(self) -> None:
        assert DEFAULT_CACHE_TTL_SECONDS == 10

    def test_default_cache_capacity_is_10000(self) -> None:
        assert DEFAULT_CACHE_MAX_ENTRIES == 10_000


class TestContractStrings:
    """Reason strings are observable and must not drift."""

    def test_identifier_reason(self) -> None:
        assert IDENTIFIER_REJECTED_REASON == "Fails Business Logic Check"

    def test_email_reason(self) -> None:
        assert EMAIL_REJECTED_REASON == "Fails Email Validation Check"

    def test_identifier_length_bounds(self) -> None:
        assert (IDENTIFIER_MIN_LENGTH, IDENTIFIER_MAX_LENGTH) == (2, 30)
