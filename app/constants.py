"""Shared constants for EvenKeel.

All latency targets, cache budgets and input bounds used across modules are
defined here. No magic numbers in other modules — import from here.
"""

# ─── Time units ───────────────────────────────────────────────────────────────

NANOSECONDS_IN_MILLISECOND: int = 1_000_000
NANOSECONDS_IN_SECOND: int = 1_000_000_000

# ─── Constant-latency padding ────────────────────────────────────────────────

# Minimum wall-clock duration of every validation call, cache hit or miss.
# Two values have been used historically (5ms and 10ms); 10ms is the default
# for both validator kinds and can be overridden per kind in config.yaml.
DEFAULT_TARGET_LATENCY_NS: int = 10_000_000  # 10ms

# ─── Result cache ────────────────────────────────────────────────────────────

# Entries expire this long after they were written (reads never refresh).
DEFAULT_CACHE_TTL_SECONDS: int = 10

# Per-namespace capacity; the least-recently-used entry is evicted beyond this.
DEFAULT_CACHE_MAX_ENTRIES: int = 10_000

# ─── Validator kinds (cache namespaces) ──────────────────────────────────────

EMAIL_KIND: str = "email"
IDENTIFIER_KIND: str = "identifier"

# ─── Reason strings (observable contract — tested verbatim) ──────────────────

IDENTIFIER_REJECTED_REASON: str = "Fails Business Logic Check"
EMAIL_REJECTED_REASON: str = "Fails Email Validation Check"

# ─── HTTP input preconditions ────────────────────────────────────────────────

# /status/{user_identifier} length bounds, checked before the core is reached.
IDENTIFIER_MIN_LENGTH: int = 2
IDENTIFIER_MAX_LENGTH: int = 30
