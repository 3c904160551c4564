"""Validation rules — pure predicates over an optional input string.

A Rule is any ``Callable[[Optional[str]], bool]``. Rules are:
  - pure and deterministic (same input → same answer, no I/O)
  - null-safe: ``None`` and blank strings are ordinary inputs, never errors
  - composable with ``all_of()`` (logical AND, evaluated in declared order)

IMPORT RULES:
  - ``import re2`` ONLY — ``import re`` is PROHIBITED in this file.
    google-re2 matches in linear time, so no input can trigger catastrophic
    backtracking and skew evaluation time.
"""

from __future__ import annotations

from typing import Callable, Optional

import re2  # google-re2. NEVER: import re

Rule = Callable[[Optional[str]], bool]

# ─── Patterns ─────────────────────────────────────────────────────────────────

# Local part: alnum run, optionally one separator from {. _ -} and another alnum run.
# Domain: one or more alnum/hyphen labels each followed by a dot, then a TLD of
# at least two letters.
EMAIL_PATTERN: str = (
    r"[A-Za-z0-9]+(?:[._-][A-Za-z0-9]+)?"
    r"@"
    r"(?:[A-Za-z0-9-]+\.)+[A-Za-z]{2,}"
)

# ASCII punctuation: !"#$%&'()*+,-./:;<=>?@[\]^_`{|}~
PUNCTUATION_PATTERN: str = r"[[:punct:]]"

_EMAIL_RE = re2.compile(EMAIL_PATTERN)
_PUNCTUATION_RE = re2.compile(PUNCTUATION_PATTERN)


# ─── Composition ──────────────────────────────────────────────────────────────


def all_of(*rules: Rule) -> Rule:
    """Compose ``rules`` with logical AND, evaluated in the given order.

    An empty composition accepts everything.
    """
    composed = tuple(rules)

    def rule(value: Optional[str]) -> bool:
        return all(r(value) for r in composed)

    return rule


def accept_all(value: Optional[str]) -> bool:
    """Permissive stub rule: accepts every input, including None."""
    return True


# ─── Identifier rules ─────────────────────────────────────────────────────────


def has_value(value: Optional[str]) -> bool:
    """False for None, empty, or whitespace-only input."""
    return value is not None and value.strip() != ""


def does_not_contain_x(value: Optional[str]) -> bool:
    """False when the literal uppercase ``X`` appears anywhere."""
    return value is not None and "X" not in value


def does_not_contain_punctuation(value: Optional[str]) -> bool:
    """False when any ASCII punctuation character appears anywhere.

    Strings that cannot be UTF-8 encoded (lone surrogates) fail the rule.
    """
    if value is None:
        return False
    try:
        return _PUNCTUATION_RE.search(value) is None
    except UnicodeEncodeError:
        return False


#: Production identifier rule set.
is_valid_identifier: Rule = all_of(has_value, does_not_contain_x, does_not_contain_punctuation)


# ─── Email rules ──────────────────────────────────────────────────────────────


def is_email_address(value: Optional[str]) -> bool:
    """True when the whole of ``value`` is a structurally valid email address."""
    if value is None:
        return False
    try:
        return _EMAIL_RE.fullmatch(value) is not None
    except UnicodeEncodeError:
        # re2 matches over UTF-8; lone surrogates are never an address
        return False
