"""Outcome — the verdict returned by every validation.

INVARIANT: ``reason`` is set if and only if ``acceptable`` is False.

Outcomes are frozen dataclasses: one instance is created per rule set and
then shared, read-only, between fresh evaluations and cache hits.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Outcome:
    """Accept / reject verdict with an optional human-readable reason.

    Attributes:
        acceptable: True when the value passed every rule.
        reason:     Why the value was rejected. None when acceptable.

    Raises:
        ValueError: If ``reason`` is given for an acceptable outcome, or
                    missing for a rejected one.
    """

    acceptable: bool
    reason: Optional[str] = None

    def __post_init__(self) -> None:
        if self.acceptable and self.reason is not None:
            raise ValueError("An acceptable Outcome must not carry a reason")
        if not self.acceptable and not self.reason:
            raise ValueError("A rejected Outcome must carry a reason")

    @classmethod
    def rejected(cls, reason: str) -> "Outcome":
        """Build a rejected Outcome carrying ``reason``."""
        return cls(acceptable=False, reason=reason)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation used in HTTP response bodies."""
        return {"acceptable": self.acceptable, "reason": self.reason}


#: Shared success verdict returned by every validator on acceptance.
ACCEPTED: Outcome = Outcome(acceptable=True)
