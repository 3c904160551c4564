"""ValueValidator — maps a Rule's boolean verdict to one of two fixed Outcomes."""

from __future__ import annotations

from typing import Optional

from app.models.outcome import ACCEPTED, Outcome
from app.validation.rules import Rule


class ValueValidator:
    """Evaluates a composed Rule and returns a shared, immutable Outcome.

    Args:
        rule:     Predicate classifying the input. Receives None unchanged.
        rejected: Outcome returned when the rule fails (carries the reason).
        accepted: Outcome returned when the rule passes (default ``ACCEPTED``).

    ``evaluate()`` never raises for string or None input; the same input
    always yields the same Outcome instance.
    """

    def __init__(
        self,
        rule: Rule,
        rejected: Outcome,
        accepted: Outcome = ACCEPTED,
    ) -> None:
        if rejected.acceptable or not accepted.acceptable:
            raise ValueError("ValueValidator needs one acceptable and one rejected Outcome")
        self._rule = rule
        self._accepted = accepted
        self._rejected = rejected

    @property
    def rejected(self) -> Outcome:
        return self._rejected

    def evaluate(self, value: Optional[str]) -> Outcome:
        return self._accepted if self._rule(value) else self._rejected

    __call__ = evaluate
