"""Padding calculation for constant-latency calls.

Given a configured target duration, ``DelayCalculator`` turns the measured
duration of a call into the delay still owed to reach the target, split into
whole milliseconds plus a sub-millisecond nanosecond remainder.

INVARIANTS:
  - The delay is never negative: a call that met or overran the target owes
    ``DelayPeriod(0, 0)``.
  - ``millis * 1_000_000 + nanos == target_ns - elapsed_ns`` otherwise, exactly.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.constants import NANOSECONDS_IN_MILLISECOND, NANOSECONDS_IN_SECOND
from app.errors import ConfigurationError

#: Exact message raised for a target below one nanosecond (tested verbatim).
INVALID_TARGET_MESSAGE: str = "max time in nano seconds must be greater than 1"


@dataclass(frozen=True)
class DelayPeriod:
    """Padding to sleep: whole milliseconds plus 0 ≤ nanos < 1,000,000."""

    millis: int
    nanos: int

    @property
    def total_ns(self) -> int:
        """The whole delay in nanoseconds."""
        return self.millis * NANOSECONDS_IN_MILLISECOND + self.nanos

    @property
    def seconds(self) -> float:
        """The whole delay in (fractional) seconds, as sleep primitives expect."""
        return self.total_ns / NANOSECONDS_IN_SECOND

    @property
    def is_zero(self) -> bool:
        return self.millis == 0 and self.nanos == 0


ZERO_DELAY: DelayPeriod = DelayPeriod(millis=0, nanos=0)


class DelayCalculator:
    """Computes the delay needed for a call to last ``target_ns`` in total.

    Args:
        target_ns: Target total duration in nanoseconds. Must be ≥ 1.

    Raises:
        ConfigurationError: If ``target_ns`` is below 1.

    Usage::

        calc = DelayCalculator(10_000_000)
        calc.compute(500)          # DelayPeriod(millis=9, nanos=999500)
        calc.compute(20_000_000)   # DelayPeriod(millis=0, nanos=0)
    """

    def __init__(self, target_ns: int) -> None:
        if target_ns < 1:
            raise ConfigurationError(INVALID_TARGET_MESSAGE)
        self._target_ns = target_ns

    @property
    def target_ns(self) -> int:
        return self._target_ns

    def compute(self, elapsed_ns: int) -> DelayPeriod:
        """Return the padding owed after a call that took ``elapsed_ns``."""
        remaining_ns = self._target_ns - elapsed_ns
        if remaining_ns <= 0:
            return ZERO_DELAY
        millis, nanos = divmod(remaining_ns, NANOSECONDS_IN_MILLISECOND)
        return DelayPeriod(millis=millis, nanos=nanos)

    __call__ = compute
