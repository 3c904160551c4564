"""Monotonic timing of a single function call.

Uses ``time.perf_counter_ns()``: monotonic, highest available resolution,
and unaffected by wall-clock adjustments.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

R = TypeVar("R")


@dataclass(frozen=True)
class TimedResult(Generic[R]):
    """Duration of a call in nanoseconds and the value it returned."""

    duration_ns: int
    result: R


def time_call(fn: Callable[..., R], *args: Any, **kwargs: Any) -> TimedResult[R]:
    """Invoke ``fn`` exactly once and measure how long it took.

    Exceptions raised by ``fn`` propagate unchanged; no duration is reported
    for a call that did not return.

    Returns:
        TimedResult with a non-negative ``duration_ns``.
    """
    start = time.perf_counter_ns()
    result = fn(*args, **kwargs)
    end = time.perf_counter_ns()
    return TimedResult(duration_ns=max(0, end - start), result=result)


class FunctionTimer(Generic[R]):
    """Callable that times every invocation of a bound function.

    Usage::

        timer = FunctionTimer(len)
        timed = timer("AnyText")
        timed.result       # 7
        timed.duration_ns  # e.g. 412
    """

    def __init__(self, fn: Callable[..., R]) -> None:
        self._fn = fn

    def __call__(self, *args: Any, **kwargs: Any) -> TimedResult[R]:
        return time_call(self._fn, *args, **kwargs)
