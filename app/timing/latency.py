"""Constant-latency wrapper — every wrapped call lasts at least ``target_ns``.

Variable response latency on a validation endpoint is a side channel: a
caller could tell which rule rejected an input, or whether the answer came
from cache, from timing alone. ``ConstantLatencyWrapper`` closes it by
padding every call up to a fixed minimum duration.

Per call:
  1. Run ``fn(value)`` under the monotonic timer.
  2. Ask the DelayCalculator how much of ``target_ns`` is left.
  3. Sleep for exactly that long (relative sleep, monotonic clock).
  4. Return the result unchanged.

INVARIANTS:
  - The returned value is never influenced by the padding step.
  - A call that already took ≥ ``target_ns`` is not padded further.
  - Async padding is best-effort: if the task is cancelled while it waits,
    the remaining wait is abandoned, the cancellation request is withdrawn
    with ``Task.uncancel()`` so later ``asyncio.timeout()`` scopes in the
    same task behave normally, and the result is still returned.
  - ``time.sleep`` resumes by itself after a signal (PEP 475), so the sync
    path only sees ``InterruptedError`` from an injected ``sleep`` that
    raises it; it is treated like a cancelled wait. ``KeyboardInterrupt`` is
    never swallowed.
  - Calls that raise are padded too, then the exception is re-raised.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from app.timing.delay import DelayCalculator, DelayPeriod
from app.timing.timer import time_call
from app.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class ConstantLatencyWrapper(Generic[T, R]):
    """Wraps ``fn`` so every call takes at least ``target_ns`` nanoseconds.

    Args:
        fn:          Single-argument function to wrap. Runs on the caller's
                     thread (sync) or inline on the event loop (async).
        target_ns:   Minimum total duration per call, in nanoseconds (≥ 1).
        sleep:       Blocking sleep used by the sync path. Injectable for tests.
        async_sleep: Awaitable sleep used by ``call_async``. Injectable for tests.

    Raises:
        ConfigurationError: If ``target_ns`` is below 1.

    Usage::

        padded = ConstantLatencyWrapper(validator.evaluate, 10_000_000)
        outcome = padded("Steve")                  # ≥ 10ms, blocking
        outcome = await padded.call_async("Steve") # ≥ 10ms, non-blocking
    """

    def __init__(
        self,
        fn: Callable[[T], R],
        target_ns: int,
        sleep: Callable[[float], None] = time.sleep,
        async_sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> None:
        self._fn = fn
        self._calculator = DelayCalculator(target_ns)
        self._sleep = sleep
        self._async_sleep = async_sleep or asyncio.sleep

    @property
    def target_ns(self) -> int:
        return self._calculator.target_ns

    # ── Sync path ─────────────────────────────────────────────────────────────

    def __call__(self, value: T) -> R:
        start = time.perf_counter_ns()
        try:
            timed = time_call(self._fn, value)
        except Exception:
            self._pad(time.perf_counter_ns() - start)
            raise
        self._pad(timed.duration_ns)
        return timed.result

    def _pad(self, elapsed_ns: int) -> None:
        delay = self._delay_for(elapsed_ns)
        if delay is None:
            return
        try:
            self._sleep(delay.seconds)
        except InterruptedError:
            logger.debug(
                "Latency padding interrupted — remaining wait abandoned",
                delay_ns=delay.total_ns,
            )

    # ── Async path ────────────────────────────────────────────────────────────

    async def call_async(self, value: T) -> R:
        """Asyncio flavour of ``__call__``: pads with a non-blocking sleep."""
        start = time.perf_counter_ns()
        try:
            timed = time_call(self._fn, value)
        except Exception:
            await self._pad_async(time.perf_counter_ns() - start)
            raise
        await self._pad_async(timed.duration_ns)
        return timed.result

    async def _pad_async(self, elapsed_ns: int) -> None:
        delay = self._delay_for(elapsed_ns)
        if delay is None:
            return
        try:
            await self._async_sleep(delay.seconds)
        except asyncio.CancelledError:
            task = asyncio.current_task()
            if task is not None:
                task.uncancel()
            logger.debug(
                "Latency padding cancelled — remaining wait abandoned",
                delay_ns=delay.total_ns,
            )

    # ── Shared ────────────────────────────────────────────────────────────────

    def _delay_for(self, elapsed_ns: int) -> Optional[DelayPeriod]:
        delay = self._calculator.compute(elapsed_ns)
        if delay.is_zero:
            logger.debug(
                "Call met or exceeded latency target — no padding",
                elapsed_ns=elapsed_ns,
                target_ns=self.target_ns,
            )
            return None
        return delay


def constant_latency(fn: Callable[[T], R], target_ns: int) -> ConstantLatencyWrapper[T, R]:
    """Wrap ``fn`` so that every call lasts at least ``target_ns`` nanoseconds."""
    return ConstantLatencyWrapper(fn, target_ns)
