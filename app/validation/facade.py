"""Validator facade — the unit consumed by the HTTP layer.

One ``Validator`` per kind (email, identifier). Each call:

  1. notifies the optional observer (``"Checking validity"`` log by default)
  2. probes the kind's cache namespace
  3. on miss, evaluates the ValueValidator and stores the Outcome
  4. returns the Outcome

Steps 2–3 run inside ONE ConstantLatencyWrapper bound to the kind's target,
so a cache hit and a fresh evaluation take the same observable time.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from app.models.outcome import Outcome
from app.timing.latency import ConstantLatencyWrapper
from app.utils.logger import get_logger
from app.validation.cache import ResultCache
from app.validation.validator import ValueValidator

logger = get_logger(__name__)

#: Observer hook: called with (kind, value) before every check.
Observer = Callable[[str, Optional[str]], None]


def log_observer(kind: str, value: Optional[str]) -> None:
    """Default observer: debug-logs every check. Never logs the raw value."""
    logger.debug(
        "Checking validity",
        kind=kind,
        length=len(value) if value is not None else None,
    )


class Validator:
    """Cache + ValueValidator behind a constant-latency wrapper.

    Args:
        kind:            Validator kind; also names the cache namespace.
        value_validator: Evaluates the kind's rule set.
        cache:           The kind's ResultCache namespace.
        target_ns:       Minimum duration of every call, hit or miss.
        observer:        Optional hook called before each check. Failures in
                         the hook are logged and never affect the Outcome.
        sleep:           Blocking sleep for the sync path (tests inject fakes).

    Raises:
        ConfigurationError: If ``target_ns`` is below 1.
    """

    def __init__(
        self,
        kind: str,
        value_validator: ValueValidator,
        cache: ResultCache,
        target_ns: int,
        observer: Optional[Observer] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.kind = kind
        self._value_validator = value_validator
        self._cache = cache
        self._observer = observer
        self._padded = ConstantLatencyWrapper(self._check, target_ns, sleep=sleep)

    @property
    def target_ns(self) -> int:
        return self._padded.target_ns

    @property
    def cache(self) -> ResultCache:
        return self._cache

    def validate(self, value: Optional[str]) -> Outcome:
        """Validate ``value``, blocking the calling thread for ≥ ``target_ns``."""
        return self._padded(value)

    async def validate_async(self, value: Optional[str]) -> Outcome:
        """Validate ``value``, padding with ``asyncio.sleep`` to ≥ ``target_ns``."""
        return await self._padded.call_async(value)

    __call__ = validate

    def _check(self, value: Optional[str]) -> Outcome:
        self._notify(value)
        return self._cache.get_or_compute(
            value, lambda: self._value_validator.evaluate(value)
        )

    def _notify(self, value: Optional[str]) -> None:
        if self._observer is None:
            return
        try:
            self._observer(self.kind, value)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Validation observer failed (ignored)",
                kind=self.kind,
                error=str(exc),
                error_type=type(exc).__name__,
            )
