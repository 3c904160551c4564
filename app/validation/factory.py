"""Composition root — resolves the active rule set once, at startup.

``build_validators()`` maps the configured ``rule_set`` to concrete rules,
creates one cache namespace per validator kind, and binds each kind to its
own target latency. Nothing branches on the rule set after this returns.

  stub       — every value is accepted (including None); useful for wiring
               tests and for environments without production rules.
  production — identifier: non-blank, no uppercase ``X``, no punctuation.
               email: structural address grammar (see rules.is_email_address).
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from app.config import Config
from app.constants import (
    EMAIL_KIND,
    EMAIL_REJECTED_REASON,
    IDENTIFIER_KIND,
    IDENTIFIER_REJECTED_REASON,
)
from app.models.outcome import Outcome
from app.utils.logger import get_logger
from app.validation.cache import CacheRegistry
from app.validation.facade import Observer, Validator, log_observer
from app.validation.rules import Rule, accept_all, is_email_address, is_valid_identifier
from app.validation.validator import ValueValidator

logger = get_logger(__name__)


class RuleSetKind(str, Enum):
    """Which rule set backs the validators."""

    STUB = "stub"
    PRODUCTION = "production"


_REJECTED: dict[str, Outcome] = {
    IDENTIFIER_KIND: Outcome.rejected(IDENTIFIER_REJECTED_REASON),
    EMAIL_KIND: Outcome.rejected(EMAIL_REJECTED_REASON),
}

_PRODUCTION_RULES: dict[str, Rule] = {
    IDENTIFIER_KIND: is_valid_identifier,
    EMAIL_KIND: is_email_address,
}


def build_value_validator(kind: str, rule_set: RuleSetKind) -> ValueValidator:
    """Return the ValueValidator for ``kind`` under ``rule_set``.

    Raises:
        KeyError: If ``kind`` is not "email" or "identifier".
    """
    rejected = _REJECTED[kind]
    rule = accept_all if rule_set is RuleSetKind.STUB else _PRODUCTION_RULES[kind]
    return ValueValidator(rule, rejected)


@dataclass(frozen=True)
class Validators:
    """The two facades plus the registry that backs their caches."""

    email: Validator
    identifier: Validator
    caches: CacheRegistry
    rule_set: RuleSetKind

    def for_kind(self, kind: str) -> Validator:
        if kind == EMAIL_KIND:
            return self.email
        if kind == IDENTIFIER_KIND:
            return self.identifier
        raise KeyError(kind)


def build_validators(
    config: Config,
    observer: Optional[Observer] = log_observer,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> Validators:
    """Build both validator facades from ``config``.

    Args:
        config:   Loaded configuration (rule set and per-kind budgets).
        observer: Per-call hook; ``None`` disables it.
        clock:    Monotonic clock for cache TTLs (tests inject fakes).
        sleep:    Blocking sleep for the sync padding path (tests inject fakes).

    Raises:
        ConfigurationError: If any budget is non-positive.
    """
    rule_set = RuleSetKind(config.rule_set)
    caches = CacheRegistry(clock=clock)

    built: dict[str, Validator] = {}
    for kind in (IDENTIFIER_KIND, EMAIL_KIND):
        settings = config.validator_settings(kind)
        cache = caches.register(
            kind,
            ttl_seconds=settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
        )
        built[kind] = Validator(
            kind=kind,
            value_validator=build_value_validator(kind, rule_set),
            cache=cache,
            target_ns=settings.target_latency_ns,
            observer=observer,
            sleep=sleep,
        )
        logger.info(
            "Validator built",
            kind=kind,
            rule_set=rule_set.value,
            target_latency_ns=settings.target_latency_ns,
            cache_ttl_seconds=settings.cache_ttl_seconds,
            cache_max_entries=settings.cache_max_entries,
        )

    return Validators(
        email=built[EMAIL_KIND],
        identifier=built[IDENTIFIER_KIND],
        caches=caches,
        rule_set=rule_set,
    )
