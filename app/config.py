"""Config loading for EvenKeel.

Reads `.evenkeel/config.yaml` (or `~/.evenkeel/config.yaml`).
Raises SystemExit on parse errors, a missing `version` field, or invalid
values. If no config file is found, returns default values (safe to run
without config).

Config search order:
  1. `config_path` argument (if provided — for testing or explicit override)
  2. EVENKEEL_CONFIG environment variable (if set)
  3. `.evenkeel/config.yaml` (working directory — for development)
  4. `~/.evenkeel/config.yaml` (home directory — for production deployments)

Environment variable overrides:
  EVENKEEL_PORT     — overrides server.port
  EVENKEEL_RULE_SET — overrides rule_set ("stub" | "production")
  EVENKEEL_CONFIG   — sets an explicit config file path to try first

Every numeric budget (target latency, cache TTL, cache capacity) must be a
positive integer. Invalid values stop the process before any request is
served.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Any, NoReturn, Optional

import yaml

from app.constants import (
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_TARGET_LATENCY_NS,
    EMAIL_KIND,
    IDENTIFIER_KIND,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)

# ─── Version constants ────────────────────────────────────────────────────────

SUPPORTED_CONFIG_VERSION = 1

SUPPORTED_VERSIONS: frozenset[int] = frozenset({1})

# ─── Validation sets ─────────────────────────────────────────────────────────

# Valid values for rule_set
VALID_RULE_SETS: frozenset[str] = frozenset({"stub", "production"})

DEFAULT_CONFIG_PATHS = [
    ".evenkeel/config.yaml",
    os.path.expanduser("~/.evenkeel/config.yaml"),
]


# ─── Dataclasses ─────────────────────────────────────────────────────────────


@dataclass
class ValidatorSettings:
    """Latency and cache budget for one validator kind.

    target_latency_ns: Minimum duration of every call for this kind, in ns.
    cache_ttl_seconds: Lifetime of a cached Outcome from its write.
    cache_max_entries: Capacity of this kind's cache namespace.
    """

    target_latency_ns: int = DEFAULT_TARGET_LATENCY_NS
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    cache_max_entries: int = DEFAULT_CACHE_MAX_ENTRIES


@dataclass
class ServerConfig:
    """HTTP binding configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class ApiInfoConfig:
    """OpenAPI metadata shown in the generated documentation."""

    title: str = "EvenKeel"
    description: str = "Constant-latency validation of user identifiers and email addresses"
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None


@dataclass
class Config:
    """Root configuration object populated from .evenkeel/config.yaml.

    All fields have safe defaults — EvenKeel can start without any config file.
    """

    version: int = SUPPORTED_CONFIG_VERSION
    rule_set: str = "production"  # "stub" | "production"
    server: ServerConfig = field(default_factory=ServerConfig)
    email: ValidatorSettings = field(default_factory=ValidatorSettings)
    identifier: ValidatorSettings = field(default_factory=ValidatorSettings)
    api: ApiInfoConfig = field(default_factory=ApiInfoConfig)
    path: Optional[str] = None  # Path to the loaded config file

    @classmethod
    def defaults(cls) -> "Config":
        """Return a fully-default Config (no file required)."""
        return cls()

    def validator_settings(self, kind: str) -> ValidatorSettings:
        """Settings for ``kind`` ("email" | "identifier"); KeyError otherwise."""
        if kind == EMAIL_KIND:
            return self.email
        if kind == IDENTIFIER_KIND:
            return self.identifier
        raise KeyError(kind)

    @classmethod
    def from_dict(cls, raw: dict, path: Optional[str] = None) -> "Config":
        """Construct Config from a parsed YAML dict.

        Merges user-supplied values onto defaults; unknown keys are silently ignored.

        Raises:
            SystemExit(1): On an invalid rule_set or a non-positive budget.
        """
        rule_set = raw.get("rule_set", "production")
        _check_rule_set(rule_set, source="rule_set")

        validators_raw = raw.get("validators") or {}
        email = _validator_settings(validators_raw.get(EMAIL_KIND) or {}, EMAIL_KIND)
        identifier = _validator_settings(
            validators_raw.get(IDENTIFIER_KIND) or {}, IDENTIFIER_KIND
        )

        server_raw = raw.get("server") or {}
        server = ServerConfig(
            host=server_raw.get("host", "127.0.0.1"),
            port=server_raw.get("port", 8080),
        )

        api_raw = raw.get("api") or {}
        api = ApiInfoConfig(
            title=api_raw.get("title", ApiInfoConfig.title),
            description=api_raw.get("description", ApiInfoConfig.description),
            contact_name=api_raw.get("contact_name"),
            contact_email=api_raw.get("contact_email"),
        )

        return cls(
            version=raw.get("version", SUPPORTED_CONFIG_VERSION),
            rule_set=rule_set,
            server=server,
            email=email,
            identifier=identifier,
            api=api,
            path=path,
        )


# ─── Field validation ─────────────────────────────────────────────────────────


def _fail(msg: str) -> NoReturn:
    print(msg, file=sys.stderr)
    raise SystemExit(1)


def _check_rule_set(value: Any, source: str) -> None:
    if value not in VALID_RULE_SETS:
        _fail(
            f"CONFIG ERROR: Invalid {source}: '{value}'. "
            f"Supported values: {sorted(VALID_RULE_SETS)}."
        )


def _positive_int(raw: dict, key: str, default: int, kind: str) -> int:
    value = raw.get(key, default)
    # bool is an int subclass; "true" is never a valid budget
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        _fail(
            f"CONFIG ERROR: validators.{kind}.{key} must be a positive integer, "
            f"got: {value!r}"
        )
    return value


def _validator_settings(raw: dict, kind: str) -> ValidatorSettings:
    return ValidatorSettings(
        target_latency_ns=_positive_int(
            raw, "target_latency_ns", DEFAULT_TARGET_LATENCY_NS, kind
        ),
        cache_ttl_seconds=_positive_int(
            raw, "cache_ttl_seconds", DEFAULT_CACHE_TTL_SECONDS, kind
        ),
        cache_max_entries=_positive_int(
            raw, "cache_max_entries", DEFAULT_CACHE_MAX_ENTRIES, kind
        ),
    )


# ─── Config loading ───────────────────────────────────────────────────────────


def load_config(config_path: Optional[str] = None) -> Config:
    """Load and validate EvenKeel configuration.

    Search order:
      1. ``config_path`` argument (if provided)
      2. ``EVENKEEL_CONFIG`` environment variable (if set)
      3. ``.evenkeel/config.yaml`` (current working directory)
      4. ``~/.evenkeel/config.yaml`` (home directory)

    If no file is found at any of these paths, returns default Config (not an error).
    If a file is found but invalid, writes error to stderr and raises SystemExit(1).

    ``EVENKEEL_PORT`` and ``EVENKEEL_RULE_SET`` are applied afterwards,
    whether or not a config file was found.

    Raises:
        SystemExit(1): On YAML parse error, missing ``version`` field, unsupported
                       version, invalid ``rule_set``, non-positive budgets, or
                       invalid env overrides.
    """
    search_paths: list[str] = []
    if config_path:
        search_paths.append(config_path)
    env_config = os.environ.get("EVENKEEL_CONFIG")
    if env_config:
        search_paths.append(env_config)
    search_paths.extend(DEFAULT_CONFIG_PATHS)

    found_path: Optional[str] = None
    for candidate in search_paths:
        expanded = os.path.expanduser(candidate)
        if os.path.isfile(expanded):
            found_path = expanded
            break

    # ── No config file found ─────────────────────────────────────────────────
    if found_path is None:
        logger.info("No config file found — using defaults", searched=search_paths)
        config = Config.defaults()
        _apply_env_overrides(config)
        return config

    # ── Parse config file ─────────────────────────────────────────────────────
    logger.info("Loading config", path=found_path)

    try:
        with open(found_path) as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        _fail(
            f"CONFIG ERROR: Failed to parse {found_path}: {exc}\n"
            "EvenKeel refuses to start with an invalid config. "
            "Check the YAML syntax and try again."
        )
    except OSError as exc:
        _fail(f"CONFIG ERROR: Could not read {found_path}: {exc}")

    if not isinstance(raw, dict):
        if raw is None:
            # Empty file — treat as missing version
            _fail(
                f"CONFIG ERROR: {found_path} is missing the required 'version' field.\n"
                "Add 'version: 1' to the top of your config file."
            )
        _fail(
            f"CONFIG ERROR: {found_path} is not a valid YAML mapping.\n"
            "The config file must be a YAML dictionary at the top level."
        )

    # ── Version validation ────────────────────────────────────────────────────
    version = raw.get("version")
    if version is None:
        _fail(
            f"CONFIG ERROR: {found_path} is missing the required 'version' field.\n"
            "Add 'version: 1' to the top of your config file."
        )

    if version not in SUPPORTED_VERSIONS:
        _fail(
            f"CONFIG ERROR: Unsupported config version: {version}. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}."
        )

    config = Config.from_dict(raw, path=found_path)
    _apply_env_overrides(config)

    if config.server.host == "0.0.0.0":
        logger.warning(
            "SECURITY WARNING: EvenKeel is configured to bind on 0.0.0.0 (all interfaces). "
            "Recommended: use server.host: '127.0.0.1' behind a reverse proxy."
        )

    logger.info(
        "Config loaded",
        path=found_path,
        version=config.version,
        rule_set=config.rule_set,
        email_target_latency_ns=config.email.target_latency_ns,
        identifier_target_latency_ns=config.identifier.target_latency_ns,
    )
    return config


def _apply_env_overrides(config: Config) -> None:
    """Apply environment variable overrides to a Config object in-place.

    Handles:
      EVENKEEL_PORT     — config.server.port (integer)
      EVENKEEL_RULE_SET — config.rule_set ("stub" | "production")

    Raises:
        SystemExit(1): If an override is set but invalid.
    """
    env_port = os.environ.get("EVENKEEL_PORT")
    if env_port is not None:
        try:
            config.server.port = int(env_port)
        except ValueError:
            _fail(
                f"CONFIG ERROR: EVENKEEL_PORT environment variable is not a valid "
                f"integer: '{env_port}'"
            )

    env_rule_set = os.environ.get("EVENKEEL_RULE_SET")
    if env_rule_set is not None:
        _check_rule_set(env_rule_set, source="EVENKEEL_RULE_SET")
        config.rule_set = env_rule_set
