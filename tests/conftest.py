"""Root test configuration for EvenKeel.

Clears every EVENKEEL_* environment variable for each test so that a
developer's local overrides (port, rule set, config path) never leak into
assertions. Tests that exercise overrides set them via monkeypatch.
"""

import os

import pytest

from app.config import Config


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove EVENKEEL_* env overrides for the duration of each test."""
    for name in list(os.environ):
        if name.startswith("EVENKEEL_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def production_config() -> Config:
    """Default Config (production rule set, 10ms targets, 10s TTL)."""
    return Config.defaults()


@pytest.fixture
def stub_config() -> Config:
    """Default Config with the permissive stub rule set."""
    config = Config.defaults()
    config.rule_set = "stub"
    return config


class FakeClock:
    """Manually advanced monotonic clock (seconds) for TTL tests."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Sleep stand-in that records requested delays instead of blocking."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
