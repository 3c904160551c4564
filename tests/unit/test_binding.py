"""Unit tests for server binding and the uvicorn entry point (app/run.py).

Verifies that:
  - Default Config binds to 127.0.0.1:8080 (loopback only)
  - server.host: 0.0.0.0 is accepted from a config file
  - main() passes the configured host/port and hardened limits to uvicorn
"""

from __future__ import annotations

from typing import Any

import pytest

from app import run
from app.config import Config, ServerConfig, load_config
from app.run import UVICORN_BACKLOG, UVICORN_LIMIT_CONCURRENCY, UVICORN_TIMEOUT_KEEP_ALIVE


class TestDefaultBinding:
    """The default config binds to loopback only."""

    def test_default_host_is_loopback(self) -> None:
        assert Config.defaults().server.host == "127.0.0.1"

    def test_server_config_default_port(self) -> None:
        assert ServerConfig().port == 8080

    def test_all_interfaces_accepted_from_file(self, tmp_path: Any) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("version: 1\nserver:\n  host: 0.0.0.0\n  port: 9000\n")
        config = load_config(config_path=str(config_file))
        assert config.server.host == "0.0.0.0"
        assert config.server.port == 9000


class TestUvicornEntryPoint:
    """main() wires config into uvicorn.run()."""

    def test_hardened_constants(self) -> None:
        assert UVICORN_LIMIT_CONCURRENCY == 100
        assert UVICORN_BACKLOG == 50
        assert UVICORN_TIMEOUT_KEEP_ALIVE == 5

    def test_main_passes_config_to_uvicorn(self, monkeypatch: pytest.MonkeyPatch) -> None:
        config = Config.defaults()
        config.server.port = 9191
        calls: list[tuple[tuple, dict]] = []

        monkeypatch.setattr(run, "load_config", lambda: config)
        monkeypatch.setattr(run.uvicorn, "run", lambda *a, **kw: calls.append((a, kw)))

        run.main()

        assert len(calls) == 1
        args, kwargs = calls[0]
        assert args == ("app.main:app",)
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9191
        assert kwargs["limit_concurrency"] == UVICORN_LIMIT_CONCURRENCY
        assert kwargs["backlog"] == UVICORN_BACKLOG
        assert kwargs["timeout_keep_alive"] == UVICORN_TIMEOUT_KEEP_ALIVE
