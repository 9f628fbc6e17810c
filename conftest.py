"""Repository-wide pytest fixtures."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

from agentdeck import config
from agentdeck.core.runtime import AgentRuntime, reset_runtime

PROJECT_ROOT = Path(__file__).resolve().parent


@pytest.fixture(autouse=True)
def _set_default_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Generator[None, None, None]:
    """Point persistence at a scratch file so tests never touch the working tree."""

    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("AGENTS_DIR", str(PROJECT_ROOT / "agents"))
    monkeypatch.setenv("STATS_PERSISTENCE_FILE_PATH", str(tmp_path / "agent-stats.json"))
    monkeypatch.setenv("STATS_PERSISTENCE_ENABLED", "true")
    config.reload_config()
    yield
    reset_runtime()
    monkeypatch.undo()
    config.reload_config()


@pytest.fixture
def agents_dir() -> Path:
    """The sample markdown catalog shipped with the repository."""

    return PROJECT_ROOT / "agents"


@pytest.fixture
def runtime() -> AgentRuntime:
    """A runtime built from the test configuration with stats loaded but no timers running."""

    built = AgentRuntime.from_config(config.CONFIG)
    built.stats_service.initialize()
    return built
