"""Tests for environment-driven settings."""

from __future__ import annotations

import os

import pytest

from agentdeck import config


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("300", 300.0),
        ("300s", 300.0),
        ("5m", 300.0),
        ("1h", 3600.0),
        ("250ms", 0.25),
        (" 2M ", 120.0),
        ("1.5s", 1.5),
        ("soon", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_duration(raw, expected) -> None:
    assert config.parse_duration(raw) == expected


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "STATS_PERSISTENCE_FILE_PATH",
        "STATS_PERSISTENCE_ENABLED",
        "CONTEXT_CACHE_MAX_SIZE",
        "CONTEXT_CACHE_TTL",
        "STATS_PERSISTENCE_INTERVAL",
        "API_CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)

    config.reload_config()

    assert config.CONFIG.stats_persistence_file_path == "agent-stats.json"
    assert config.CONFIG.stats_persistence_enabled is True
    assert config.CONFIG.context_cache_max_size == 1000
    assert config.CONFIG.context_cache_ttl == 300.0
    assert config.CONFIG.stats_persistence_interval == 300.0
    assert config.CONFIG.api_cors_origins == ()


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STATS_PERSISTENCE_ENABLED", "false")
    monkeypatch.setenv("CONTEXT_CACHE_MAX_SIZE", "50")
    monkeypatch.setenv("CONTEXT_CACHE_TTL", "10m")
    monkeypatch.setenv("API_CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config.reload_config()

    assert config.CONFIG.stats_persistence_enabled is False
    assert config.CONFIG.context_cache_max_size == 50
    assert config.CONFIG.context_cache_ttl == 600.0
    assert config.CONFIG.api_cors_origins == ("http://a.test", "http://b.test")
    assert config.CONFIG.log_level == "DEBUG"
    assert config.LOG_LEVEL == "DEBUG"


def test_interval_alias_in_seconds(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("STATS_PERSISTENCE_INTERVAL", raising=False)
    monkeypatch.setenv("STATS_PERSISTENCE_INTERVAL_SECONDS", "45")

    config.reload_config()

    assert config.CONFIG.stats_persistence_interval == 45.0


@pytest.mark.parametrize("raw", ["0", "-5", "lots"])
def test_invalid_cache_size_falls_back_to_default(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("CONTEXT_CACHE_MAX_SIZE", raw)

    config.reload_config()

    assert config.CONFIG.context_cache_max_size == 1000


def test_invalid_durations_fall_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONTEXT_CACHE_TTL", "0s")
    monkeypatch.setenv("CONTEXT_CLEANUP_INTERVAL", "whenever")

    config.reload_config()

    assert config.CONFIG.context_cache_ttl == 300.0
    assert config.CONFIG.context_cleanup_interval == 300.0


def test_load_envs_reads_dotenv_and_reloads(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.delenv("CONTEXT_CACHE_MAX_SIZE", raising=False)
    (tmp_path / ".env").write_text("CONTEXT_CACHE_MAX_SIZE=77\n", encoding="utf-8")

    try:
        config.load_envs(str(tmp_path))

        assert config.CONFIG.context_cache_max_size == 77
        assert config.CONTEXT_CACHE_MAX_SIZE == 77
    finally:
        os.environ.pop("CONTEXT_CACHE_MAX_SIZE", None)


def test_unknown_environment_is_treated_as_prod(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENV", "staging")

    config.reload_config()

    assert config.CONFIG.environment == "prod"
    assert config.CONFIG.is_development is False
