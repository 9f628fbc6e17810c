"""Environment-driven runtime settings for the agent catalog service."""

from __future__ import annotations

import os
import re
from types import SimpleNamespace
from typing import Optional, Sequence, Tuple

_DURATION_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h)?\s*$", re.IGNORECASE)
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def _env_str(
    name: str,
    default: Optional[str] = None,
    *,
    alias: Optional[str] = None,
    empty_to_none: bool = True,
) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None and alias:
        raw = os.getenv(alias)
    if raw is None:
        return default
    value = raw.strip()
    if not value and empty_to_none:
        return None if default is None else default
    return value if value else default


def _env_bool(name: str, default: bool, *, alias: Optional[str] = None) -> bool:
    raw = os.getenv(name)
    if raw is None and alias:
        raw = os.getenv(alias)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def parse_duration(raw: Optional[str]) -> Optional[float]:
    """Parse ``"300"``, ``"300s"``, ``"5m"``, ``"1h"`` or ``"250ms"`` into seconds."""

    if raw is None:
        return None
    match = _DURATION_PATTERN.match(raw)
    if not match:
        return None
    amount = float(match.group(1))
    unit = (match.group(2) or "s").lower()
    return amount * _DURATION_UNITS[unit]


def _env_duration(name: str, default: float, *, alias: Optional[str] = None) -> float:
    raw = os.getenv(name)
    if raw is None and alias:
        raw = os.getenv(alias)
    seconds = parse_duration(raw)
    if seconds is None or seconds <= 0:
        return default
    return seconds


def _env_tuple(name: str, default: Sequence[str]) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if not raw:
        return tuple(default)
    items = tuple(part.strip() for part in raw.split(",") if part.strip())
    return items or tuple(default)


class Settings(SimpleNamespace):
    """Simple attribute container used throughout the codebase."""

CONFIG = Settings()


def _compute_values() -> tuple[dict[str, object], dict[str, object]]:
    # -----------------------------------------------------------------------
    # RUNTIME ENVIRONMENT
    # -----------------------------------------------------------------------
    environment = _env_str("ENV", "prod", empty_to_none=False).lower()
    if environment not in {"dev", "prod", "test"}:
        environment = "prod"
    is_development = environment == "dev"

    log_level = _env_str("LOG_LEVEL", "INFO", empty_to_none=False).upper()

    # -----------------------------------------------------------------------
    # AGENT CATALOG
    # -----------------------------------------------------------------------
    agents_dir = _env_str("AGENTS_DIR", "agents", empty_to_none=False)

    # -----------------------------------------------------------------------
    # USAGE STATISTICS PERSISTENCE
    # -----------------------------------------------------------------------
    stats_persistence_enabled = _env_bool("STATS_PERSISTENCE_ENABLED", True)
    stats_persistence_file_path = _env_str(
        "STATS_PERSISTENCE_FILE_PATH",
        "agent-stats.json",
        empty_to_none=False,
    )
    stats_persistence_interval = _env_duration(
        "STATS_PERSISTENCE_INTERVAL",
        300.0,
        alias="STATS_PERSISTENCE_INTERVAL_SECONDS",
    )

    # -----------------------------------------------------------------------
    # CONTEXT CACHE
    # -----------------------------------------------------------------------
    context_cache_max_size = _env_int("CONTEXT_CACHE_MAX_SIZE", 1000)
    if context_cache_max_size <= 0:
        context_cache_max_size = 1000
    context_cache_ttl = _env_duration("CONTEXT_CACHE_TTL", 300.0)
    context_cleanup_interval = _env_duration("CONTEXT_CLEANUP_INTERVAL", 300.0)

    # -----------------------------------------------------------------------
    # HTTP API
    # -----------------------------------------------------------------------
    api_title = _env_str("API_TITLE", "AgentDeck API", empty_to_none=False)
    api_version = _env_str("API_VERSION", "1.0.0", empty_to_none=False)
    api_cors_origins = _env_tuple("API_CORS_ORIGINS", ())

    globals_map = {
        "ENVIRONMENT": environment,
        "IS_DEVELOPMENT": is_development,
        "LOG_LEVEL": log_level,
        "AGENTS_DIR": agents_dir,
        "STATS_PERSISTENCE_ENABLED": stats_persistence_enabled,
        "STATS_PERSISTENCE_FILE_PATH": stats_persistence_file_path,
        "STATS_PERSISTENCE_INTERVAL": stats_persistence_interval,
        "CONTEXT_CACHE_MAX_SIZE": context_cache_max_size,
        "CONTEXT_CACHE_TTL": context_cache_ttl,
        "CONTEXT_CLEANUP_INTERVAL": context_cleanup_interval,
        "API_TITLE": api_title,
        "API_VERSION": api_version,
        "API_CORS_ORIGINS": api_cors_origins,
    }

    config_map = {
        "environment": environment,
        "is_development": is_development,
        "log_level": log_level,
        "agents_dir": agents_dir,
        "stats_persistence_enabled": stats_persistence_enabled,
        "stats_persistence_file_path": stats_persistence_file_path,
        "stats_persistence_interval": stats_persistence_interval,
        "context_cache_max_size": context_cache_max_size,
        "context_cache_ttl": context_cache_ttl,
        "context_cleanup_interval": context_cleanup_interval,
        "api_title": api_title,
        "api_version": api_version,
        "api_cors_origins": api_cors_origins,
    }

    return globals_map, config_map


def reload_config() -> None:
    globals_map, config_map = _compute_values()
    globals().update(globals_map)
    CONFIG.__dict__.update(config_map)


def load_envs(global_dir: str) -> None:
    """Load environment variables from the project ``.env`` file."""
    from dotenv import load_dotenv

    load_dotenv(os.path.join(global_dir, ".env"))

    # Reload configuration after environment changes
    reload_config()


# Load once on import so downstream modules can use CONFIG immediately.
reload_config()
