"""Route modules for the public API."""

from . import agents, dashboard, stats

__all__ = [
    "agents",
    "dashboard",
    "stats",
]
