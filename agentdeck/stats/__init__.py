"""
Agent Usage Statistics

Concurrent per-agent counters, aggregate queries and crash-safe persistence.
"""

from .models import AgentUsageRow, DashboardReport, StatEntry
from .persistence import StatsPersistence, StatsPersistenceError
from .service import StatsService
from .store import StatsStore

__all__ = [
    'AgentUsageRow',
    'DashboardReport',
    'StatEntry',
    'StatsPersistence',
    'StatsPersistenceError',
    'StatsService',
    'StatsStore',
]
