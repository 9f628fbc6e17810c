"""FastAPI dependencies shared across the public API."""

from __future__ import annotations

from fastapi import Depends

from agentdeck.core.runtime import AgentRuntime, get_runtime
from agentdeck.registry.agents.store import AgentStore
from agentdeck.stats.service import StatsService


def get_agent_runtime() -> AgentRuntime:
    """Return the process-wide runtime instance."""

    return get_runtime()


def get_stats_service(runtime: AgentRuntime = Depends(get_agent_runtime)) -> StatsService:
    """Return the shared statistics service."""

    return runtime.stats_service


def get_agent_store(runtime: AgentRuntime = Depends(get_agent_runtime)) -> AgentStore:
    """Return the shared agent catalog."""

    return runtime.agent_store
