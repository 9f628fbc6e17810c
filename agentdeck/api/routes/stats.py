"""Dashboard endpoints exposing agent usage statistics."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query, status

from agentdeck.api.dependencies import get_agent_runtime
from agentdeck.api.schemas import (
    AgentStatsResponse,
    AgentSummary,
    DashboardDataResponse,
    StatsSummaryResponse,
    SystemStatusResponse,
)
from agentdeck.core.runtime import AgentRuntime
from agentdeck.stats.models import StatEntry

logger = logging.getLogger(__name__)

router = APIRouter()

MIN_TOP_LIMIT = 1
MAX_TOP_LIMIT = 50


def _now() -> datetime:
    return datetime.now(timezone.utc)


@router.get("/stats/summary", response_model=StatsSummaryResponse, status_code=status.HTTP_200_OK)
def get_summary_stats(runtime: AgentRuntime = Depends(get_agent_runtime)) -> StatsSummaryResponse:
    """Return headline numbers for the dashboard."""

    stats = runtime.stats_service
    return StatsSummaryResponse(
        total_invocations=stats.get_total_invocations(),
        unique_agents=len(stats.get_all_stats()),
        current_time=_now(),
        stats_summary=stats.get_stats_summary(),
    )


@router.get("/stats/agents", response_model=Dict[str, Any], status_code=status.HTTP_200_OK)
def get_all_agent_stats(runtime: AgentRuntime = Depends(get_agent_runtime)) -> Dict[str, Any]:
    """Return statistics for every agent that has been invoked."""

    all_stats = runtime.stats_service.get_all_stats()
    if not all_stats:
        return {
            "message": "No agent statistics available yet",
            "agents": [],
            "timestamp": _now(),
        }

    return {
        "agents": {name: AgentStatsResponse.from_entry(entry) for name, entry in all_stats.items()},
        "count": len(all_stats),
        "timestamp": _now(),
    }


@router.get("/stats/top", response_model=Dict[str, Any], status_code=status.HTTP_200_OK)
def get_top_agents(
    limit: int = Query(5),
    runtime: AgentRuntime = Depends(get_agent_runtime),
) -> Dict[str, Any]:
    """Return the most used agents."""

    if limit < MIN_TOP_LIMIT or limit > MAX_TOP_LIMIT:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Limit must be between {MIN_TOP_LIMIT} and {MAX_TOP_LIMIT}",
        )

    top_agents = runtime.stats_service.get_most_used_agents(limit)
    if not top_agents:
        return {
            "message": "No agent usage data available yet",
            "top_agents": [],
            "limit": limit,
            "timestamp": _now(),
        }

    return {
        "top_agents": [AgentStatsResponse.from_entry(entry) for entry in top_agents],
        "limit": limit,
        "actual_count": len(top_agents),
        "timestamp": _now(),
    }


@router.get("/stats/agents/{agent_name}", response_model=Dict[str, Any], status_code=status.HTTP_200_OK)
def get_agent_stats(
    agent_name: str,
    runtime: AgentRuntime = Depends(get_agent_runtime),
) -> Dict[str, Any]:
    """Return statistics for one catalog agent, zero-filled if never invoked."""

    agent = runtime.agent_store.get_agent(agent_name)
    if agent is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Agent '{agent_name}' not found",
        )

    entry = runtime.stats_service.get_agent_stats(agent.name) or StatEntry.initial(agent.name)
    return {
        "stats": AgentStatsResponse.from_entry(entry),
        "agent_info": AgentSummary.from_definition(agent),
        "timestamp": _now(),
    }


@router.get("/dashboard/data", response_model=DashboardDataResponse, status_code=status.HTTP_200_OK)
def get_dashboard_data(runtime: AgentRuntime = Depends(get_agent_runtime)) -> DashboardDataResponse:
    """Return the catalog joined with a consistent snapshot of the statistics."""

    try:
        report = runtime.stats_service.generate_dashboard_report(runtime.agent_store.get_agents())
    except Exception as exc:
        logger.error("Error getting dashboard data: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate dashboard data",
        ) from exc
    return DashboardDataResponse.from_report(report)


@router.get("/dashboard/status", response_model=SystemStatusResponse, status_code=status.HTTP_200_OK)
def get_system_status(runtime: AgentRuntime = Depends(get_agent_runtime)) -> SystemStatusResponse:
    """Return overall service health."""

    return SystemStatusResponse(
        health="UP",
        timestamp=_now(),
        agent_count=len(runtime.agent_store.get_agents()),
        total_invocations=runtime.stats_service.get_total_invocations(),
        persistence_enabled=runtime.stats_service.persistence_enabled,
        context_cache=runtime.context_cache.stats(),
    )


@router.post("/dashboard/stats/reset", response_model=Dict[str, Any], status_code=status.HTTP_200_OK)
def reset_stats(runtime: AgentRuntime = Depends(get_agent_runtime)) -> Dict[str, Any]:
    """Clear every recorded statistic."""

    logger.info("API request to reset statistics")
    try:
        runtime.stats_service.clear_all_stats()
    except Exception as exc:
        logger.error("Error resetting statistics: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to reset statistics",
        ) from exc

    return {
        "message": "Statistics reset successfully",
        "timestamp": _now(),
    }
