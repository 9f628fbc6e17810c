"""Pydantic schemas for the public API."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from agentdeck.registry.agents.models import AgentDefinition
from agentdeck.stats.models import AgentUsageRow, DashboardReport, StatEntry


class AgentSummary(BaseModel):
    name: str
    description: str = ""
    model: str
    tools: List[str] = Field(default_factory=list)
    system_prompt: str = ""

    @classmethod
    def from_definition(cls, agent: AgentDefinition) -> "AgentSummary":
        return cls(
            name=agent.name,
            description=agent.description,
            model=agent.model,
            tools=list(agent.tools),
            system_prompt=agent.system_prompt,
        )


class InvokeAgentRequest(BaseModel):
    agent_name: str = Field(default="")
    task: str = Field(default="")
    context: str = Field(default="")

    @field_validator("agent_name", "task", "context", mode="before")
    @classmethod
    def coerce_none(cls, value: Optional[str]) -> str:
        return "" if value is None else value


class InvokeAgentResponse(BaseModel):
    agent_name: str
    model: str
    content: str
    status: str
    context_key: Optional[str] = None


class AgentStatsResponse(BaseModel):
    agent_name: str
    invocation_count: int
    success_count: int
    failure_count: int
    success_rate: float
    failure_rate: float
    average_response_time_ms: float
    total_response_time_ms: int
    last_used: Optional[datetime] = None
    first_used: Optional[datetime] = None

    @classmethod
    def from_entry(cls, entry: StatEntry) -> "AgentStatsResponse":
        return cls(
            agent_name=entry.agent_name,
            invocation_count=entry.invocation_count,
            success_count=entry.success_count,
            failure_count=entry.failure_count,
            success_rate=entry.success_rate,
            failure_rate=entry.failure_rate,
            average_response_time_ms=entry.average_response_time_ms,
            total_response_time_ms=entry.total_response_time_ms,
            last_used=entry.last_used,
            first_used=entry.first_used,
        )


class AgentUsageResponse(BaseModel):
    agent_name: str
    description: str = ""
    invocation_count: int = 0
    success_count: int = 0
    success_rate: float = 0.0
    last_used: Optional[datetime] = None
    first_used: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: AgentUsageRow) -> "AgentUsageResponse":
        return cls(
            agent_name=row.agent_name,
            description=row.description,
            invocation_count=row.invocation_count,
            success_count=row.success_count,
            success_rate=row.success_rate,
            last_used=row.last_used,
            first_used=row.first_used,
        )


class DashboardDataResponse(BaseModel):
    agents: List[AgentSummary]
    usage_stats: List[AgentUsageResponse]
    total_invocations: int
    active_agents: int
    overall_success_rate: float

    @classmethod
    def from_report(cls, report: DashboardReport) -> "DashboardDataResponse":
        return cls(
            agents=[AgentSummary.from_definition(agent) for agent in report.agents],
            usage_stats=[AgentUsageResponse.from_row(row) for row in report.usage_stats],
            total_invocations=report.total_invocations,
            active_agents=report.active_agents,
            overall_success_rate=report.overall_success_rate,
        )


class StatsSummaryResponse(BaseModel):
    total_invocations: int
    unique_agents: int
    current_time: datetime
    stats_summary: str


class SystemStatusResponse(BaseModel):
    health: str = "UP"
    timestamp: datetime
    agent_count: int
    total_invocations: int
    persistence_enabled: bool
    context_cache: Dict[str, Any] = Field(default_factory=dict)
