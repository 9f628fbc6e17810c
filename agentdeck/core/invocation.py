"""Agent invocation: context caching, guidance rendering and usage recording."""

from __future__ import annotations

import itertools
import logging
import time
from dataclasses import dataclass
from typing import List, Optional

from agentdeck.cache import ContextCache
from agentdeck.registry.agents.models import AgentDefinition
from agentdeck.registry.agents.store import AgentStore
from agentdeck.stats.service import StatsService

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"
GENERIC_MODEL = "mcp-optimized"


@dataclass(slots=True)
class AgentInvocation:
    agent_name: str
    task: str
    context: str = ""


@dataclass(slots=True)
class AgentResponse:
    agent_name: str
    model: str
    content: str
    status: str
    context_key: Optional[str]


def _approaches_for(agent: AgentDefinition) -> List[str]:
    name = agent.name
    if "backend" in name or "architect" in name:
        return [
            "Design clear API contracts and system boundaries",
            "Plan for scalability with caching and data consistency",
            "Implement security patterns (auth, validation, rate limiting)",
        ]
    if "frontend" in name or "ui" in name:
        return [
            "Focus on accessibility and responsive design",
            "Optimize state management and component patterns",
            "Ensure Core Web Vitals and comprehensive testing",
        ]
    if "ai" in name or "ml" in name:
        return [
            "Design for production scalability and reliability",
            "Include monitoring, evaluation metrics, and observability",
            "Optimize for cost efficiency and resource usage",
        ]
    if "security" in name or "audit" in name:
        return [
            "Apply OWASP principles and threat modeling",
            "Implement defense in depth and least privilege",
            "Include compliance and audit trail considerations",
        ]
    if "requirements" in name or "analyst" in name:
        return [
            "Break features into actionable user stories with acceptance criteria",
            "Identify dependencies and integration points",
            "Provide estimation guidance and risk assessment",
        ]
    return [
        "Apply domain-specific best practices",
        "Focus on maintainability and testability",
        "Consider performance and scalability implications",
    ]


def build_agent_guidance(agent: AgentDefinition, invocation: AgentInvocation) -> str:
    """Render concise markdown guidance for the calling tool."""

    lines = [
        f"## {agent.name.upper()} SPECIALIST",
        f"> {agent.description}",
        "",
        "### Task Analysis",
        f"**Objective**: {invocation.task}",
    ]
    if invocation.context:
        lines.append(f"**Context**: {invocation.context}")
    lines.extend(["", "### Recommended Approach"])
    lines.extend(f"{index}. {approach}" for index, approach in enumerate(_approaches_for(agent), start=1))
    lines.extend(["", "### Expert Context", "```", agent.system_prompt, "```"])
    return "\n".join(lines)


class InvocationService:
    """Entry point used by the catalog surface to invoke an agent."""

    def __init__(self, agent_store: AgentStore, context_cache: ContextCache, stats_service: StatsService) -> None:
        self._agent_store = agent_store
        self._context_cache = context_cache
        self._stats_service = stats_service
        self._sequence = itertools.count(1)

    def _context_key(self, agent_name: str) -> str:
        return f"{agent_name}_{int(time.time() * 1000)}_{next(self._sequence)}"

    def invoke_agent(self, invocation: AgentInvocation) -> AgentResponse:
        started = time.perf_counter()
        agent_name = (invocation.agent_name or "").strip()
        context = invocation.context or ""

        if not agent_name:
            return AgentResponse("unknown", "unknown", "Error: Agent name cannot be blank", STATUS_ERROR, context)

        agent = self._agent_store.get_agent(agent_name)

        if not (invocation.task or "").strip():
            if agent is not None:
                self._record(agent.name, False, started)
            return AgentResponse(agent_name, "unknown", "Error: Task description cannot be blank", STATUS_ERROR, context)

        if agent is None:
            return AgentResponse(
                agent_name,
                "unknown",
                f"Error: Agent '{agent_name}' not found. Use the agent listing to see available agents.",
                STATUS_ERROR,
                context,
            )

        logger.info("Invoking agent: %s with task: %s", agent.name, invocation.task)

        try:
            guidance = build_agent_guidance(agent, invocation)
        except Exception as exc:
            logger.error("Failed to build guidance for agent %s: %s", agent.name, exc)
            self._record(agent.name, False, started)
            return AgentResponse(agent.name, GENERIC_MODEL, f"Error: {exc}", STATUS_ERROR, context)

        context_key = self._context_key(agent.name)
        self._context_cache.put(context_key, context)
        self._record(agent.name, True, started)

        return AgentResponse(agent.name, GENERIC_MODEL, guidance, STATUS_SUCCESS, context_key)

    def get_context(self, context_key: str) -> Optional[str]:
        return self._context_cache.get(context_key)

    def cleanup_expired_contexts(self) -> int:
        removed = self._context_cache.cleanup()
        logger.debug(
            "Cleaned up %d expired agent contexts. Current size: %d",
            removed,
            self._context_cache.approximate_size(),
        )
        return removed

    def _record(self, agent_name: str, success: bool, started: float) -> None:
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        self._stats_service.record_invocation(agent_name, success, elapsed_ms)
