"""Agent Store - catalog lookup, search and recommendations."""

from __future__ import annotations

from pathlib import Path
from threading import Lock
from typing import List, Optional, Sequence, Tuple

from .models import AgentDefinition
from .repository import AgentRepository

MAX_RECOMMENDATIONS = 3

# (task keywords, agent name fragments) checked in order.
_RECOMMENDATION_RULES: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = (
    (("api", "backend", "database"), ("backend", "architect")),
    (("ui", "frontend", "react"), ("frontend",)),
    (("ai", "llm", "rag"), ("ai-engineer",)),
    (("review", "security", "audit"), ("code-reviewer", "security")),
    (("bug", "debug", "error"), ("debugger",)),
    (
        (
            "requirements",
            "ticket",
            "story",
            "planning",
            "breakdown",
            "epic",
            "project management",
            "acceptance criteria",
        ),
        ("requirements-analyst",),
    ),
)

_VERSATILE_AGENTS: Tuple[str, ...] = ("ai-engineer", "backend-architect", "code-reviewer")


class AgentStore:
    """Manages the loaded agent catalog."""

    def __init__(self, agents_dir: str | Path | None = None, *, repository: Optional[AgentRepository] = None) -> None:
        self._repository = repository or AgentRepository(agents_dir)
        self._agents: Optional[List[AgentDefinition]] = None
        self._lock = Lock()

    def _catalog(self) -> List[AgentDefinition]:
        agents = self._agents
        if agents is not None:
            return agents
        with self._lock:
            if self._agents is None:
                self._agents = self._repository.load()
            return self._agents

    def reload(self) -> List[AgentDefinition]:
        """Drop the cached catalog and read the markdown files again."""
        with self._lock:
            self._agents = self._repository.load()
            return list(self._agents)

    def get_agents(self) -> List[AgentDefinition]:
        """Return all catalog agents in load order."""
        return list(self._catalog())

    def get_agent(self, name: str) -> Optional[AgentDefinition]:
        """Return a single agent definition if it exists."""
        cleaned = (name or "").strip()
        if not cleaned:
            return None
        return next((agent for agent in self._catalog() if agent.name == cleaned), None)

    def find_agents(self, query: str) -> List[AgentDefinition]:
        """Case-insensitive substring search over name, description and prompt."""
        needle = (query or "").strip().lower()
        if not needle:
            return self.get_agents()
        return [
            agent
            for agent in self._catalog()
            if needle in agent.name.lower()
            or needle in agent.description.lower()
            or needle in agent.system_prompt.lower()
        ]

    def recommend_agents(self, task: str) -> List[AgentDefinition]:
        """Pick up to three agents whose names match keywords found in the task."""
        lowered = (task or "").lower()
        catalog = self._catalog()
        recommended: List[AgentDefinition] = []

        for keywords, fragments in _RECOMMENDATION_RULES:
            if not any(keyword in lowered for keyword in keywords):
                continue
            match = _first_matching(catalog, fragments)
            if match is not None and match not in recommended:
                recommended.append(match)

        if not recommended:
            return [
                agent
                for agent in catalog
                if any(fragment in agent.name for fragment in _VERSATILE_AGENTS)
            ][:MAX_RECOMMENDATIONS]

        return recommended[:MAX_RECOMMENDATIONS]

    def is_agent_available(self, name: str) -> bool:
        """Check if an agent exists in the catalog."""
        return self.get_agent(name) is not None


def _first_matching(catalog: Sequence[AgentDefinition], fragments: Sequence[str]) -> Optional[AgentDefinition]:
    for agent in catalog:
        if any(fragment in agent.name for fragment in fragments):
            return agent
    return None
