"""Repositories that expose agent definitions from markdown sources."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import yaml

from .models import AgentDefinition

logger = logging.getLogger(__name__)

_FRONTMATTER_PATTERN = re.compile(r"\A---\s*\n(.*?)\n---\s*(?:\n(.*))?\Z", re.DOTALL)

DEFAULT_AGENTS: tuple[AgentDefinition, ...] = (
    AgentDefinition(
        name="ai-engineer",
        description="Build production-ready LLM applications, advanced RAG systems, and intelligent agents",
        system_prompt="You are an AI engineer specializing in production-grade LLM applications and intelligent agent architectures.",
    ),
    AgentDefinition(
        name="backend-architect",
        description="Design RESTful APIs, microservice boundaries, and database schemas",
        system_prompt="You are a backend system architect specializing in scalable API design and microservices.",
    ),
    AgentDefinition(
        name="frontend-developer",
        description="Build React components, implement responsive layouts, and handle client-side state management",
        system_prompt="You are a frontend developer specializing in React, modern JavaScript, and responsive design.",
    ),
    AgentDefinition(
        name="code-reviewer",
        description="Elite code review expert specializing in security, performance, and production reliability",
        system_prompt="You are a code review expert focusing on security, performance optimization, and production reliability.",
    ),
    AgentDefinition(
        name="debugger",
        description="Debugging specialist for errors, test failures, and unexpected behavior",
        system_prompt="You are a debugging specialist expert at resolving errors, test failures, and unexpected behavior.",
    ),
)


def parse_agent_markdown(content: str, fallback_name: str, *, path: Optional[Path] = None) -> Optional[AgentDefinition]:
    """Parse a markdown document with a leading YAML frontmatter block."""

    match = _FRONTMATTER_PATTERN.match(content.replace("\r\n", "\n"))
    if not match:
        logger.warning("No frontmatter found in agent file: %s", fallback_name)
        return None

    try:
        frontmatter = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as exc:
        logger.warning("Invalid frontmatter in agent file %s: %s", fallback_name, exc)
        return None
    if not isinstance(frontmatter, dict):
        logger.warning("Frontmatter in agent file %s is not a mapping", fallback_name)
        return None

    return AgentDefinition.from_frontmatter(fallback_name, frontmatter, match.group(2) or "", path=path)


class AgentRepository:
    """Load agent definitions from a directory of markdown files."""

    def __init__(self, agents_dir: str | Path | None = None):
        if agents_dir is None:
            agents_dir = Path("agents")
        self._agents_dir = Path(agents_dir)

    @property
    def agents_dir(self) -> Path:
        return self._agents_dir

    def paths(self) -> Iterable[Path]:
        if not self._agents_dir.is_dir():
            return []
        return sorted(
            path
            for path in self._agents_dir.rglob("*.md")
            if path.is_file() and path.name != "README.md"
        )

    def _build_definition(self, path: Path) -> Optional[AgentDefinition]:
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Error loading agent from %s: %s", path, exc)
            return None
        return parse_agent_markdown(content, path.stem, path=path)

    def load(self) -> List[AgentDefinition]:
        definitions: Dict[str, AgentDefinition] = {}
        for path in self.paths():
            definition = self._build_definition(path)
            if definition is None:
                continue
            if definition.name in definitions:
                logger.warning("Duplicate agent name %s in %s; keeping the first", definition.name, path)
                continue
            definitions[definition.name] = definition
            logger.debug("Loaded agent %s from %s", definition.name, path)

        if not definitions:
            logger.warning("No agents found in %s, loading default agents", self._agents_dir)
            return [
                AgentDefinition(
                    name=agent.name,
                    description=agent.description,
                    model=agent.model,
                    tools=list(agent.tools),
                    system_prompt=agent.system_prompt,
                )
                for agent in DEFAULT_AGENTS
            ]

        logger.info("Loaded %d agents from %s", len(definitions), self._agents_dir)
        return list(definitions.values())
