"""
Agent Registry System

Handles markdown agent discovery, catalog lookup, search and recommendations.
"""

from .models import AgentDefinition
from .repository import DEFAULT_AGENTS, AgentRepository, parse_agent_markdown
from .store import AgentStore

__all__ = [
    'AgentDefinition',
    'AgentRepository',
    'AgentStore',
    'DEFAULT_AGENTS',
    'parse_agent_markdown',
]
