"""
Registry System for Agents

Submodules are available as ``agentdeck.registry.agents``.
"""

from .agents import AgentDefinition, AgentRepository, AgentStore

__all__ = [
    'AgentDefinition',
    'AgentRepository',
    'AgentStore',
]
