"""Core runtime helpers shared across the API and CLI."""

from .invocation import AgentInvocation, AgentResponse, InvocationService
from .runtime import AgentRuntime, get_runtime, reset_runtime, set_runtime
from .scheduler import PeriodicTask

__all__ = [
    "AgentInvocation",
    "AgentResponse",
    "AgentRuntime",
    "InvocationService",
    "PeriodicTask",
    "get_runtime",
    "reset_runtime",
    "set_runtime",
]
