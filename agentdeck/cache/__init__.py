"""Bounded in-memory caches."""

from .context_cache import ContextCache

__all__ = ["ContextCache"]
