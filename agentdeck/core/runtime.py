"""Process lifecycle: wiring, background timers and shutdown."""

from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Optional

from agentdeck.cache import ContextCache
from agentdeck.config import CONFIG
from agentdeck.logger import log
from agentdeck.registry.agents.store import AgentStore
from agentdeck.stats.persistence import StatsPersistence
from agentdeck.stats.service import StatsService

from .invocation import InvocationService
from .scheduler import PeriodicTask

logger = logging.getLogger(__name__)


class AgentRuntime:
    """Owns every long-lived component of the service.

    ``start`` loads persisted statistics and starts the persistence and
    context-cleanup timers; ``shutdown`` stops them, attempts a final save
    and clears the context cache.
    """

    def __init__(
        self,
        *,
        agent_store: AgentStore,
        context_cache: ContextCache,
        stats_service: StatsService,
        persistence_interval: float = 300.0,
        context_cleanup_interval: float = 300.0,
    ) -> None:
        self.agent_store = agent_store
        self.context_cache = context_cache
        self.stats_service = stats_service
        self.invocations = InvocationService(agent_store, context_cache, stats_service)
        self.persistence_task = PeriodicTask(
            "stats-persistence",
            persistence_interval,
            stats_service.scheduled_persistence,
        )
        self.cleanup_task = PeriodicTask(
            "context-cleanup",
            context_cleanup_interval,
            self.invocations.cleanup_expired_contexts,
        )
        self._started = False
        self._lock = Lock()

    @classmethod
    def from_config(cls, config: Any = CONFIG) -> "AgentRuntime":
        persistence = StatsPersistence(config.stats_persistence_file_path)
        return cls(
            agent_store=AgentStore(config.agents_dir),
            context_cache=ContextCache(
                max_size=config.context_cache_max_size,
                ttl_seconds=config.context_cache_ttl,
            ),
            stats_service=StatsService(
                persistence=persistence,
                persistence_enabled=config.stats_persistence_enabled,
            ),
            persistence_interval=config.stats_persistence_interval,
            context_cleanup_interval=config.context_cleanup_interval,
        )

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> None:
        with self._lock:
            if self._started:
                return
            self.stats_service.initialize()
            if self.stats_service.persistence_enabled:
                self.persistence_task.start()
            self.cleanup_task.start()
            self._started = True
        log(
            "[runtime] started",
            agents=len(self.agent_store.get_agents()),
            persistence=self.stats_service.persistence_enabled,
        )

    def shutdown(self) -> None:
        with self._lock:
            if not self._started:
                return
            self.persistence_task.stop()
            self.cleanup_task.stop()
            self.stats_service.shutdown()
            self.context_cache.invalidate_all()
            self._started = False
        log("[runtime] shutdown completed")


_RUNTIME: Optional[AgentRuntime] = None
_RUNTIME_LOCK = Lock()


def get_runtime() -> AgentRuntime:
    """Return the process-wide runtime, building it from ``CONFIG`` on first use."""

    global _RUNTIME
    runtime = _RUNTIME
    if runtime is not None:
        return runtime
    with _RUNTIME_LOCK:
        if _RUNTIME is None:
            _RUNTIME = AgentRuntime.from_config(CONFIG)
        return _RUNTIME


def set_runtime(runtime: Optional[AgentRuntime]) -> None:
    global _RUNTIME
    with _RUNTIME_LOCK:
        _RUNTIME = runtime


def reset_runtime() -> None:
    """Shut down and forget the process-wide runtime."""

    global _RUNTIME
    with _RUNTIME_LOCK:
        runtime, _RUNTIME = _RUNTIME, None
    if runtime is not None:
        runtime.shutdown()
