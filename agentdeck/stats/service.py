"""Usage statistics service: recording, aggregate queries and persistence."""

from __future__ import annotations

import logging
from threading import RLock
from typing import Any, Iterable, List, Mapping, Optional

from .models import AgentUsageRow, DashboardReport, StatEntry
from .persistence import StatsPersistence
from .store import StatsStore

logger = logging.getLogger(__name__)


class StatsService:
    """Records agent invocations and serves aggregate views over them.

    The service starts uninitialized; :meth:`initialize` loads the persisted
    snapshot (when persistence is enabled) and marks it active. Recording is
    fire-and-forget: :meth:`record_invocation` never raises.
    """

    def __init__(
        self,
        store: Optional[StatsStore] = None,
        persistence: Optional[StatsPersistence] = None,
        *,
        persistence_enabled: bool = True,
    ) -> None:
        self._store = store or StatsStore()
        self._persistence = persistence
        self._persistence_enabled = bool(persistence_enabled and persistence is not None)
        self._lock = RLock()
        self._total_invocations = 0
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def persistence_enabled(self) -> bool:
        return self._persistence_enabled

    def initialize(self) -> None:
        with self._lock:
            if self._initialized:
                return

            loaded: Mapping[str, StatEntry] = {}
            if self._persistence_enabled:
                logger.info("Initializing stats service from %s", self._persistence.path)
                try:
                    loaded = self._persistence.load()
                except Exception as exc:
                    logger.warning("Failed to load existing stats, starting fresh: %s", exc)
                    loaded = {}
            else:
                logger.info("Statistics persistence disabled, starting with empty stats")

            self._store.replace_all(loaded)
            self._total_invocations = sum(entry.invocation_count for entry in loaded.values())
            self._initialized = True
            logger.info("Stats service initialized with %d agent statistics", len(loaded))

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------
    def record_invocation(self, agent_name: str, success: bool, response_time_ms: int) -> None:
        if not isinstance(agent_name, str) or not agent_name.strip():
            return

        try:
            with self._lock:
                self._store.upsert(agent_name, bool(success), int(response_time_ms))
                self._total_invocations += 1
        except Exception as exc:
            # Recording must never affect the invocation that triggered it.
            logger.debug("Failed to record stats for agent %s: %s", agent_name, exc)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_agent_stats(self, agent_name: str) -> Optional[StatEntry]:
        return self._store.get(agent_name)

    def get_all_stats(self) -> Mapping[str, StatEntry]:
        return self._store.snapshot()

    def get_total_invocations(self) -> int:
        return self._total_invocations

    def get_most_used_agents(self, limit: int) -> List[StatEntry]:
        entries = list(self._store.snapshot().values())
        entries.sort(key=lambda entry: entry.invocation_count, reverse=True)
        return _truncate(entries, limit)

    def get_highest_success_rate_agents(self, limit: int) -> List[StatEntry]:
        entries = [entry for entry in self._store.snapshot().values() if entry.invocation_count > 0]
        entries.sort(key=lambda entry: entry.success_rate, reverse=True)
        return _truncate(entries, limit)

    def get_recently_used_agents(self, limit: int) -> List[StatEntry]:
        entries = [entry for entry in self._store.snapshot().values() if entry.last_used is not None]
        entries.sort(key=lambda entry: entry.last_used, reverse=True)
        return _truncate(entries, limit)

    def get_stats_summary(self) -> str:
        with self._lock:
            snapshot = self._store.snapshot()
            total = self._total_invocations

        if not snapshot:
            return "No agent statistics available"

        total_success = sum(entry.success_count for entry in snapshot.values())
        overall = (total_success / total * 100.0) if total > 0 else 0.0
        return (
            f"Agents: {len(snapshot)}, Total Invocations: {total}, "
            f"Overall Success Rate: {overall:.1f}%"
        )

    def generate_dashboard_report(self, catalog: Iterable[Any]) -> DashboardReport:
        """Join the catalog against one consistent snapshot of the statistics."""

        agents = list(catalog)
        with self._lock:
            snapshot = self._store.snapshot()
            total = self._total_invocations

        rows: List[AgentUsageRow] = []
        for agent in agents:
            name = getattr(agent, "name", None) or str(agent)
            description = getattr(agent, "description", "") or ""
            entry = snapshot.get(name)
            if entry is None:
                rows.append(AgentUsageRow(agent_name=name, description=description))
                continue
            rows.append(
                AgentUsageRow(
                    agent_name=name,
                    description=description,
                    invocation_count=entry.invocation_count,
                    success_count=entry.success_count,
                    success_rate=entry.success_rate,
                    last_used=entry.last_used,
                    first_used=entry.first_used,
                )
            )

        active = [row for row in rows if row.invocation_count > 0]
        overall = sum(row.success_rate for row in active) / len(active) if active else 0.0

        return DashboardReport(
            agents=agents,
            usage_stats=rows,
            total_invocations=total,
            active_agents=len(active),
            overall_success_rate=overall,
        )

    # ------------------------------------------------------------------
    # Persistence and administration
    # ------------------------------------------------------------------
    def persist_now(self) -> bool:
        """Write the current snapshot; raises :class:`StatsPersistenceError` on failure."""

        if not self._persistence_enabled:
            return False
        snapshot = self._store.snapshot()
        self._persistence.save(snapshot)
        return True

    def scheduled_persistence(self) -> bool:
        if not self._persistence_enabled:
            return False
        try:
            written = self.persist_now()
        except Exception as exc:
            logger.warning("Scheduled stats persistence failed: %s", exc)
            return False
        logger.debug("Scheduled stats persistence completed - %d agents tracked", len(self._store))
        return written

    def clear_all_stats(self) -> None:
        with self._lock:
            self._store.clear()
            self._total_invocations = 0
        logger.info("All agent statistics cleared")

    def shutdown(self) -> None:
        if not self._persistence_enabled:
            logger.info("Stats service shutdown - persistence disabled")
            return
        try:
            self.persist_now()
            logger.info("Stats service shutdown - stats persisted")
        except Exception:
            logger.error("Failed to persist stats during shutdown", exc_info=True)


def _truncate(entries: List[StatEntry], limit: int) -> List[StatEntry]:
    if limit <= 0:
        return []
    return entries[:limit]
