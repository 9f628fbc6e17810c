"""Thread-safe in-memory store of per-agent statistics."""

from __future__ import annotations

from datetime import datetime
from threading import Lock
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional

from .models import StatEntry

MergeFn = Callable[[Optional[StatEntry]], StatEntry]


class StatsStore:
    """Concurrent mapping of agent name to :class:`StatEntry`.

    The only mutation path is :meth:`merge`: the successor entry is computed
    from the current one and installed while holding the lock, so concurrent
    updates for the same agent are applied one after another and none is lost.
    Entries are immutable and replaced whole, so readers never see a
    half-applied update.
    """

    def __init__(self, entries: Optional[Mapping[str, StatEntry]] = None) -> None:
        self._entries: Dict[str, StatEntry] = dict(entries or {})
        self._lock = Lock()

    def merge(self, agent_name: str, fn: MergeFn) -> StatEntry:
        with self._lock:
            successor = fn(self._entries.get(agent_name))
            if successor.agent_name != agent_name:
                raise ValueError(
                    f"Merge for {agent_name!r} produced an entry for {successor.agent_name!r}"
                )
            self._entries[agent_name] = successor
            return successor

    def upsert(
        self,
        agent_name: str,
        success: bool,
        response_time_ms: int,
        now: Optional[datetime] = None,
    ) -> StatEntry:
        def _apply(current: Optional[StatEntry]) -> StatEntry:
            base = current or StatEntry.initial(agent_name, now=now)
            return base.with_invocation(success, response_time_ms, now=now)

        return self.merge(agent_name, _apply)

    def get(self, agent_name: str) -> Optional[StatEntry]:
        return self._entries.get(agent_name)

    def snapshot(self) -> Mapping[str, StatEntry]:
        with self._lock:
            return MappingProxyType(dict(self._entries))

    def replace_all(self, entries: Mapping[str, StatEntry]) -> None:
        with self._lock:
            self._entries = dict(entries)

    def clear(self) -> None:
        with self._lock:
            self._entries = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, agent_name: object) -> bool:
        return agent_name in self._entries
