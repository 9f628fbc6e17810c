"""Value objects for per-agent usage statistics."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: Any, field_name: str) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as exc:
            raise ValueError(f"Invalid timestamp for {field_name}: {value!r}") from exc
    else:
        raise ValueError(f"Missing timestamp for {field_name}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_count(payload: Dict[str, Any], key: str) -> int:
    value = payload.get(key, 0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Field {key} must be a number, got {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Field {key} must be finite, got {value!r}")
    count = int(value)
    if count < 0:
        raise ValueError(f"Field {key} must be non-negative, got {count}")
    return count


@dataclass(frozen=True, slots=True)
class StatEntry:
    """Immutable snapshot of one agent's cumulative counters.

    Entries are never mutated; every recorded invocation produces a new
    entry through :meth:`with_invocation`.
    """

    agent_name: str
    invocation_count: int = 0
    success_count: int = 0
    failure_count: int = 0
    total_response_time_ms: int = 0
    average_response_time_ms: float = 0.0
    first_used: datetime = field(default_factory=utcnow)
    last_used: datetime = field(default_factory=utcnow)

    @classmethod
    def initial(cls, agent_name: str, now: Optional[datetime] = None) -> "StatEntry":
        moment = now or utcnow()
        return cls(agent_name=agent_name, first_used=moment, last_used=moment)

    def with_invocation(
        self,
        success: bool,
        response_time_ms: int,
        now: Optional[datetime] = None,
    ) -> "StatEntry":
        moment = now or utcnow()
        elapsed = max(int(response_time_ms), 0)
        invocation_count = self.invocation_count + 1
        total = self.total_response_time_ms + elapsed
        return StatEntry(
            agent_name=self.agent_name,
            invocation_count=invocation_count,
            success_count=self.success_count + (1 if success else 0),
            failure_count=self.failure_count + (0 if success else 1),
            total_response_time_ms=total,
            average_response_time_ms=total / invocation_count,
            first_used=self.first_used,
            last_used=max(moment, self.first_used),
        )

    @property
    def success_rate(self) -> float:
        if self.invocation_count == 0:
            return 0.0
        return self.success_count / self.invocation_count * 100.0

    @property
    def failure_rate(self) -> float:
        if self.invocation_count == 0:
            return 0.0
        return self.failure_count / self.invocation_count * 100.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "agentName": self.agent_name,
            "invocationCount": self.invocation_count,
            "successCount": self.success_count,
            "failureCount": self.failure_count,
            "averageResponseTimeMs": self.average_response_time_ms,
            "totalResponseTimeMs": self.total_response_time_ms,
            "lastUsed": self.last_used.isoformat(),
            "firstUsed": self.first_used.isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any], *, agent_name: Optional[str] = None) -> "StatEntry":
        if not isinstance(payload, dict):
            raise ValueError(f"Stat entry must be an object, got {type(payload).__name__}")

        name = agent_name or payload.get("agentName")
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Stat entry is missing agentName")

        success_count = _parse_count(payload, "successCount")
        failure_count = _parse_count(payload, "failureCount")
        total = _parse_count(payload, "totalResponseTimeMs")
        # The split counts are authoritative; a drifted invocationCount is ignored.
        invocation_count = success_count + failure_count

        first_used = _parse_timestamp(payload.get("firstUsed"), "firstUsed")
        last_used = _parse_timestamp(payload.get("lastUsed") or payload.get("firstUsed"), "lastUsed")

        return cls(
            agent_name=name,
            invocation_count=invocation_count,
            success_count=success_count,
            failure_count=failure_count,
            total_response_time_ms=total,
            average_response_time_ms=(total / invocation_count) if invocation_count else 0.0,
            first_used=first_used,
            last_used=max(last_used, first_used),
        )


@dataclass(slots=True)
class AgentUsageRow:
    """One dashboard row joining a catalog agent with its statistics."""

    agent_name: str
    description: str
    invocation_count: int = 0
    success_count: int = 0
    success_rate: float = 0.0
    last_used: Optional[datetime] = None
    first_used: Optional[datetime] = None


@dataclass(slots=True)
class DashboardReport:
    """Aggregated view handed to the dashboard layer."""

    agents: Sequence[Any]
    usage_stats: List[AgentUsageRow]
    total_invocations: int
    active_agents: int
    overall_success_rate: float
