"""Tests for the statistics service."""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from agentdeck.stats.models import StatEntry
from agentdeck.stats.persistence import StatsPersistence, StatsPersistenceError
from agentdeck.stats.service import StatsService
from agentdeck.stats.store import StatsStore

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FailingPersistence:
    def __init__(self, path) -> None:
        self.path = path
        self.save_calls = 0

    def load(self):
        raise StatsPersistenceError("corrupt", path=self.path)

    def save(self, entries) -> None:
        self.save_calls += 1
        raise StatsPersistenceError("read-only", path=self.path)


def _entry(name: str, successes: int, failures: int = 0, *, at: datetime = T0) -> StatEntry:
    entry = StatEntry.initial(name, now=at)
    for _ in range(successes):
        entry = entry.with_invocation(True, 10, now=at)
    for _ in range(failures):
        entry = entry.with_invocation(False, 10, now=at)
    return entry


def _service_with(entries: dict[str, StatEntry]) -> StatsService:
    service = StatsService(StatsStore(), persistence=None)
    service.initialize()
    service._store.replace_all(entries)
    return service


def test_end_to_end_recording() -> None:
    service = StatsService()
    service.initialize()

    for elapsed in (100, 200, 300):
        service.record_invocation("x", True, elapsed)
    service.record_invocation("x", False, 50)

    stats = service.get_agent_stats("x")
    assert stats.invocation_count == 4
    assert stats.success_count == 3
    assert stats.failure_count == 1
    assert stats.average_response_time_ms == 162.5
    assert stats.last_used >= stats.first_used
    assert service.get_total_invocations() == 4


@pytest.mark.parametrize("name", ["", "   ", None, 42])
def test_blank_agent_name_is_ignored(name) -> None:
    service = StatsService()
    service.initialize()

    service.record_invocation(name, True, 10)

    assert service.get_total_invocations() == 0
    assert dict(service.get_all_stats()) == {}


def test_record_invocation_swallows_internal_failures(caplog) -> None:
    class BrokenStore(StatsStore):
        def upsert(self, *args, **kwargs):
            raise RuntimeError("boom")

    service = StatsService(BrokenStore())
    caplog.set_level(logging.DEBUG, logger="agentdeck.stats.service")

    service.record_invocation("x", True, 10)
    service.record_invocation("x", True, "not-a-number")  # type: ignore[arg-type]

    assert service.get_total_invocations() == 0
    assert any("Failed to record stats" in message for message in caplog.messages)


def test_concurrent_recording_keeps_exact_totals() -> None:
    service = StatsService()
    service.initialize()
    calls = [(i % 3 != 0, i) for i in range(1500)]

    with ThreadPoolExecutor(max_workers=12) as pool:
        list(pool.map(lambda call: service.record_invocation("x", *call), calls))

    stats = service.get_agent_stats("x")
    assert stats.invocation_count == 1500
    assert stats.success_count + stats.failure_count == 1500
    assert stats.total_response_time_ms == sum(elapsed for _, elapsed in calls)
    assert service.get_total_invocations() == 1500


def test_most_used_agents_ordering() -> None:
    service = _service_with({"C": _entry("C", 1), "A": _entry("A", 10), "B": _entry("B", 5)})

    assert [entry.agent_name for entry in service.get_most_used_agents(2)] == ["A", "B"]
    assert service.get_most_used_agents(0) == []


def test_highest_success_rate_skips_unused_agents() -> None:
    service = _service_with(
        {
            "idle": StatEntry.initial("idle", now=T0),
            "flaky": _entry("flaky", 1, 1),
            "solid": _entry("solid", 4),
        }
    )

    ranked = service.get_highest_success_rate_agents(5)

    assert [entry.agent_name for entry in ranked] == ["solid", "flaky"]


def test_recently_used_agents_newest_first() -> None:
    service = _service_with(
        {
            "old": _entry("old", 1, at=T0),
            "new": _entry("new", 1, at=T0 + timedelta(hours=2)),
            "mid": _entry("mid", 1, at=T0 + timedelta(hours=1)),
        }
    )

    assert [entry.agent_name for entry in service.get_recently_used_agents(3)] == ["new", "mid", "old"]


def test_get_all_stats_is_read_only() -> None:
    service = StatsService()
    service.initialize()
    service.record_invocation("x", True, 1)

    with pytest.raises(TypeError):
        service.get_all_stats()["y"] = StatEntry.initial("y")  # type: ignore[index]


def test_clear_all_stats() -> None:
    service = StatsService()
    service.initialize()
    service.record_invocation("x", True, 1)

    service.clear_all_stats()

    assert service.get_total_invocations() == 0
    assert dict(service.get_all_stats()) == {}


def test_clear_racing_with_recording_keeps_counter_consistent() -> None:
    service = StatsService()
    service.initialize()

    def _record(i: int) -> None:
        service.record_invocation(f"agent-{i % 4}", True, 1)
        if i % 250 == 0:
            service.clear_all_stats()

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(_record, range(1000)))

    snapshot = service.get_all_stats()
    assert service.get_total_invocations() == sum(entry.invocation_count for entry in snapshot.values())


def test_initialize_loads_persisted_stats(tmp_path) -> None:
    gateway = StatsPersistence(tmp_path / "stats.json")
    gateway.save({"a": _entry("a", 3, 1), "b": _entry("b", 2)})

    service = StatsService(persistence=gateway)
    service.initialize()

    assert service.initialized is True
    assert service.get_total_invocations() == 6
    assert service.get_agent_stats("a").failure_count == 1


def test_initialize_is_idempotent(tmp_path) -> None:
    gateway = StatsPersistence(tmp_path / "stats.json")
    gateway.save({"a": _entry("a", 3)})
    service = StatsService(persistence=gateway)

    service.initialize()
    service.record_invocation("a", True, 1)
    service.initialize()

    assert service.get_total_invocations() == 4


def test_initialize_with_corrupt_file_starts_empty(tmp_path, caplog) -> None:
    path = tmp_path / "stats.json"
    path.write_text("{broken", encoding="utf-8")
    service = StatsService(persistence=StatsPersistence(path))
    caplog.set_level(logging.WARNING, logger="agentdeck.stats.service")

    service.initialize()

    assert service.initialized is True
    assert service.get_total_invocations() == 0
    assert any("starting fresh" in message for message in caplog.messages)


def test_initialize_with_infinite_counts_starts_empty(tmp_path) -> None:
    path = tmp_path / "stats.json"
    path.write_text(
        '{"x": {"successCount": 1e400, "failureCount": 0, "totalResponseTimeMs": 0,'
        ' "firstUsed": "2024-05-01T12:00:00+00:00"}}',
        encoding="utf-8",
    )
    service = StatsService(persistence=StatsPersistence(path))

    service.initialize()

    assert service.initialized is True
    assert dict(service.get_all_stats()) == {}


def test_initialize_survives_unexpected_load_errors(tmp_path, caplog) -> None:
    class ExplodingPersistence:
        path = tmp_path / "stats.json"

        def load(self):
            raise RuntimeError("disk controller on fire")

    service = StatsService(persistence=ExplodingPersistence())
    caplog.set_level(logging.WARNING, logger="agentdeck.stats.service")

    service.initialize()

    assert service.initialized is True
    assert service.get_total_invocations() == 0
    assert any("starting fresh" in message for message in caplog.messages)


def test_initialize_skips_loading_when_persistence_disabled(tmp_path) -> None:
    gateway = StatsPersistence(tmp_path / "stats.json")
    gateway.save({"a": _entry("a", 3)})

    service = StatsService(persistence=gateway, persistence_enabled=False)
    service.initialize()

    assert service.persistence_enabled is False
    assert service.get_total_invocations() == 0
    assert service.scheduled_persistence() is False


def test_scheduled_persistence_writes_snapshot(tmp_path) -> None:
    path = tmp_path / "stats.json"
    service = StatsService(persistence=StatsPersistence(path))
    service.initialize()
    service.record_invocation("x", True, 12)

    assert service.scheduled_persistence() is True

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["x"]["invocationCount"] == 1


def test_scheduled_persistence_failures_are_not_fatal(tmp_path, caplog) -> None:
    gateway = FailingPersistence(tmp_path / "stats.json")
    service = StatsService(persistence=gateway)
    service.initialize()
    service.record_invocation("x", True, 1)
    caplog.set_level(logging.WARNING, logger="agentdeck.stats.service")

    assert service.scheduled_persistence() is False
    assert service.scheduled_persistence() is False

    assert gateway.save_calls == 2
    assert any("Scheduled stats persistence failed" in message for message in caplog.messages)


def test_persist_now_raises_persistence_errors(tmp_path) -> None:
    service = StatsService(persistence=FailingPersistence(tmp_path / "stats.json"))

    with pytest.raises(StatsPersistenceError):
        service.persist_now()


def test_shutdown_logs_persistence_failure(tmp_path, caplog) -> None:
    service = StatsService(persistence=FailingPersistence(tmp_path / "stats.json"))
    caplog.set_level(logging.ERROR, logger="agentdeck.stats.service")

    service.shutdown()

    assert any("during shutdown" in message for message in caplog.messages)


def test_cleared_stats_survive_restart(tmp_path) -> None:
    gateway = StatsPersistence(tmp_path / "stats.json")
    service = StatsService(persistence=gateway)
    service.initialize()
    service.record_invocation("x", True, 1)
    service.scheduled_persistence()

    service.clear_all_stats()
    service.shutdown()

    restarted = StatsService(persistence=gateway)
    restarted.initialize()
    assert restarted.get_total_invocations() == 0


def test_stats_summary() -> None:
    service = StatsService()
    service.initialize()

    assert service.get_stats_summary() == "No agent statistics available"

    service.record_invocation("a", True, 1)
    service.record_invocation("a", False, 1)
    service.record_invocation("b", True, 1)
    service.record_invocation("b", True, 1)

    assert service.get_stats_summary() == "Agents: 2, Total Invocations: 4, Overall Success Rate: 75.0%"


def test_generate_dashboard_report_zero_fills_unused_agents() -> None:
    service = StatsService()
    service.initialize()
    service.record_invocation("alpha", True, 10)
    service.record_invocation("alpha", False, 10)
    service.record_invocation("beta", True, 10)
    service.record_invocation("not-in-catalog", True, 10)
    catalog = [
        SimpleNamespace(name="alpha", description="First"),
        SimpleNamespace(name="beta", description="Second"),
        SimpleNamespace(name="gamma", description="Third"),
    ]

    report = service.generate_dashboard_report(catalog)

    assert [row.agent_name for row in report.usage_stats] == ["alpha", "beta", "gamma"]
    gamma = report.usage_stats[2]
    assert gamma.invocation_count == 0
    assert gamma.last_used is None
    assert gamma.description == "Third"
    assert report.usage_stats[0].success_rate == 50.0
    assert report.active_agents == 2
    assert report.overall_success_rate == 75.0
    assert report.total_invocations == 4
    assert report.agents == catalog


def test_generate_dashboard_report_accepts_a_generator() -> None:
    service = StatsService()
    service.initialize()
    service.record_invocation("alpha", True, 10)

    report = service.generate_dashboard_report(
        SimpleNamespace(name=name, description="") for name in ("alpha", "beta")
    )

    assert [agent.name for agent in report.agents] == ["alpha", "beta"]
    assert [row.agent_name for row in report.usage_stats] == ["alpha", "beta"]
    assert report.active_agents == 1


def test_generate_dashboard_report_without_activity() -> None:
    service = StatsService()
    service.initialize()

    report = service.generate_dashboard_report([SimpleNamespace(name="alpha", description="")])

    assert report.active_agents == 0
    assert report.overall_success_rate == 0.0
    assert report.total_invocations == 0
