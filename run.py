import os
import sys
from typing import Dict, List, Tuple

PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from agentdeck.config import CONFIG, load_envs, reload_config
from agentdeck.logger import configure_logging, log
from agentdeck.registry.agents.store import AgentStore
from agentdeck.stats.persistence import StatsPersistence, StatsPersistenceError
from agentdeck.stats.service import StatsService

# Load environment variables
load_envs(PROJECT_ROOT)


def _parse_cli_args(extra_args: List[str]) -> Tuple[Dict[str, object], List[str]]:
    """Parse CLI-style ``--key value`` pairs and return remaining positional args."""

    consumed_indexes: set[int] = set()
    cli_params: Dict[str, object] = {}

    i = 0
    while i < len(extra_args):
        token = extra_args[i]
        if token.startswith("--") and len(token) > 2:
            key = token[2:].strip().replace("-", "_")
            if not key:
                i += 1
                continue
            consumed_indexes.add(i)
            value: object = True
            if i + 1 < len(extra_args) and not extra_args[i + 1].startswith("--"):
                value = extra_args[i + 1]
                consumed_indexes.add(i + 1)
                i += 2
            else:
                i += 1
            cli_params[key] = value
        else:
            i += 1

    residual = [token for idx, token in enumerate(extra_args) if idx not in consumed_indexes]
    return cli_params, residual


def _print_usage() -> None:
    usage = (
        "Usage:\n"
        "  python run.py serve [--host 127.0.0.1] [--port 8000] [--reload]\n"
        "  python run.py agents [--agents-dir <path>]\n"
        "  python run.py stats [--file <path>]\n"
    )
    print(usage.strip())


def _serve(params: Dict[str, object]) -> int:
    import uvicorn

    host = str(params.get("host") or "127.0.0.1")
    try:
        port = int(params.get("port") or 8000)
    except (TypeError, ValueError):
        print("[dispatcher error] --port must be an integer.", file=sys.stderr)
        return 1

    log(f"[dispatcher] serving API on {host}:{port}")
    uvicorn.run(
        "agentdeck.api.main:app",
        host=host,
        port=port,
        reload=bool(params.get("reload")),
        log_level=CONFIG.log_level.lower(),
    )
    return 0


def _list_agents(params: Dict[str, object]) -> int:
    agents_dir = params.get("agents_dir")
    store = AgentStore(str(agents_dir) if isinstance(agents_dir, str) else CONFIG.agents_dir)
    for agent in store.get_agents():
        print(f"{agent.name}: {agent.description}")
    return 0


def _print_stats(params: Dict[str, object]) -> int:
    path = params.get("file")
    persistence = StatsPersistence(str(path) if isinstance(path, str) else CONFIG.stats_persistence_file_path)
    try:
        persistence.load()
    except StatsPersistenceError as exc:
        print(f"[dispatcher error] {exc}", file=sys.stderr)
        return 1

    service = StatsService(persistence=persistence, persistence_enabled=True)
    service.initialize()
    print(service.get_stats_summary())
    for entry in service.get_most_used_agents(len(service.get_all_stats())):
        print(
            f"  {entry.agent_name}: {entry.invocation_count} invocations, "
            f"{entry.success_rate:.1f}% success, {entry.average_response_time_ms:.1f}ms avg"
        )
    return 0


COMMANDS = {
    "serve": _serve,
    "agents": _list_agents,
    "stats": _print_stats,
}


def main(argv: list[str] | None = None):
    args = argv if argv is not None else sys.argv[1:]
    reload_config()
    configure_logging(CONFIG.log_level)

    if not args:
        _print_usage()
        return 1

    command, extra_args = args[0], args[1:]
    handler = COMMANDS.get(command)
    if handler is None:
        print(f"[dispatcher error] Unknown command '{command}'.", file=sys.stderr)
        _print_usage()
        return 1

    cli_params, residual_args = _parse_cli_args(extra_args)
    if residual_args:
        print(f"[dispatcher error] Unexpected arguments: {' '.join(residual_args)}", file=sys.stderr)
        return 1

    try:
        return int(handler(cli_params) or 0)
    except Exception as exc:
        print(f"[dispatcher error] {type(exc).__name__}: {exc}", file=sys.stderr)
        return 2

if __name__ == "__main__":
    sys.exit(main())
