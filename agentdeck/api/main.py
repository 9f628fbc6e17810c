"""FastAPI application exposing the agent catalog and usage dashboard."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agentdeck.config import CONFIG, load_envs
from agentdeck.core.runtime import get_runtime
from agentdeck.logger import configure_logging

from .routes import agents, dashboard, stats

PROJECT_ROOT = Path(__file__).resolve().parents[2]

load_envs(str(PROJECT_ROOT))
configure_logging(CONFIG.log_level)


@asynccontextmanager
async def lifespan(_api_app: FastAPI) -> AsyncIterator[None]:
    runtime = get_runtime()
    runtime.start()
    try:
        yield
    finally:
        runtime.shutdown()


app = FastAPI(
    title=CONFIG.api_title,
    version=CONFIG.api_version,
    description=(
        "JSON API exposing the markdown agent catalog, agent invocation and "
        "per-agent usage statistics for dashboards."
    ),
    lifespan=lifespan,
)


def _configure_cors(api_app: FastAPI, origins: Sequence[str]) -> None:
    if not origins:
        return

    api_app.add_middleware(
        CORSMiddleware,
        allow_origins=list(origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


_configure_cors(app, CONFIG.api_cors_origins)


@app.get("/health", tags=["health"])  # pragma: no cover - trivial fast check
def healthcheck() -> dict[str, str]:
    """Simple health endpoint for load balancers and smoke tests."""

    return {"status": "ok"}


app.include_router(agents.router, prefix="/v1", tags=["agents"])
app.include_router(stats.router, prefix="/v1", tags=["stats"])
app.include_router(dashboard.router, tags=["dashboard"])
