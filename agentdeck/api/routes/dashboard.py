"""Browser-facing dashboard page and root redirect."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from html import escape

from fastapi import APIRouter, Depends, status
from fastapi.responses import HTMLResponse, RedirectResponse

from agentdeck.api.dependencies import get_agent_runtime
from agentdeck.core.runtime import AgentRuntime

logger = logging.getLogger(__name__)

router = APIRouter()

PAGE_TITLE = "Agent Dashboard"


@router.get("/", include_in_schema=False)
def redirect_to_dashboard() -> RedirectResponse:
    logger.debug("Root path accessed, redirecting to dashboard")
    return RedirectResponse(url="/dashboard", status_code=status.HTTP_302_FOUND)


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard_page(runtime: AgentRuntime = Depends(get_agent_runtime)) -> HTMLResponse:
    """
    Render a small HTML overview of the catalog and its usage.

    The page is a static render of one dashboard report; live data is served
    as JSON under ``/v1/dashboard/data``.
    """

    logger.info("Serving dashboard page")
    try:
        report = runtime.stats_service.generate_dashboard_report(runtime.agent_store.get_agents())
    except Exception as exc:
        logger.error("Error loading dashboard: %s", exc)
        return HTMLResponse(
            content="<h1>Dashboard unavailable</h1><p>Failed to load dashboard data.</p>",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    rows = "".join(
        "<tr>"
        f"<td>{escape(row.agent_name)}</td>"
        f"<td>{escape(row.description)}</td>"
        f"<td>{row.invocation_count}</td>"
        f"<td>{row.success_rate:.1f}%</td>"
        f"<td>{row.last_used.isoformat() if row.last_used else '-'}</td>"
        "</tr>"
        for row in report.usage_stats
    )
    content = (
        f"<!doctype html><html><head><title>{PAGE_TITLE}</title></head><body>"
        f"<h1>{PAGE_TITLE}</h1>"
        f"<p>Agents: <strong>{len(report.agents)}</strong> | "
        f"Total invocations: <strong>{report.total_invocations}</strong> | "
        f"Active agents: <strong>{report.active_agents}</strong> | "
        f"Overall success rate: <strong>{report.overall_success_rate:.1f}%</strong></p>"
        f"<p>Server time: {datetime.now(timezone.utc).isoformat()}</p>"
        "<table><thead><tr><th>Agent</th><th>Description</th><th>Invocations</th>"
        "<th>Success rate</th><th>Last used</th></tr></thead>"
        f"<tbody>{rows}</tbody></table>"
        "</body></html>"
    )
    return HTMLResponse(content=content)
