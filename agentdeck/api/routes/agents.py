"""Agent catalog endpoints: listing, search, recommendations and invocation."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query, status

from agentdeck.api.dependencies import get_agent_runtime
from agentdeck.api.schemas import AgentSummary, InvokeAgentRequest, InvokeAgentResponse
from agentdeck.core.invocation import AgentInvocation
from agentdeck.core.runtime import AgentRuntime

router = APIRouter()


@router.get("/agents", response_model=Dict[str, Any], status_code=status.HTTP_200_OK)
def list_agents(runtime: AgentRuntime = Depends(get_agent_runtime)) -> Dict[str, Any]:
    """Return every agent in the catalog."""

    agents = [AgentSummary.from_definition(agent) for agent in runtime.agent_store.get_agents()]
    return {"agents": agents, "count": len(agents)}


@router.get("/agents/search", response_model=Dict[str, Any], status_code=status.HTTP_200_OK)
def find_agents(
    query: str = Query(..., min_length=1),
    runtime: AgentRuntime = Depends(get_agent_runtime),
) -> Dict[str, Any]:
    """Search agents by domain keywords."""

    matches = [AgentSummary.from_definition(agent) for agent in runtime.agent_store.find_agents(query)]
    return {"query": query, "agents": matches, "count": len(matches)}


@router.get("/agents/recommend", response_model=Dict[str, Any], status_code=status.HTTP_200_OK)
def recommend_agents(
    task: str = Query(..., min_length=1),
    runtime: AgentRuntime = Depends(get_agent_runtime),
) -> Dict[str, Any]:
    """Return the one to three agents best suited to the task."""

    recommended = [AgentSummary.from_definition(agent) for agent in runtime.agent_store.recommend_agents(task)]
    return {"task": task, "agents": recommended}


@router.post("/agents/invoke", response_model=InvokeAgentResponse, status_code=status.HTTP_200_OK)
def invoke_agent(
    payload: InvokeAgentRequest,
    runtime: AgentRuntime = Depends(get_agent_runtime),
) -> InvokeAgentResponse:
    """Return task-specific guidance from an agent and record the invocation."""

    response = runtime.invocations.invoke_agent(
        AgentInvocation(agent_name=payload.agent_name, task=payload.task, context=payload.context)
    )
    return InvokeAgentResponse(
        agent_name=response.agent_name,
        model=response.model,
        content=response.content,
        status=response.status,
        context_key=response.context_key,
    )


@router.get("/agents/contexts/{context_key}", response_model=Dict[str, Any], status_code=status.HTTP_200_OK)
def get_agent_context(
    context_key: str,
    runtime: AgentRuntime = Depends(get_agent_runtime),
) -> Dict[str, Any]:
    """Return a cached invocation context while it is still alive."""

    context = runtime.invocations.get_context(context_key)
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Context not found or expired",
        )
    return {"context_key": context_key, "context": context}


@router.get("/agents/{agent_name}", response_model=AgentSummary, status_code=status.HTTP_200_OK)
def get_agent_info(
    agent_name: str,
    runtime: AgentRuntime = Depends(get_agent_runtime),
) -> AgentSummary:
    """Return capabilities and description for one agent."""

    agent = runtime.agent_store.get_agent(agent_name)
    if agent is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Agent '{agent_name}' not found",
        )
    return AgentSummary.from_definition(agent)
