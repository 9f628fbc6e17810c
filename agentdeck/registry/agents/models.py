"""Agent definition model for markdown-based discovery."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_MODEL = "mcp-optimized"


def _normalize_tools(raw: Any) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [part.strip() for part in raw.split(",") if part.strip()]
    if isinstance(raw, (list, tuple)):
        return [str(item).strip() for item in raw if item is not None and str(item).strip()]
    return [str(raw).strip()]


@dataclass(slots=True)
class AgentDefinition:
    """Represents an agent profile described by a markdown file."""

    name: str
    description: str = ""
    model: str = DEFAULT_MODEL
    tools: List[str] = field(default_factory=list)
    system_prompt: str = ""
    path: Optional[Path] = None

    @classmethod
    def from_frontmatter(
        cls,
        fallback_name: str,
        frontmatter: Dict[str, Any],
        body: str,
        *,
        path: Optional[Path] = None,
    ) -> "AgentDefinition":
        name = str(frontmatter.get("name") or fallback_name).strip()
        description = str(frontmatter.get("description") or "").strip()
        model = str(frontmatter.get("model") or DEFAULT_MODEL).strip()

        return cls(
            name=name,
            description=description,
            model=model,
            tools=_normalize_tools(frontmatter.get("tools")),
            system_prompt=body.strip(),
            path=path,
        )
