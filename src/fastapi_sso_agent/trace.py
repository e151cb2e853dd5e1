"""DispatchTrace — debug record of a single agent invocation."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi_sso_agent.category import FlowCategory


@dataclass
class DispatchTrace:
    """Structured record of how one request was classified and handled."""

    category: FlowCategory
    handler_name: str | None = None
    outcome: str = "Continue"
    duration_ms: float = 0.0
    reason: str | None = None
