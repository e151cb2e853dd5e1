"""SSOAgentError hierarchy for configuration, protocol and session failures."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi_sso_agent.category import FlowCategory


class SSOAgentError(Exception):
    """Base for all agent exceptions."""


class ConfigurationMissing(SSOAgentError):
    """Required agent configuration or collaborator is not available."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ProtocolFailure(SSOAgentError):
    """Protocol-level error raised by a collaborator.

    ``category`` is filled in by the agent once it knows which flow the
    failure belongs to.
    """

    def __init__(
        self,
        detail: str,
        *,
        category: FlowCategory | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.category = category
        self.cause = cause


class InvalidSessionError(SSOAgentError):
    """Session-bound authentication state is missing or no longer valid."""

    def __init__(self, detail: str = "Session expired or already logged out") -> None:
        super().__init__(detail)
        self.detail = detail
