"""Shared pytest fixtures for fastapi-sso-agent tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from fastapi_sso_agent.config import AgentSettings, SAML2Settings


@pytest.fixture
def make_request() -> Any:
    """Factory for creating Starlette Request objects, optionally with a body and session."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
        body: bytes = b"",
        session: dict[str, Any] | None = None,
        app: Any = None,
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
        }
        if session is not None:
            scope["session"] = session
        if app is not None:
            scope["app"] = app

        async def receive() -> dict[str, Any]:
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return _make


@pytest.fixture
def settings() -> AgentSettings:
    """Settings with every protocol switched on."""
    return AgentSettings(
        openid_login_enabled=True,
        saml2_grant_enabled=True,
        skip_urls=["/static/*", "/health"],
    )


@pytest.fixture
def passive_settings() -> AgentSettings:
    """Settings whose configured passive-authentication default is on."""
    return AgentSettings(saml2=SAML2Settings(passive_authn=True))


@pytest.fixture
def saml2_manager() -> AsyncMock:
    """Mock SAML2 collaborator returning canned request payloads."""
    manager = AsyncMock()
    manager.build_authn_request.return_value = "https://idp.example.com/sso?SAMLRequest=abc"
    manager.build_logout_request.return_value = "https://idp.example.com/slo?SAMLRequest=def"
    return manager


@pytest.fixture
def openid_manager() -> AsyncMock:
    manager = AsyncMock()
    manager.initiate_login.return_value = "https://op.example.com/auth?openid.mode=checkid_setup"
    return manager


@pytest.fixture
def grant_manager() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def call_next() -> AsyncMock:
    """Downstream continuation that records its calls."""
    return AsyncMock(return_value=PlainTextResponse("downstream"))
