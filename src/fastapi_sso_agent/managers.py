"""Protocol collaborators — SAML2 SSO/SLO, OpenID 2.0 and SAML2 grant managers.

The agent never parses assertions or talks to identity providers itself.
Implementations raise ``ProtocolFailure`` for protocol errors and
``InvalidSessionError`` when session-bound state is missing.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from starlette.requests import Request

from fastapi_sso_agent.config import Binding


@runtime_checkable
class SAML2SSOManager(Protocol):
    """SAML2 web-SSO and single-logout operations."""

    async def process_response(self, request: Request) -> None: ...

    async def build_authn_request(
        self, request: Request, *, binding: Binding, is_passive: bool
    ) -> str:
        """Return a redirect URL for ``Binding.REDIRECT`` or a form snippet for POST."""
        ...

    async def build_logout_request(
        self, request: Request, *, binding: Binding, is_passive: bool
    ) -> str: ...

    async def process_logout(self, request: Request) -> None: ...


@runtime_checkable
class OpenIDManager(Protocol):
    """OpenID 2.0 relying-party operations."""

    async def process_login_response(self, request: Request) -> None: ...

    async def initiate_login(self, request: Request) -> str: ...


@runtime_checkable
class SAML2GrantManager(Protocol):
    """SAML2 bearer assertion to OAuth2 access token exchange."""

    async def exchange_assertion_for_token(self, request: Request) -> None: ...
