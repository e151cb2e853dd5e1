"""SSOAgentMiddleware — mounts an SSOAgent in a Starlette/FastAPI app."""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp, Receive, Scope, Send

from fastapi_sso_agent.agent import SSOAgent
from fastapi_sso_agent.exceptions import ProtocolFailure


class SSOAgentMiddleware(BaseHTTPMiddleware):
    """Runs every HTTP request through the agent before the app sees it.

    Add ``SessionMiddleware`` after this one so it wraps the agent and the
    session is available when a failed login has to be cleared.

    A cookie-backed session is only written when a response starts, so a
    failure that cleared the session bean is answered with a 500 here before
    the error is re-raised. The outer error middleware then logs it without
    sending a second response.
    """

    def __init__(self, app: ASGIApp, agent: SSOAgent) -> None:
        super().__init__(app)
        self.agent = agent

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        except ProtocolFailure as exc:
            category = exc.category
            if (
                category is not None
                and category.clears_session_on_failure
                and "session" in scope
            ):
                response = PlainTextResponse("Internal Server Error", status_code=500)
                await response(scope, receive, send)
            raise

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        return await self.agent.handle(request, call_next)
