"""RequestContext — per-request state container."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from loguru import logger
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import Request

from fastapi_sso_agent._logging import LOG_PREFIX
from fastapi_sso_agent.config import AgentSettings

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


@dataclass
class RequestContext:
    """Per-request view over the inbound request and the shared settings.

    ``params`` merges query string and form fields, query string first, so
    classification never has to touch the request body again.
    """

    request: Request
    settings: AgentSettings
    params: dict[str, str] = field(default_factory=dict)
    state: dict[str, Any] = field(default_factory=dict)

    @classmethod
    async def from_request(
        cls, request: Request, settings: AgentSettings, *, read_form: bool = True
    ) -> RequestContext:
        params = {
            key: request.query_params.getlist(key)[0]
            for key in request.query_params.keys()
        }
        ctx = cls(request=request, settings=settings, params=params)
        if read_form:
            await ctx.load_form()
        return ctx

    async def load_form(self) -> None:
        """Add form fields to ``params`` without shadowing query parameters.

        The raw body is read first so Starlette caches it and the downstream
        app can still parse the form. A malformed body only means no form
        parameters; the downstream app decides how to answer it.
        """
        request = self.request
        content_type = request.headers.get("content-type", "")
        if request.method != "POST" or not content_type.startswith(_FORM_CONTENT_TYPES):
            return
        await request.body()
        try:
            form = await request.form()
        except (HTTPException, MultiPartException) as exc:
            logger.debug(f"{LOG_PREFIX} Ignoring unparsable form body on {self.path}: {exc}")
            return
        for key, value in form.multi_items():
            if isinstance(value, str):
                self.params.setdefault(key, value)

    @property
    def path(self) -> str:
        return self.request.url.path

    def param(self, name: str) -> str | None:
        return self.params.get(name)

    @property
    def has_session(self) -> bool:
        """True when a session middleware has attached a session to the request."""
        return "session" in self.request.scope
