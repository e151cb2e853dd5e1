"""SSOAgent — classifies each request and dispatches it to a protocol handler."""

from __future__ import annotations

import time
from typing import NoReturn

from loguru import logger
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from fastapi_sso_agent._logging import LOG_PREFIX
from fastapi_sso_agent._types import CallNext
from fastapi_sso_agent.category import FlowCategory
from fastapi_sso_agent.classifier import RequestClassifier, is_url_to_skip
from fastapi_sso_agent.config import AgentSettings
from fastapi_sso_agent.context import RequestContext
from fastapi_sso_agent.exceptions import ConfigurationMissing, ProtocolFailure
from fastapi_sso_agent.handlers import (
    FlowHandler,
    OpenIDHandler,
    SAML2GrantHandler,
    SAML2Handler,
)
from fastapi_sso_agent.hooks import AgentHook
from fastapi_sso_agent.managers import OpenIDManager, SAML2GrantManager, SAML2SSOManager
from fastapi_sso_agent.outcomes import (
    Continue,
    Failure,
    Outcome,
    PostForm,
    Redirect,
    SessionExpired,
    outcome_kind,
)
from fastapi_sso_agent.rendering import post_response
from fastapi_sso_agent.trace import DispatchTrace

DEFAULT_CONFIG_STATE_KEY = "sso_agent_config"
TRACE_STATE_ATTRIBUTE = "sso_trace"

_NO_HANDLER = frozenset({FlowCategory.SKIP, FlowCategory.PASS_THROUGH})


def should_go_to_welcome_page(request: Request, settings: AgentSettings) -> bool:
    """True when the agent asked the downstream app to show its landing view."""
    return bool(getattr(request.state, settings.welcome_page_attribute, False))


class SSOAgent:
    """Single entry point for federated authentication flows.

    One instance serves every concurrent request. It keeps no per-request
    state, and settings are never written: overrides such as forced passive
    authentication are passed to the collaborator per call.
    """

    def __init__(
        self,
        *,
        settings: AgentSettings | None = None,
        saml2: SAML2SSOManager | None = None,
        openid: OpenIDManager | None = None,
        grant: SAML2GrantManager | None = None,
        classifier: RequestClassifier | None = None,
        handlers: tuple[FlowHandler, ...] = (),
        config_state_key: str = DEFAULT_CONFIG_STATE_KEY,
        debug: bool = False,
    ) -> None:
        self._settings = settings
        self._classifier = classifier or RequestClassifier()
        self._config_state_key = config_state_key
        self._debug = debug
        self._hooks: list[AgentHook] = []
        self._handlers: dict[FlowCategory, FlowHandler] = {}

        builtin: list[FlowHandler] = []
        if saml2 is not None:
            builtin.append(SAML2Handler(saml2))
        if openid is not None:
            builtin.append(OpenIDHandler(openid))
        if grant is not None:
            builtin.append(SAML2GrantHandler(grant))
        for handler in (*builtin, *handlers):
            self.register(handler)

    def register(self, handler: FlowHandler) -> SSOAgent:
        """Route every category the handler owns to it, replacing earlier ones."""
        for category in handler.categories:
            if category in _NO_HANDLER:
                raise ValueError(f"{category.name} is never dispatched to a handler")
            self._handlers[category] = handler
        return self

    def add_hook(self, hook: AgentHook) -> SSOAgent:
        self._hooks.append(hook)
        return self

    @property
    def classifier(self) -> RequestClassifier:
        return self._classifier

    def resolve_settings(self, request: Request) -> AgentSettings:
        if self._settings is not None:
            return self._settings
        app = request.scope.get("app")
        config = getattr(getattr(app, "state", None), self._config_state_key, None)
        if not isinstance(config, AgentSettings):
            raise ConfigurationMissing(
                f"Cannot find {self._config_state_key} attribute of AgentSettings "
                "type in the application state. Cannot proceed further."
            )
        return config

    def handler_for(self, category: FlowCategory) -> FlowHandler:
        handler = self._handlers.get(category)
        if handler is None:
            raise ConfigurationMissing(
                f"No handler configured for {category.name} requests"
            )
        return handler

    async def handle(self, request: Request, call_next: CallNext) -> Response:
        settings = self.resolve_settings(request)
        ctx = await RequestContext.from_request(request, settings, read_form=False)
        # skipped paths keep their body untouched for the downstream app
        if not is_url_to_skip(ctx):
            await ctx.load_form()
        category = self._classifier.classify(ctx)

        for hook in self._hooks:
            await hook.on_classified(ctx, category)

        start = time.perf_counter()
        handler: FlowHandler | None = None
        if category in _NO_HANDLER:
            outcome: Outcome = Continue()
        else:
            handler = self.handler_for(category)
            outcome = await handler.handle(ctx, category)

        for hook in self._hooks:
            await hook.on_outcome(ctx, category, outcome)

        if self._debug:
            self._record_trace(ctx, category, handler, outcome, start)

        return await self._respond(ctx, category, outcome, call_next)

    async def _respond(
        self,
        ctx: RequestContext,
        category: FlowCategory,
        outcome: Outcome,
        call_next: CallNext,
    ) -> Response:
        request = ctx.request
        if isinstance(outcome, Redirect):
            logger.info(f"{LOG_PREFIX} {category.name}: redirecting")
            return RedirectResponse(outcome.location, status_code=outcome.status_code)
        if isinstance(outcome, PostForm):
            logger.info(f"{LOG_PREFIX} {category.name}: sending POST binding form")
            return post_response(outcome.snippet, ctx.settings)
        if isinstance(outcome, Failure):
            self._recover(ctx, category, outcome.error)
        if isinstance(outcome, SessionExpired):
            logger.info(
                f"{LOG_PREFIX} {category.name}: session expired, "
                "continuing to the welcome page"
            )
            self._mark_welcome_page(ctx)
        elif isinstance(outcome, Continue) and outcome.show_landing:
            self._mark_welcome_page(ctx)
        return await call_next(request)

    def _recover(
        self, ctx: RequestContext, category: FlowCategory, error: ProtocolFailure
    ) -> NoReturn:
        error.category = category
        # only response processing drops the session bean; see DESIGN.md
        if category.clears_session_on_failure and ctx.has_session:
            ctx.request.session.pop(ctx.settings.session_bean_key, None)
            logger.warning(
                f"{LOG_PREFIX} {category.name}: cleared {ctx.settings.session_bean_key}"
            )
        logger.opt(exception=error).error(f"{LOG_PREFIX} An error has occurred")
        raise error

    @staticmethod
    def _mark_welcome_page(ctx: RequestContext) -> None:
        setattr(ctx.request.state, ctx.settings.welcome_page_attribute, True)

    def _record_trace(
        self,
        ctx: RequestContext,
        category: FlowCategory,
        handler: FlowHandler | None,
        outcome: Outcome,
        start: float,
    ) -> None:
        reason: str | None = None
        if isinstance(outcome, Failure):
            reason = outcome.error.detail
        elif isinstance(outcome, SessionExpired):
            reason = outcome.reason
        trace = DispatchTrace(
            category=category,
            handler_name=type(handler).__name__ if handler is not None else None,
            outcome=outcome_kind(outcome),
            duration_ms=(time.perf_counter() - start) * 1000,
            reason=reason,
        )
        ctx.state["trace"] = trace
        setattr(ctx.request.state, TRACE_STATE_ATTRIBUTE, trace)
