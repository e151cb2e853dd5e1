"""Flow handlers — one capability per protocol, selected by FlowCategory."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping

from loguru import logger

from fastapi_sso_agent._logging import LOG_PREFIX
from fastapi_sso_agent.category import FlowCategory
from fastapi_sso_agent.config import Binding
from fastapi_sso_agent.context import RequestContext
from fastapi_sso_agent.exceptions import InvalidSessionError, ProtocolFailure
from fastapi_sso_agent.managers import OpenIDManager, SAML2GrantManager, SAML2SSOManager
from fastapi_sso_agent.outcomes import (
    Continue,
    Failure,
    Outcome,
    PostForm,
    Redirect,
    SessionExpired,
)

Operation = Callable[[RequestContext], Awaitable[Outcome]]


def select_binding(ctx: RequestContext) -> Binding:
    """Binding requested by the caller, else the configured default."""
    saml2 = ctx.settings.saml2
    requested = ctx.param(saml2.binding_param)
    if requested:
        try:
            return Binding.parse(requested)
        except ValueError:
            logger.debug(f"{LOG_PREFIX} Ignoring unknown binding {requested!r}")
    return saml2.http_binding


def _terminal(binding: Binding, payload: str) -> Outcome:
    if binding is Binding.POST:
        return PostForm(snippet=payload)
    return Redirect(location=payload)


class FlowHandler(ABC):
    """Base abstraction for protocol handlers.

    Subclasses map the categories they own to operations. Collaborator
    errors are folded into outcomes here: ``InvalidSessionError`` becomes
    ``SessionExpired`` and ``ProtocolFailure`` becomes ``Failure``. Anything
    else propagates.
    """

    @abstractmethod
    def operations(self) -> Mapping[FlowCategory, Operation]: ...

    @property
    def categories(self) -> frozenset[FlowCategory]:
        return frozenset(self.operations())

    async def handle(self, ctx: RequestContext, category: FlowCategory) -> Outcome:
        operation = self.operations().get(category)
        if operation is None:
            raise ValueError(f"{type(self).__name__} cannot handle {category.name}")
        try:
            return await operation(ctx)
        except InvalidSessionError as exc:
            return SessionExpired(reason=exc.detail)
        except ProtocolFailure as exc:
            return Failure(error=exc)


class SAML2Handler(FlowHandler):
    """SAML2 web-SSO, single logout and passive authentication."""

    def __init__(self, manager: SAML2SSOManager) -> None:
        self._manager = manager

    def operations(self) -> Mapping[FlowCategory, Operation]:
        return {
            FlowCategory.SLO_CALLBACK: self._logout_callback,
            FlowCategory.SSO_RESPONSE: self._sso_response,
            FlowCategory.SLO_INITIATE: self._initiate_logout,
            FlowCategory.SSO_INITIATE: self._initiate_sso,
            FlowCategory.PASSIVE_AUTH_INITIATE: self._initiate_passive,
        }

    async def _logout_callback(self, ctx: RequestContext) -> Outcome:
        await self._manager.process_logout(ctx.request)
        return Continue(show_landing=True)

    async def _sso_response(self, ctx: RequestContext) -> Outcome:
        await self._manager.process_response(ctx.request)
        return Continue()

    async def _initiate_logout(self, ctx: RequestContext) -> Outcome:
        # logout requests never carry IsPassive
        binding = select_binding(ctx)
        payload = await self._manager.build_logout_request(
            ctx.request, binding=binding, is_passive=False
        )
        return _terminal(binding, payload)

    async def _initiate_sso(self, ctx: RequestContext) -> Outcome:
        binding = select_binding(ctx)
        payload = await self._manager.build_authn_request(
            ctx.request,
            binding=binding,
            is_passive=ctx.settings.saml2.passive_authn,
        )
        return _terminal(binding, payload)

    async def _initiate_passive(self, ctx: RequestContext) -> Outcome:
        location = await self._manager.build_authn_request(
            ctx.request, binding=Binding.REDIRECT, is_passive=True
        )
        return Redirect(location=location)


class OpenIDHandler(FlowHandler):
    """OpenID 2.0 login initiation and provider responses."""

    def __init__(self, manager: OpenIDManager) -> None:
        self._manager = manager

    def operations(self) -> Mapping[FlowCategory, Operation]:
        return {
            FlowCategory.OPENID_RESPONSE: self._login_response,
            FlowCategory.OPENID_INITIATE: self._initiate_login,
        }

    async def _login_response(self, ctx: RequestContext) -> Outcome:
        await self._manager.process_login_response(ctx.request)
        return Continue()

    async def _initiate_login(self, ctx: RequestContext) -> Outcome:
        return Redirect(location=await self._manager.initiate_login(ctx.request))


class SAML2GrantHandler(FlowHandler):
    """Exchanges the session's SAML2 assertion for an OAuth2 token."""

    def __init__(self, manager: SAML2GrantManager) -> None:
        self._manager = manager

    def operations(self) -> Mapping[FlowCategory, Operation]:
        return {FlowCategory.OAUTH2_GRANT_EXCHANGE: self._exchange}

    async def _exchange(self, ctx: RequestContext) -> Outcome:
        await self._manager.exchange_assertion_for_token(ctx.request)
        return Continue()
