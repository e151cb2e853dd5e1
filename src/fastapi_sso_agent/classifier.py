"""Request classification — ordered (category, predicate) rules, first match wins."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from fnmatch import fnmatchcase

from loguru import logger

from fastapi_sso_agent._logging import LOG_PREFIX
from fastapi_sso_agent.category import FlowCategory
from fastapi_sso_agent.context import RequestContext

SAML_REQUEST_PARAM = "SAMLRequest"
SAML_RESPONSE_PARAM = "SAMLResponse"
OPENID_REQUEST_MODES = frozenset({"checkid_immediate", "checkid_setup"})

Predicate = Callable[[RequestContext], bool]


@dataclass(frozen=True)
class ClassificationRule:
    """A single precedence entry: ``category`` applies when ``predicate`` holds."""

    category: FlowCategory
    predicate: Predicate


def is_url_to_skip(ctx: RequestContext) -> bool:
    path = ctx.path
    return any(fnmatchcase(path, pattern) for pattern in ctx.settings.skip_urls)


def is_slo_callback(ctx: RequestContext) -> bool:
    return (
        ctx.settings.saml2_sso_login_enabled
        and ctx.param(SAML_REQUEST_PARAM) is not None
    )


def is_saml2_sso_response(ctx: RequestContext) -> bool:
    return (
        ctx.settings.saml2_sso_login_enabled
        and ctx.param(SAML_RESPONSE_PARAM) is not None
    )


def is_openid_login_response(ctx: RequestContext) -> bool:
    if not ctx.settings.openid_login_enabled:
        return False
    mode = ctx.param(ctx.settings.openid.mode_param)
    return bool(mode) and mode not in OPENID_REQUEST_MODES


def is_slo_url(ctx: RequestContext) -> bool:
    saml2 = ctx.settings.saml2
    return (
        ctx.settings.saml2_sso_login_enabled
        and saml2.slo_enabled
        and ctx.path.endswith(saml2.slo_url)
    )


def is_saml2_sso_url(ctx: RequestContext) -> bool:
    return ctx.settings.saml2_sso_login_enabled and ctx.path.endswith(
        ctx.settings.saml2.sso_url
    )


def is_openid_url(ctx: RequestContext) -> bool:
    return ctx.settings.openid_login_enabled and ctx.path.endswith(
        ctx.settings.openid.login_url
    )


def is_passive_authn_request(ctx: RequestContext) -> bool:
    return ctx.settings.saml2_sso_login_enabled and ctx.path.endswith(
        ctx.settings.saml2.passive_authn_url
    )


def is_saml2_oauth2_grant_request(ctx: RequestContext) -> bool:
    return (
        ctx.settings.saml2_sso_login_enabled
        and ctx.settings.saml2_grant_enabled
        and ctx.path.endswith(ctx.settings.oauth2.saml2_grant_url)
    )


def default_rules() -> tuple[ClassificationRule, ...]:
    """Return the standard precedence list. PASS_THROUGH is implicit."""
    return (
        ClassificationRule(FlowCategory.SKIP, is_url_to_skip),
        ClassificationRule(FlowCategory.SLO_CALLBACK, is_slo_callback),
        ClassificationRule(FlowCategory.SSO_RESPONSE, is_saml2_sso_response),
        ClassificationRule(FlowCategory.OPENID_RESPONSE, is_openid_login_response),
        ClassificationRule(FlowCategory.SLO_INITIATE, is_slo_url),
        ClassificationRule(FlowCategory.SSO_INITIATE, is_saml2_sso_url),
        ClassificationRule(FlowCategory.OPENID_INITIATE, is_openid_url),
        ClassificationRule(FlowCategory.PASSIVE_AUTH_INITIATE, is_passive_authn_request),
        ClassificationRule(
            FlowCategory.OAUTH2_GRANT_EXCHANGE, is_saml2_oauth2_grant_request
        ),
    )


class RequestClassifier:
    """Maps a RequestContext to exactly one FlowCategory."""

    def __init__(self, rules: Iterable[ClassificationRule] | None = None) -> None:
        self._rules: tuple[ClassificationRule, ...] = (
            tuple(rules) if rules is not None else default_rules()
        )
        if any(rule.category is FlowCategory.PASS_THROUGH for rule in self._rules):
            raise ValueError("PASS_THROUGH is the fallback and cannot be a rule")

    @property
    def rules(self) -> tuple[ClassificationRule, ...]:
        return self._rules

    def classify(self, ctx: RequestContext) -> FlowCategory:
        for rule in self._rules:
            if rule.predicate(ctx):
                logger.debug(
                    f"{LOG_PREFIX} {ctx.request.method} {ctx.path} -> {rule.category.name}"
                )
                return rule.category
        return FlowCategory.PASS_THROUGH
