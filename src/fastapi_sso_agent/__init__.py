"""FastAPI SSO Agent - federated login gatekeeper for SAML2, OpenID 2.0 and OAuth2."""

from fastapi_sso_agent.agent import SSOAgent, should_go_to_welcome_page
from fastapi_sso_agent.category import FlowCategory
from fastapi_sso_agent.classifier import (
    ClassificationRule,
    RequestClassifier,
    default_rules,
)
from fastapi_sso_agent.config import (
    AgentSettings,
    Binding,
    OAuth2Settings,
    OpenIDSettings,
    SAML2Settings,
    get_settings,
)
from fastapi_sso_agent.context import RequestContext
from fastapi_sso_agent.exceptions import (
    ConfigurationMissing,
    InvalidSessionError,
    ProtocolFailure,
    SSOAgentError,
)
from fastapi_sso_agent.handlers import (
    FlowHandler,
    OpenIDHandler,
    SAML2GrantHandler,
    SAML2Handler,
)
from fastapi_sso_agent.hooks import AfterClassify, AfterDispatch, AgentHook
from fastapi_sso_agent.managers import OpenIDManager, SAML2GrantManager, SAML2SSOManager
from fastapi_sso_agent.middleware import SSOAgentMiddleware
from fastapi_sso_agent.outcomes import (
    Continue,
    Failure,
    Outcome,
    PostForm,
    Redirect,
    SessionExpired,
)
from fastapi_sso_agent.rendering import build_post_form
from fastapi_sso_agent.trace import DispatchTrace

__all__ = [
    "AfterClassify",
    "AfterDispatch",
    "AgentHook",
    "AgentSettings",
    "Binding",
    "ClassificationRule",
    "ConfigurationMissing",
    "Continue",
    "DispatchTrace",
    "Failure",
    "FlowCategory",
    "FlowHandler",
    "InvalidSessionError",
    "OAuth2Settings",
    "OpenIDHandler",
    "OpenIDManager",
    "OpenIDSettings",
    "Outcome",
    "PostForm",
    "ProtocolFailure",
    "Redirect",
    "RequestClassifier",
    "RequestContext",
    "SAML2GrantHandler",
    "SAML2GrantManager",
    "SAML2Handler",
    "SAML2SSOManager",
    "SAML2Settings",
    "SSOAgent",
    "SSOAgentError",
    "SSOAgentMiddleware",
    "SessionExpired",
    "build_post_form",
    "default_rules",
    "get_settings",
    "should_go_to_welcome_page",
]
