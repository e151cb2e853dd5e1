"""Agent configuration loaded from the environment via pydantic-settings.

Settings are frozen: one instance is shared by every in-flight request and
nothing in the agent writes to it. Per-request overrides (such as forcing
passive authentication) travel as explicit arguments instead.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Binding(str, Enum):
    """SAML2 HTTP bindings the agent can emit."""

    REDIRECT = "urn:oasis:names:tc:SAML:2.0:bindings:HTTP-Redirect"
    POST = "urn:oasis:names:tc:SAML:2.0:bindings:HTTP-POST"

    @classmethod
    def parse(cls, value: str) -> Binding:
        """Accept the full URN or the short ``HTTP-POST``/``HTTP-Redirect`` name."""
        normalized = value.strip()
        for binding in cls:
            if normalized == binding.value:
                return binding
            if normalized.lower() == binding.value.rsplit(":", 1)[-1].lower():
                return binding
        raise ValueError(f"Unknown SAML2 binding: {value!r}")


def _check_endpoint(value: str) -> str:
    if not value.startswith("/"):
        raise ValueError("endpoint URLs must start with '/'")
    return value


class SAML2Settings(BaseModel):
    """SAML2 web-SSO and single-logout endpoints."""

    model_config = ConfigDict(frozen=True)

    sso_url: str = Field(default="/samlsso", description="SSO initiation endpoint")
    slo_url: str = Field(default="/logout", description="Logout initiation endpoint")
    slo_enabled: bool = Field(default=True, description="Enable single logout")
    passive_authn: bool = Field(
        default=False,
        description="Send IsPassive on ordinary SSO authentication requests",
    )
    passive_authn_url: str = Field(
        default="/passiveauth",
        description="Endpoint that triggers silent re-authentication",
    )
    http_binding: Binding = Field(
        default=Binding.REDIRECT,
        description="Binding used when the request does not select one",
    )
    binding_param: str = Field(
        default="binding",
        description="Request parameter carrying the binding preference",
    )

    @field_validator("sso_url", "slo_url", "passive_authn_url")
    @classmethod
    def _check_endpoints(cls, value: str) -> str:
        return _check_endpoint(value)

    @field_validator("http_binding", mode="before")
    @classmethod
    def _parse_binding(cls, value: object) -> object:
        if isinstance(value, str):
            return Binding.parse(value)
        return value


class OpenIDSettings(BaseModel):
    """OpenID 2.0 login endpoint."""

    model_config = ConfigDict(frozen=True)

    login_url: str = Field(default="/openid", description="OpenID login endpoint")
    mode_param: str = Field(
        default="openid.mode",
        description="Parameter that marks an OpenID provider response",
    )

    @field_validator("login_url")
    @classmethod
    def _check_endpoints(cls, value: str) -> str:
        return _check_endpoint(value)


class OAuth2Settings(BaseModel):
    """SAML2 bearer assertion to OAuth2 token exchange."""

    model_config = ConfigDict(frozen=True)

    saml2_grant_url: str = Field(
        default="/token",
        description="Endpoint that exchanges the SAML2 assertion for a token",
    )

    @field_validator("saml2_grant_url")
    @classmethod
    def _check_endpoints(cls, value: str) -> str:
        return _check_endpoint(value)


DEFAULT_POST_BINDING_TEMPLATE = (
    "<html>\n"
    "<head><title>Redirecting</title></head>\n"
    '<body onload="document.forms[0].submit()">\n'
    "<p>You are now redirected. If the redirection fails, "
    "please click the post button.</p>\n"
    "$saml_snippet\n"
    "</body>\n"
    "</html>\n"
)


class AgentSettings(BaseSettings):
    """Process-wide SSO agent configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SSO_AGENT_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    saml2_sso_login_enabled: bool = Field(
        default=True, description="Handle SAML2 SSO and SLO flows"
    )
    openid_login_enabled: bool = Field(
        default=False, description="Handle OpenID 2.0 login flows"
    )
    saml2_grant_enabled: bool = Field(
        default=False, description="Handle SAML2 to OAuth2 token exchange"
    )
    skip_urls: list[str] = Field(
        default_factory=list,
        description="Path patterns (fnmatch globs) the agent never handles",
    )
    session_bean_key: str = Field(
        default="sso_agent_session_bean",
        description="Session key holding the authenticated SSO state",
    )
    welcome_page_attribute: str = Field(
        default="should_go_to_welcome_page",
        description="request.state attribute set when the landing view is due",
    )
    post_binding_html_template: str | None = Field(
        default=None,
        description="Page wrapping POST-binding forms, with a $saml_snippet slot",
    )

    saml2: SAML2Settings = Field(default_factory=SAML2Settings)
    openid: OpenIDSettings = Field(default_factory=OpenIDSettings)
    oauth2: OAuth2Settings = Field(default_factory=OAuth2Settings)

    @field_validator("post_binding_html_template")
    @classmethod
    def _check_template(cls, value: str | None) -> str | None:
        if value is not None and "$saml_snippet" not in value:
            raise ValueError("post_binding_html_template must contain $saml_snippet")
        return value


@lru_cache
def get_settings() -> AgentSettings:
    """Return the cached process-wide settings."""
    return AgentSettings()
