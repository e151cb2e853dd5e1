"""FlowCategory enum — the closed set of request flows."""

from __future__ import annotations

from enum import Enum


class FlowCategory(Enum):
    """Request flow categories, in classification priority order."""

    SKIP = "skip"
    SLO_CALLBACK = "slo_callback"
    SSO_RESPONSE = "sso_response"
    OPENID_RESPONSE = "openid_response"
    SLO_INITIATE = "slo_initiate"
    SSO_INITIATE = "sso_initiate"
    OPENID_INITIATE = "openid_initiate"
    PASSIVE_AUTH_INITIATE = "passive_auth_initiate"
    OAUTH2_GRANT_EXCHANGE = "oauth2_grant_exchange"
    PASS_THROUGH = "pass_through"

    @property
    def order(self) -> int:
        _ORDER = {
            "skip": 1,
            "slo_callback": 2,
            "sso_response": 3,
            "openid_response": 4,
            "slo_initiate": 5,
            "sso_initiate": 6,
            "openid_initiate": 7,
            "passive_auth_initiate": 8,
            "oauth2_grant_exchange": 9,
            "pass_through": 10,
        }
        return _ORDER[self.value]

    @property
    def clears_session_on_failure(self) -> bool:
        """Whether a protocol failure in this flow drops the session bean."""
        return self in (FlowCategory.SSO_RESPONSE, FlowCategory.OPENID_RESPONSE)
