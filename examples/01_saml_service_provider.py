"""
Basic usage example of fastapi-sso-agent.

Demonstrates:
- Mounting the agent as middleware in front of a FastAPI app
- Plugging in a SAML2 collaborator (stubbed here)
- Reading the welcome-page marker after logout or session expiry
"""

from urllib.parse import urlencode

from fastapi import FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware

from fastapi_sso_agent import (
    AgentSettings,
    Binding,
    InvalidSessionError,
    ProtocolFailure,
    SSOAgent,
    SSOAgentMiddleware,
    build_post_form,
    should_go_to_welcome_page,
)

IDP_SSO_URL = "https://idp.example.com/samlsso"
SESSION_KEY = "sso_agent_session_bean"


class StubSAML2Manager:
    """Stand-in for a real SAML2 service-provider implementation."""

    async def process_response(self, request: Request) -> None:
        form = await request.form()
        if form.get("SAMLResponse") != "trusted":
            raise ProtocolFailure("Untrusted SAML response")
        request.session[SESSION_KEY] = {"subject": "alice@example.com"}

    async def build_authn_request(
        self, request: Request, *, binding: Binding, is_passive: bool
    ) -> str:
        fields = {"SAMLRequest": "stub-authn", "IsPassive": str(is_passive).lower()}
        if binding is Binding.POST:
            return build_post_form(IDP_SSO_URL, fields)
        return f"{IDP_SSO_URL}?{urlencode(fields)}"

    async def build_logout_request(
        self, request: Request, *, binding: Binding, is_passive: bool
    ) -> str:
        if SESSION_KEY not in request.session:
            raise InvalidSessionError()
        request.session.pop(SESSION_KEY)
        return f"{IDP_SSO_URL}?{urlencode({'SAMLRequest': 'stub-logout'})}"

    async def process_logout(self, request: Request) -> None:
        request.session.pop(SESSION_KEY, None)


settings = AgentSettings(skip_urls=["/static/*", "/health"])
agent = SSOAgent(settings=settings, saml2=StubSAML2Manager())

app = FastAPI(title="SAML2 Service Provider Example")


@app.get("/")
async def home(request: Request):
    """Landing page; shows who is logged in."""
    if should_go_to_welcome_page(request, settings):
        return {"message": "Welcome! Please log in again."}
    return {"user": request.session.get(SESSION_KEY)}


@app.get("/health")
async def health():
    return {"status": "ok"}


app.add_middleware(SSOAgentMiddleware, agent=agent)
app.add_middleware(SessionMiddleware, secret_key="change-me")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Test with:
    # curl -i http://localhost:8000/samlsso
    # curl -i "http://localhost:8000/samlsso?binding=HTTP-POST"
    # curl -i http://localhost:8000/passiveauth
