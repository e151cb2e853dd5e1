"""Auto-submit page rendering for POST-binding payloads."""

from __future__ import annotations

from collections.abc import Mapping
from html import escape

from starlette.responses import HTMLResponse

from fastapi_sso_agent.config import DEFAULT_POST_BINDING_TEMPLATE, AgentSettings

SNIPPET_PLACEHOLDER = "$saml_snippet"


def build_post_form(action: str, fields: Mapping[str, str]) -> str:
    """Build the ``<form>`` snippet a collaborator returns for POST binding."""
    inputs = "".join(
        f'<input type="hidden" name="{escape(name)}" value="{escape(value)}"/>'
        for name, value in fields.items()
    )
    return (
        f'<form method="post" action="{escape(action)}">'
        f"<p>{inputs}"
        '<button type="submit">POST</button></p>'
        "</form>"
    )


def render_post_page(snippet: str, settings: AgentSettings) -> str:
    template = settings.post_binding_html_template or DEFAULT_POST_BINDING_TEMPLATE
    return template.replace(SNIPPET_PLACEHOLDER, snippet)


def post_response(snippet: str, settings: AgentSettings) -> HTMLResponse:
    return HTMLResponse(
        render_post_page(snippet, settings),
        headers={"Cache-Control": "no-cache, no-store", "Pragma": "no-cache"},
    )
