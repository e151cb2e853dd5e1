"""Step outcomes returned by flow handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from fastapi_sso_agent.exceptions import ProtocolFailure


@dataclass(frozen=True)
class Continue:
    """Hand the request to the rest of the pipeline."""

    show_landing: bool = False


@dataclass(frozen=True)
class Redirect:
    """Terminate with an HTTP redirect."""

    location: str
    status_code: int = 302


@dataclass(frozen=True)
class PostForm:
    """Terminate with an auto-submitting form carrying ``snippet``."""

    snippet: str


@dataclass(frozen=True)
class SessionExpired:
    """Session-bound state is gone; land on the welcome view and continue."""

    reason: str | None = None


@dataclass(frozen=True)
class Failure:
    """A collaborator reported a protocol-level failure."""

    error: ProtocolFailure


Outcome = Union[Continue, Redirect, PostForm, SessionExpired, Failure]


def outcome_kind(outcome: Outcome) -> str:
    return type(outcome).__name__
