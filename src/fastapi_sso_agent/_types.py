"""Shared type aliases."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from starlette.requests import Request
from starlette.responses import Response

# Downstream continuation handed to SSOAgent.handle by the hosting pipeline
CallNext = Callable[[Request], Awaitable[Response]]
