"""Tests for AgentHook, AfterClassify, AfterDispatch."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

from fastapi_sso_agent.category import FlowCategory
from fastapi_sso_agent.config import AgentSettings
from fastapi_sso_agent.context import RequestContext
from fastapi_sso_agent.hooks import AfterClassify, AfterDispatch, AgentHook
from fastapi_sso_agent.outcomes import Continue


class TestAgentHookBase:
    async def test_default_methods_are_noop(
        self, make_request: Any, settings: AgentSettings
    ) -> None:
        class MinimalHook(AgentHook):
            pass

        hook = MinimalHook()
        ctx = RequestContext(request=make_request(), settings=settings)
        await hook.on_classified(ctx, FlowCategory.SKIP)
        await hook.on_outcome(ctx, FlowCategory.SKIP, Continue())


class TestAfterClassify:
    async def test_only_fires_on_classified(
        self, make_request: Any, settings: AgentSettings
    ) -> None:
        callback = AsyncMock()
        hook = AfterClassify(callback)
        ctx = RequestContext(request=make_request(), settings=settings)
        await hook.on_classified(ctx, FlowCategory.SSO_INITIATE)
        await hook.on_outcome(ctx, FlowCategory.SSO_INITIATE, Continue())
        callback.assert_awaited_once_with(ctx, FlowCategory.SSO_INITIATE)


class TestAfterDispatch:
    async def test_only_fires_on_outcome(
        self, make_request: Any, settings: AgentSettings
    ) -> None:
        callback = AsyncMock()
        hook = AfterDispatch(callback)
        ctx = RequestContext(request=make_request(), settings=settings)
        await hook.on_classified(ctx, FlowCategory.PASS_THROUGH)
        await hook.on_outcome(ctx, FlowCategory.PASS_THROUGH, Continue())
        callback.assert_awaited_once_with(ctx, FlowCategory.PASS_THROUGH, Continue())
