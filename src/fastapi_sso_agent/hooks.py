"""AgentHook base and convenience hook classes."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from fastapi_sso_agent.category import FlowCategory
from fastapi_sso_agent.context import RequestContext
from fastapi_sso_agent.outcomes import Outcome


class AgentHook:
    """Base abstraction for lifecycle hooks. All methods are no-op by default."""

    async def on_classified(self, ctx: RequestContext, category: FlowCategory) -> None:
        pass

    async def on_outcome(
        self, ctx: RequestContext, category: FlowCategory, outcome: Outcome
    ) -> None:
        pass


class AfterClassify(AgentHook):
    """Convenience hook that only fires once the category is known."""

    def __init__(
        self, callback: Callable[[RequestContext, FlowCategory], Awaitable[None]]
    ) -> None:
        self._callback = callback

    async def on_classified(self, ctx: RequestContext, category: FlowCategory) -> None:
        await self._callback(ctx, category)


class AfterDispatch(AgentHook):
    """Convenience hook that fires after a handler produced its outcome."""

    def __init__(
        self,
        callback: Callable[[RequestContext, FlowCategory, Outcome], Awaitable[None]],
    ) -> None:
        self._callback = callback

    async def on_outcome(
        self, ctx: RequestContext, category: FlowCategory, outcome: Outcome
    ) -> None:
        await self._callback(ctx, category, outcome)
