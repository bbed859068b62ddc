"""
Bot Adapter and Middleware

The adapter connects the bot to a channel: it turns inbound activities
into turn contexts, runs the middleware pipeline and the bot callback,
and delivers outbound activities.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List

import structlog

from ..errors import TransportError
from ..schema import Activity
from .turn_context import TurnContext


logger = structlog.get_logger()


BotCallback = Callable[[TurnContext], Awaitable[None]]
NextHandler = Callable[[], Awaitable[None]]


class Middleware(ABC):
    """Component that runs around every turn."""

    @abstractmethod
    async def on_turn(self, context: TurnContext, next_handler: NextHandler) -> None:
        """
        Process the turn.

        Implementations call ``await next_handler()`` to continue the
        pipeline; skipping it short-circuits the remaining middleware
        and the bot.
        """
        pass


class MiddlewareSet:
    """Ordered middleware pipeline."""

    def __init__(self) -> None:
        self._middleware: List[Middleware] = []

    def use(self, *middleware: Middleware) -> "MiddlewareSet":
        for item in middleware:
            if not isinstance(item, Middleware):
                raise TypeError(f"{type(item).__name__} is not a Middleware")
            self._middleware.append(item)
        return self

    def __len__(self) -> int:
        return len(self._middleware)

    async def receive_activity(self, context: TurnContext, callback: BotCallback) -> None:
        """Run every middleware in registration order, then the callback."""
        await self._run(context, callback, 0)

    async def _run(self, context: TurnContext, callback: BotCallback, index: int) -> None:
        if index == len(self._middleware):
            if callback is not None:
                await callback(context)
            return

        async def next_handler() -> None:
            await self._run(context, callback, index + 1)

        await self._middleware[index].on_turn(context, next_handler)


class BotAdapter(ABC):
    """
    Abstract base class for channel adapters.

    Subclasses implement :meth:`deliver`. Failures raised by ``deliver``
    reach callers as :class:`TransportError`.
    """

    def __init__(self) -> None:
        self.middleware = MiddlewareSet()

    def use(self, middleware: Middleware) -> "BotAdapter":
        """Register middleware; returns self for chaining."""
        self.middleware.use(middleware)
        return self

    @abstractmethod
    async def deliver(self, context: TurnContext, activities: List[Activity]) -> List[Activity]:
        """Deliver outbound activities to the channel."""
        pass

    async def send_activities(self, context: TurnContext, activities: List[Activity]) -> List[Activity]:
        """Send activities, normalizing delivery failures."""
        try:
            return await self.deliver(context, activities)
        except TransportError:
            raise
        except Exception as e:
            logger.error(
                "activity_delivery_failed",
                adapter=type(self).__name__,
                error=str(e),
            )
            raise TransportError(
                f"Failed to deliver {len(activities)} activities",
                details={"error": str(e)},
            ) from e

    async def run_pipeline(self, context: TurnContext, callback: BotCallback) -> None:
        """Run the middleware pipeline followed by the bot callback."""
        logger.debug(
            "turn_started",
            activity_type=context.activity.type,
            channel_id=context.activity.channel_id,
        )
        await self.middleware.receive_activity(context, callback)

    async def process_activity(self, activity: Activity, callback: BotCallback) -> TurnContext:
        """Create a turn context for an inbound activity and run the turn."""
        context = TurnContext(self, activity)
        await self.run_pipeline(context, callback)
        return context


__all__ = [
    "BotCallback",
    "NextHandler",
    "Middleware",
    "MiddlewareSet",
    "BotAdapter",
]
