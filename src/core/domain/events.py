"""Domain events infrastructure.

The event bus is the notification boundary towards the presentation layer:
the catalog publishes, presentation-side services subscribe.
"""

import inspect
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import cast
from uuid import uuid4

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field


class DomainEvent(BaseModel, ABC):
    """Base class for all domain events."""

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = ConfigDict(frozen=True)

    @property
    def event_type(self) -> str:
        return self.__class__.__name__


class DomainEventHandler(ABC):
    """Base class for domain event handlers."""

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        """Handle the domain event."""
        pass


HandlerFunc = Callable[[DomainEvent], Awaitable[None] | None]


class _FunctionHandler(DomainEventHandler):
    def __init__(self, func: HandlerFunc) -> None:
        self.func = func

    async def handle(self, event: DomainEvent) -> None:
        result = self.func(event)
        if inspect.isawaitable(result):
            await cast(Awaitable[None], result)


class EventBus:
    """In-process event bus.

    Handlers run sequentially in subscription order. A failing handler is
    logged and does not stop the remaining handlers or the publisher.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[DomainEventHandler]] = {}

    def subscribe(
        self,
        event_type: type[DomainEvent],
        handler: DomainEventHandler | HandlerFunc,
    ) -> None:
        if not isinstance(handler, DomainEventHandler):
            handler = _FunctionHandler(handler)
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(
            f"Subscribed handler {handler.__class__.__name__} to {event_type.__name__}"
        )

    async def publish(self, event: DomainEvent) -> None:
        handlers = self._handlers.get(type(event), [])

        logger.debug(f"Publishing event {event.event_type} to {len(handlers)} handlers")

        for handler in handlers:
            try:
                await handler.handle(event)
            except Exception as e:
                logger.error(
                    f"Error handling event {event.event_type} "
                    f"by {handler.__class__.__name__}: {e}"
                )

    def clear_handlers(self) -> None:
        self._handlers.clear()

    def get_handlers_count(self, event_type: type[DomainEvent] | None = None) -> int:
        if event_type is not None:
            return len(self._handlers.get(event_type, []))
        return sum(len(handlers) for handlers in self._handlers.values())


_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get the global event bus instance."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus


def reset_global_event_bus() -> None:
    global _event_bus
    if _event_bus is not None:
        _event_bus.clear_handlers()
    _event_bus = EventBus()
