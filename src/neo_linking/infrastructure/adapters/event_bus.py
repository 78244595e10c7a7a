"""In-process event bus adapter."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, Type, Union

logger = logging.getLogger(__name__)

Subscriber = Callable[[Any], Union[None, Awaitable[None]]]


class InMemoryEventBus:
    """In-process publisher that fans events out to subscribers.

    Handles ONLY delivering lifecycle events to UI observers.
    Subscribers may be plain callables or coroutine functions and are
    called in subscription order. A failing subscriber is logged and does
    not prevent delivery to the others.
    """

    def __init__(self, keep_history: bool = False):
        """Initialize event bus.

        Args:
            keep_history: Record every published event (useful in tests)
        """
        self._subscribers: List[tuple] = []
        self.keep_history = keep_history
        self.history: List[Any] = []

    def subscribe(
        self,
        subscriber: Subscriber,
        event_type: Optional[Type] = None
    ) -> Callable[[], None]:
        """Subscribe to events, optionally only to one event class.

        Returns:
            Callable that removes the subscription
        """
        entry = (subscriber, event_type)
        self._subscribers.append(entry)

        def unsubscribe() -> None:
            if entry in self._subscribers:
                self._subscribers.remove(entry)

        return unsubscribe

    async def publish(self, event: Any) -> None:
        """Deliver event to every matching subscriber."""
        if self.keep_history:
            self.history.append(event)

        for subscriber, event_type in list(self._subscribers):
            if event_type is not None and not isinstance(event, event_type):
                continue
            try:
                result = subscriber(event)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.exception(f"Event subscriber {subscriber!r} failed for {type(event).__name__}")

    def events_of(self, event_type: Type) -> List[Any]:
        """Recorded events of one class, in publication order."""
        return [event for event in self.history if isinstance(event, event_type)]

    def clear(self) -> None:
        self.history.clear()
