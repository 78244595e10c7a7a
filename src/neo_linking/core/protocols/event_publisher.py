"""Event publishing protocol contract."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class EventPublisher(Protocol):
    """Protocol for publishing linking lifecycle events."""
    
    async def publish(self, event: Any) -> None:
        """Publish an event to interested subscribers."""
        ...
