"""Event contracts and publishing interfaces for the notification channel."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from site_editor.events.contracts import Audience, EventEnvelope, NotificationRequest
from site_editor.events.servicebus import ServiceBusPublisher


@runtime_checkable
class EventPublisher(Protocol):
    """Protocol for publishing events to connected consumers."""

    async def publish(self, event_type: str, data: dict[str, Any] | str) -> None:
        """Broadcast an event to all connected consumers."""
        ...


__all__ = [
    "Audience",
    "EventEnvelope",
    "EventPublisher",
    "NotificationRequest",
    "ServiceBusPublisher",
]
