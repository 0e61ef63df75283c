"""Service Bus publisher for requester notifications and promotion events."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from azure.servicebus import ServiceBusMessage
from azure.servicebus.aio import ServiceBusClient, ServiceBusSender

from site_editor.events.contracts import EventEnvelope

if TYPE_CHECKING:
    from site_editor.config import ServiceBusConfig

logger = logging.getLogger(__name__)

# Copied onto application properties so subscriptions can filter without
# parsing the body.
ROUTING_KEYS = ("trigger", "subject_id", "audience")


def build_message(event_type: str, data: dict[str, Any] | str) -> ServiceBusMessage:
    """Wrap ``data`` in an envelope addressed by event type and edit request."""
    properties: dict[str, str] = {"event_type": event_type}
    correlation_id = None
    if isinstance(data, dict):
        properties.update({key: str(data[key]) for key in ROUTING_KEYS if data.get(key)})
        correlation_id = data.get("edit_request_id")
    return ServiceBusMessage(
        body=EventEnvelope(event=event_type, data=data).model_dump_json(),
        subject=event_type,
        correlation_id=correlation_id,
        application_properties=properties,
    )


class ServiceBusPublisher:
    """Send events to one Service Bus topic, best-effort.

    Without a connection string the publisher is disabled and drops every
    event, which keeps local development free of a broker.
    """

    def __init__(self, config: ServiceBusConfig) -> None:
        self._config = config
        self._client: ServiceBusClient | None = None
        self._sender: ServiceBusSender | None = None
        self._lock = asyncio.Lock()
        if not self.enabled:
            logger.warning(
                "AZURE_SERVICEBUS_CONNECTION_STRING is not set — notifications are dropped"
            )

    @property
    def enabled(self) -> bool:
        return bool(self._config.connection_string)

    async def _get_sender(self) -> ServiceBusSender:
        async with self._lock:
            if self._sender is None:
                self._client = ServiceBusClient.from_connection_string(
                    self._config.connection_string
                )
                self._sender = self._client.get_topic_sender(topic_name=self._config.topic_name)
                logger.info("Service Bus sender opened — topic=%s", self._config.topic_name)
            return self._sender

    async def publish(self, event_type: str, data: dict[str, Any] | str) -> None:
        """Send one event. Failures are logged and never raised."""
        if not self.enabled:
            logger.debug("Event dropped — event=%s (publisher disabled)", event_type)
            return
        try:
            sender = await self._get_sender()
            await sender.send_messages(build_message(event_type, data))
        except Exception:  # noqa: BLE001
            logger.warning("Event publish failed — event=%s", event_type, exc_info=True)
            return
        logger.debug("Event published — event=%s", event_type)

    async def close(self) -> None:
        if self._sender is not None:
            await self._sender.close()
            self._sender = None
        if self._client is not None:
            await self._client.close()
            self._client = None
