"""Typed contracts for notification and pipeline events."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel


class Audience(StrEnum):
    REQUESTER = "requester"
    OPERATOR = "operator"


class EventEnvelope(BaseModel):
    """Canonical event envelope used on Service Bus."""

    event: str
    data: dict[str, Any] | str


class NotificationRequest(BaseModel):
    """Outbound message for the notification channel.

    The channel dedupes on ``(trigger, subject_id)`` within its own window.
    """

    trigger: str
    subject_id: str
    audience: Audience
    message: str
    edit_request_id: str | None = None
