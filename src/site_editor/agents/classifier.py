"""Reply classifier — reads a requester's answer after an edit was shown."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

from site_editor.agents.prompts import compose_prompt

logger = logging.getLogger(__name__)


class ReplyIntent(StrEnum):
    CONFIRM = "confirm"
    UNDO = "undo"
    MORE_EDITS = "more_edits"
    UNRELATED = "unrelated"


@runtime_checkable
class ReplyClassifier(Protocol):
    async def classify(self, message: str) -> ReplyIntent: ...


def parse_reply_intent(text: str) -> ReplyIntent:
    """Map a one-word model answer to an intent, tolerating extra words."""
    answer = text.strip().lower().strip(".!\"'")
    try:
        return ReplyIntent(answer)
    except ValueError:
        pass
    if "confirm" in answer:
        return ReplyIntent.CONFIRM
    if "undo" in answer:
        return ReplyIntent.UNDO
    if "more" in answer:
        return ReplyIntent.MORE_EDITS
    return ReplyIntent.UNRELATED


class ChatReplyClassifier:
    """``ReplyClassifier`` backed by a small chat deployment.

    Any failure classifies as ``unrelated`` so the message falls through to
    general handling instead of triggering an edit action.
    """

    def __init__(self, chat_client: Any) -> None:
        self._client = chat_client

    async def classify(self, message: str) -> ReplyIntent:
        prompt = compose_prompt("reply_classifier", f"Reply: {message}")
        try:
            response = await self._client.get_response(prompt)
        except Exception:  # noqa: BLE001
            logger.warning("Reply classification failed", exc_info=True)
            return ReplyIntent.UNRELATED
        intent = parse_reply_intent(getattr(response, "text", "") or "")
        logger.debug("Reply classified — intent=%s", intent)
        return intent
