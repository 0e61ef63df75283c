"""Chat-model adapters for the edit-proposal service and reply classifier."""

from site_editor.agents.classifier import (
    ChatReplyClassifier,
    ReplyClassifier,
    ReplyIntent,
    parse_reply_intent,
)
from site_editor.agents.proposals import (
    ChatProposalService,
    ProposalService,
    parse_proposal_response,
)

__all__ = [
    "ChatProposalService",
    "ChatReplyClassifier",
    "ProposalService",
    "ReplyClassifier",
    "ReplyIntent",
    "parse_proposal_response",
    "parse_reply_intent",
]
