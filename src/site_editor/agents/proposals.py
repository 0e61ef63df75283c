"""Edit-proposal service — asks a chat model for search/replace edits."""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from site_editor.agents.prompts import compose_prompt
from site_editor.exceptions import ProposalServiceError
from site_editor.models.proposal import ChangeProposal, EditProposal

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

_JSON_FENCE_START = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_HTML_FENCE_START = re.compile(r"^```(?:html)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"```\s*$")
_SUMMARY_COMMENT = re.compile(r"<!--\s*AI_SUMMARY:\s*(.+?)\s*-->")
_TRUNCATED = "length"


@runtime_checkable
class ProposalService(Protocol):
    """Anything that can turn an instruction into an ``EditProposal``."""

    async def propose(
        self,
        document: str,
        instruction: str,
        prior_summaries: Sequence[tuple[str, str]] = (),
        *,
        subject_name: str = "",
    ) -> EditProposal:
        """Return proposed edits, or raise ``ProposalServiceError``."""
        ...


def _looks_like_html(text: str) -> bool:
    lowered = text.lower()
    return "<html" in lowered or "<!doctype" in lowered


def parse_proposal_response(raw: str) -> EditProposal:
    """Parse a model reply into an ``EditProposal``.

    Accepts the JSON change-list shape (optionally inside markdown fences) or,
    failing that, a complete HTML page returned in place of a diff.
    """
    text = _FENCE_END.sub("", _JSON_FENCE_START.sub("", raw.strip())).strip()
    try:
        payload: Any = json.loads(text)
    except json.JSONDecodeError:
        if not _looks_like_html(raw):
            msg = f"unparseable proposal response: {raw[:200]!r}"
            raise ProposalServiceError(msg) from None
        document = _FENCE_END.sub("", _HTML_FENCE_START.sub("", raw.strip())).strip()
        if not _looks_like_html(document):
            msg = "full-document proposal lost its markup after unwrapping"
            raise ProposalServiceError(msg) from None
        found = _SUMMARY_COMMENT.search(document)
        return EditProposal(
            full_document=document,
            summary=found.group(1) if found else "Changes applied",
        )

    if not isinstance(payload, dict) or not isinstance(payload.get("changes"), list):
        msg = "proposal response is missing a changes list"
        raise ProposalServiceError(msg)

    changes = [
        ChangeProposal(search=item["search"], replace=str(item.get("replace") or ""))
        for item in payload["changes"]
        if isinstance(item, dict) and isinstance(item.get("search"), str) and item["search"]
    ]
    summary = payload.get("summary")
    return EditProposal(changes=changes, summary=summary if isinstance(summary, str) else "")


def build_edit_prompt(
    document: str,
    instruction: str,
    prior_summaries: Sequence[tuple[str, str]],
    *,
    subject_name: str = "",
) -> str:
    """Assemble the single prompt sent to the chat model."""
    history = "\n".join(
        f"- {instruction_text} → {summary}" for instruction_text, summary in prior_summaries
    )
    return compose_prompt(
        "site_editor",
        f"The site belongs to: {subject_name}" if subject_name else None,
        f"Edits already made to this site, oldest first:\n{history}" if history else None,
        f"Here is the current HTML:\n\n{document}",
        f"INSTRUCTION: {instruction}",
    )


class ChatProposalService:
    """``ProposalService`` backed by an agent-framework chat client."""

    def __init__(self, chat_client: Any, *, max_prior_summaries: int = 10) -> None:
        self._client = chat_client
        self._max_prior_summaries = max_prior_summaries

    async def propose(
        self,
        document: str,
        instruction: str,
        prior_summaries: Sequence[tuple[str, str]] = (),
        *,
        subject_name: str = "",
    ) -> EditProposal:
        if not document or not instruction.strip():
            msg = "document and instruction are both required"
            raise ProposalServiceError(msg)

        history = list(prior_summaries)[-self._max_prior_summaries :]
        prompt = build_edit_prompt(document, instruction, history, subject_name=subject_name)
        try:
            response = await self._client.get_response(prompt)
        except ProposalServiceError:
            raise
        except Exception as exc:
            logger.warning("Proposal service call failed", exc_info=True)
            msg = f"proposal service error: {exc}"
            raise ProposalServiceError(msg) from exc

        finish_reason = getattr(response, "finish_reason", None)
        if getattr(finish_reason, "value", finish_reason) == _TRUNCATED:
            msg = "proposal response was truncated"
            raise ProposalServiceError(msg)

        proposal = parse_proposal_response(getattr(response, "text", "") or "")
        logger.info(
            "Proposal received — changes=%d full_document=%s",
            len(proposal.changes),
            proposal.is_full_document,
        )
        return proposal
