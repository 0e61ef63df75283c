"""Edit request model — one requester instruction and its journey through the pipeline."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import Field

from site_editor.exceptions import InvalidTransition
from site_editor.models.base import DocumentBase


class ComplexityTier(StrEnum):
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


class EditFlowState(StrEnum):
    PENDING = "pending"
    AI_EDITING = "ai_editing"
    AWAITING_APPROVAL = "awaiting_approval"
    ESCALATED = "escalated"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class HoldReason(StrEnum):
    BURST = "burst"
    HOURLY_CAP = "hourly_cap"


# The reset edges back to PENDING exist only for a requester undo.
_TRANSITIONS: dict[EditFlowState, frozenset[EditFlowState]] = {
    EditFlowState.PENDING: frozenset(
        {EditFlowState.AI_EDITING, EditFlowState.ESCALATED, EditFlowState.FAILED}
    ),
    EditFlowState.AI_EDITING: frozenset(
        {
            EditFlowState.CONFIRMED,
            EditFlowState.AWAITING_APPROVAL,
            EditFlowState.ESCALATED,
            EditFlowState.FAILED,
        }
    ),
    EditFlowState.AWAITING_APPROVAL: frozenset(
        {EditFlowState.CONFIRMED, EditFlowState.FAILED, EditFlowState.PENDING}
    ),
    EditFlowState.ESCALATED: frozenset({EditFlowState.CONFIRMED, EditFlowState.FAILED}),
    EditFlowState.CONFIRMED: frozenset({EditFlowState.PENDING}),
    EditFlowState.FAILED: frozenset(),
}

_LABELS: dict[EditFlowState, str] = {
    EditFlowState.PENDING: "new",
    EditFlowState.AI_EDITING: "ai_processing",
    EditFlowState.AWAITING_APPROVAL: "ready_for_review",
    EditFlowState.ESCALATED: "needs_operator",
    EditFlowState.CONFIRMED: "approved",
    EditFlowState.FAILED: "failed",
}


class EditRequest(DocumentBase):
    """A requested change to a subject's document.

    ``state`` is the only lifecycle field; ``status_label`` is derived from it
    for display. ``pre_edit_snapshot`` is written once, before the first
    AI edit, and never changed afterwards.
    """

    subject_id: str
    request_text: str
    sanitized_instruction: str = ""
    complexity_tier: ComplexityTier = ComplexityTier.MEDIUM
    state: EditFlowState = EditFlowState.PENDING
    flagged: bool = False
    flag_reason: str | None = None
    hold_reason: HoldReason | None = None
    pre_edit_snapshot: str | None = None
    post_edit_content: str | None = None
    edit_summary: str | None = None
    failed_searches: list[str] = Field(default_factory=list)
    base_version: int | None = None
    saved_version: int | None = None
    awaiting_reply: bool = False
    approved_by: str | None = None
    approved_at: datetime | None = None
    rejection_reason: str | None = None

    @property
    def status_label(self) -> str:
        if self.state == EditFlowState.FAILED and self.rejection_reason is not None:
            return "rejected"
        return _LABELS[self.state]

    @property
    def is_terminal(self) -> bool:
        return self.state in {EditFlowState.CONFIRMED, EditFlowState.FAILED}

    def can_transition(self, target: EditFlowState) -> bool:
        return target in _TRANSITIONS[self.state]

    def transition(self, target: EditFlowState) -> None:
        """Move to ``target`` or raise ``InvalidTransition``."""
        if not self.can_transition(target):
            raise InvalidTransition(self.state.value, target.value)
        self.state = target
        self.touch()

    def capture_snapshot(self, content: str) -> None:
        """Record the pre-edit content the first time only."""
        if self.pre_edit_snapshot is None:
            self.pre_edit_snapshot = content
