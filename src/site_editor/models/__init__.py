"""Data models for Cosmos DB document types."""

from site_editor.models.document import SiteDocument
from site_editor.models.edit_request import (
    ComplexityTier,
    EditFlowState,
    EditRequest,
    HoldReason,
)
from site_editor.models.escalation import Escalation, EscalationKind, EscalationPriority
from site_editor.models.proposal import ChangeProposal, EditProposal
from site_editor.models.snapshot import SnapshotSource, VersionSnapshot

__all__ = [
    "ChangeProposal",
    "ComplexityTier",
    "EditFlowState",
    "EditProposal",
    "EditRequest",
    "Escalation",
    "EscalationKind",
    "EscalationPriority",
    "HoldReason",
    "SiteDocument",
    "SnapshotSource",
    "VersionSnapshot",
]
