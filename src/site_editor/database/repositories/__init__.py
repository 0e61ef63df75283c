"""Repository modules for each Cosmos DB container."""

from site_editor.database.repositories.documents import DocumentRepository
from site_editor.database.repositories.edit_requests import EditRequestRepository
from site_editor.database.repositories.escalations import EscalationRepository
from site_editor.database.repositories.snapshots import SnapshotRepository

__all__ = [
    "DocumentRepository",
    "EditRequestRepository",
    "EscalationRepository",
    "SnapshotRepository",
]
