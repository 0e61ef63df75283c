"""Application services shared by the pipeline and the HTTP routes."""

from site_editor.services.approvals import ApprovalService
from site_editor.services.archive import VersionArchive
from site_editor.services.escalations import EscalationService
from site_editor.services.notifications import NotificationTrigger, Notifier
from site_editor.services.version_store import VersionStore

__all__ = [
    "ApprovalService",
    "EscalationService",
    "NotificationTrigger",
    "Notifier",
    "VersionArchive",
    "VersionStore",
]
