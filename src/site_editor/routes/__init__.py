"""HTTP routes for operators and inbound requester messages."""

from site_editor.routes import documents, edit_requests, escalations, inbound

__all__ = ["documents", "edit_requests", "escalations", "inbound"]
