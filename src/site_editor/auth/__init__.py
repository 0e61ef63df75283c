"""Authentication module — session-backed operator identity."""

from site_editor.auth.middleware import get_user, operator_name, require_authenticated_user

__all__ = ["get_user", "operator_name", "require_authenticated_user"]
