"""Authentication middleware — protects operator routes behind a session login."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request, status


def get_user(request: Request) -> dict[str, Any] | None:
    """Extract the authenticated user from the session, if present."""
    return request.session.get("user") if "session" in request.scope else None


def require_authenticated_user(request: Request) -> dict[str, Any]:
    """Return the authenticated user or raise HTTP 401."""
    user = get_user(request)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


def operator_name(user: dict[str, Any]) -> str:
    """Name recorded as ``approved_by`` for operator actions."""
    return str(user.get("preferred_username") or user.get("name") or user.get("email") or "operator")
