"""Shared base for every Cosmos DB document type."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


class DocumentBase(BaseModel):
    """Fields common to all persisted documents."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def touch(self) -> None:
        """Bump ``updated_at`` to now."""
        self.updated_at = _utcnow()
