"""Ephemeral proposal types returned by the edit-proposal service."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ChangeProposal(BaseModel):
    """One search/replace pair, consumed once by the patch applier."""

    search: str = ""
    replace: str = ""


class EditProposal(BaseModel):
    """Either a list of changes or a full replacement document, plus a summary."""

    changes: list[ChangeProposal] = Field(default_factory=list)
    full_document: str | None = None
    summary: str = ""

    @property
    def is_full_document(self) -> bool:
        return self.full_document is not None
