"""Patch applier — turns a proposed change list into a mutated document."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from site_editor.editing.strategies import DEFAULT_STRATEGIES, MatchStrategy, attempt_match

if TYPE_CHECKING:
    from collections.abc import Iterable

    from site_editor.models.proposal import ChangeProposal, EditProposal

logger = logging.getLogger(__name__)

FAILED_SEARCH_PREVIEW = 100


@dataclass(frozen=True)
class PatchResult:
    """Outcome of applying one batch of changes.

    ``ok`` is False whenever nothing was applied, including an empty batch;
    a zero-change result must never be persisted as a successful edit.
    """

    content: str
    applied_count: int
    failed_searches: list[str] = field(default_factory=list)
    strategies: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.applied_count > 0

    def summarize(self, summary: str) -> str:
        """Return ``summary`` (or a default) with skipped changes noted."""
        plural = "" if self.applied_count == 1 else "s"
        text = summary.strip() or f"Applied {self.applied_count} change{plural}"
        if self.failed_searches and self.applied_count:
            text += f" ({len(self.failed_searches)} skipped)"
        return text


def apply_changes(
    document: str,
    changes: Iterable[ChangeProposal],
    strategies: tuple[MatchStrategy, ...] = DEFAULT_STRATEGIES,
) -> PatchResult:
    """Apply ``changes`` in order, each against the output of the previous one.

    A change no strategy can place is recorded in ``failed_searches`` and the
    batch carries on.
    """
    content = document
    applied = 0
    failed: list[str] = []
    used: list[str] = []

    for change in changes:
        if not change.search.strip():
            continue
        found = attempt_match(content, change, strategies)
        if found is None:
            failed.append(change.search[:FAILED_SEARCH_PREVIEW])
            continue
        content = found.apply(content)
        applied += 1
        used.append(found.strategy)

    if failed:
        logger.warning(
            "Patch partially applied — applied=%d failed=%d searches=%r",
            applied,
            len(failed),
            failed,
        )
    return PatchResult(content, applied, failed, used)


def apply_proposal(
    document: str,
    proposal: EditProposal,
    strategies: tuple[MatchStrategy, ...] = DEFAULT_STRATEGIES,
) -> PatchResult:
    """Apply either shape the proposal service can return."""
    if proposal.is_full_document:
        replacement = (proposal.full_document or "").strip()
        if not replacement:
            return PatchResult(document, 0)
        return PatchResult(replacement, 1, strategies=["full_document"])
    return apply_changes(document, proposal.changes, strategies)
