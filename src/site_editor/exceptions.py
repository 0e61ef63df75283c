"""Exception hierarchy for the edit pipeline."""

from __future__ import annotations


class SiteEditorError(Exception):
    """Base class for all site-editor errors."""


class DocumentNotFound(SiteEditorError):
    def __init__(self, subject_id: str) -> None:
        self.subject_id = subject_id
        super().__init__(f"no document for subject {subject_id}")


class ProposalServiceError(SiteEditorError):
    """The edit-proposal service timed out, refused, or returned garbage."""


class PatchApplicationFailure(SiteEditorError):
    """None of the proposed changes could be located in the document."""

    def __init__(self, failed_searches: list[str]) -> None:
        self.failed_searches = failed_searches
        super().__init__(f"no changes applied ({len(failed_searches)} searches failed)")


class VersionConflict(SiteEditorError):
    """A conditional save lost the race — the document moved on."""

    def __init__(self, subject_id: str, expected_version: int) -> None:
        self.subject_id = subject_id
        self.expected_version = expected_version
        super().__init__(
            f"concurrent edit on {subject_id} (expected version {expected_version}) — "
            "resubmit against latest version"
        )


class UndoUnavailable(SiteEditorError):
    def __init__(self, edit_request_id: str) -> None:
        self.edit_request_id = edit_request_id
        super().__init__(f"edit request {edit_request_id} has no pre-edit snapshot")


class InvalidTransition(SiteEditorError):
    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"cannot move edit request from {current} to {target}")
