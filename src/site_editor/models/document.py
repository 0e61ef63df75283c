"""Site document model — the shared markup every edit targets."""

from __future__ import annotations

from site_editor.models.base import DocumentBase


class SiteDocument(DocumentBase):
    """The editable markup owned by one subject.

    ``id`` equals ``subject_id``; there is exactly one document per subject.
    ``content`` and ``version`` only change together, through a conditional
    save in ``DocumentRepository``.
    """

    subject_id: str
    content: str = ""
    version: int = 0
    subject_name: str = ""
