"""Instruction sanitizer — cleans requester text and flags dangerous intent."""

from __future__ import annotations

import re
from dataclasses import dataclass

MAX_INSTRUCTION_LENGTH = 500

_SCRIPT_BLOCK = re.compile(r"<script\b[^>]*>.*?(?:</script\s*>|$)", re.IGNORECASE | re.DOTALL)
_FENCED_CODE = re.compile(r"```.*?(?:```|$)", re.DOTALL)
_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")

_DANGEROUS_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    (
        "content_wipe",
        re.compile(
            r"\b(?:delete|remove|erase|wipe|clear|nuke|strip)\s+(?:out\s+)?"
            r"(?:everything"
            r"|all\s+(?:of\s+)?(?:the\s+)?(?:content|text|html|code|sections|pages|of\s+it)"
            r"|(?:the\s+)?(?:entire|whole)\s+(?:site|page|website|content)"
            r"|(?:the\s+)?(?:site|page|website)\s+(?:entirely|completely))"
            r"|\bmake\s+(?:the\s+)?(?:site|page|website)\s+(?:blank|empty)\b",
            re.IGNORECASE,
        ),
    ),
    (
        "script_injection",
        re.compile(
            r"<\s*/?\s*script\b"
            r"|\b(?:add|insert|inject|embed|paste)\s+(?:a\s+|an\s+|some\s+|this\s+)?"
            r"(?:java)?script\b",
            re.IGNORECASE,
        ),
    ),
    (
        "event_handler",
        re.compile(
            r"\bon(?:click|load|error|mouseover|mouseout|focus|blur|submit|change|"
            r"input|keydown|keyup|keypress)\s*=",
            re.IGNORECASE,
        ),
    ),
    (
        "embedded_frame",
        re.compile(r"<\s*(?:iframe|frame|embed|object)\b|\biframe\b", re.IGNORECASE),
    ),
    (
        "script_uri",
        re.compile(r"javascript\s*:|\beval\s*\(|data\s*:\s*text/html", re.IGNORECASE),
    ),
)


@dataclass(frozen=True)
class SanitizedInstruction:
    """Cleaned instruction text plus the outcome of the danger scan.

    A flagged instruction is never auto-applied; the router forces it into
    the complex tier.
    """

    cleaned: str
    flagged: bool = False
    reason: str | None = None


def clean_instruction(raw: str) -> str:
    """Strip scripts, fenced code and tags, collapse whitespace, cap the length."""
    text = _SCRIPT_BLOCK.sub(" ", raw)
    text = _FENCED_CODE.sub(" ", text)
    text = _TAG.sub(" ", text)
    text = _WHITESPACE.sub(" ", text).strip()
    return text[:MAX_INSTRUCTION_LENGTH]


def detect_danger(*texts: str) -> str | None:
    """Return the first matching danger reason across ``texts``, or None."""
    for reason, pattern in _DANGEROUS_PATTERNS:
        if any(pattern.search(text) for text in texts):
            return reason
    return None


def sanitize_instruction(raw: str) -> SanitizedInstruction:
    """Clean ``raw`` and scan both the raw and cleaned text for dangerous intent.

    The raw text is scanned too because cleaning removes exactly the markup
    an injection attempt would use.
    """
    cleaned = clean_instruction(raw or "")
    reason = detect_danger(cleaned, raw or "")
    return SanitizedInstruction(cleaned=cleaned, flagged=reason is not None, reason=reason)
