"""Document editing primitives: instruction sanitizing and fuzzy patching."""

from site_editor.editing.applier import PatchResult, apply_changes, apply_proposal
from site_editor.editing.sanitizer import SanitizedInstruction, sanitize_instruction
from site_editor.editing.strategies import Match, attempt_match

__all__ = [
    "Match",
    "PatchResult",
    "SanitizedInstruction",
    "apply_changes",
    "apply_proposal",
    "attempt_match",
    "sanitize_instruction",
]
