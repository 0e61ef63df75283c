"""Prompt files — markdown instructions kept under the repository's prompts/ directory."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

PROMPTS_DIR = Path(__file__).resolve().parent.parent.parent.parent / "prompts"

logger = logging.getLogger(__name__)


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Return the text of ``prompts/<name>.md``, stripped.

    Raises ``FileNotFoundError`` if the prompt file does not exist.
    """
    path = PROMPTS_DIR / f"{name}.md"
    text = path.read_text(encoding="utf-8").strip()
    logger.debug("Prompt loaded — name=%s chars=%d", name, len(text))
    return text


def compose_prompt(name: str, *sections: str | None) -> str:
    """Prefix the named prompt to the per-call sections, skipping empty ones.

    The chat clients take a single user message, so instructions and
    request data travel together, separated by blank lines.
    """
    extra = [section for section in sections if section and section.strip()]
    return "\n\n".join([load_prompt(name), *extra])
