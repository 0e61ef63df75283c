"""Match strategies — ways of locating a proposed search string in a document.

Each strategy answers one question: where in ``document`` does this change
apply, and what text goes there? Strategies are tried in priority order by
``attempt_match``; the first hit wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from site_editor.models.proposal import ChangeProposal

MIN_NORMALIZED_SEARCH_LENGTH = 10

_WHITESPACE_SPLIT = re.compile(r"(\s+)")
_WHITESPACE = re.compile(r"\s+")
_QUOTED_ATTRIBUTE = re.compile(r'([A-Za-z_:][\w:.-]*)\s*=\s*"([^"]*)"')


@dataclass(frozen=True)
class Match:
    """A located span ``[start, end)`` and the text that replaces it."""

    start: int
    end: int
    replacement: str
    strategy: str

    def apply(self, document: str) -> str:
        return document[: self.start] + self.replacement + document[self.end :]


class MatchStrategy(Protocol):
    name: str

    def attempt(self, document: str, change: ChangeProposal) -> Match | None: ...


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to one space and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def normalize_with_positions(text: str) -> tuple[str, list[int]]:
    """Collapse whitespace runs, keeping a map from normalized to original index.

    ``positions[i]`` is the index in ``text`` the i-th normalized character
    came from; a collapsed run maps to its first whitespace character.
    """
    chars: list[str] = []
    positions: list[int] = []
    in_whitespace = False
    for index, char in enumerate(text):
        if char.isspace():
            if not in_whitespace:
                chars.append(" ")
                positions.append(index)
                in_whitespace = True
        else:
            chars.append(char)
            positions.append(index)
            in_whitespace = False
    return "".join(chars), positions


class ExactMatch:
    name = "exact"

    def attempt(self, document: str, change: ChangeProposal) -> Match | None:
        start = document.find(change.search)
        if start == -1:
            return None
        return Match(start, start + len(change.search), change.replace, self.name)


class FlexibleWhitespaceMatch:
    """Literal search where any whitespace run matches any other."""

    name = "flexible_whitespace"

    def attempt(self, document: str, change: ChangeProposal) -> Match | None:
        parts = _WHITESPACE_SPLIT.split(change.search)
        pattern = "".join(
            r"\s+" if index % 2 else re.escape(part) for index, part in enumerate(parts)
        )
        try:
            found = re.search(pattern, document)
        except (re.error, RecursionError, OverflowError):
            return None
        if found is None:
            return None
        return Match(found.start(), found.end(), change.replace, self.name)


class NormalizedPositionMatch:
    """Search in whitespace-normalized space, then map the hit back to original offsets.

    The recovered span is re-normalized and compared against the normalized
    search before it is accepted, so a bad mapping can never splice the
    wrong text.
    """

    name = "normalized_position"

    def attempt(self, document: str, change: ChangeProposal) -> Match | None:
        needle = normalize_whitespace(change.search)
        if len(needle) < MIN_NORMALIZED_SEARCH_LENGTH:
            return None

        haystack, positions = normalize_with_positions(document)
        index = haystack.find(needle)
        if index == -1:
            return None

        start = positions[index]
        last = index + len(needle) - 1
        end = positions[last] + 1
        if not needle[-1].isspace():
            while end < len(document) and not document[end].isspace():
                end += 1
        if normalize_whitespace(document[start:end]) == needle:
            return Match(start, end, change.replace, self.name)

        # Alternate boundary: stop right where the next normalized character begins.
        alternate_end = positions[last + 1] if last + 1 < len(positions) else positions[last] + 1
        if normalize_whitespace(document[start:alternate_end]) == needle:
            return Match(start, alternate_end, change.replace, self.name)
        return None


class AttributeValueMatch:
    """Swap a single quoted attribute value when the surrounding markup drifted.

    Only applies when exactly one attribute differs between search and
    replace, and that ``name="value"`` pair occurs exactly once in the
    document. Identical pairs elsewhere in the document make the target
    ambiguous and the strategy declines.
    """

    name = "attribute_value"

    def attempt(self, document: str, change: ChangeProposal) -> Match | None:
        new_values = dict(_QUOTED_ATTRIBUTE.findall(change.replace))
        candidates = [
            (attribute, old_value, new_values[attribute])
            for attribute, old_value in _QUOTED_ATTRIBUTE.findall(change.search)
            if attribute in new_values and new_values[attribute] != old_value
        ]
        if len(candidates) != 1:
            return None

        attribute, old_value, new_value = candidates[0]
        needle = f'{attribute}="{old_value}"'
        if document.count(needle) != 1:
            return None
        start = document.find(needle) + len(attribute) + 2
        return Match(start, start + len(old_value), new_value, self.name)


DEFAULT_STRATEGIES: tuple[MatchStrategy, ...] = (
    ExactMatch(),
    FlexibleWhitespaceMatch(),
    NormalizedPositionMatch(),
    AttributeValueMatch(),
)


def attempt_match(
    document: str,
    change: ChangeProposal,
    strategies: tuple[MatchStrategy, ...] = DEFAULT_STRATEGIES,
) -> Match | None:
    """Return the first strategy's match for ``change`` in ``document``, if any."""
    for strategy in strategies:
        found = strategy.attempt(document, change)
        if found is not None:
            return found
    return None
