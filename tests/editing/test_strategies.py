"""Tests for the match strategies."""

import pytest

from site_editor.editing.strategies import (
    AttributeValueMatch,
    ExactMatch,
    FlexibleWhitespaceMatch,
    NormalizedPositionMatch,
    attempt_match,
    normalize_with_positions,
)
from site_editor.models.proposal import ChangeProposal


def _change(search: str, replace: str = "X") -> ChangeProposal:
    return ChangeProposal(search=search, replace=replace)


@pytest.mark.unit
class TestExactMatch:
    """Test the Exact Match strategy."""

    def test_replaces_first_occurrence_only(self) -> None:
        document = "<p>a</p><p>a</p>"
        found = ExactMatch().attempt(document, _change("<p>a</p>", "<p>b</p>"))
        assert found is not None
        assert found.apply(document) == "<p>b</p><p>a</p>"

    def test_no_match(self) -> None:
        assert ExactMatch().attempt("<p>a</p>", _change("<p>z</p>")) is None


@pytest.mark.unit
class TestFlexibleWhitespaceMatch:
    """Test the Flexible Whitespace Match strategy."""

    def test_matches_different_whitespace(self) -> None:
        document = "<h1>Welcome\n      home</h1>"
        found = FlexibleWhitespaceMatch().attempt(document, _change("Welcome home", "Hi"))
        assert found is not None
        assert found.strategy == "flexible_whitespace"
        assert found.apply(document) == "<h1>Hi</h1>"

    def test_escapes_regex_characters(self) -> None:
        document = "Price: $5.00 (tax incl.)"
        found = FlexibleWhitespaceMatch().attempt(document, _change("$5.00 (tax incl.)", "$6"))
        assert found is not None
        assert found.apply(document) == "Price: $6"

    def test_literal_dot_does_not_match_any_character(self) -> None:
        assert FlexibleWhitespaceMatch().attempt("5x00", _change("5.00")) is None


@pytest.mark.unit
class TestNormalizedPositionMatch:
    """Test the Normalized Position Match strategy."""

    def test_position_map_points_at_original_indices(self) -> None:
        normalized, positions = normalize_with_positions("a  \n b")
        assert normalized == "a b"
        assert positions == [0, 1, 5]

    def test_locates_irregular_whitespace_without_touching_neighbours(self) -> None:
        document = "<p>Hello   world</p>\n<p>Other</p>"
        change = _change(" Hello world ", "Hi there")

        assert ExactMatch().attempt(document, change) is None
        assert FlexibleWhitespaceMatch().attempt(document, change) is None
        found = NormalizedPositionMatch().attempt(document, change)

        assert found is not None
        assert found.apply(document) == "<p>Hi there</p>\n<p>Other</p>"

    def test_extends_to_whitespace_boundary(self) -> None:
        document = "Call us\t\ttoday for a quote"
        found = NormalizedPositionMatch().attempt(document, _change("Call us today", "Ring"))
        assert found is not None
        assert found.apply(document) == "Ring for a quote"

    def test_skips_short_search(self) -> None:
        assert NormalizedPositionMatch().attempt("a   b c", _change("a b")) is None

    def test_no_match(self) -> None:
        assert NormalizedPositionMatch().attempt("<p>nothing here</p>", _change("missing text")) is None


@pytest.mark.unit
class TestAttributeValueMatch:
    """Test the Attribute Value Match strategy."""

    def test_swaps_single_changed_attribute(self) -> None:
        document = '<a class="btn" href="tel:5550100">Call</a>'
        change = _change(
            '<a href="tel:5550100" class="button">Call now</a>',
            '<a href="tel:5550199" class="button">Call now</a>',
        )
        found = AttributeValueMatch().attempt(document, change)
        assert found is not None
        assert found.apply(document) == '<a class="btn" href="tel:5550199">Call</a>'

    def test_declines_when_value_occurs_twice(self) -> None:
        document = '<img src="logo.png"><img src="logo.png">'
        change = _change('<img src="logo.png" alt="">', '<img src="new.png" alt="">')
        assert AttributeValueMatch().attempt(document, change) is None

    def test_declines_when_several_attributes_change(self) -> None:
        document = '<img src="a.png" alt="a">'
        change = _change('<img src="a.png" alt="a" >', '<img src="b.png" alt="b" >')
        assert AttributeValueMatch().attempt(document, change) is None


@pytest.mark.unit
def test_attempt_match_prefers_exact() -> None:
    found = attempt_match("<p>Hours: 9-5</p>", _change("Hours: 9-5", "Hours: 8-6"))
    assert found is not None
    assert found.strategy == "exact"


@pytest.mark.unit
def test_attempt_match_returns_none_when_all_fail() -> None:
    assert attempt_match("<p>Hours</p>", _change("completely different text")) is None
