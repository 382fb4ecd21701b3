"""Tests for rule-based signal extraction from ask text."""
import dataclasses
import logging
import re

from core.config import DEFAULT_MATCHERS
from core.models import MoveIntent, ParentLink
from core.text_signals import (
    extract_field_assignments,
    extract_move_intent,
    extract_parent_reference,
    extract_quoted_strings,
    tokenize,
)

GUID = "9b1deb4d-3b7d-4bad-9bdd-2b0d7b3dcb6d"


class TestTokenize:
    """Test lower-casing and punctuation splitting."""

    def test_punctuation_becomes_separator(self):
        """Hyphens and exclamation marks split tokens."""
        assert tokenize("Find a CTA-Card!") == ["find", "a", "cta", "card"]

    def test_empty_and_whitespace(self):
        """No tokens come out of blank text."""
        assert tokenize("") == []
        assert tokenize("  \t\n ") == []

    def test_digits_kept(self):
        """Digits survive as tokens."""
        assert tokenize("under parent #4187.") == ["under", "parent", "4187"]


class TestQuotedStrings:
    """Test quoted-string extraction."""

    def test_double_quotes(self):
        """Double-quoted values are returned without quotes."""
        assert extract_quoted_strings('set Heading to "Viva Opal"') == ["Viva Opal"]

    def test_mixed_quotes_in_order(self):
        """Single and double quotes are both recognised, left to right."""
        text = "create 'First' and then \"Second\""
        assert extract_quoted_strings(text) == ["First", "Second"]

    def test_unmatched_quote_ignored(self):
        """A lone quote character yields nothing."""
        assert extract_quoted_strings('a "dangling quote') == []


class TestParentReference:
    """Test explicit parent extraction and its numeric-before-guid order."""

    def test_numeric_parent(self):
        """'parent 4187' becomes a numeric link."""
        assert extract_parent_reference("under parent 4187") == ParentLink(id=4187)

    def test_parent_link_and_id_variants(self):
        """'parent link' and 'parent id' prefixes are accepted."""
        assert extract_parent_reference("parent link 12") == ParentLink(id=12)
        assert extract_parent_reference("Parent ID 77") == ParentLink(id=77)

    def test_guid_anywhere(self):
        """A GUID anywhere in the text is used when no numeric parent exists."""
        assert extract_parent_reference(f"under {GUID}") == ParentLink(guid_value=GUID)

    def test_numeric_wins_over_guid(self):
        """Numeric parent takes priority even when a GUID appears first."""
        text = f"copy of {GUID} under parent 55"
        assert extract_parent_reference(text) == ParentLink(id=55)

    def test_no_reference(self):
        """Plain text yields no parent."""
        assert extract_parent_reference("no reference here") is None

    def test_more_than_ten_digits_rejected(self):
        """Numeric ids longer than ten digits are not parent references."""
        assert extract_parent_reference("parent 12345678901") is None

    def test_custom_pattern_via_config(self):
        """Matcher patterns can be swapped without touching module state."""
        matchers = dataclasses.replace(
            DEFAULT_MATCHERS, parent_reference=re.compile(r"\bfolder\s+(\d+)")
        )
        assert extract_parent_reference("in folder 9", matchers) == ParentLink(id=9)
        assert extract_parent_reference("in folder 9") is None


class TestFieldAssignments:
    """Test `set X to "..."` and the quoted-string fallback."""

    def test_set_phrase_matches_property(self):
        """Words are matched case-insensitively against property names."""
        result = extract_field_assignments('set heading to "Viva Opal"', ["Heading"])
        assert result == {"Heading": {"value": "Viva Opal"}}

    def test_multi_word_property_normalized(self):
        """Whitespace is removed before matching."""
        result = extract_field_assignments(
            "set button text to 'Go' and set main body to \"Hello\"",
            ["ButtonText", "MainBody"],
        )
        assert result == {"ButtonText": {"value": "Go"}, "MainBody": {"value": "Hello"}}

    def test_first_assignment_not_overwritten(self):
        """A property set twice keeps its first value."""
        result = extract_field_assignments(
            'set title to "One" then set title to "Two"', ["Title"]
        )
        assert result == {"Title": {"value": "One"}}

    def test_fallback_prefers_title_like_property(self):
        """Without a set phrase, the first quote goes to a heading/title property."""
        result = extract_field_assignments(
            'create a teaser "Summer Sale"', ["Image", "MainTitle", "Body"]
        )
        assert result == {"MainTitle": {"value": "Summer Sale"}}

    def test_fallback_uses_first_property(self):
        """With no title-like property, the first property receives the quote."""
        result = extract_field_assignments('new page "About"', ["Body", "Image"])
        assert result == {"Body": {"value": "About"}}

    def test_fallback_skipped_when_set_phrase_present(self):
        """An unmatched set phrase disables the fallback."""
        result = extract_field_assignments('set colour to "red"', ["Heading"])
        assert result == {}

    def test_no_quotes_no_fields(self):
        """Nothing is assigned when the ask has no quoted values."""
        assert extract_field_assignments("create a block", ["Heading"]) == {}

    def test_unmatched_set_phrase_is_logged(self, caplog):
        """A set phrase naming no property is dropped with a debug message."""
        with caplog.at_level(logging.DEBUG, logger="core.text_signals"):
            result = extract_field_assignments('set the heading to "X"', ["Heading"])
        assert result == {}
        assert "the heading" in caplog.text


class TestMoveIntent:
    """Test move detection, source and destination extraction."""

    def test_numeric_move(self):
        """'move 123 under parent 456' is fully parsed."""
        assert extract_move_intent("move 123 under parent 456") == MoveIntent(
            content_identifier="123", parent_link=ParentLink(id=456)
        )

    def test_not_a_move(self):
        """Asks without the word 'move' are not moves."""
        assert extract_move_intent("create something") is None
        assert extract_move_intent("remove 12 under parent 3") is None

    def test_move_without_source(self):
        """'move' with no identifier is not a move."""
        assert extract_move_intent("move the teaser under parent 4") is None

    def test_move_without_destination(self):
        """The destination is optional and reported as None."""
        assert extract_move_intent("move content 55") == MoveIntent(content_identifier="55")

    def test_guid_source_and_destination(self):
        """GUIDs are accepted for both source and destination."""
        other = "0f8fad5b-d9cb-469f-a165-70867728950e"
        intent = extract_move_intent(f"move {GUID} to {other}")
        assert intent.content_identifier == GUID
        assert intent.parent_link == ParentLink(guid_value=other)

    def test_content_id_prefix(self):
        """'move content id N to parent id M' is understood."""
        intent = extract_move_intent("Move content id 7 to parent id 8")
        assert intent == MoveIntent(content_identifier="7", parent_link=ParentLink(id=8))

    def test_parent_link_destination(self):
        """Destinations accept the same 'parent link N' wording as create asks."""
        assert extract_move_intent("move 55 under parent link 99") == MoveIntent(
            content_identifier="55", parent_link=ParentLink(id=99)
        )
        assert extract_move_intent(f"move 55 to parent link {GUID}") == MoveIntent(
            content_identifier="55", parent_link=ParentLink(guid_value=GUID)
        )
