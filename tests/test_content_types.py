"""Tests for content-type scoring, resolution and classification."""
import pytest

from core.content_types import (
    FULL_CLASSIFIER,
    ORCHESTRATOR_CLASSIFIER,
    resolve,
    score,
)
from core.errors import NoCandidateError
from core.models import ContentTypeDescriptor, PropertyDescriptor


def make_type(name, display_name=None, properties=(), base_type=None):
    return ContentTypeDescriptor(
        name=name,
        display_name=display_name if display_name is not None else name,
        properties=tuple(PropertyDescriptor(name=p) for p in properties),
        base_type=base_type,
    )


CTA = make_type("CtaCardBlock", "CTA Card Block", ["Heading"])
ARTICLE = make_type("ArticlePage", "Article Page", ["MainBody", "Heading"])
IMAGE = make_type("ImageMedia", "Image File", ["AltText"])


class TestScore:
    """Test the per-type scoring heuristic."""

    def test_display_name_tokens(self):
        """Each token found in the display name is worth 3."""
        assert score("cta card", CTA) == 6

    def test_property_tokens(self):
        """A token found in a property name is worth 1."""
        assert score("heading", CTA) == 1

    def test_keyword_bonus(self):
        """'block' in the ask plus a Block model name adds 2 on top of display match."""
        assert score("block", CTA) == 3 + 2

    def test_keyword_bonus_needs_model_name_match(self):
        """'page' earns no bonus for a block type."""
        assert score("page", CTA) == 0

    def test_unrelated_ask_scores_zero(self):
        """Nothing in common, nothing scored."""
        assert score("xyz", ARTICLE) == 0


class TestResolve:
    """Test best-candidate selection."""

    def test_picks_highest(self):
        """The CTA block wins an ask about CTA card blocks."""
        ask = "create a CTA card block under parent 4187"
        assert resolve(ask, [ARTICLE, CTA, IMAGE]) is CTA

    def test_tie_goes_to_first(self):
        """Equal scores resolve to the earlier entry."""
        first = make_type("AlphaBlock", "Alpha")
        second = make_type("BetaBlock", "Beta")
        assert resolve("unrelated words", [first, second]) is first
        assert resolve("unrelated words", [second, first]) is second

    def test_deterministic(self):
        """Repeated calls return the same element."""
        types = [ARTICLE, CTA, IMAGE]
        ask = "new article page"
        assert {resolve(ask, types).name for _ in range(5)} == {"ArticlePage"}

    def test_empty_list_raises(self):
        """No content types is fatal."""
        with pytest.raises(NoCandidateError):
            resolve("anything", [])


class TestClassifier:
    """Test base-type classification tables."""

    def test_orchestrator_rules_block_or_page(self):
        """The ask path only distinguishes Block and Page."""
        assert ORCHESTRATOR_CLASSIFIER.classify(CTA) == "Block"
        assert ORCHESTRATOR_CLASSIFIER.classify(ARTICLE) == "Page"
        assert ORCHESTRATOR_CLASSIFIER.classify(IMAGE) == "Page"

    def test_full_rules(self):
        """The listing classifier also knows Media and Folder."""
        assert FULL_CLASSIFIER.classify(IMAGE) == "Media"
        assert FULL_CLASSIFIER.classify(make_type("ContentFolder")) == "Folder"
        assert FULL_CLASSIFIER.classify(CTA) == "Block"
        assert FULL_CLASSIFIER.classify(ARTICLE) == "Page"

    def test_declared_base_type_honoured(self):
        """A base type declared by the CMS wins in the full classifier only."""
        declared = make_type("HeroUnit", base_type="Block")
        assert FULL_CLASSIFIER.classify(declared) == "Block"
        assert ORCHESTRATOR_CLASSIFIER.classify(declared) == "Page"
