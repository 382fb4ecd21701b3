# =============================================================================
# core/content_types.py  —  Picking the content type an ask is talking about
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   1. score() / resolve(): rank every content type in the CMS against the
#      ask's tokens and return the best one.
#   2. ContentTypeClassifier: map a content type onto a coarse base type
#      (Page / Block / Media / Folder) from one ordered rule table.
#
# SCORING HEURISTIC (per ask token):
#   +3  the type's display name contains the token (case-insensitive)
#   +1  any property name contains the token
# plus, once per keyword:
#   +2  the ask contains "block" / "page" / "media" and the type's model
#       name matches the same word
#
# The scores are arbitrary units; they only matter relative to each other.
# Ties go to the type listed first by the CMS, so the same list always
# yields the same winner.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from core.config import DEFAULT_MATCHERS, MatcherConfig, icase
from core.errors import NoCandidateError
from core.models import ContentTypeDescriptor
from core.text_signals import tokenize

logger = logging.getLogger(__name__)


def score(
    ask: str,
    content_type: ContentTypeDescriptor,
    matchers: MatcherConfig = DEFAULT_MATCHERS,
) -> int:
    """How well one content type matches the ask (higher is better)."""
    tokens = tokenize(ask)
    display = (content_type.display_name or content_type.name).lower()
    property_names = [name.lower() for name in content_type.property_names]

    total = 0
    for token in tokens:
        if token in display:
            total += matchers.display_name_weight
        if any(token in name for name in property_names):
            total += matchers.property_name_weight

    token_set = set(tokens)
    for keyword, pattern in matchers.type_keywords:
        if keyword in token_set and pattern.search(content_type.name):
            total += matchers.keyword_weight
    return total


def resolve(
    ask: str,
    types: Sequence[ContentTypeDescriptor],
    matchers: MatcherConfig = DEFAULT_MATCHERS,
) -> ContentTypeDescriptor:
    """The highest-scoring content type; the earliest one wins a tie.

    Raises:
        NoCandidateError: when types is empty.
    """
    if not types:
        raise NoCandidateError("No content types available to match the ask against.")

    best = types[0]
    best_score = score(ask, best, matchers)
    for candidate in types[1:]:
        candidate_score = score(ask, candidate, matchers)
        if candidate_score > best_score:
            best, best_score = candidate, candidate_score

    logger.debug("Resolved content type %s (score %d of %d types)", best.name, best_score, len(types))
    return best


# =============================================================================
# Base-type classification
# =============================================================================
# One classifier, one rule table.  Rules are tried in order against the
# model name; the first match wins, else the default.
#
#   ORCHESTRATOR_RULES  Block, else Page.  Used when creating content from an
#                       ask.
#   FULL_RULES          Media, Folder, Block, else Page.  Used when listing
#                       content types; also honours a base type the CMS
#                       declares on the descriptor.
# =============================================================================
ORCHESTRATOR_RULES = (
    ("Block", icase(r"block")),
)

FULL_RULES = (
    ("Media", icase(r"media|image|video|file")),
    ("Folder", icase(r"folder")),
    ("Block", icase(r"block")),
)


@dataclass(frozen=True)
class ContentTypeClassifier:
    rules: tuple
    default: str = "Page"
    honour_declared: bool = False

    def classify(self, content_type: ContentTypeDescriptor) -> str:
        declared: Optional[str] = content_type.base_type
        if self.honour_declared and declared:
            return declared
        for base_type, pattern in self.rules:
            if pattern.search(content_type.name):
                return base_type
        return self.default


ORCHESTRATOR_CLASSIFIER = ContentTypeClassifier(ORCHESTRATOR_RULES)
FULL_CLASSIFIER = ContentTypeClassifier(FULL_RULES, honour_declared=True)
