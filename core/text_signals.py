# =============================================================================
# core/text_signals.py  —  Rule-based signals pulled out of the ask text
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns a free-text ask ("create a CTA card block under parent 4187 and
#   set heading to 'Viva Opal'") into small typed facts: tokens, quoted
#   strings, a parent reference, field assignments, a move intent.
#
#   There is no language model here.  Each signal comes from a short ordered
#   list of matcher functions; every matcher returns a typed result or None
#   and the FIRST non-None result wins.  The order of those lists is part of
#   the contract:
#
#     parent reference:   "parent <digits>"  before  any GUID in the text
#     move source:        "move <digits>"    before  "move <guid>"
#     move destination:   "under/to <digits>" before "under/to <guid>"
#
# All functions are pure: same text + same MatcherConfig, same answer.
# =============================================================================

import logging
import re
from typing import Callable, Iterable, Optional

from core.config import DEFAULT_MATCHERS, MatcherConfig
from core.models import FieldAssignments, MoveIntent, ParentLink

logger = logging.getLogger(__name__)

LinkMatcher = Callable[[str, MatcherConfig], Optional[ParentLink]]

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


def tokenize(text: str) -> list[str]:
    """Lower-case word tokens; punctuation becomes a separator.

    >>> tokenize("Find a CTA-Card!")
    ['find', 'a', 'cta', 'card']
    """
    return _NON_ALNUM.sub(" ", text.lower()).split()


def extract_quoted_strings(text: str, matchers: MatcherConfig = DEFAULT_MATCHERS) -> list[str]:
    """Every '...' or "..." span, left to right, without the quotes."""
    return [match.group(2) for match in matchers.quoted.finditer(text)]


# -----------------------------------------------------------------------------
# Parent reference
# -----------------------------------------------------------------------------
def _match_numeric_parent(text: str, matchers: MatcherConfig) -> Optional[ParentLink]:
    match = matchers.parent_reference.search(text)
    return ParentLink(id=int(match.group(1))) if match else None


def _match_any_guid(text: str, matchers: MatcherConfig) -> Optional[ParentLink]:
    match = matchers.guid.search(text)
    return ParentLink(guid_value=match.group(0)) if match else None


PARENT_REFERENCE_MATCHERS: tuple[LinkMatcher, ...] = (
    _match_numeric_parent,
    _match_any_guid,
)


def _first_link(
    text: str, chain: Iterable[LinkMatcher], matchers: MatcherConfig
) -> Optional[ParentLink]:
    for matcher in chain:
        link = matcher(text, matchers)
        if link is not None:
            return link
    return None


def extract_parent_reference(
    text: str, matchers: MatcherConfig = DEFAULT_MATCHERS
) -> Optional[ParentLink]:
    """Explicit parent named in the ask, numeric id first, then any GUID."""
    return _first_link(text, PARENT_REFERENCE_MATCHERS, matchers)


# -----------------------------------------------------------------------------
# Field assignments
# -----------------------------------------------------------------------------
def _normalize(name: str) -> str:
    return re.sub(r"\s+", "", name).lower()


def extract_field_assignments(
    text: str,
    property_names: Iterable[str],
    matchers: MatcherConfig = DEFAULT_MATCHERS,
) -> FieldAssignments:
    """Map property names to {"value": ...} from the ask.

    Rule (a): every `set <words> to "<value>"` whose words, with whitespace
    removed and case folded, equal a property name.

    Rule (b): only when no `set ... to ...` phrase appears at all, the first
    quoted string goes to the first heading/title-like property, or to the
    first property if none looks like a title.

    A property that already has a value is never overwritten.
    """
    names = list(property_names)
    by_normalized: dict[str, str] = {}
    for name in names:
        by_normalized.setdefault(_normalize(name), name)

    assignments: FieldAssignments = {}
    set_phrases = list(matchers.set_assignment.finditer(text))
    for match in set_phrases:
        prop = by_normalized.get(_normalize(match.group(1)))
        if prop is None:
            logger.debug("Set phrase %r matches no property; value dropped", match.group(1))
        elif prop not in assignments:
            assignments[prop] = {"value": match.group(3)}

    if set_phrases or not names:
        return assignments

    quoted = extract_quoted_strings(text, matchers)
    if quoted:
        target = next((n for n in names if matchers.title_property.search(n)), names[0])
        assignments.setdefault(target, {"value": quoted[0]})
    return assignments


def extract_set_values(text: str, matchers: MatcherConfig = DEFAULT_MATCHERS) -> list[str]:
    """Values captured by `set ... to "..."` phrases, whatever the property."""
    return [match.group(3) for match in matchers.set_assignment.finditer(text)]


# -----------------------------------------------------------------------------
# Move intent
# -----------------------------------------------------------------------------
def _match_move_source(text: str, matchers: MatcherConfig) -> Optional[str]:
    for pattern in (matchers.move_source_id, matchers.move_source_guid):
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def _match_destination_id(text: str, matchers: MatcherConfig) -> Optional[ParentLink]:
    match = matchers.move_destination_id.search(text)
    return ParentLink(id=int(match.group(1))) if match else None


def _match_destination_guid(text: str, matchers: MatcherConfig) -> Optional[ParentLink]:
    match = matchers.move_destination_guid.search(text)
    return ParentLink(guid_value=match.group(1)) if match else None


MOVE_DESTINATION_MATCHERS: tuple[LinkMatcher, ...] = (
    _match_destination_id,
    _match_destination_guid,
)


def extract_move_intent(
    text: str, matchers: MatcherConfig = DEFAULT_MATCHERS
) -> Optional[MoveIntent]:
    """MoveIntent when the ask says "move <id>"; None otherwise.

    A move without an identifiable source is not a move.  A missing
    destination is reported as parent_link=None.
    """
    if not matchers.move_keyword.search(text):
        return None
    source = _match_move_source(text, matchers)
    if source is None:
        return None
    destination = _first_link(text, MOVE_DESTINATION_MATCHERS, matchers)
    return MoveIntent(content_identifier=source, parent_link=destination)
