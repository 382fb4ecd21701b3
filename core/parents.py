# =============================================================================
# core/parents.py  —  Proposing where new content should live
# =============================================================================
#
# When the ask names no parent, every node in the snapshot is scored as a
# possible container for the new item:
#
#   3  the new item is a block AND the node's name looks like a block
#      library (block / widgets / components / assets / global)
#   1  otherwise, the node's name looks like any container
#      (folder / container / library)
#   0  anything else (dropped)
#
# The result is at most five candidates, best first.  Equal scores keep the
# order the traversal found them in (sorted() is stable).
# =============================================================================

import logging

from core.config import DEFAULT_MATCHERS, MatcherConfig
from core.models import ContentTypeDescriptor, ParentCandidate, StructureSnapshot

logger = logging.getLogger(__name__)


def _score_node(name: str, desired_is_block: bool, matchers: MatcherConfig) -> int:
    if desired_is_block and matchers.block_parent.search(name):
        return matchers.block_parent_score
    if matchers.container_parent.search(name):
        return matchers.container_parent_score
    return 0


def propose(
    snapshot: StructureSnapshot,
    target_type: ContentTypeDescriptor,
    matchers: MatcherConfig = DEFAULT_MATCHERS,
) -> list[ParentCandidate]:
    """Ranked parent candidates for a new item of target_type."""
    desired_is_block = bool(matchers.block_type.search(target_type.name))

    candidates = []
    for node in snapshot.children:
        node_score = _score_node(node.name or "", desired_is_block, matchers)
        link = node.link()
        if node_score <= 0 or link is None:
            continue
        candidates.append(ParentCandidate(
            identifier=link.identifier,
            name=node.name or None,
            score=node_score,
            parent_link=link,
        ))

    ranked = sorted(candidates, key=lambda c: c.score, reverse=True)[: matchers.max_proposals]
    logger.debug("Proposed %d of %d scored parents", len(ranked), len(candidates))
    return ranked
