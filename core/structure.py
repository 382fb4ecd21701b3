# =============================================================================
# core/structure.py  —  Bounded snapshot of the remote content tree
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Fetches ONE document for a root node (its children are embedded inline)
#   and walks it breadth-first into a flat StructureSnapshot that
#   core/parents.py can score.
#
# BOUNDS:
#   - max_depth: a node at depth == max_depth is recorded but its children
#     are not expanded.  The root is depth 0.
#   - max_nodes: once that many distinct nodes (root included) have been
#     visited, traversal stops and whatever was gathered is returned with
#     truncated=True.  A partial snapshot is a normal result.
#
# I/O:
#   At most two awaits: resolving the default root (only when no root was
#   given) and fetching the root document.  The walk itself is pure.
#
# NODE KEYS:
#   Nodes are de-duplicated by key: the numeric id, else the guid, else a
#   key from the pluggable KeyStrategy.  positional_key (the default) is
#   stable across runs; random_key gives every anonymous node its own token.
# =============================================================================

import logging
import uuid
from collections import deque
from typing import Callable, Optional, Protocol

from core.errors import UpstreamError
from core.models import StructureNode, StructureSnapshot

logger = logging.getLogger(__name__)

DEFAULT_ROOT = "1"

# (node, parent key, index among parent's children) -> key
KeyStrategy = Callable[[StructureNode, Optional[str], int], str]


class ContentTree(Protocol):
    async def fetch(self, identifier: str) -> StructureNode: ...


class RootResolver(Protocol):
    async def resolve_default_root(self) -> Optional[str]: ...


def positional_key(node: StructureNode, parent_key: Optional[str], index: int) -> str:
    return f"{parent_key or '~'}/{index}"


def random_key(node: StructureNode, parent_key: Optional[str], index: int) -> str:
    return f"anon-{uuid.uuid4().hex}"


def node_key(
    node: StructureNode,
    parent_key: Optional[str],
    index: int,
    key_strategy: KeyStrategy = positional_key,
) -> str:
    if node.id is not None:
        return str(node.id)
    if node.guid:
        return node.guid
    return key_strategy(node, parent_key, index)


def traverse(
    root: StructureNode,
    max_depth: int = 2,
    max_nodes: int = 50,
    key_strategy: KeyStrategy = positional_key,
) -> StructureSnapshot:
    """Breadth-first walk of an already-fetched tree."""
    queue = deque([(root, 0, node_key(root, None, 0, key_strategy))])
    visited: set[str] = set()
    flat: list[StructureNode] = []
    truncated = False

    while queue:
        if len(visited) >= max_nodes:
            truncated = True
            break
        node, depth, key = queue.popleft()
        if key in visited:
            continue
        visited.add(key)
        if node is not root:
            flat.append(node)
        if depth >= max_depth:
            continue
        for index, child in enumerate(node.children):
            queue.append((child, depth + 1, node_key(child, key, index, key_strategy)))

    if truncated:
        logger.debug("Traversal stopped at %d nodes (max_nodes)", len(visited))
    return StructureSnapshot(root=root, children=flat, visited=len(visited), truncated=truncated)


async def resolve_root(
    root: Optional[str],
    root_resolver: Optional[RootResolver],
    default_root: str = DEFAULT_ROOT,
) -> str:
    """The given root, else the one the CMS redirects to, else default_root."""
    if root:
        return root
    if root_resolver is not None:
        try:
            resolved = await root_resolver.resolve_default_root()
        except UpstreamError as exc:
            logger.warning("Default root lookup failed (%s); using %s", exc, default_root)
            resolved = None
        if resolved:
            return resolved
    return default_root


async def snapshot(
    tree: ContentTree,
    root: Optional[str] = None,
    max_depth: int = 2,
    max_nodes: int = 50,
    root_resolver: Optional[RootResolver] = None,
    default_root: str = DEFAULT_ROOT,
    key_strategy: KeyStrategy = positional_key,
) -> StructureSnapshot:
    """Fetch a root document and flatten it within the given bounds."""
    identifier = await resolve_root(root, root_resolver, default_root)
    document = await tree.fetch(identifier)
    result = traverse(document, max_depth, max_nodes, key_strategy)
    logger.info(
        "Snapshot of %s: %d nodes visited, %d children%s",
        identifier, result.visited, len(result.children),
        " (truncated)" if result.truncated else "",
    )
    return result
