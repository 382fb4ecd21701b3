# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Defines the MCP tools a caller (an assistant, a workflow) can invoke.
#   Each tool is a thin wrapper around core/: it opens a CmsClient, calls
#   the core function, turns dataclasses into dicts and logs the exchange.
#
# TOOLS:
#   - resolve_content_ask    Free-text ask -> create or move (or a
#                            clarification asking for more detail).
#                            The only tool that changes content.
#   - get_content_types      Read-only list of content types with base type.
#   - get_content_structure  Read-only bounded snapshot of the content tree.
#
# ERRORS:
#   Core failures (AskError and subclasses) come back as {"error": ...}
#   dicts rather than protocol errors.  A clarification is NOT an error; it
#   comes back as {"message": ..., "proposals": [...]}.
#
# RUNNING THIS SERVER:
#   python -m tools.mcp_server          (stdio transport)
# =============================================================================

import json
import logging
import sys
from typing import Optional

from dotenv import load_dotenv
from fastmcp import FastMCP

from core import structure
from core.cms_client import CmsClient
from core.content_types import FULL_CLASSIFIER
from core.errors import AskError
from core.orchestrator import AskOrchestrator

load_dotenv()

# =============================================================================
# Logging Setup
# =============================================================================
# STDOUT carries the MCP protocol, so every log line goes to STDERR.
#   - CYAN for incoming requests (tool name + parameters)
#   - GREEN for response JSON
#   - YELLOW for intermediate status messages
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: dict) -> dict:
    """Log the tool response as compact JSON in GREEN, then return it."""
    logging.info(f"{_GREEN}  ← {tool_name} response: {json.dumps(result, separators=(',', ':'), default=str)}{_RESET}")
    return result


def _error(tool_name: str, exc: AskError) -> dict:
    _log_status(f"{type(exc).__name__}: {exc}")
    return _log_response(tool_name, {"error": str(exc), "type": type(exc).__name__})


mcp = FastMCP("cms-ask-resolver")


# =============================================================================
# TOOL 1: resolve_content_ask
# =============================================================================
@mcp.tool()
async def resolve_content_ask(
    ask: str,
    discovery_root: Optional[str] = None,
    max_depth: int = 2,
    max_nodes: int = 50,
    language: str = "en",
    status: str = "Published",
    auto_select_parent: bool = False,
) -> dict:
    """Create or move CMS content from a plain-language instruction.

    WHEN TO CALL THIS: The user describes ONE content change in words, e.g.
      - "create a CTA card block under parent 4187 and set heading to 'Viva Opal'"
      - "move 55 under parent 99"

    If the instruction does not say where new content should go, this tool
    does NOT guess: it returns a message plus up to five ranked parent
    proposals.  Ask the user to pick one and call again with
    "under parent <id>" in the ask (or pass auto_select_parent=true).

    Args:
        ask: The instruction text.  Required.
        discovery_root: Content id/GUID to search for parents under
            (default: the site's start node).
        max_depth: How many levels below discovery_root to inspect (default 2).
        max_nodes: Maximum nodes to inspect (default 50).
        language: Language branch for new content (default "en").
        status: Status for new content (default "Published").
        auto_select_parent: Use the best proposal instead of asking (default false).

    Returns:
        Either {"status": <http status>, "body": <CMS response>} after a
        create/move, or {"message": ..., "proposals": [...]} when more
        detail is needed, or {"error": ...} when the ask cannot proceed.
    """
    _log_request("resolve_content_ask", ask=ask, discovery_root=discovery_root,
                 max_depth=max_depth, max_nodes=max_nodes, language=language,
                 status=status, auto_select_parent=auto_select_parent)
    try:
        async with CmsClient.from_env() as client:
            result = await AskOrchestrator.for_client(client).resolve(
                ask,
                discovery_root=discovery_root,
                language=language,
                status=status,
                auto_select_parent=auto_select_parent,
                max_depth=max_depth,
                max_nodes=max_nodes,
            )
    except AskError as exc:
        return _error("resolve_content_ask", exc)

    _log_status(f"Result: {type(result).__name__}")
    return _log_response("resolve_content_ask", result.to_dict())


# =============================================================================
# TOOL 2: get_content_types
# =============================================================================
@mcp.tool()
async def get_content_types() -> dict:
    """List every content type the CMS defines, with its coarse base type.

    Returns:
        A dict with:
          - count: Number of content types
          - content_types: [{name, displayName, baseType, properties}]
    """
    _log_request("get_content_types")
    try:
        async with CmsClient.from_env() as client:
            types = await client.list_content_types()
    except AskError as exc:
        return _error("get_content_types", exc)

    items = []
    for content_type in types:
        item = content_type.to_dict()
        item["baseType"] = FULL_CLASSIFIER.classify(content_type)
        items.append(item)
    return _log_response("get_content_types", {"count": len(items), "content_types": items})


# =============================================================================
# TOOL 3: get_content_structure
# =============================================================================
@mcp.tool()
async def get_content_structure(
    root: Optional[str] = None,
    max_depth: int = 2,
    max_nodes: int = 50,
) -> dict:
    """Bounded, flattened view of the content tree below a node.

    Args:
        root: Content id/GUID to start from (default: the site's start node).
        max_depth: Levels below root to include (default 2).
        max_nodes: Maximum nodes to include (default 50).

    Returns:
        The root's id/guid/name plus a flat "children" list of every node
        visited, with "visited" and "truncated" counters.
    """
    _log_request("get_content_structure", root=root, max_depth=max_depth, max_nodes=max_nodes)
    try:
        async with CmsClient.from_env() as client:
            result = await structure.snapshot(
                client,
                root=root,
                max_depth=max_depth,
                max_nodes=max_nodes,
                root_resolver=client,
                default_root=client.settings.default_root,
            )
    except AskError as exc:
        return _error("get_content_structure", exc)
    return _log_response("get_content_structure", result.to_dict())


if __name__ == "__main__":
    mcp.run()
