# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool wrappers.
#
# Each tool:
#   1. Builds a CmsClient from the environment
#   2. Calls into core/
#   3. Converts dataclasses to dicts for JSON
#   4. Reports core failures as {"error": ...} instead of raising
#
# Tools hold no logic of their own beyond that wiring.
# =============================================================================
