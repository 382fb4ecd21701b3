# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL inference logic of the CMS ask resolver:
# text signals, content-type scoring, tree traversal, parent proposals and
# the orchestrator that sequences them.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP.  The only network-facing module
#   is core/cms_client.py (httpx); everything else works on plain dataclasses
#   and can be exercised with in-memory fakes.
# =============================================================================
