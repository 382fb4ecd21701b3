# =============================================================================
# core/config.py  —  Matcher constants and CMS connection settings
# =============================================================================
#
# TWO KINDS OF CONFIGURATION LIVE HERE:
#
#   1. MatcherConfig — every regular expression and score the heuristics
#      use.  It is a frozen value passed into the extractors and scorers;
#      nothing reads a module global at match time.  Tests that want a
#      different pattern build a copy with dataclasses.replace().
#
#   2. CmsSettings — where the CMS lives and how to authenticate.  Read from
#      environment variables (a .env file is loaded by the entry points via
#      python-dotenv before this runs).
# =============================================================================

import os
import re
from dataclasses import dataclass
from typing import Optional

from core.errors import CmsSettingsError


_GUID = r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"

# A run of digits that is not the first group of a GUID ("12345678-...").
_DIGITS = r"(\d+)(?![\w-])"


def icase(pattern: str) -> re.Pattern:
    return re.compile(pattern, re.IGNORECASE)


@dataclass(frozen=True)
class MatcherConfig:
    """Patterns and weights shared by the extractors and scorers."""

    # --- Text signals (core/text_signals.py) ---
    quoted: re.Pattern = re.compile(r"([\"'])(.*?)\1", re.DOTALL)
    guid: re.Pattern = icase(rf"\b{_GUID}\b")
    parent_reference: re.Pattern = icase(r"\bparent\s*(?:link|id)?\s*[:#]?\s*(\d{1,10})(?![\w-])")
    set_assignment: re.Pattern = icase(r"\bset\s+([a-z0-9_][a-z0-9_ ]*?)\s+to\s+([\"'])(.*?)\2")
    title_property: re.Pattern = icase(r"heading|title")
    move_keyword: re.Pattern = icase(r"\bmove\b")
    move_source_id: re.Pattern = icase(rf"\bmove\s+(?:content\s+)?(?:id\s+)?{_DIGITS}")
    move_source_guid: re.Pattern = icase(rf"\bmove\s+(?:content\s+)?(?:id\s+)?({_GUID})\b")
    move_destination_id: re.Pattern = icase(rf"\b(?:under|to)\s+(?:parent\s*(?:link|id)?\s*)?(?:id\s+)?{_DIGITS}")
    move_destination_guid: re.Pattern = icase(rf"\b(?:under|to)\s+(?:parent\s*(?:link|id)?\s*)?(?:id\s+)?({_GUID})\b")

    # --- Content-type scoring (core/content_types.py) ---
    display_name_weight: int = 3
    property_name_weight: int = 1
    keyword_weight: int = 2
    # ask token -> pattern the type's model name must match to earn the bonus
    type_keywords: tuple = (
        ("block", icase(r"block")),
        ("page", icase(r"page")),
        ("media", icase(r"media")),
    )

    # --- Parent proposals (core/parents.py) ---
    block_type: re.Pattern = icase(r"block")
    block_parent: re.Pattern = icase(r"block|widgets|components|assets|global")
    container_parent: re.Pattern = icase(r"folder|container|library")
    block_parent_score: int = 3
    container_parent_score: int = 1
    max_proposals: int = 5


DEFAULT_MATCHERS = MatcherConfig()


# =============================================================================
# CMS settings
# =============================================================================
API_ROOT_PATH = "/api/episerver/v3.0"


@dataclass(frozen=True)
class CmsSettings:
    """Connection details for the content management API."""

    base_url: str
    basic_username: Optional[str] = None
    basic_password: Optional[str] = None
    access_token: Optional[str] = None
    root_redirect_path: str = "/"
    default_root: str = "1"
    timeout_seconds: float = 30.0

    @property
    def api_root(self) -> str:
        """<base_url>/api/episerver/v3.0 with duplicate slashes collapsed."""
        root = f"{self.base_url.rstrip('/')}{API_ROOT_PATH}"
        return re.sub(r"(?<!:)/{2,}", "/", root)

    @classmethod
    def from_env(cls) -> "CmsSettings":
        base_url = os.environ.get("CMS_BASE_URL", "").strip()
        if not base_url:
            raise CmsSettingsError(
                "CMS API settings are missing. Please configure CMS_BASE_URL."
            )
        return cls(
            base_url=base_url,
            basic_username=os.environ.get("CMS_BASIC_USERNAME") or None,
            basic_password=os.environ.get("CMS_BASIC_PASSWORD") or None,
            access_token=os.environ.get("CMS_ACCESS_TOKEN") or None,
            root_redirect_path=os.environ.get("CMS_ROOT_REDIRECT_PATH", "/"),
            default_root=os.environ.get("CMS_DEFAULT_ROOT", "1"),
            timeout_seconds=float(os.environ.get("CMS_TIMEOUT_SECONDS", "30")),
        )
