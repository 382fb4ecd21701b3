# =============================================================================
# core/errors.py  —  Failures the ask resolver can raise
# =============================================================================
#
# A clarification ("which parent did you mean?") is NOT in this file: it is a
# normal result (core.models.ClarificationResult).  Everything here aborts
# the ask.
# =============================================================================

from typing import Any, Optional


class AskError(Exception):
    """Base class for every failure surfaced to the tool caller."""


class ValidationError(AskError):
    """The ask (or one of its bounds) is missing or invalid."""


class NoCandidateError(AskError):
    """The CMS returned no content types, so nothing can be classified."""


class CmsSettingsError(AskError):
    """CMS connection settings are missing from the environment."""


class UpstreamError(AskError):
    """A CMS call failed at the transport level or returned non-success.

    status and body are kept for logging; the message shown to the caller
    stays generic.
    """

    def __init__(self, message: str, status: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status = status
        self.body = body
