"""
Exception hierarchy for termnews.

Network and per-source parse failures are recoverable within a refresh;
AllSourcesFailed and the ExtractionError family are raised to the caller,
which decides how to surface them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import SourceFailure


class TermNewsError(Exception):
    """Base class for all termnews errors."""


class FetchError(TermNewsError):
    """Raised when a URL cannot be fetched (network error, timeout, HTTP error)."""

    def __init__(self, url: str, message: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class FeedParseError(TermNewsError):
    """Raised when a document is not a recognizable RSS or Atom feed."""

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


class AggregationError(TermNewsError):
    """Base class for errors that abort a whole refresh."""


class AllSourcesFailed(AggregationError):
    """Every source URL of a group failed to fetch or parse."""

    def __init__(self, group: str, failures: list[SourceFailure]):
        super().__init__(f"All {len(failures)} sources failed for group '{group}'")
        self.group = group
        self.failures = list(failures)


class ExtractionError(TermNewsError):
    """Base class for reader-mode extraction failures."""

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


class ParseFailed(ExtractionError):
    """The payload is empty or not HTML."""


class NoContentFound(ExtractionError):
    """No block qualified as the main content of the page."""


class UnsupportedContent(ExtractionError):
    """The response is a media file (PDF, image) rather than a web page."""

    def __init__(self, url: str, content_type: str):
        super().__init__(url, f"Unsupported content type: {content_type}")
        self.content_type = content_type


class ConfigError(TermNewsError):
    """Raised when the configuration file cannot be loaded."""
