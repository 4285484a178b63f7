"""
Core domain models and business logic.

This package contains data types, the error hierarchy and the merge rules
that are independent of any network or presentation concern.
"""

from .types import (
    AggregatedFeed,
    ExtractedArticle,
    FeedGroup,
    FeedItem,
    SourceFailure,
    normalize_link,
    normalize_title,
)
from .errors import (
    AggregationError,
    AllSourcesFailed,
    ConfigError,
    ExtractionError,
    FeedParseError,
    FetchError,
    NoContentFound,
    ParseFailed,
    TermNewsError,
    UnsupportedContent,
)
from .dedup import dedup_items, sort_items

__all__ = [
    "AggregatedFeed",
    "ExtractedArticle",
    "FeedGroup",
    "FeedItem",
    "SourceFailure",
    "normalize_link",
    "normalize_title",
    "AggregationError",
    "AllSourcesFailed",
    "ConfigError",
    "ExtractionError",
    "FeedParseError",
    "FetchError",
    "NoContentFound",
    "ParseFailed",
    "TermNewsError",
    "UnsupportedContent",
    "dedup_items",
    "sort_items",
]
