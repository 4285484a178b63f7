"""
termnews - a terminal news reader.

Aggregates RSS/Atom feeds into named groups (merged, deduplicated, newest
first) and extracts the readable body of article pages.

Main entry point is the CLI via the `termnews` command.

Example:
    $ termnews refresh "Tech Hub" --limit 20
    $ termnews read https://example.com/story
"""

__all__ = [
    "__version__",
    "AggregatedFeed",
    "ExtractedArticle",
    "FeedAggregator",
    "FeedGroup",
    "FeedItem",
    "extract",
]
__version__ = "0.1.0"

from .core.types import AggregatedFeed, ExtractedArticle, FeedGroup, FeedItem
from .feeds.aggregator import FeedAggregator
from .reader.extractor import extract
