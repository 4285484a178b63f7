"""
Feed parsing and multi-source aggregation.
"""

from .aggregator import FeedAggregator
from .parser import parse_feed_document, parse_timestamp

__all__ = [
    "FeedAggregator",
    "parse_feed_document",
    "parse_timestamp",
]
