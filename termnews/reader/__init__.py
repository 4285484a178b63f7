"""
Reader mode: article fetching and main-content extraction.
"""

from .extractor import DEFAULT_WEIGHTS, ScoringWeights, extract
from .service import ReadResult, extract_fetched, fallback_text, read_article
from .tree import ContentNode, ContentTree

__all__ = [
    "DEFAULT_WEIGHTS",
    "ScoringWeights",
    "extract",
    "extract_fetched",
    "fallback_text",
    "ReadResult",
    "read_article",
    "ContentNode",
    "ContentTree",
]
