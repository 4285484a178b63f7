"""
Core data types for termnews.

This module defines the fundamental data structures shared by the feed
aggregation pipeline and the reader-mode extractor:
- FeedGroup: A named set of feed source URLs
- FeedItem: One entry parsed from an RSS/Atom document
- SourceFailure: Why a single source contributed no items
- AggregatedFeed: Merged, deduplicated, ordered items for one group
- ExtractedArticle: Readable content extracted from an article page
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator
from urllib.parse import urlsplit, urlunsplit


@dataclass(frozen=True)
class FeedGroup:
    """A user-defined topical group of feeds.

    Attributes:
        name: Display name of the group (e.g., "Tech Hub")
        source_urls: Feed URLs in configured order; earlier sources win on dedup
    """
    name: str
    source_urls: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "source_urls", tuple(self.source_urls))


@dataclass(frozen=True)
class FeedItem:
    """A single entry from a feed.

    Attributes:
        title: The item headline
        link: URL of the full article, may be empty
        summary: Optional description/summary from the feed
        published_at: Timezone-aware UTC timestamp, or None when absent/unparseable
        source_feed: Feed title (or URL) the item came from
    """
    title: str
    link: str
    summary: str | None = None
    published_at: datetime | None = None
    source_feed: str = ""

    @property
    def dedup_key(self) -> str:
        """Normalized link, falling back to the normalized title."""
        key = normalize_link(self.link)
        if key:
            return key
        return normalize_title(self.title)


@dataclass(frozen=True)
class SourceFailure:
    """A per-source failure recorded during a refresh.

    Attributes:
        url: The source URL that failed
        error: Human readable error message
        kind: "fetch" for network failures, "parse" for malformed documents
    """
    url: str
    error: str
    kind: str = "fetch"


@dataclass
class AggregatedFeed:
    """Items of one group, newest first, with at most one item per dedup key.

    Attributes:
        group: Name of the group that was refreshed
        items: Ordered items
        failures: Sources that contributed nothing during this refresh
    """
    group: str
    items: list[FeedItem] = field(default_factory=list)
    failures: list[SourceFailure] = field(default_factory=list)

    def __iter__(self) -> Iterator[FeedItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def is_partial(self) -> bool:
        return bool(self.failures)


@dataclass(frozen=True)
class ExtractedArticle:
    """Readable article content produced by the reader-mode extractor.

    Attributes:
        title: Document title, first heading, or empty string
        body_text: Plain text with paragraphs separated by blank lines
        source_url: The URL the HTML was fetched from
    """
    title: str
    body_text: str
    source_url: str


def normalize_link(link: str | None) -> str:
    """Normalize a link for duplicate detection.

    Scheme and host are lowercased, the fragment is dropped and a trailing
    slash on the path is removed. The query string is kept as-is.

    Examples:
        >>> normalize_link(" HTTPS://Example.com/a/#top ")
        'https://example.com/a'
    """
    if not link:
        return ""
    link = link.strip()
    if not link:
        return ""
    try:
        parts = urlsplit(link)
    except ValueError:
        return link
    path = parts.path.rstrip("/")
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, parts.query, ""))


def normalize_title(title: str | None) -> str:
    if not title:
        return ""
    return " ".join(title.split()).casefold()
