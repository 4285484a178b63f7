"""RSS/Atom feed document parsing using feedparser."""

from __future__ import annotations

import calendar
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
import io
from time import struct_time
from xml.sax import SAXException

import feedparser

from ..core.errors import FeedParseError
from ..core.types import FeedItem


DEFAULT_TITLE = "No Title"

# feedparser reports the detected dialect in `version`, derived from the root
# element: <rss> -> rss20/rss092/..., <rdf:RDF> -> rss10, <feed> -> atom10/atom03.
SUPPORTED_PREFIXES = ("rss", "atom")


def parse_feed_document(
    content: bytes,
    source_url: str,
    max_items: int | None = None,
) -> list[FeedItem]:
    """Parse raw feed bytes into FeedItems.

    Args:
        content: The raw response body
        source_url: URL the document was fetched from (for provenance and errors)
        max_items: Keep only the first N entries in document order

    Returns:
        Items in document order. Entries with neither a title nor a link are skipped.

    Raises:
        FeedParseError: If the document is not a recognizable RSS or Atom feed.
    """
    if not content or not content.strip():
        raise FeedParseError(source_url, "Empty feed document")

    # A stream keeps feedparser from treating the payload as a URL or file name.
    parsed = feedparser.parse(io.BytesIO(content))
    version = parsed.get("version") or ""

    # feedparser retries broken XML with its loose parser and still reports a
    # version; a syntax error in the document is a failure on its own.
    bozo_exception = parsed.get("bozo_exception")
    if isinstance(bozo_exception, SAXException):
        raise FeedParseError(source_url, f"Malformed feed document: {bozo_exception}")

    if not version.startswith(SUPPORTED_PREFIXES):
        detail = f" ({version})" if version else ""
        raise FeedParseError(source_url, f"Not an RSS or Atom document{detail}")

    source_feed = (parsed.feed.get("title") or "").strip() or source_url
    entries = parsed.entries if max_items is None else parsed.entries[:max_items]

    items: list[FeedItem] = []
    for entry in entries:
        title = (entry.get("title") or "").strip()
        link = (entry.get("link") or "").strip()
        if not title and not link:
            continue
        items.append(
            FeedItem(
                title=title or DEFAULT_TITLE,
                link=link,
                summary=entry.get("summary") or entry.get("description") or None,
                published_at=_entry_timestamp(entry),
                source_feed=source_feed,
            )
        )
    return items


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an RFC 2822 (RSS) or ISO 8601 (Atom) timestamp.

    Naive values are assumed to be UTC. Returns None instead of raising when
    the value cannot be parsed.

    Examples:
        >>> parse_timestamp("Thu, 13 Feb 2026 10:00:00 GMT")
        datetime.datetime(2026, 2, 13, 10, 0, tzinfo=datetime.timezone.utc)
        >>> parse_timestamp("2026-02-13T10:00:00Z")
        datetime.datetime(2026, 2, 13, 10, 0, tzinfo=datetime.timezone.utc)
    """
    if not value or not value.strip():
        return None
    value = value.strip()

    parsed: datetime | None = None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        parsed = None

    if parsed is None:
        iso = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
        try:
            parsed = datetime.fromisoformat(iso)
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _entry_timestamp(entry) -> datetime | None:
    """Pick the publication timestamp of a feedparser entry.

    feedparser already normalizes RFC 2822 and ISO 8601 dates into UTC
    struct_time values; the raw strings are only consulted when it could not.
    """
    for field in ("published_parsed", "updated_parsed", "created_parsed"):
        time_struct = entry.get(field)
        if isinstance(time_struct, struct_time):
            try:
                return datetime.fromtimestamp(calendar.timegm(time_struct), tz=timezone.utc)
            except (ValueError, OverflowError, OSError):
                continue
    for field in ("published", "updated", "created"):
        parsed = parse_timestamp(entry.get(field))
        if parsed is not None:
            return parsed
    return None
