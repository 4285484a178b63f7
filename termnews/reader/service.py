"""
Article reading: fetch a page, then extract its readable content.

Media responses (PDFs, images) are rejected before extraction. When the
extractor finds no content and the raw fallback is enabled, the page's
plain text is returned instead so the reader still has something to show.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging

from bs4 import BeautifulSoup

from ..core.errors import NoContentFound, ParseFailed, UnsupportedContent
from ..core.types import ExtractedArticle
from ..fetch.fetcher import FetchResult, Fetcher
from ..utils.logging import log_event
from .extractor import ScoringWeights, extract


MEDIA_TYPE_PREFIXES = ("application/pdf", "image/", "video/", "audio/")


@dataclass
class ReadResult:
    """Outcome of reading one article.

    Either article is populated (success), or raw_text and error are
    (extraction failed and the raw fallback was used).

    Attributes:
        url: The requested URL
        article: Extracted content, or None when extraction failed
        raw_text: Plain text dump of the page when falling back
        error: Why extraction failed, None on success
    """
    url: str
    article: ExtractedArticle | None
    raw_text: str | None = None
    error: str | None = None


def extract_fetched(result: FetchResult, weights: ScoringWeights | None = None) -> ExtractedArticle:
    """Extract an article from a completed fetch.

    Raises:
        FetchError: If the fetch itself failed
        UnsupportedContent: If the response is a media file
        ParseFailed, NoContentFound: If extraction fails
    """
    content = result.unwrap()
    content_type = (result.content_type or "").lower()
    if content_type.startswith(MEDIA_TYPE_PREFIXES):
        raise UnsupportedContent(result.url, content_type)
    return extract(content, result.final_url or result.url, weights)


async def read_article(
    url: str,
    fetcher: Fetcher,
    weights: ScoringWeights | None = None,
    raw_fallback: bool = False,
    logger: logging.Logger | None = None,
) -> ReadResult:
    """Fetch an article page and extract its main content.

    Extraction runs in a worker thread so concurrent reads do not block the
    event loop.

    Args:
        url: Article URL (usually a FeedItem link)
        fetcher: Open Fetcher used for the request
        weights: Optional scoring constants for the extractor
        raw_fallback: Return the page's plain text instead of raising when
            no content is found
        logger: Optional logger for extraction events

    Returns:
        ReadResult; its article's source_url is the final URL after redirects

    Raises:
        FetchError: If the page cannot be fetched
        UnsupportedContent: If the response is a media file
        ParseFailed, NoContentFound: If extraction fails and raw_fallback is off
    """
    result = await fetcher.fetch(url)
    try:
        article = await asyncio.to_thread(extract_fetched, result, weights)
    except (ParseFailed, NoContentFound) as exc:
        log_event(
            logger,
            "Extract failed",
            level=logging.WARNING,
            event="extract_failed",
            url=url,
            error=str(exc),
            raw_fallback=raw_fallback,
        )
        if not raw_fallback:
            raise
        return ReadResult(url=url, article=None, raw_text=fallback_text(result.content), error=str(exc))
    except UnsupportedContent as exc:
        log_event(logger, "Unsupported content", event="unsupported_content", url=url, content_type=exc.content_type)
        raise

    log_event(
        logger,
        "Article extracted",
        event="extract_done",
        url=article.source_url,
        title=article.title,
        chars=len(article.body_text),
    )
    return ReadResult(url=url, article=article)


def fallback_text(html: bytes | str | None) -> str | None:
    """Extract plain text from HTML using BeautifulSoup.

    This is the most basic extraction method: it removes script/style
    tags and keeps every non-empty line of text. Used as a last resort when
    reader-mode extraction finds no content.

    Args:
        html: The HTML content to extract from

    Returns:
        Extracted plain text with non-empty lines only, or None if empty
    """
    if not html:
        return None
    soup = BeautifulSoup(html, "html.parser")
    # Remove non-content tags
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    text = soup.get_text(separator="\n")
    # Clean up: remove empty lines and strip whitespace
    cleaned = "\n".join([line.strip() for line in text.splitlines() if line.strip()])
    return cleaned if cleaned else None
