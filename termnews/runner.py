"""
Synchronous entry points used by the command-line interface.

Each call opens one Fetcher (one httpx client) for its duration and drives
the async core with asyncio.run:
- refresh_group: fetch and merge every feed of a group
- read_url: fetch one article page and extract its readable content
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from .config import AppConfig, FetchConfig
from .core.types import AggregatedFeed, FeedGroup
from .feeds.aggregator import FeedAggregator
from .fetch.fetcher import Fetcher
from .reader.service import ReadResult, read_article


def refresh_group(
    group: FeedGroup,
    cfg: AppConfig,
    logger: logging.Logger | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AggregatedFeed:
    """Refresh a feed group.

    Args:
        group: Group to refresh
        cfg: Application configuration
        logger: Optional logger passed to the aggregator
        transport: Optional httpx transport (tests use httpx.MockTransport)

    Raises:
        AllSourcesFailed: If no source of the group could be fetched and parsed
    """
    return asyncio.run(_refresh_group_async(group, cfg, logger, transport))


async def _refresh_group_async(
    group: FeedGroup,
    cfg: AppConfig,
    logger: logging.Logger | None,
    transport: httpx.AsyncBaseTransport | None,
) -> AggregatedFeed:
    async with _build_fetcher(cfg.fetch, transport) as fetcher:
        aggregator = FeedAggregator(
            fetcher.fetch_bytes,
            max_items_per_source=cfg.fetch.max_items_per_source,
            title_similarity_threshold=cfg.dedup.title_similarity_threshold,
            logger=logger,
        )
        return await aggregator.refresh(group)


def read_url(
    url: str,
    cfg: AppConfig,
    logger: logging.Logger | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    raw_fallback: bool | None = None,
) -> ReadResult:
    """Fetch an article and extract its readable content.

    Args:
        url: Article URL
        cfg: Application configuration
        logger: Optional logger for extraction events
        transport: Optional httpx transport
        raw_fallback: Override cfg.extract.raw_fallback

    Raises:
        FetchError, UnsupportedContent, ParseFailed, NoContentFound
    """
    if raw_fallback is None:
        raw_fallback = cfg.extract.raw_fallback
    return asyncio.run(_read_url_async(url, cfg, logger, transport, raw_fallback))


async def _read_url_async(
    url: str,
    cfg: AppConfig,
    logger: logging.Logger | None,
    transport: httpx.AsyncBaseTransport | None,
    raw_fallback: bool,
) -> ReadResult:
    async with _build_fetcher(cfg.fetch, transport) as fetcher:
        return await read_article(
            url,
            fetcher,
            weights=cfg.extract.to_weights(),
            raw_fallback=raw_fallback,
            logger=logger,
        )


def _build_fetcher(cfg: FetchConfig, transport: httpx.AsyncBaseTransport | None) -> Fetcher:
    return Fetcher(
        timeout=cfg.timeout_seconds,
        retries=cfg.retries,
        user_agent=cfg.user_agent,
        trust_env=cfg.trust_env,
        transport=transport,
    )
