"""
Multi-source feed aggregation.

A refresh fetches every source of a FeedGroup concurrently, parses each
document independently, and merges the results:
1. Concatenate items in source order (the configured URL order)
2. Drop duplicates, keeping the first occurrence
3. Stable-sort newest first, undated items last

A source that fails to fetch or parse contributes nothing and is recorded
as a SourceFailure; the refresh only fails when every source fails.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from ..core.dedup import dedup_items, sort_items
from ..core.errors import AllSourcesFailed, FeedParseError, FetchError
from ..core.types import AggregatedFeed, FeedGroup, FeedItem, SourceFailure
from ..utils.logging import log_event
from .parser import parse_feed_document


FetchBytes = Callable[[str], Awaitable[bytes]]


class FeedAggregator:
    """Builds an AggregatedFeed for a FeedGroup.

    The aggregator holds no state between refreshes; every call rebuilds the
    result from the current feed contents.

    Attributes:
        fetch: Async callable returning the raw body of a URL, raising FetchError
        max_items_per_source: Optional cap on entries taken from each feed
        title_similarity_threshold: Optional fuzzy title dedup threshold (0-100)
        logger: Optional logger; nothing is logged when None
    """

    def __init__(
        self,
        fetch: FetchBytes,
        max_items_per_source: int | None = None,
        title_similarity_threshold: int | None = None,
        logger: logging.Logger | None = None,
    ):
        self.fetch = fetch
        self.max_items_per_source = max_items_per_source
        self.title_similarity_threshold = title_similarity_threshold
        self.logger = logger

    async def refresh(self, group: FeedGroup) -> AggregatedFeed:
        """Fetch, parse and merge every source of a group.

        Args:
            group: The group to refresh; it is only read

        Returns:
            AggregatedFeed with merged items and any per-source failures

        Raises:
            AllSourcesFailed: If no source produced a parseable document
        """
        urls = list(group.source_urls)
        if not urls:
            return AggregatedFeed(group=group.name)

        tasks = [asyncio.create_task(self._load_source(url)) for url in urls]
        # gather keeps results aligned with source order regardless of completion order
        outcomes = await asyncio.gather(*tasks)

        collected: list[FeedItem] = []
        failures: list[SourceFailure] = []
        succeeded = 0
        for outcome in outcomes:
            if isinstance(outcome, SourceFailure):
                failures.append(outcome)
                continue
            succeeded += 1
            collected.extend(outcome)

        if succeeded == 0:
            log_event(
                self.logger,
                "All sources failed",
                level=logging.ERROR,
                event="refresh_failed",
                group=group.name,
                failures=len(failures),
            )
            raise AllSourcesFailed(group.name, failures)

        merged = dedup_items(collected, self.title_similarity_threshold)
        items = sort_items(merged)
        log_event(
            self.logger,
            "Refresh done",
            event="refresh_done",
            group=group.name,
            sources=len(urls),
            failed=len(failures),
            fetched=len(collected),
            items=len(items),
        )
        return AggregatedFeed(group=group.name, items=items, failures=failures)

    async def _load_source(self, url: str) -> list[FeedItem] | SourceFailure:
        """Fetch and parse one source; any failure becomes a SourceFailure."""
        try:
            content = await self.fetch(url)
        except (FetchError, asyncio.TimeoutError) as exc:
            return self._failure(url, str(exc) or type(exc).__name__, "fetch")
        except Exception as exc:  # noqa: BLE001
            return self._failure(url, f"{type(exc).__name__}: {exc}", "fetch")

        try:
            return parse_feed_document(content, url, max_items=self.max_items_per_source)
        except FeedParseError as exc:
            return self._failure(url, str(exc), "parse")
        except Exception as exc:  # noqa: BLE001
            return self._failure(url, f"{type(exc).__name__}: {exc}", "parse")

    def _failure(self, url: str, message: str, kind: str) -> SourceFailure:
        log_event(
            self.logger,
            "Fetch failed" if kind == "fetch" else "Parse failed",
            level=logging.WARNING,
            event=f"{kind}_failed",
            url=url,
            error=message,
        )
        return SourceFailure(url=url, error=message, kind=kind)
