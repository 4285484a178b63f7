"""
Feed item deduplication and ordering.

Duplicates are removed by dedup key (normalized link, or normalized title
when the link is empty). Optionally, near-identical titles are also treated
as duplicates using rapidfuzz, which catches the same story syndicated under
different URLs.
"""

from __future__ import annotations

from datetime import timezone
from typing import Iterable

from rapidfuzz import fuzz

from .types import FeedItem, normalize_title


def dedup_items(
    items: Iterable[FeedItem],
    title_similarity_threshold: int | None = None,
) -> list[FeedItem]:
    """Remove duplicate items, keeping the first occurrence.

    Args:
        items: Items in source order (earlier sources first)
        title_similarity_threshold: Optional similarity (0-100) above which two
            titles are considered the same story. None disables fuzzy matching.

    Returns:
        Deduplicated list of items, preserving input order
    """
    seen_keys: set[str] = set()
    kept: list[FeedItem] = []
    titles: list[str] = []

    for item in items:
        key = item.dedup_key
        if key in seen_keys:
            continue
        title = normalize_title(item.title)
        if title_similarity_threshold is not None and _is_similar_title(
            title, titles, title_similarity_threshold
        ):
            continue
        seen_keys.add(key)
        titles.append(title)
        kept.append(item)

    return kept


def sort_items(items: Iterable[FeedItem]) -> list[FeedItem]:
    """Order items newest first; undated items go last in their original order.

    Python's sort is stable, so items with equal timestamps (and all undated
    items) keep their relative fetch order.
    """
    return sorted(items, key=_sort_key)


def _sort_key(item: FeedItem) -> tuple[bool, float]:
    if item.published_at is None:
        return (True, 0.0)
    published = item.published_at
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    return (False, -published.timestamp())


def _is_similar_title(title: str, titles: list[str], threshold: int) -> bool:
    """Check if a title is similar to any title in the given list.

    Uses rapidfuzz's ratio (normalized Levenshtein similarity, 0-100).
    """
    if not title:
        return False
    for existing in titles:
        if existing and fuzz.ratio(title, existing) >= threshold:
            return True
    return False
