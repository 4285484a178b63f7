"""
Saving links and articles to disk as Markdown.

Links are appended as bullets to a single reading-list file. Extracted
articles get one file each, named by a title slug plus a short URL hash so
two articles with the same headline do not collide.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
import re

from ..core.types import ExtractedArticle


def slugify(text: str) -> str:
    """Convert text to URL-safe slug.

    Args:
        text: The text to slugify

    Returns:
        A lowercase, hyphenated slug limited to 50 characters
    """
    slug = text.lower()
    slug = re.sub(r"[^a-z0-9]+", "-", slug)
    slug = slug.strip("-")
    # Fallback for empty slug (e.g., empty title or only special characters)
    if not slug:
        slug = "untitled"
    return slug[:50]


def short_hash(url: str) -> str:
    """Return first 5 characters of MD5 hash of URL."""
    return hashlib.md5(url.encode()).hexdigest()[:5]


def save_bookmark(title: str, url: str, path: Path) -> str:
    """Append a Markdown link to the reading-list file.

    Args:
        title: Link text
        url: Link target; must not be empty
        path: Reading-list file, created if missing

    Returns:
        Status message for the user

    Raises:
        ValueError: If url is empty
    """
    if not url:
        raise ValueError("No URL to save")
    path.parent.mkdir(parents=True, exist_ok=True)
    label = " ".join(title.split()).replace("[", "(").replace("]", ")") or url
    with path.open("a", encoding="utf-8") as handle:
        handle.write(f"- [{label}]({url})\n")
    return f'Saved: "{label}"'


def save_article(article: ExtractedArticle, directory: Path) -> Path:
    """Write an extracted article to <slug>-<hash>.md and return the path."""
    directory.mkdir(parents=True, exist_ok=True)
    title = article.title or article.source_url
    path = directory / f"{slugify(title)}-{short_hash(article.source_url)}.md"
    lines = [
        f"# {title}",
        "",
        f"Source: <{article.source_url}>",
        "",
        article.body_text,
        "",
    ]
    path.write_text("\n".join(lines), encoding="utf-8")
    return path
