"""
Output: saving links and extracted articles.
"""

from .saver import save_article, save_bookmark, short_hash, slugify

__all__ = [
    "save_article",
    "save_bookmark",
    "short_hash",
    "slugify",
]
