"""
Network fetching.

This package handles raw HTTP fetching for feed documents and article pages.
"""

from .fetcher import DEFAULT_USER_AGENT, FetchResult, Fetcher, fetch_url

__all__ = [
    "DEFAULT_USER_AGENT",
    "FetchResult",
    "Fetcher",
    "fetch_url",
]
