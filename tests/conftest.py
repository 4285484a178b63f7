"""Shared test fixtures for termnews tests."""

from __future__ import annotations

import pytest

from termnews.core.errors import FetchError


SAMPLE_RSS_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Test Feed</title>
    <link>https://example.com</link>
    <description>A test RSS feed</description>
    <item>
      <title>First Article</title>
      <link>https://example.com/article-1</link>
      <guid>article-1</guid>
      <description>Description of the first article</description>
      <pubDate>Fri, 13 Feb 2026 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Second Article</title>
      <link>https://example.com/article-2</link>
      <guid>article-2</guid>
      <description>Description of the second article</description>
      <pubDate>Fri, 13 Feb 2026 09:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>"""

SAMPLE_ATOM_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Test Atom Feed</title>
  <link href="https://example.com"/>
  <subtitle>A test Atom feed</subtitle>
  <id>urn:uuid:feed</id>
  <updated>2026-02-13T11:00:00Z</updated>
  <entry>
    <title>Atom Entry 1</title>
    <link href="https://example.org/entry-1"/>
    <id>urn:uuid:entry-1</id>
    <summary>Summary of entry 1</summary>
    <updated>2026-02-13T11:00:00Z</updated>
  </entry>
</feed>"""

SAMPLE_MALFORMED_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Malformed Feed</title>
    <link>https://example.com</link>
    <item>
      <title>Good Item</title>
      <guid>good-item</guid>
    </item>
    <item>
      <title>Bad Item</title>
      <!-- Missing closing tags intentionally -->
"""

SAMPLE_NOT_A_FEED_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<html>
  <body>This is not a feed</body>
</html>"""

PROSE = (
    "The city council voted on Tuesday to expand the riverside park, "
    "adding new walking paths, a community garden and a small library. "
    "Residents had campaigned for the project for almost a decade, "
    "and the first phase is expected to open next spring."
)

SAMPLE_ARTICLE_HTML = f"""<!DOCTYPE html>
<html>
<head><title>Park Expansion Approved</title></head>
<body>
  <nav><a href="/">Home</a> <a href="/world">World</a> <a href="/sport">Sport</a></nav>
  <div class="content">
    <article>
      <h1>Park Expansion Approved</h1>
      <p>{PROSE}</p>
      <p>Funding comes from a regional grant, with the remainder covered by the city budget over three years.</p>
      <p>Construction crews will begin clearing the site in March, weather permitting, officials said.</p>
    </article>
  </div>
  <footer>Copyright 2026 Example News. All rights reserved.</footer>
</body>
</html>""".encode()


def make_rss(title: str, items: list[tuple[str, str, str | None]]) -> bytes:
    """Build an RSS 2.0 document from (title, link, pubDate) tuples."""
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<rss version="2.0"><channel>',
        f"<title>{title}</title>",
        "<link>https://example.com</link>",
        "<description>generated</description>",
    ]
    for item_title, link, pub_date in items:
        parts.append("<item>")
        parts.append(f"<title>{item_title}</title>")
        parts.append(f"<link>{link}</link>")
        if pub_date:
            parts.append(f"<pubDate>{pub_date}</pubDate>")
        parts.append("</item>")
    parts.append("</channel></rss>")
    return "\n".join(parts).encode()


class FakeFetch:
    """Async fetch stub serving canned bodies; unknown URLs raise FetchError."""

    def __init__(self, bodies: dict[str, bytes | Exception]):
        self.bodies = bodies
        self.calls: list[str] = []

    async def __call__(self, url: str) -> bytes:
        self.calls.append(url)
        body = self.bodies.get(url)
        if body is None:
            raise FetchError(url, "HTTP 404", 404)
        if isinstance(body, Exception):
            raise body
        return body


@pytest.fixture
def sample_rss_xml():
    """Sample valid RSS 2.0 XML."""
    return SAMPLE_RSS_XML


@pytest.fixture
def sample_atom_xml():
    """Sample valid Atom XML."""
    return SAMPLE_ATOM_XML


@pytest.fixture
def sample_malformed_xml():
    """Sample malformed RSS XML."""
    return SAMPLE_MALFORMED_XML


@pytest.fixture
def sample_not_a_feed_xml():
    """Sample XML that is not a feed."""
    return SAMPLE_NOT_A_FEED_XML


@pytest.fixture
def sample_article_html():
    """Article page with navigation, a content wrapper and a footer."""
    return SAMPLE_ARTICLE_HTML


@pytest.fixture
def prose():
    return PROSE
