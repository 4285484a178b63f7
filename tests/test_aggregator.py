"""Tests for multi-source feed aggregation."""

from __future__ import annotations

import asyncio
import logging

import httpx
import pytest

from conftest import SAMPLE_ATOM_XML, SAMPLE_MALFORMED_XML, SAMPLE_RSS_XML, FakeFetch, make_rss
from termnews.config import AppConfig
from termnews.core.errors import AllSourcesFailed
from termnews.core.types import FeedGroup
from termnews.feeds.aggregator import FeedAggregator
from termnews.runner import refresh_group


def _refresh(fetch, urls, **kwargs):
    aggregator = FeedAggregator(fetch, **kwargs)
    return asyncio.run(aggregator.refresh(FeedGroup(name="Test", source_urls=urls)))


def test_merges_sources_newest_first():
    fetch = FakeFetch({
        "https://a.example/rss": SAMPLE_RSS_XML,
        "https://b.example/atom": SAMPLE_ATOM_XML,
    })

    feed = _refresh(fetch, ["https://a.example/rss", "https://b.example/atom"])

    assert [item.title for item in feed] == ["Atom Entry 1", "First Article", "Second Article"]
    assert feed.group == "Test"
    assert feed.failures == []
    assert not feed.is_partial
    assert sorted(fetch.calls) == ["https://a.example/rss", "https://b.example/atom"]


def test_duplicate_link_keeps_first_source():
    shared = "https://news.example/shared-story"
    first = make_rss("First Source", [("Shared story", shared, "Fri, 13 Feb 2026 10:00:00 GMT")])
    second = make_rss("Second Source", [("Shared story (syndicated)", shared + "/", "Fri, 13 Feb 2026 12:00:00 GMT")])
    fetch = FakeFetch({"https://one.example/rss": first, "https://two.example/rss": second})

    feed = _refresh(fetch, ["https://one.example/rss", "https://two.example/rss"])

    assert len(feed) == 1
    assert feed.items[0].source_feed == "First Source"
    assert feed.items[0].title == "Shared story"


def test_undated_items_follow_dated_in_fetch_order():
    first = make_rss("A", [("a-undated", "https://a.example/1", None), ("a-dated", "https://a.example/2", "Fri, 13 Feb 2026 08:00:00 GMT")])
    second = make_rss("B", [("b-undated", "https://b.example/1", None)])
    fetch = FakeFetch({"https://a.example/rss": first, "https://b.example/rss": second})

    feed = _refresh(fetch, ["https://a.example/rss", "https://b.example/rss"])

    assert [item.title for item in feed] == ["a-dated", "a-undated", "b-undated"]


def test_one_malformed_source_is_partial_failure():
    fetch = FakeFetch({
        "https://a.example/rss": SAMPLE_RSS_XML,
        "https://bad.example/rss": SAMPLE_MALFORMED_XML,
        "https://b.example/atom": SAMPLE_ATOM_XML,
    })

    feed = _refresh(fetch, ["https://a.example/rss", "https://bad.example/rss", "https://b.example/atom"])

    assert {item.source_feed for item in feed} == {"Test Feed", "Test Atom Feed"}
    assert len(feed) == 3
    assert feed.is_partial
    assert [(f.url, f.kind) for f in feed.failures] == [("https://bad.example/rss", "parse")]


def test_all_sources_malformed_raises_with_every_failure():
    urls = ["https://a.example/rss", "https://b.example/rss", "https://c.example/rss"]
    fetch = FakeFetch({url: SAMPLE_MALFORMED_XML for url in urls})

    with pytest.raises(AllSourcesFailed) as excinfo:
        _refresh(fetch, urls)

    assert excinfo.value.group == "Test"
    assert len(excinfo.value.failures) == 3
    assert [f.url for f in excinfo.value.failures] == urls


def test_fetch_errors_and_timeouts_are_recorded():
    fetch = FakeFetch({
        "https://a.example/rss": SAMPLE_RSS_XML,
        "https://slow.example/rss": asyncio.TimeoutError(),
    })

    feed = _refresh(fetch, ["https://a.example/rss", "https://slow.example/rss", "https://missing.example/rss"])

    assert len(feed) == 2
    failures = {f.url: f for f in feed.failures}
    assert failures["https://slow.example/rss"].kind == "fetch"
    assert failures["https://slow.example/rss"].error == "TimeoutError"
    assert failures["https://missing.example/rss"].error == "HTTP 404"


def test_max_items_per_source():
    fetch = FakeFetch({"https://a.example/rss": SAMPLE_RSS_XML})

    feed = _refresh(fetch, ["https://a.example/rss"], max_items_per_source=1)

    assert [item.title for item in feed] == ["First Article"]


def test_empty_group_returns_empty_feed():
    fetch = FakeFetch({})

    feed = _refresh(fetch, [])

    assert len(feed) == 0
    assert fetch.calls == []


def test_refresh_logs_only_through_given_logger(caplog):
    fetch = FakeFetch({"https://a.example/rss": SAMPLE_RSS_XML})
    logger = logging.getLogger("aggregator-test")

    with caplog.at_level(logging.INFO, logger="aggregator-test"):
        _refresh(fetch, ["https://a.example/rss", "https://missing.example/rss"], logger=logger)

    events = [getattr(record, "event", None) for record in caplog.records]
    assert "fetch_failed" in events
    assert "refresh_done" in events


def test_unexpected_fetch_exception_is_a_source_failure():
    fetch = FakeFetch({
        "https://a.example/rss": SAMPLE_RSS_XML,
        "https://odd.example/rss": RuntimeError("connection pool exploded"),
    })

    feed = _refresh(fetch, ["https://a.example/rss", "https://odd.example/rss"])

    assert len(feed) == 2
    assert [(f.url, f.kind) for f in feed.failures] == [("https://odd.example/rss", "fetch")]
    assert feed.failures[0].error == "RuntimeError: connection pool exploded"


def test_invalid_source_url_does_not_abort_refresh():
    def handler(request):
        return httpx.Response(200, content=SAMPLE_RSS_XML)

    group = FeedGroup(name="G", source_urls=("https://good.example/rss", "https://feeds.example/r\tss"))

    feed = refresh_group(group, AppConfig(), transport=httpx.MockTransport(handler))

    assert [item.title for item in feed] == ["First Article", "Second Article"]
    assert len(feed.failures) == 1
    assert feed.failures[0].url == "https://feeds.example/r\tss"
    assert feed.failures[0].kind == "fetch"
