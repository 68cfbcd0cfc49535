"""Shared fixtures for Episode Feed tests."""

import threading
from datetime import datetime, timedelta, timezone
from xml.sax.saxutils import escape, quoteattr

import pytest

TEST_FEED_URL = 'https://www.youtube.com/feeds/videos.xml?channel_id=UCtest'

FEED_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns:yt="http://www.youtube.com/xml/schemas/2015" xmlns:media="http://search.yahoo.com/mrss/" xmlns="http://www.w3.org/2005/Atom">
 <link rel="self" href="{feed_url}"/>
 <id>yt:channel:UCtest</id>
 <title>Test Channel</title>
 <published>2020-01-01T00:00:00+00:00</published>
{entries}
</feed>
"""


def _entry_xml(video_id=None, title=None, published=None, thumbnail=None, entry_id=None):
    parts = [' <entry>']
    if entry_id or video_id:
        parts.append(f'  <id>{escape(entry_id or "yt:video:" + video_id)}</id>')
    if video_id:
        parts.append(f'  <yt:videoId>{escape(video_id)}</yt:videoId>')
    if title is not None:
        parts.append(f'  <title>{escape(title)}</title>')
    if published is not None:
        parts.append(f'  <published>{escape(published)}</published>')
    parts.append('  <media:group>')
    if title is not None:
        parts.append(f'   <media:title>{escape(title)}</media:title>')
    if thumbnail:
        parts.append(f'   <media:thumbnail url={quoteattr(thumbnail)} width="480" height="360"/>')
    parts.append('  </media:group>')
    parts.append(' </entry>')
    return '\n'.join(parts)


def build_feed(*entries) -> bytes:
    """Build a YouTube-style Atom feed from entry keyword dicts."""
    body = '\n'.join(_entry_xml(**entry) for entry in entries)
    return FEED_TEMPLATE.format(feed_url=TEST_FEED_URL, entries=body).encode('utf-8')


def make_episode(episode_id, published, title=None, thumbnail=''):
    return {
        'id': episode_id,
        'title': title or f'Episode {episode_id}',
        'published': published,
        'thumbnail': thumbnail,
    }


class FakeFetcher:
    """Stands in for fetch_feed_content: returns queued responses in order.

    A response is either feed bytes or an exception instance to raise. The
    last response is repeated once the queue runs out.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, feed_url):
        self.calls.append(feed_url)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


class BlockingFetcher:
    """Fetcher that blocks until released, to hold a refresh in flight."""

    def __init__(self, content):
        self.content = content
        self.calls = 0
        self.entered = threading.Event()
        self.release = threading.Event()

    def __call__(self, feed_url):
        self.calls += 1
        self.entered.set()
        self.release.wait(5)
        return self.content


class FakeClock:
    def __init__(self, start=None):
        self.current = start or datetime(2024, 3, 4, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)


@pytest.fixture
def feed_builder():
    return build_feed


@pytest.fixture
def episode_factory():
    return make_episode


@pytest.fixture
def fake_fetcher_class():
    return FakeFetcher


@pytest.fixture
def blocking_fetcher_class():
    return BlockingFetcher


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def feed_url():
    return TEST_FEED_URL
