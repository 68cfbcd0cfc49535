"""Tests for feed fetching, parsing and episode normalization."""

from unittest.mock import Mock, patch

import pytest
import requests

from episode_feed.data.collection import (
    clean_title,
    fetch_feed_content,
    is_episode_title,
    normalize_entries,
    parse_episodes,
)
from episode_feed.data.curation import curate_episodes
from episode_feed.exceptions import FetchError, ParseError

RSS_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
 <channel>
  <title>Test Channel</title>
  <link>https://example.com/</link>
  <item>
   <guid isPermaLink="false">rss-1</guid>
   <title>Episode 1 | 4 Mar 2024</title>
   <pubDate>Mon, 04 Mar 2024 10:00:00 GMT</pubDate>
  </item>
 </channel>
</rss>
"""


class TestCleanTitle:
    @pytest.mark.parametrize('title, expected', [
        ('Episode 12 || 23-02-26', 'Episode 12'),
        ('Episode 12 | 23/02/2026', 'Episode 12'),
        ('Episode 12 || 2026-02-23', 'Episode 12'),
        ('Episode 12|2026/02/23 full video', 'Episode 12'),
        ('Episode 5 | 3 March 2024', 'Episode 5'),
        ('Episode 5 | 3 Mar 2024', 'Episode 5'),
        ('Episode 5 | 30 Sept. 2024', 'Episode 5'),
        ('Episode 5 | 13 december 2024 (HD)', 'Episode 5'),
        ('Episode 7 | 01-02-24 | 1 February 2024', 'Episode 7'),
    ])
    def test_strips_date_annotation(self, title, expected):
        assert clean_title(title) == expected

    @pytest.mark.parametrize('title', [
        'Episode 3',
        'Episode 3 | Special Guest',
        'Episode 3 | Part 2',
        'Episode 2024 recap',
    ])
    def test_keeps_titles_without_date_annotation(self, title):
        assert clean_title(title) == title

    def test_long_date_requires_single_pipe(self):
        assert clean_title('Episode 5 || 3 March 2024') == 'Episode 5 || 3 March 2024'

    def test_month_abbreviation_needs_word_boundary(self):
        assert clean_title('Episode 5 | 3 Marathons 2024') == 'Episode 5 | 3 Marathons 2024'

    @pytest.mark.parametrize('title', [
        'Episode 12 || 23-02-26',
        'Episode 5 | 3 March 2024',
        'Episode 7 | 01-02-24 | 1 February 2024',
        'Episode 9 | Finale | 4 April 2024',
        'Episode 3 | Special Guest',
    ])
    def test_is_idempotent(self, title):
        once = clean_title(title)
        assert clean_title(once) == once


class TestIsEpisodeTitle:
    @pytest.mark.parametrize('title, expected', [
        ('Episode 1', True),
        ('FULL EPISODE 4', True),
        ('Behind the scenes of episode 2', True),
        ('Promo Episode', False),
        ('Episode 5 PROMO', False),
        ('Trailer', False),
        ('', False),
        (None, False),
    ])
    def test_keyword_filter(self, title, expected):
        assert is_episode_title(title) is expected

    def test_custom_keywords(self):
        assert is_episode_title('Chapter 1', include_keyword='chapter', exclude_keyword='teaser')
        assert not is_episode_title('Chapter 1 teaser', include_keyword='chapter', exclude_keyword='teaser')


class TestParseEpisodes:
    def test_parses_and_normalizes_entries(self, feed_builder):
        content = feed_builder(
            {'video_id': 'vid2', 'title': 'Episode 2 || 02-03-24', 'published': '2024-03-02T10:00:00+00:00',
             'thumbnail': 'https://i.ytimg.com/vi/vid2/hqdefault.jpg'},
            {'video_id': 'vid1', 'title': 'Episode 1 | 1 March 2024', 'published': '2024-03-01T10:00:00+00:00',
             'thumbnail': 'https://i.ytimg.com/vi/vid1/hqdefault.jpg'},
        )

        episodes = parse_episodes(content)

        assert episodes == [
            {'id': 'vid2', 'title': 'Episode 2', 'published': '2024-03-02T10:00:00+00:00',
             'thumbnail': 'https://i.ytimg.com/vi/vid2/hqdefault.jpg'},
            {'id': 'vid1', 'title': 'Episode 1', 'published': '2024-03-01T10:00:00+00:00',
             'thumbnail': 'https://i.ytimg.com/vi/vid1/hqdefault.jpg'},
        ]

    def test_single_entry_feed(self, feed_builder):
        content = feed_builder(
            {'video_id': 'only', 'title': 'Episode 1', 'published': '2024-03-01T10:00:00+00:00'},
        )

        episodes = parse_episodes(content)

        assert [e['id'] for e in episodes] == ['only']

    def test_filters_non_episode_and_promo_titles(self, feed_builder):
        content = feed_builder(
            {'video_id': 'a', 'title': 'Episode 1', 'published': '2024-03-01T10:00:00+00:00'},
            {'video_id': 'b', 'title': 'Promo Episode', 'published': '2024-03-01T11:00:00+00:00'},
            {'video_id': 'c', 'title': 'Channel trailer', 'published': '2024-03-01T12:00:00+00:00'},
        )

        assert [e['id'] for e in parse_episodes(content)] == ['a']

    def test_missing_thumbnail_defaults_to_empty_string(self, feed_builder):
        content = feed_builder(
            {'video_id': 'a', 'title': 'Episode 1', 'published': '2024-03-01T10:00:00+00:00'},
        )

        assert parse_episodes(content)[0]['thumbnail'] == ''

    def test_video_id_falls_back_to_entry_id(self, feed_builder):
        content = feed_builder(
            {'entry_id': 'yt:video:fallback', 'title': 'Episode 1', 'published': '2024-03-01T10:00:00+00:00'},
        )

        assert parse_episodes(content)[0]['id'] == 'fallback'

    def test_feed_without_entries_returns_empty_list(self, feed_builder):
        assert parse_episodes(feed_builder()) == []

    def test_malformed_feed_raises_parse_error(self):
        content = b'<?xml version="1.0" encoding="UTF-8"?><feed><entry><title>Episode 1</title></feed'

        with pytest.raises(ParseError):
            parse_episodes(content, feed_url='https://example.com/feed.xml')

    @pytest.mark.parametrize('content', [b'', b'   \n', ''])
    def test_empty_body_raises_parse_error(self, content):
        with pytest.raises(ParseError) as exc_info:
            parse_episodes(content, feed_url='https://example.com/feed.xml')

        assert exc_info.value.url == 'https://example.com/feed.xml'

    def test_non_feed_document_raises_parse_error(self):
        with pytest.raises(ParseError):
            parse_episodes(b'<?xml version="1.0" encoding="UTF-8"?><html><body>Episode 1</body></html>')

    def test_rss_pub_date_is_converted_to_iso(self):
        episodes = parse_episodes(RSS_FEED)

        assert episodes == [
            {'id': 'rss-1', 'title': 'Episode 1', 'published': '2024-03-04T10:00:00+00:00', 'thumbnail': ''},
        ]
        assert curate_episodes([], episodes) == episodes


class TestNormalizeEntries:
    def test_accepts_single_entry(self):
        entry = {'yt_videoid': 'x', 'title': 'Episode 1', 'published': '2024-03-01T10:00:00+00:00'}

        assert normalize_entries(entry) == [
            {'id': 'x', 'title': 'Episode 1', 'published': '2024-03-01T10:00:00+00:00', 'thumbnail': ''},
        ]

    def test_skips_entries_without_id(self):
        entries = [{'title': 'Episode 1', 'published': '2024-03-01T10:00:00+00:00'}]

        assert normalize_entries(entries) == []

    def test_missing_title_is_excluded(self):
        assert normalize_entries([{'yt_videoid': 'x', 'published': '2024-03-01T10:00:00+00:00'}]) == []


class TestFetchFeedContent:
    @patch('episode_feed.data.collection.requests.get')
    def test_returns_content(self, mock_get, feed_url):
        mock_get.return_value = Mock(content=b'<feed/>', raise_for_status=Mock())

        assert fetch_feed_content(feed_url, timeout=5) == b'<feed/>'
        mock_get.assert_called_once_with(feed_url, timeout=5)

    @patch('episode_feed.data.collection.requests.get')
    def test_http_error_raises_fetch_error(self, mock_get, feed_url):
        error_response = Mock(status_code=503)
        mock_get.return_value = Mock(
            raise_for_status=Mock(side_effect=requests.HTTPError(response=error_response))
        )

        with pytest.raises(FetchError) as exc_info:
            fetch_feed_content(feed_url)

        assert exc_info.value.status_code == 503
        assert exc_info.value.url == feed_url

    @patch('episode_feed.data.collection.requests.get')
    def test_network_error_raises_fetch_error(self, mock_get, feed_url):
        mock_get.side_effect = requests.ConnectionError('connection refused')

        with pytest.raises(FetchError) as exc_info:
            fetch_feed_content(feed_url)

        assert exc_info.value.status_code is None

    @patch('episode_feed.data.collection.requests.get')
    def test_invalid_url_is_not_requested(self, mock_get):
        with pytest.raises(FetchError):
            fetch_feed_content('ftp://example.com/feed.xml')

        mock_get.assert_not_called()
