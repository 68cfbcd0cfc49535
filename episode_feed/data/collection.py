"""
Data collection functions for downloading the channel feed and extracting episodes.
"""

import re
import requests
import feedparser
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional
from episode_feed import config
from episode_feed.exceptions import FetchError, ParseError
from episode_feed.validation import validate_feed_url

# Set up logging
from episode_feed.logging_config import setup_logging
logger = setup_logging(__name__)

YOUTUBE_ID_PREFIX = 'yt:video:'
ISO_DATE_PREFIX = re.compile(r'^\d{4}-\d{2}-\d{2}')

# Full or abbreviated English month names
MONTH_PATTERNS = (
    r'Jan(?:uary)?', r'Feb(?:ruary)?', r'Mar(?:ch)?', r'Apr(?:il)?', r'May', r'June?', r'July?',
    r'Aug(?:ust)?', r'Sep(?:t(?:ember)?)?', r'Oct(?:ober)?', r'Nov(?:ember)?', r'Dec(?:ember)?',
)

# "Episode 12 || 23-02-26", "Episode 12 | 2024/02/23 (re-upload)"
NUMERIC_DATE_SUFFIX = re.compile(
    r'\s*\|\|?\s*(?:\d{2}[-/]\d{2}[-/]\d{2}(?:\d{2})?|\d{4}[-/]\d{2}[-/]\d{2}).*$'
)

# "Episode 5 | 3 March 2024", "Episode 5 | 3 Mar 2024"
LONG_DATE_SUFFIX = re.compile(
    r'\s*(?<!\|)\|(?!\|)\s*\d{1,2}\s+(?:' + '|'.join(MONTH_PATTERNS) + r')\.?\s+\d{4}.*$',
    re.IGNORECASE,
)


def fetch_feed_content(feed_url: str, timeout: float = config.FETCH_TIMEOUT_SECONDS) -> bytes:
    """
    Download the raw feed document.

    Parameters:
    feed_url: URL of the channel feed
    timeout: Seconds to wait for the server before giving up

    Returns:
    bytes: Feed content

    Raises:
    FetchError: If the URL is invalid, the request fails or the response is not 2xx
    """
    is_valid, error = validate_feed_url(feed_url)
    if not is_valid:
        raise FetchError(f"Invalid feed URL: {error}", url=feed_url)

    try:
        logger.debug(f"Downloading feed: {feed_url}")
        response = requests.get(feed_url, timeout=timeout)
        response.raise_for_status()
    except requests.HTTPError as e:
        status_code = e.response.status_code if e.response is not None else None
        raise FetchError(f"HTTP error! status: {status_code}", url=feed_url, status_code=status_code) from e
    except requests.RequestException as e:
        raise FetchError(f"Failed to download feed: {e}", url=feed_url) from e

    content = response.content
    logger.debug(f"Downloaded feed: {feed_url} ({len(content):,} bytes)")
    return content


def is_episode_title(title: Optional[str],
                     include_keyword: str = config.TITLE_INCLUDE_KEYWORD,
                     exclude_keyword: str = config.TITLE_EXCLUDE_KEYWORD) -> bool:
    """
    Check whether a video title names an episode.

    Both keywords are matched as case-insensitive substrings.
    """
    if not title:
        return False
    lowered = title.lower()
    return include_keyword.lower() in lowered and exclude_keyword.lower() not in lowered


def clean_title(title: str) -> str:
    """
    Strip a trailing upload-date annotation from an episode title.

    The numeric form ("|| 23-02-26", "| 2024-02-23") is removed first, then
    the long form ("| 3 March 2024"). Everything after the date goes with it.

    Example:
        >>> clean_title("Episode 12 || 23-02-26")
        'Episode 12'
        >>> clean_title("Episode 5 | 3 March 2024")
        'Episode 5'
    """
    title = NUMERIC_DATE_SUFFIX.sub('', title, count=1)
    title = LONG_DATE_SUFFIX.sub('', title, count=1)
    return title.strip()


def _entry_video_id(entry) -> Optional[str]:
    video_id = entry.get('yt_videoid')
    if video_id:
        return video_id

    entry_id = entry.get('id', '')
    if entry_id.startswith(YOUTUBE_ID_PREFIX):
        return entry_id[len(YOUTUBE_ID_PREFIX):]
    return entry_id or None


def _entry_thumbnail(entry) -> str:
    thumbnails = entry.get('media_thumbnail')
    if isinstance(thumbnails, list) and len(thumbnails) > 0:
        return thumbnails[0].get('url', '') or ''
    elif isinstance(thumbnails, dict):
        return thumbnails.get('url', '') or ''
    return ''


def _entry_published(entry) -> str:
    """
    Return the entry's publication time as an ISO 8601 string.

    Atom timestamps are already ISO 8601 and are kept verbatim. Other forms,
    such as the RFC 822 pubDate of RSS 2.0, are rebuilt from feedparser's
    published_parsed, which is in UTC.
    """
    published = entry.get('published', '') or ''
    if ISO_DATE_PREFIX.match(published):
        return published

    parsed = entry.get('published_parsed')
    if parsed:
        return datetime(*parsed[:6], tzinfo=timezone.utc).isoformat()
    return published


def normalize_entry(entry) -> Optional[Dict[str, str]]:
    """
    Map a parsed feed entry to an episode record.

    Parameters:
    entry: feedparser entry (FeedParserDict)

    Returns:
    dict with keys id, title, published, thumbnail, or None if the entry has no video id
    """
    video_id = _entry_video_id(entry)
    if not video_id:
        logger.debug(f"Skipping entry without a video id: {entry.get('title', '')!r}")
        return None

    return {
        'id': video_id,
        'title': clean_title(entry.get('title', '')),
        'published': _entry_published(entry),
        'thumbnail': _entry_thumbnail(entry),
    }


def normalize_entries(entries: Iterable,
                      include_keyword: str = config.TITLE_INCLUDE_KEYWORD,
                      exclude_keyword: str = config.TITLE_EXCLUDE_KEYWORD) -> List[Dict[str, str]]:
    """
    Filter entries down to episodes and normalize them.

    A single entry may be passed instead of a sequence.
    """
    if isinstance(entries, dict):
        entries = [entries]

    episodes = []
    for entry in entries:
        if not is_episode_title(entry.get('title'), include_keyword, exclude_keyword):
            continue
        episode = normalize_entry(entry)
        if episode is not None:
            episodes.append(episode)
    return episodes


def parse_episodes(content: bytes,
                   include_keyword: str = config.TITLE_INCLUDE_KEYWORD,
                   exclude_keyword: str = config.TITLE_EXCLUDE_KEYWORD,
                   feed_url: Optional[str] = None) -> List[Dict[str, str]]:
    """
    Parse feed content into episode candidates.

    Parameters:
    content: Raw feed bytes (or text)
    include_keyword: Titles must contain this keyword
    exclude_keyword: Titles must not contain this keyword
    feed_url: Used in error messages only

    Returns:
    List of episode dicts in feed order; empty if the feed has no entries

    Raises:
    ParseError: If the content is empty or not a well-formed feed document
    """
    if not content or not content.strip():
        raise ParseError("Failed to parse feed: empty document", url=feed_url)

    feed = feedparser.parse(content)

    if feed.bozo and not isinstance(feed.bozo_exception, feedparser.CharacterEncodingOverride):
        raise ParseError(f"Failed to parse feed: {feed.bozo_exception}", url=feed_url)

    # Well-formed XML that feedparser recognizes as neither RSS nor Atom
    if not feed.get('version') and not feed.get('feed'):
        raise ParseError("Failed to parse feed: not an RSS or Atom document", url=feed_url)

    entries = feed.get('entries', [])
    if not entries:
        logger.info('No entries found in feed.')
        return []

    episodes = normalize_entries(entries, include_keyword, exclude_keyword)
    logger.debug(f"Kept {len(episodes)} of {len(entries)} feed entries as episodes")
    return episodes
