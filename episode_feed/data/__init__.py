"""
Feed collection and episode curation modules.
"""

from episode_feed.data.collection import (
    fetch_feed_content,
    parse_episodes,
    normalize_entries,
    normalize_entry,
    is_episode_title,
    clean_title
)
from episode_feed.data.curation import (
    curate_episodes,
    deduplicate_episodes,
    sort_episodes,
    filter_recent_upload_days,
    upload_day
)

__all__ = [
    'fetch_feed_content',
    'parse_episodes',
    'normalize_entries',
    'normalize_entry',
    'is_episode_title',
    'clean_title',
    'curate_episodes',
    'deduplicate_episodes',
    'sort_episodes',
    'filter_recent_upload_days',
    'upload_day',
]
