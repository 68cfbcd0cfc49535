"""
Episode Feed - A channel episode mirror.

This package provides functionality to:
- Download a channel's video feed and extract episode entries
- Curate episodes (deduplicate, sort, keep the latest upload days)
- Cache the curated list in memory with a refresh policy
- Serve the list over a small HTTP API with a static front-end
"""

__version__ = '1.0.0'

# Import config
from episode_feed import config

# Import data modules
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

# Import cache modules
from episode_feed.cache.store import EpisodeCache, Snapshot

# Import errors and validation
from episode_feed.exceptions import EpisodeFeedError, FetchError, ParseError
from episode_feed.validation import validate_feed_url, validate_port, ValidationError

# Import logging configuration
from episode_feed.logging_config import (
    setup_logging,
    get_logger,
    configure_logging
)

__all__ = [
    # Config
    'config',
    # Data functions
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
    # Cache
    'EpisodeCache',
    'Snapshot',
    # Errors and validation
    'EpisodeFeedError',
    'FetchError',
    'ParseError',
    'validate_feed_url',
    'validate_port',
    'ValidationError',
    # Logging functions
    'setup_logging',
    'get_logger',
    'configure_logging',
]
