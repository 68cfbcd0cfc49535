"""
In-memory episode cache.
"""

from episode_feed.cache.store import EpisodeCache, Snapshot

__all__ = [
    'EpisodeCache',
    'Snapshot',
]
