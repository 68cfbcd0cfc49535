"""
In-memory episode cache with a time-boxed refresh policy.

The cache owns a single Snapshot reference. A refresh builds the next
snapshot completely and then swaps the reference, so readers never observe
a partially built list. At most one refresh runs at a time; callers that
trigger a refresh while another is in flight wait for it and share its result.
"""

import threading
import traceback
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple
from episode_feed import config
from episode_feed.data.collection import fetch_feed_content, parse_episodes
from episode_feed.data.curation import curate_episodes
from episode_feed.exceptions import EpisodeFeedError

# Set up logging
from episode_feed.logging_config import setup_logging
logger = setup_logging(__name__)


class Snapshot(NamedTuple):
    """Immutable curated episode list and the time it was built."""
    episodes: Tuple[Dict[str, str], ...] = ()
    refreshed_at: Optional[datetime] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EpisodeCache:
    """
    Process-wide store of the curated episode list.

    Parameters:
    feed_url: Feed to refresh from
    fetcher: Callable taking a feed URL and returning raw feed bytes
    cache_duration: Snapshot age after which a read triggers a refresh
    now: Clock returning a tz-aware datetime

    Example:
        >>> cache = EpisodeCache()
        >>> episodes = cache.get_episodes()  # refreshes lazily on first read
    """

    def __init__(self,
                 feed_url: str = config.FEED_URL,
                 fetcher: Callable[[str], bytes] = fetch_feed_content,
                 cache_duration: timedelta = config.CACHE_DURATION,
                 now: Callable[[], datetime] = _utcnow):
        self.feed_url = feed_url
        self.fetcher = fetcher
        self.cache_duration = cache_duration
        self._now = now
        self._snapshot = Snapshot()
        self._last_error: Optional[Exception] = None
        self._refresh_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._background_thread: Optional[threading.Thread] = None

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def last_error(self) -> Optional[Exception]:
        """Error of the most recent refresh, or None if it succeeded."""
        return self._last_error

    @property
    def has_refreshed(self) -> bool:
        return self._snapshot.refreshed_at is not None

    def is_stale(self) -> bool:
        refreshed_at = self._snapshot.refreshed_at
        if refreshed_at is None:
            return True
        return self._now() - refreshed_at >= self.cache_duration

    def get_episodes(self) -> List[Dict[str, str]]:
        """
        Return the current episodes, refreshing first if the snapshot is stale.

        Refresh failures are logged and never raised; the previous snapshot
        (possibly empty) is returned instead.
        """
        if self.is_stale():
            self.refresh()
        return [dict(episode) for episode in self._snapshot.episodes]

    def refresh(self) -> bool:
        """
        Run one fetch, parse and curate cycle.

        Returns:
        bool: True if the snapshot was replaced, False if the cycle failed
        """
        if not self._refresh_lock.acquire(blocking=False):
            logger.debug("Refresh already in progress, waiting for it")
            with self._refresh_lock:
                return self._last_error is None

        try:
            return self._refresh()
        finally:
            self._refresh_lock.release()

    def _refresh(self) -> bool:
        previous = self._snapshot
        try:
            content = self.fetcher(self.feed_url)
            candidates = parse_episodes(content, feed_url=self.feed_url)
            episodes = curate_episodes(previous.episodes, candidates)
        except EpisodeFeedError as e:
            logger.error(f"Error fetching RSS feed: {e}")
            logger.debug(traceback.format_exc())
            self._last_error = e
            return False
        except Exception as e:
            logger.error(f"Unexpected error refreshing episodes from {self.feed_url}: {e}")
            logger.debug(traceback.format_exc())
            self._last_error = e
            return False

        self._snapshot = Snapshot(episodes=tuple(episodes), refreshed_at=self._now())
        self._last_error = None
        logger.info(f"Fetched and cached {len(episodes)} episodes.")
        return True

    def start_background_refresh(self, interval: Optional[timedelta] = None) -> threading.Thread:
        """
        Refresh now and then every interval on a daemon thread.

        Parameters:
        interval: Time between refreshes (defaults to cache_duration)

        Returns:
        threading.Thread: The running refresh thread
        """
        if self._background_thread is not None and self._background_thread.is_alive():
            return self._background_thread

        interval_seconds = (interval or self.cache_duration).total_seconds()
        self._stop_event.clear()

        def run():
            self.refresh()
            while not self._stop_event.wait(interval_seconds):
                self.refresh()

        self._background_thread = threading.Thread(target=run, name='episode-refresh', daemon=True)
        self._background_thread.start()
        logger.info(f"Background refresh started (every {interval_seconds:.0f}s)")
        return self._background_thread

    def stop_background_refresh(self, timeout: Optional[float] = None) -> None:
        """Stop the background refresh thread, waiting up to timeout seconds."""
        self._stop_event.set()
        if self._background_thread is not None:
            self._background_thread.join(timeout)
            self._background_thread = None
