"""
Curation of episode lists: merge with the cached snapshot, deduplicate,
sort newest first and keep only the most recent upload days.

Upload days are taken after shifting each timestamp by a fixed offset
(config.UPLOAD_DAY_OFFSET, +5:30). This is a fixed-offset approximation of the
channel's local calendar, not a timezone conversion: no DST rules apply.
"""

from datetime import date, timedelta
from typing import Dict, Iterable, List
import pandas as pd
from episode_feed import config

# Set up logging
from episode_feed.logging_config import setup_logging
logger = setup_logging(__name__)

Episode = Dict[str, str]


def parse_published(published) -> pd.Series:
    """
    Parse published timestamps into UTC instants.

    Parameters:
    published: Iterable of ISO-8601 strings

    Returns:
    pd.Series of tz-aware UTC timestamps; unparseable values become NaT.
    Naive timestamps are read as UTC.
    """
    return pd.to_datetime(pd.Series(published, dtype='object'),
                          utc=True, format='ISO8601', errors='coerce')


def upload_day(published: str, offset: timedelta = config.UPLOAD_DAY_OFFSET) -> date:
    """
    Return the calendar day of a published timestamp shifted by offset.

    Example:
        >>> upload_day("2024-03-03T20:00:00+00:00")
        datetime.date(2024, 3, 4)
    """
    instant = parse_published([published]).iloc[0]
    if pd.isna(instant):
        raise ValueError(f"Invalid published timestamp: {published!r}")
    return (instant + offset).date()


def deduplicate_episodes(episodes: Iterable[Episode]) -> List[Episode]:
    """
    Deduplicate episodes by id; a later occurrence replaces an earlier one.

    The result keeps the position where each id was first seen.
    """
    by_id = {}
    for episode in episodes:
        by_id[episode['id']] = episode
    return list(by_id.values())


def _episode_frame(episodes: List[Episode]) -> pd.DataFrame:
    df = pd.DataFrame(episodes, columns=config.EPISODE_FIELDS)
    df['published_at'] = parse_published(df['published'])

    invalid = df['published_at'].isna()
    if invalid.any():
        for episode_id in df.loc[invalid, 'id']:
            logger.warning(f"Dropping episode {episode_id} with invalid published timestamp")
        df = df[~invalid].copy()

    return df


def _records(df: pd.DataFrame) -> List[Episode]:
    return df[config.EPISODE_FIELDS].to_dict('records')


def sort_episodes(episodes: Iterable[Episode]) -> List[Episode]:
    """
    Sort episodes newest first by their published instant.

    Ties keep their input order. Episodes whose timestamp cannot be parsed are dropped.
    """
    episodes = list(episodes)
    if not episodes:
        return []

    df = _episode_frame(episodes)
    df = df.sort_values('published_at', ascending=False, kind='mergesort')
    return _records(df)


def filter_recent_upload_days(episodes: Iterable[Episode],
                              upload_days: int = config.RECENT_UPLOAD_DAYS,
                              offset: timedelta = config.UPLOAD_DAY_OFFSET) -> List[Episode]:
    """
    Keep the episodes published on the most recent upload days.

    Parameters:
    episodes: Episodes sorted newest first
    upload_days: Number of distinct upload days to keep
    offset: Shift applied to each timestamp before taking its calendar day

    Returns:
    Episodes whose shifted day is among the first upload_days distinct days
    encountered in input order
    """
    episodes = list(episodes)
    if not episodes:
        return []

    df = _episode_frame(episodes)
    df['upload_day'] = (df['published_at'] + pd.Timedelta(offset)).dt.date
    recent_days = df['upload_day'].drop_duplicates().head(upload_days)
    df = df[df['upload_day'].isin(recent_days)]
    return _records(df)


def curate_episodes(previous: Iterable[Episode],
                    candidates: Iterable[Episode],
                    upload_days: int = config.RECENT_UPLOAD_DAYS,
                    offset: timedelta = config.UPLOAD_DAY_OFFSET) -> List[Episode]:
    """
    Build the next snapshot from the previous one and freshly parsed episodes.

    Steps:
    1. Merge previous snapshot and candidates (previous first)
    2. Deduplicate by id, letting candidates overwrite cached data
    3. Sort newest first
    4. Keep only the most recent upload days

    Parameters:
    previous: Episodes of the current snapshot
    candidates: Episodes parsed from the latest feed download
    upload_days: Number of distinct upload days to keep
    offset: Shift applied before taking the upload day

    Returns:
    List of episode dicts; empty if there is nothing to curate

    Example:
        >>> previous = [{'id': 'A', 'title': 'Episode 1', 'published': '2024-03-01T10:00:00+00:00', 'thumbnail': ''}]
        >>> new = [{'id': 'B', 'title': 'Episode 2', 'published': '2024-03-02T10:00:00+00:00', 'thumbnail': ''}]
        >>> [e['id'] for e in curate_episodes(previous, new)]
        ['B', 'A']
    """
    merged = list(previous) + list(candidates)
    if not merged:
        return []

    episodes = deduplicate_episodes(merged)
    episodes = sort_episodes(episodes)
    return filter_recent_upload_days(episodes, upload_days=upload_days, offset=offset)
