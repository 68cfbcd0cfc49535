"""
Configuration constants for Episode Feed application.
"""

import os
from datetime import timedelta
from pathlib import Path

# Feed Configuration
CHANNEL_ID = 'UCp_r6Z-Oh0YTf-ym71z5Nqg'
FEED_URL = f'https://www.youtube.com/feeds/videos.xml?channel_id={CHANNEL_ID}'
FETCH_TIMEOUT_SECONDS = 10  # Timeout for the outbound feed request

# Cache Configuration
CACHE_DURATION_MINUTES = 10  # Snapshot age before a read triggers a refresh
CACHE_DURATION = timedelta(minutes=CACHE_DURATION_MINUTES)
STALE_WHILE_REVALIDATE_SECONDS = 600

# Episode Filtering Configuration
TITLE_INCLUDE_KEYWORD = 'episode'
TITLE_EXCLUDE_KEYWORD = 'promo'
RECENT_UPLOAD_DAYS = 2  # Number of distinct upload days kept in the snapshot
UPLOAD_DAY_OFFSET = timedelta(hours=5, minutes=30)  # Fixed shift applied before taking the upload day

# Episode Fields
EPISODE_FIELDS = ['id', 'title', 'published', 'thumbnail']

# Server Configuration
HOST = '0.0.0.0'
PORT = int(os.environ.get('PORT', 3000))
STATIC_FOLDER = str(Path(__file__).parent / 'static')

# Logging Configuration
LOG_LEVEL = 'INFO'  # DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_FILE = None  # Set to a file path to enable file logging, None for console only
