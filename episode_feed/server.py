"""
HTTP server for Episode Feed.

Serves the curated episode list at /api/episodes and the static front-end
from config.STATIC_FOLDER.
"""

from datetime import datetime, timezone
from typing import Optional
from flask import Flask, Response, current_app, jsonify, request, send_from_directory
from episode_feed import config
from episode_feed.cache import EpisodeCache

# Set up logging
from episode_feed.logging_config import setup_logging
logger = setup_logging(__name__)

EPISODE_CACHE_KEY = 'EPISODE_CACHE'


def _cache() -> EpisodeCache:
    return current_app.config[EPISODE_CACHE_KEY]


def create_app(cache: Optional[EpisodeCache] = None, static_folder: str = config.STATIC_FOLDER) -> Flask:
    """
    Create the Flask application.

    Parameters:
    cache: Episode cache to serve from (a default EpisodeCache if None)
    static_folder: Directory holding index.html and the front-end assets

    Returns:
    Flask: Configured application
    """
    app = Flask(__name__, static_folder=static_folder, static_url_path='')
    app.config[EPISODE_CACHE_KEY] = cache if cache is not None else EpisodeCache()

    @app.route('/api/episodes', methods=['GET'])
    def episodes():
        """Curated episodes, newest first."""
        cache = _cache()
        episodes = cache.get_episodes()

        # Nothing has ever been fetched successfully: let the front-end show its error message
        if not cache.has_refreshed and cache.last_error is not None:
            return jsonify({'error': 'Failed to parse RSS'}), 500

        response = jsonify(episodes)
        response.headers['Cache-Control'] = (
            f's-maxage={config.STALE_WHILE_REVALIDATE_SECONDS}, '
            f'stale-while-revalidate={config.STALE_WHILE_REVALIDATE_SECONDS}'
        )
        return response

    @app.route('/health')
    def health_check():
        """Health check endpoint for monitoring."""
        cache = _cache()
        snapshot = cache.snapshot
        last_error = cache.last_error
        return jsonify({
            'status': 'healthy' if last_error is None else 'degraded',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'episodes': len(snapshot.episodes),
            'last_refresh': snapshot.refreshed_at.isoformat() if snapshot.refreshed_at else None,
            'last_error': str(last_error) if last_error is not None else None,
        })

    @app.route('/')
    def index():
        return send_from_directory(app.static_folder, 'index.html')

    @app.errorhandler(404)
    def not_found(error):
        logger.error(f"404: {request.path}")
        return Response('<h1>404 Not Found</h1>', status=404, mimetype='text/html')

    return app


def run_server(cache: EpisodeCache,
               host: str = config.HOST,
               port: int = config.PORT,
               background: bool = True) -> None:
    """
    Start the HTTP server.

    Parameters:
    cache: Episode cache to serve from
    host: Interface to bind
    port: Port to listen on
    background: Refresh on a timer in addition to lazily on read
    """
    app = create_app(cache)
    if background:
        cache.start_background_refresh()

    logger.info(f"Server running at http://localhost:{port}/")
    try:
        app.run(host=host, port=port, threaded=True)
    finally:
        cache.stop_background_refresh(timeout=1)
