"""
Command Line Interface for Episode Feed.
"""

import argparse
import json
import sys

from episode_feed import config
from episode_feed.cache import EpisodeCache
from episode_feed.logging_config import configure_logging
from episode_feed.server import run_server
from episode_feed.validation import ValidationError, validate_feed_url, validate_port


def _build_cache(feed_url):
    is_valid, error = validate_feed_url(feed_url)
    if not is_valid:
        raise ValidationError(f"Invalid feed URL '{feed_url}': {error}")
    return EpisodeCache(feed_url=feed_url)


def serve(host, port, feed_url, background=True):
    """Serve the episode API and the front-end."""
    port = validate_port(port)
    cache = _build_cache(feed_url)
    print(f"📻 Serving episodes from {feed_url}")
    run_server(cache, host=host, port=port, background=background)
    return True


def fetch_once(feed_url):
    """Run one refresh cycle and print the curated episodes as JSON."""
    cache = _build_cache(feed_url)
    print(f"📥 Fetching episodes from {feed_url}...", file=sys.stderr)

    if not cache.refresh():
        print(f"❌ Error: {cache.last_error}", file=sys.stderr)
        return False

    episodes = cache.get_episodes()
    if not episodes:
        print("⚠️  No episodes found in feed.", file=sys.stderr)
    print(json.dumps(episodes, indent=2, ensure_ascii=False))
    return True


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Episode Feed - Mirror a channel\'s latest episodes over HTTP',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  episode-feed serve                   # Serve on $PORT (default 3000)
  episode-feed serve --port 8080       # Serve on port 8080
  episode-feed fetch                   # Print the current episodes as JSON
        """
    )
    parser.add_argument('--log-level', default=config.LOG_LEVEL,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help=f'Logging level (default: {config.LOG_LEVEL})')
    parser.add_argument('--log-file', default=config.LOG_FILE,
                        help='Also append log records to this file')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Serve command
    serve_parser = subparsers.add_parser('serve', help='Start the HTTP server')
    serve_parser.add_argument('--host', default=config.HOST, help=f'Interface to bind (default: {config.HOST})')
    serve_parser.add_argument('--port', default=config.PORT, help=f'Port to listen on (default: {config.PORT})')
    serve_parser.add_argument('--feed-url', default=config.FEED_URL, help='Channel feed URL')
    serve_parser.add_argument('--no-background', action='store_true',
                              help='Only refresh when a request finds the cache stale')

    # Fetch command
    fetch_parser = subparsers.add_parser('fetch', help='Fetch and print the curated episodes once')
    fetch_parser.add_argument('--feed-url', default=config.FEED_URL, help='Channel feed URL')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.log_level != config.LOG_LEVEL or args.log_file != config.LOG_FILE:
        config.LOG_LEVEL = args.log_level
        config.LOG_FILE = args.log_file
        configure_logging(force=True)

    try:
        if args.command == 'serve':
            success = serve(args.host, args.port, args.feed_url, background=not args.no_background)
        elif args.command == 'fetch':
            success = fetch_once(args.feed_url)
        else:
            parser.print_help()
            return 1

        return 0 if success else 1

    except ValidationError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user.")
        return 130


if __name__ == '__main__':
    sys.exit(main())
