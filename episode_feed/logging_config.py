"""
Centralized logging configuration for Episode Feed.

All modules obtain their logger through setup_logging(__name__), which
configures logging once via logging.config.dictConfig() and places every
logger under the 'episode_feed' namespace.
"""

import logging
import logging.config
import sys
from pathlib import Path
from typing import Optional
from episode_feed import config

# Track if logging has been configured to avoid reconfiguration
_logging_configured = False


def _get_logging_config() -> dict:
    """
    Build logging configuration dictionary.

    Returns:
    dict: Logging configuration for dictConfig()
    """
    log_level = getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)

    logging_config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            }
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'level': log_level,
                'formatter': 'standard',
                'stream': sys.stderr
            }
        },
        'loggers': {
            'episode_feed': {
                'level': log_level,
                'handlers': ['console'],
                'propagate': False
            },
            # Flask's request log goes through werkzeug
            'werkzeug': {
                'level': log_level,
                'handlers': ['console'],
                'propagate': False
            }
        },
        'root': {
            'level': log_level,
            'handlers': ['console']
        }
    }

    if config.LOG_FILE:
        try:
            log_path = Path(config.LOG_FILE)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            logging_config['handlers']['file'] = {
                'class': 'logging.FileHandler',
                'level': log_level,
                'formatter': 'standard',
                'filename': config.LOG_FILE,
                'mode': 'a',
                'encoding': 'utf-8'
            }

            for logger_config in logging_config['loggers'].values():
                logger_config['handlers'].append('file')
            logging_config['root']['handlers'].append('file')
        except (OSError, PermissionError) as e:
            # If file logging fails, log to console only
            print(f"Warning: Could not set up file logging to {config.LOG_FILE}: {e}", file=sys.stderr)

    return logging_config


def configure_logging(force: bool = False) -> None:
    """
    Configure logging for the entire application.

    Safe to call repeatedly; only the first call (or a call with force=True,
    used by the CLI after it changes config.LOG_LEVEL) applies the configuration.

    Example:
        >>> from episode_feed.logging_config import configure_logging
        >>> configure_logging()
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    logging.config.dictConfig(_get_logging_config())
    _logging_configured = True


def setup_logging(logger_name: Optional[str] = None) -> logging.Logger:
    """
    Set up logging for a module with centralized configuration.

    Parameters:
    logger_name: Name of the logger (typically __name__). If None, uses root logger.

    Returns:
    logging.Logger: Configured logger instance

    Example:
        >>> from episode_feed.logging_config import setup_logging
        >>> logger = setup_logging(__name__)
        >>> logger.info("This will be logged")
    """
    configure_logging()

    if logger_name:
        # Ensure logger is under episode_feed namespace
        if not logger_name.startswith('episode_feed'):
            logger_name = f'episode_feed.{logger_name}'
        return logging.getLogger(logger_name)

    return logging.getLogger()


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance with centralized configuration.

    Convenience alias for setup_logging().
    """
    return setup_logging(name)
