"""
Input validation utilities for Episode Feed.

This module validates the feed URL and the listening port supplied on the
command line before they reach the fetcher or the server.
"""

from urllib.parse import urlparse
from typing import Tuple, Optional


# Validation constants
MAX_URL_LENGTH = 2048
ALLOWED_URL_SCHEMES = ('http', 'https')
MIN_PORT = 1
MAX_PORT = 65535


class ValidationError(Exception):
    """Raised when input validation fails."""
    pass


def validate_feed_url(url: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a feed URL format.

    Parameters:
    url: str - URL to validate

    Returns:
    Tuple[bool, Optional[str]]: (is_valid, error_message)
        - If valid: (True, None)
        - If invalid: (False, error_message)

    Example:
        >>> is_valid, error = validate_feed_url("https://www.youtube.com/feeds/videos.xml?channel_id=abc")
        >>> is_valid
        True
    """
    if not url:
        return False, "URL cannot be empty"

    if not isinstance(url, str):
        return False, f"URL must be a string, got {type(url).__name__}"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL exceeds maximum length of {MAX_URL_LENGTH} characters"

    if not url.strip():
        return False, "URL cannot be whitespace only"

    try:
        parsed = urlparse(url.strip())
    except ValueError as e:
        return False, f"Invalid URL format: {e}"

    if not parsed.scheme:
        return False, "URL must include a scheme (http:// or https://)"

    if parsed.scheme.lower() not in ALLOWED_URL_SCHEMES:
        return False, f"URL scheme must be one of {ALLOWED_URL_SCHEMES}, got '{parsed.scheme}'"

    if not parsed.netloc:
        return False, "URL must include a domain name"

    # Check for suspicious patterns (basic security check)
    if '..' in parsed.path or '//' in parsed.path:
        return False, "URL contains suspicious path patterns"

    return True, None


def validate_port(port) -> int:
    """
    Validate a listening port.

    Parameters:
    port: int or str - Port number

    Returns:
    int - The port as an integer

    Raises:
    ValidationError: If the port is not an integer in 1-65535
    """
    try:
        value = int(port)
    except (TypeError, ValueError):
        raise ValidationError(f"Port must be an integer, got '{port}'")

    if not MIN_PORT <= value <= MAX_PORT:
        raise ValidationError(f"Port must be between {MIN_PORT} and {MAX_PORT}, got {value}")

    return value
