"""Exceptions raised while refreshing the episode feed.

Exception Hierarchy:
    EpisodeFeedError (base)
    ├── FetchError - transport failure or non-2xx response
    └── ParseError - feed markup that is not well-formed

A feed without entries is not an error: it yields an empty episode list.
"""

from typing import Optional


class EpisodeFeedError(Exception):
    """Base exception for a failed refresh cycle.

    Attributes:
        url: Feed URL the refresh was working on
        message: Human-readable error message
    """

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        self.url = url
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.url:
            return f"{self.message} ({self.url})"
        return self.message


class FetchError(EpisodeFeedError):
    """Raised when the feed cannot be downloaded.

    Common causes:
    - Network failure or timeout
    - Non-2xx HTTP status (status_code is set)
    - Invalid feed URL
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, url=url)


class ParseError(EpisodeFeedError):
    """Raised when the downloaded feed is not well-formed XML."""
