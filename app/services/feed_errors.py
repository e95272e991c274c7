"""Errors raised by the feed pipeline.

Every error carries the HTTP status it maps to when
``settings.strict_error_status`` is enabled; otherwise all of them are
reported as a flat 500 with the message as the body.
"""


class FeedError(Exception):
    """Base class for feed pipeline failures."""

    strict_status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FeedInputError(FeedError):
    """The request did not identify a usable feed URL."""

    strict_status_code = 400


class FeedFetchError(FeedError):
    """The upstream feed host could not be reached or answered non-2xx."""

    strict_status_code = 502


class FeedTimeoutError(FeedFetchError):
    """The upstream feed host did not answer in time."""

    strict_status_code = 504


class FeedDecodeError(FeedError):
    """The feed body was not well-formed RSS, or could not be encoded."""
