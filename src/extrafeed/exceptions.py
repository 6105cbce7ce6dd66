"""Custom exceptions for extrafeed."""

from __future__ import annotations


class FeedError(Exception):
    """Base exception for all extrafeed errors."""

    pass


class InvalidArgumentError(FeedError, ValueError):
    """Raised when a required option (spreadsheet key, worksheet) is missing.

    Always raised before any request is made.
    """

    pass


class TransportError(FeedError):
    """Base exception for transport-related errors."""

    pass


class AuthenticationError(TransportError):
    """Raised when the feed rejects the authorization key (401)."""

    def __init__(self, message: str = "Invalid authorization key.") -> None:
        super().__init__(message)


class NotFoundError(TransportError):
    """Raised when a local feed document does not exist."""

    def __init__(self, path: str, message: str | None = None) -> None:
        self.path = path
        super().__init__(message or f"Feed not found: {path}")


class APIError(TransportError):
    """Raised for any other HTTP error status (>= 400)."""

    def __init__(self, status_code: int, reason: str) -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"HTTP error {status_code}: {reason}")


class FeedParseError(FeedError):
    """Raised when a response body is not well-formed XML."""

    pass
