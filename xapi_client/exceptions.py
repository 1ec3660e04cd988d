"""
Domain specific exception hierarchy for the xapi_client package.
"""

from __future__ import annotations

from typing import Sequence


class XClientError(Exception):
    """Base exception for all library errors."""


class ConfigurationError(XClientError):
    """Raised when required configuration or credentials are missing."""


class TransportError(XClientError):
    """Raised when the underlying HTTP exchange fails (connection, TLS, decoding)."""


class ApiResponseError(XClientError):
    """Raised when the X API returns an error payload."""

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        messages: Sequence[str] = (),
    ) -> None:
        super().__init__(message)
        self.code = code
        self.messages = tuple(messages)


class RateLimitExceeded(ApiResponseError):
    """Raised when the X API answers with "Too Many Requests"."""

    def __init__(
        self,
        message: str,
        *,
        reset_at: int | None = None,
        messages: Sequence[str] = (),
    ) -> None:
        super().__init__(message, code=429, messages=messages)
        self.reset_at = reset_at


class UnknownResponseError(ApiResponseError):
    """Raised when a response carries neither data nor error information."""


class BadMediaError(XClientError):
    """Raised when a media endpoint answers with an unexpected status or shape."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MediaValidationError(XClientError):
    """Raised when local media does not satisfy upload requirements."""


class MediaProcessingTimeout(ApiResponseError):
    """Raised when media processing does not complete in the allocated time."""


class MediaProcessingFailed(ApiResponseError):
    """Raised when the API reports failure for an uploaded media asset."""
