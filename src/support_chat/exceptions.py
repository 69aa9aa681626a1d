"""Domain exception hierarchy for the support chat client."""

from __future__ import annotations


class SupportChatError(RuntimeError):
    """Base class for all domain-level support chat errors."""


class TransportError(SupportChatError):
    """Raised when the support chat backend could not produce a reply."""


class SupportConnectionError(TransportError):
    """Raised when the support API cannot be reached or times out."""


class TransportHTTPError(TransportError):
    """Raised when the support API answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitedError(TransportHTTPError):
    """Raised when the support API rejects the request with HTTP 429."""

    def __init__(
        self,
        message: str,
        retry_after: str | None = None,
        remaining: str | None = None,
    ) -> None:
        super().__init__(message, status_code=429)
        self.retry_after = retry_after
        self.remaining = remaining


class ReplyDecodeError(TransportError):
    """Raised when the support API returns a body that is not a reply object."""


class ConfigValidationError(SupportChatError):
    """Raised when configuration cannot be validated safely."""
