"""Custom exception hierarchy.

Only failures that prevent a typed response from being produced are raised:
transport failures and deserialization failures. HTTP error statuses are
returned to the caller inside a ``RestResponse`` and never raised.
"""

from __future__ import annotations

from typing import Any


class RestError(Exception):
    """Base exception for all library errors."""

    pass


class ConfigurationError(RestError):
    """Client configuration is invalid."""

    pass


class RequestBuildError(RestError):
    """A request could not be assembled (missing URL segment, body on GET, ...)."""

    pass


class TransportError(RestError):
    """The request failed before any HTTP status was obtained.

    Covers connection failures, timeouts, and malformed responses. Never
    retried by the client.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        method: str | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.method = method


class DeserializationError(RestError):
    """A body was present and expected but could not be converted to the target type.

    This signals a contract mismatch between the API and the requested type;
    it is never mapped to an absent content value.
    """

    def __init__(
        self,
        message: str,
        target: Any = None,
        status_code: int | None = None,
        media_type: str | None = None,
    ) -> None:
        super().__init__(message)
        self.target = target
        self.status_code = status_code
        self.media_type = media_type
