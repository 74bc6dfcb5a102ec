"""Core enumerations for HTTP methods, status classes, and content policies.

Architecture:
    This module defines the enums the send pipeline branches on. Status
    handling is expressed as enums plus an explicit table (see
    ``runtime.materializer.STATUS_POLICY``) so that every status code maps to
    exactly one content policy.

Key Types:
    - HttpMethod: Request verbs
    - StatusClass: Classification of an HTTP status code
    - ContentPolicy: What the materializer does for a status class
    - MaterializeState: Terminal state reached by one send
    - MediaType: Body formats understood by the deserializers

See Also:
    - ResponseMaterializer: Consumes StatusClass and ContentPolicy
    - DeserializerRegistry: Keyed by MediaType
"""

from __future__ import annotations

from enum import Enum

# Statuses that never carry a representation, whatever the transport returned.
_BODILESS_STATUSES = frozenset({204, 205, 304})


class HttpMethod(str, Enum):
    """HTTP request methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @property
    def allows_body(self) -> bool:
        """Whether a request body may be sent with this method."""
        return self not in (HttpMethod.GET, HttpMethod.HEAD)


class StatusClass(str, Enum):
    """Classification of an HTTP status code.

    NO_CONTENT is split out of the 2xx/3xx ranges because those statuses
    never carry a body, so they must not reach the deserializer.
    """

    INFORMATIONAL = "informational"
    SUCCESS = "success"
    NO_CONTENT = "no_content"
    REDIRECTION = "redirection"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"

    @classmethod
    def of(cls, status: int) -> StatusClass:
        """Classify a status code.

        Args:
            status: HTTP status code

        Returns:
            StatusClass for the code

        Raises:
            ValueError: If status is outside the 100-599 range
        """
        if status in _BODILESS_STATUSES:
            return cls.NO_CONTENT
        if 100 <= status < 200:
            return cls.INFORMATIONAL
        if 200 <= status < 300:
            return cls.SUCCESS
        if 300 <= status < 400:
            return cls.REDIRECTION
        if 400 <= status < 500:
            return cls.CLIENT_ERROR
        if 500 <= status < 600:
            return cls.SERVER_ERROR
        raise ValueError(f"Invalid HTTP status code: {status}")


class ContentPolicy(str, Enum):
    """What the materializer does with the body for a status class."""

    NO_BODY = "no_body"
    ERROR_STATUS = "error_status"
    READ_BODY = "read_body"


class MaterializeState(str, Enum):
    """State reached by a send once its response has been classified."""

    NO_CONTENT = "no_content"
    ERROR_STATUS = "error_status"
    EMPTY_BODY = "empty_body"
    DESERIALIZE = "deserialize"

    @property
    def expects_content(self) -> bool:
        return self is MaterializeState.DESERIALIZE


class MediaType(str, Enum):
    """Body formats understood by the client."""

    JSON = "application/json"
    XML = "application/xml"
    FORM = "application/x-www-form-urlencoded"
    TEXT = "text/plain"

    @classmethod
    def from_header(cls, content_type: str | None) -> MediaType | None:
        """Map a Content-Type header value to a MediaType.

        Structured suffixes are honored, so ``application/problem+json``
        maps to JSON and ``application/atom+xml`` maps to XML.

        Args:
            content_type: Raw Content-Type header value (parameters allowed)

        Returns:
            Matching MediaType, or None if the header is missing or unknown
        """
        if not content_type:
            return None
        mime = content_type.split(";", 1)[0].strip().lower()
        if mime == cls.JSON.value or mime.endswith("+json") or mime == "text/json":
            return cls.JSON
        if mime in (cls.XML.value, "text/xml") or mime.endswith("+xml"):
            return cls.XML
        if mime == cls.FORM.value:
            return cls.FORM
        if mime == cls.TEXT.value:
            return cls.TEXT
        return None
