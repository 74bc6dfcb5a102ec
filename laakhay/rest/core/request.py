"""Immutable request model and fluent builder.

Architecture:
    RestRequest is the logical description of one HTTP call: verb, resource
    path (optionally templated), headers, query parameters, and an encoded
    body. It carries no base address; the Dispatcher resolves the path
    against the client's configured base URL at send time.

Design Decisions:
    - Frozen dataclass: a request cannot change once handed to the client
    - Header pairs instead of a dict: the same header name may repeat
    - Encoded body: the builder serializes JSON/form bodies up front so the
      transport only ever sees bytes
    - Builder pattern: chainable construction, build() validates and freezes

See Also:
    - Dispatcher: Resolves and sends RestRequest instances
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, urlencode

from pydantic import TypeAdapter

from .enums import HttpMethod, MediaType
from .exceptions import RequestBuildError

__all__ = ["RestRequest", "RestRequestBuilder", "request"]

_SEGMENT_PATTERN = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")
_JSON_ENCODER = TypeAdapter(Any)

Pairs = tuple[tuple[str, str], ...]


def _coerce_method(method: HttpMethod | str) -> HttpMethod:
    if isinstance(method, HttpMethod):
        return method
    try:
        return HttpMethod(str(method).upper())
    except ValueError as exc:
        raise RequestBuildError(f"Unsupported HTTP method: {method!r}") from exc


@dataclass(frozen=True)
class RestRequest:
    """Immutable description of a single HTTP request."""

    resource: str
    method: HttpMethod = HttpMethod.GET
    headers: Pairs = ()
    query: Pairs = ()
    url_segments: Pairs = ()
    body: bytes | None = None
    content_type: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", _coerce_method(self.method))
        if self.body is not None and not self.method.allows_body:
            raise RequestBuildError(f"{self.method.value} requests cannot carry a body")

    @property
    def path(self) -> str:
        """Resource path with ``{name}`` placeholders replaced.

        Raises:
            RequestBuildError: If a placeholder has no matching URL segment
        """
        segments = dict(self.url_segments)

        def _substitute(match: re.Match[str]) -> str:
            name = match.group(1)
            if name not in segments:
                raise RequestBuildError(f"No value for URL segment '{name}' in '{self.resource}'")
            return quote(segments[name], safe="")

        return _SEGMENT_PATTERN.sub(_substitute, self.resource)

    def header_values(self, name: str) -> list[str]:
        """All values set for a header name (case-insensitive)."""
        lowered = name.lower()
        return [value for key, value in self.headers if key.lower() == lowered]


class RestRequestBuilder:
    """Fluent builder for RestRequest.

    Example:
        >>> req = (RestRequestBuilder()
        ...     .resource("api/books/{id}")
        ...     .add_url_segment("id", 5)
        ...     .add_header("Accept", "application/json")
        ...     .build())
        >>> req.path
        'api/books/5'
    """

    def __init__(self) -> None:
        self._resource: str | None = None
        self._method: HttpMethod = HttpMethod.GET
        self._headers: list[tuple[str, str]] = []
        self._query: list[tuple[str, str]] = []
        self._segments: dict[str, str] = {}
        self._body: bytes | None = None
        self._content_type: str | None = None

    def resource(self, resource: str) -> RestRequestBuilder:
        self._resource = resource
        return self

    def method(self, method: HttpMethod | str) -> RestRequestBuilder:
        self._method = _coerce_method(method)
        return self

    def add_header(self, name: str, value: str) -> RestRequestBuilder:
        """Append a header. Repeated names are kept, not replaced."""
        self._headers.append((name, str(value)))
        return self

    def add_query(self, name: str, value: Any) -> RestRequestBuilder:
        self._query.append((name, str(value)))
        return self

    def add_url_segment(self, name: str, value: Any) -> RestRequestBuilder:
        self._segments[name] = str(value)
        return self

    def json_body(self, payload: Any) -> RestRequestBuilder:
        """Encode payload as JSON (pydantic models and dataclasses included)."""
        self._body = _JSON_ENCODER.dump_json(payload, by_alias=True)
        self._content_type = MediaType.JSON.value
        return self

    def form_body(self, fields: dict[str, Any] | list[tuple[str, Any]]) -> RestRequestBuilder:
        items = fields.items() if isinstance(fields, dict) else fields
        self._body = urlencode([(k, str(v)) for k, v in items]).encode("utf-8")
        self._content_type = MediaType.FORM.value
        return self

    def raw_body(self, body: bytes, content_type: str) -> RestRequestBuilder:
        self._body = body
        self._content_type = content_type
        return self

    def build(self) -> RestRequest:
        """Build and validate the request.

        Returns:
            Frozen RestRequest

        Raises:
            RequestBuildError: If the resource is missing or the method forbids a body
        """
        if self._resource is None:
            raise RequestBuildError("resource must be provided")
        return RestRequest(
            resource=self._resource,
            method=self._method,
            headers=tuple(self._headers),
            query=tuple(self._query),
            url_segments=tuple(self._segments.items()),
            body=self._body,
            content_type=self._content_type,
        )


def request(resource: str, method: HttpMethod | str = HttpMethod.GET) -> RestRequestBuilder:
    """Start a builder for ``resource``."""
    return RestRequestBuilder().resource(resource).method(method)
