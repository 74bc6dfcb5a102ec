"""Raw and typed response models.

Architecture:
    RawResponse is exactly what the transport returned: status, headers, and
    the body as bytes. ``body is None`` means the response had no body at all,
    ``body == b""`` means it had an empty one. RestResponse pairs a
    RawResponse with the optional value materialized from it.

Design Decisions:
    - Frozen dataclasses: responses are created once per send and never change
    - CIMultiDictProxy headers: case-insensitive, read-only, repeated names kept
    - content is None unless a body was expected, present, and deserialized;
      callers must check ``status_code`` to tell "no content" from "error"
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Generic, TypeVar

from multidict import CIMultiDict, CIMultiDictProxy

from ..core.enums import MediaType, StatusClass

T = TypeVar("T")


def _freeze_headers(
    headers: Mapping[str, str] | Iterable[tuple[str, str]] | None,
) -> CIMultiDictProxy[str]:
    if isinstance(headers, CIMultiDictProxy):
        return headers
    return CIMultiDictProxy(CIMultiDict(headers or ()))


@dataclass(frozen=True)
class RawResponse:
    """Uninterpreted HTTP response."""

    status: int
    headers: CIMultiDictProxy[str]
    body: bytes | None = None
    url: str | None = None
    reason: str | None = None
    method: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _freeze_headers(self.headers))

    @property
    def status_class(self) -> StatusClass:
        return StatusClass.of(self.status)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300

    @property
    def has_body(self) -> bool:
        """True when the body is present and non-empty."""
        return bool(self.body)

    @property
    def content_type(self) -> str | None:
        return self.headers.get("Content-Type")

    @property
    def media_type(self) -> MediaType | None:
        return MediaType.from_header(self.content_type)

    @property
    def charset(self) -> str | None:
        """Charset parameter of the Content-Type header, if any."""
        if not self.content_type:
            return None
        for param in self.content_type.split(";")[1:]:
            key, _, value = param.partition("=")
            if key.strip().lower() == "charset" and value:
                return value.strip().strip('"')
        return None

    def text(self, encoding: str = "utf-8") -> str | None:
        """Body decoded with the response charset, falling back to ``encoding``."""
        if self.body is None:
            return None
        return self.body.decode(self.charset or encoding, errors="replace")


@dataclass(frozen=True)
class RestResponse(Generic[T]):
    """Raw response paired with its optional materialized content."""

    http_response: RawResponse
    content: T | None = None

    @property
    def status_code(self) -> int:
        return self.http_response.status

    @property
    def headers(self) -> CIMultiDictProxy[str]:
        return self.http_response.headers

    @property
    def is_success(self) -> bool:
        return self.http_response.is_success
