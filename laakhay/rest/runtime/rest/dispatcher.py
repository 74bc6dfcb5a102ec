"""Dispatcher: sends a RestRequest and returns the raw response."""

from __future__ import annotations

import time

from yarl import URL

from ...core.config import RestClientConfig
from ...core.enums import MediaType
from ...core.exceptions import TransportError
from ...core.request import RestRequest
from ...models import RawResponse
from ..telemetry import log_request_dispatched, log_response_received, log_transport_failed
from .transport import Transport

DEFAULT_ACCEPT = f"{MediaType.JSON.value}, {MediaType.XML.value};q=0.9"


class Dispatcher:
    """Resolves requests against the base URL and hands them to the transport.

    The Dispatcher knows nothing about target types. It returns exactly what
    the transport produced; 4xx and 5xx responses are results, not errors.
    """

    def __init__(self, transport: Transport, config: RestClientConfig) -> None:
        self._t = transport
        self._config = config

    @property
    def transport(self) -> Transport:
        return self._t

    def resolve_url(self, request: RestRequest) -> URL:
        """Join the request path onto the base URL and append query parameters.

        Absolute request paths are used as-is.
        """
        path = request.path
        url = URL(path)
        if not url.is_absolute():
            url = URL(f"{self._config.base_url.rstrip('/')}/{path.lstrip('/')}")
        if request.query:
            url = url.extend_query(list(request.query))
        return url

    def build_headers(self, request: RestRequest) -> list[tuple[str, str]]:
        """Client defaults first, then request headers, then implied headers."""
        headers = [*self._config.default_headers, *request.headers]
        present = {name.lower() for name, _ in headers}
        if "accept" not in present:
            headers.append(("Accept", DEFAULT_ACCEPT))
        if self._config.user_agent and "user-agent" not in present:
            headers.append(("User-Agent", self._config.user_agent))
        if request.content_type and "content-type" not in present:
            headers.append(("Content-Type", request.content_type))
        return headers

    async def send(self, request: RestRequest) -> RawResponse:
        """Send ``request`` through the transport.

        Returns:
            RawResponse with status and body exactly as received

        Raises:
            TransportError: If no response was obtained
            RequestBuildError: If the request path cannot be rendered
        """
        url = str(self.resolve_url(request))
        method = request.method.value
        headers = self.build_headers(request)

        log_request_dispatched(method=method, url=url, has_body=request.body is not None)
        started = time.perf_counter()
        try:
            raw = await self._t.send(method, url, headers, request.body)
        except TransportError as exc:
            log_transport_failed(
                method=method,
                url=url,
                error_type=type(exc.__cause__ or exc).__name__,
                error_message=str(exc),
            )
            raise

        if not 100 <= raw.status < 600:
            exc = TransportError(f"Malformed response: status {raw.status}", url=url, method=method)
            log_transport_failed(
                method=method, url=url, error_type="InvalidStatus", error_message=str(exc)
            )
            raise exc

        log_response_received(
            method=method,
            url=url,
            status=raw.status,
            body_bytes=None if raw.body is None else len(raw.body),
            latency_ms=(time.perf_counter() - started) * 1000,
        )
        return raw
