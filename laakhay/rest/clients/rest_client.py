"""RestClient: typed, deadlock-safe access to a REST API.

Architecture:
    RestClient composes the pipeline stages and runs them on its worker loop:

        send_async(request, T)
            -> Dispatcher.send(request)              (transport I/O)
            -> ResponseMaterializer.materialize(raw, T)
            -> RestResponse[T]

    The whole pipeline is one coroutine submitted to the client's
    BackgroundLoop, so stages run strictly in order and every internal await
    resumes on the worker loop. The returned PendingResponse may be awaited
    or blocked on from any thread, including one that runs its own event
    loop.

Design Decisions:
    - Configuration is frozen at construction: the RestClientConfig model is
      immutable and the DeserializerConfig is copied, so in-flight sends only
      ever read shared state
    - Transport is injectable: tests and callers can supply any Transport
    - Transport and deserialization failures fail the pending response;
      4xx/5xx statuses complete it normally

Example:
    >>> client = RestClient("https://api.example.com/")
    >>> response = client.send_async(RestRequest("api/books"), list[Book]).result()
    >>> response.status_code, len(response.content)
    (200, 5)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, TypeVar

from pydantic import ValidationError

from ..core.config import RestClientConfig
from ..core.exceptions import ConfigurationError
from ..core.request import RestRequest, RestRequestBuilder
from ..models import RestResponse
from ..runtime.materializer import ResponseMaterializer
from ..runtime.rest import Dispatcher, HTTPClient, Transport
from ..runtime.worker import BackgroundLoop, PendingResponse
from ..serialization import DeserializerConfig, DeserializerRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RestClient:
    """Asynchronous REST client returning typed response envelopes.

    Args:
        base_url: Base address requests are resolved against (alternative to ``config``)
        config: Full client configuration
        deserializer_config: Converters and validation settings; copied at construction
        transport: Transport to send through (defaults to an aiohttp HTTPClient)
        registry: Media type to deserializer mapping
        **settings: Extra RestClientConfig fields when ``base_url`` is given
            (timeout, user_agent, default_headers, default_media_type)

    Raises:
        ConfigurationError: If neither or both of base_url/config are given, or
            the settings are invalid
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        config: RestClientConfig | None = None,
        deserializer_config: DeserializerConfig | None = None,
        transport: Transport | None = None,
        registry: DeserializerRegistry | None = None,
        **settings: Any,
    ) -> None:
        if (base_url is None) == (config is None):
            raise ConfigurationError("Provide exactly one of base_url or config")
        if config is None:
            try:
                config = RestClientConfig(base_url=base_url, **settings)
            except ValidationError as exc:
                raise ConfigurationError(f"Invalid client configuration: {exc}") from exc
        elif settings:
            raise ConfigurationError("Extra settings are only accepted together with base_url")

        self._config = config
        self._deserializer_config = (deserializer_config or DeserializerConfig()).copy()
        self._transport = transport or HTTPClient(timeout=config.timeout)
        self._dispatcher = Dispatcher(self._transport, config)
        self._materializer = ResponseMaterializer(
            self._deserializer_config,
            registry or DeserializerRegistry(default=config.default_media_type),
        )
        self._worker = BackgroundLoop()
        self._closed = False

        logger.debug(
            "RestClient created",
            extra={
                "base_url": config.base_url,
                "converters": len(self._deserializer_config.converters),
            },
        )

    @property
    def config(self) -> RestClientConfig:
        return self._config

    @property
    def deserializer_config(self) -> DeserializerConfig:
        return self._deserializer_config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def closed(self) -> bool:
        return self._closed

    async def _pipeline(self, request: RestRequest, target: Any) -> RestResponse[Any]:
        raw = await self._dispatcher.send(request)
        return self._materializer.materialize(raw, target)

    async def _content(self, request: RestRequest, target: Any) -> Any:
        response = await self._pipeline(request, target)
        return response.content

    def _submit(self, coro: Any) -> PendingResponse[Any]:
        if self._closed:
            coro.close()
            raise RuntimeError("RestClient is closed")
        return PendingResponse(self._worker.submit(coro), self._worker)

    @staticmethod
    def _coerce(request: RestRequest | RestRequestBuilder) -> RestRequest:
        if isinstance(request, RestRequestBuilder):
            return request.build()
        return request

    def send_async(
        self,
        request: RestRequest | RestRequestBuilder,
        target: type[T] | Any = Any,
    ) -> PendingResponse[RestResponse[T]]:
        """Send ``request`` and materialize the body as ``target``.

        Returns immediately. The returned handle can be awaited from any
        event loop or blocked on with ``result()``, even from a thread that is
        running its own event loop.

        Args:
            request: Request (or unbuilt builder) to send
            target: Type of the expected body (scalar, model, list of models, ...)

        Returns:
            PendingResponse resolving to RestResponse[target]. It fails with
            TransportError or DeserializationError; error statuses resolve
            normally with ``content`` set to None.

        Raises:
            RuntimeError: If the client is closed
        """
        return self._submit(self._pipeline(self._coerce(request), target))

    def send(
        self,
        request: RestRequest | RestRequestBuilder,
        target: type[T] | Any = Any,
        *,
        timeout: float | None = None,
    ) -> RestResponse[T]:
        """Blocking form of send_async."""
        return self.send_async(request, target).result(timeout)

    def execute_async(
        self,
        request: RestRequest | RestRequestBuilder,
        target: type[T] | Any = Any,
    ) -> PendingResponse[T | None]:
        """Like send_async, but resolves to the content only."""
        return self._submit(self._content(self._coerce(request), target))

    def execute(
        self,
        request: RestRequest | RestRequestBuilder,
        target: type[T] | Any = Any,
        *,
        timeout: float | None = None,
    ) -> T | None:
        """Blocking form of execute_async."""
        return self.execute_async(request, target).result(timeout)

    def close(self) -> None:
        """Close the transport and stop the worker loop. Idempotent."""
        if self._closed:
            return
        if self._worker.in_loop():
            raise RuntimeError("Use aclose() to close the client from its own worker loop")
        self._closed = True
        try:
            self._worker.submit(self._transport.close()).result()
        finally:
            self._worker.close()

    async def aclose(self) -> None:
        """Async form of close; does not block the calling loop."""
        if self._closed:
            return
        self._closed = True
        try:
            await asyncio.wrap_future(self._worker.submit(self._transport.close()))
        finally:
            await asyncio.to_thread(self._worker.close)

    def __enter__(self) -> RestClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    async def __aenter__(self) -> RestClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
