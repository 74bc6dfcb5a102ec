"""aiohttp transport."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable

import aiohttp
from multidict import CIMultiDict

from ...core.config import DEFAULT_TIMEOUT
from ...core.exceptions import TransportError
from ...models import RawResponse

logger = logging.getLogger(__name__)

ResponseHook = Callable[[RawResponse], Awaitable[None] | None]


def _is_bodiless(method: str, status: int) -> bool:
    """Responses that cannot carry a body (RFC 9110 section 6.4.1)."""
    return method.upper() == "HEAD" or 100 <= status < 200 or status in (204, 304)


class HTTPClient:
    """Async HTTP transport backed by an aiohttp session.

    The session is created lazily on first use, so it binds to the loop that
    first sends through it (the client's worker loop). Responses are never
    raised for status; every status is returned as a RawResponse.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None
        self._response_hooks: list[ResponseHook] = []

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    def add_response_hook(self, hook: ResponseHook) -> None:
        """Register a callback invoked with every RawResponse (sync or async)."""
        self._response_hooks.append(hook)

    async def send(
        self,
        method: str,
        url: str,
        headers: Iterable[tuple[str, str]],
        body: bytes | None,
    ) -> RawResponse:
        """Send a request and return the raw response.

        Raises:
            TransportError: On connection failure, timeout, or a malformed response
        """
        try:
            async with self.session.request(
                method, url, headers=CIMultiDict(headers), data=body
            ) as response:
                payload = None if _is_bodiless(method, response.status) else await response.read()
                raw = RawResponse(
                    status=response.status,
                    headers=response.headers,
                    body=payload,
                    url=str(response.url),
                    reason=response.reason,
                    method=method,
                )
        except asyncio.TimeoutError as exc:
            raise TransportError(
                f"Request timed out after {self.timeout.total}s", url=url, method=method
            ) from exc
        except aiohttp.ClientError as exc:
            raise TransportError(f"{type(exc).__name__}: {exc}", url=url, method=method) from exc

        await self._run_hooks(raw)
        return raw

    async def _run_hooks(self, raw: RawResponse) -> None:
        for hook in self._response_hooks:
            try:
                result = hook(raw)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.warning(
                    "Response hook failed",
                    exc_info=True,
                    extra={"hook": getattr(hook, "__name__", repr(hook)), "status": raw.status},
                )

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
