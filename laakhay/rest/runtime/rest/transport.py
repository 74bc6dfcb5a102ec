"""Transport protocol consumed by the Dispatcher."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from ...models import RawResponse


@runtime_checkable
class Transport(Protocol):
    """Moves bytes over the network.

    Implementations return every response as a RawResponse, whatever its
    status, and raise TransportError only when no status was obtained.
    Both methods are always awaited on the client's worker loop.
    """

    async def send(
        self,
        method: str,
        url: str,
        headers: Iterable[tuple[str, str]],
        body: bytes | None,
    ) -> RawResponse:
        """Send one request and return the uninterpreted response."""
        ...

    async def close(self) -> None:
        """Release connections held by the transport."""
        ...
