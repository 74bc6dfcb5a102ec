"""Worker event loop that makes sends safe to block on.

Architecture:
    A caller may run on a single-threaded event loop (a UI loop, a request
    loop) and still block that thread on the result of a send. If the send's
    coroutines were scheduled on the caller's loop, the blocked thread could
    never run them and the call would deadlock.

    The client therefore never runs pipeline code on the caller's loop. Each
    send is submitted as a single coroutine to a BackgroundLoop, an asyncio
    event loop owned by a dedicated daemon thread. Every await inside the
    pipeline (transport I/O, body reads, hooks) resumes on that worker loop,
    so completing a send never needs the caller's thread.

Design Decisions:
    - One worker thread per client, started lazily on the first send
    - PendingResponse is both awaitable (resumes on the awaiting loop) and
      blockable (``result()``), mirroring a concurrent future
    - Blocking from the worker loop itself is the one real deadlock; it is
      detected and raised instead of hanging

See Also:
    - RestClient.send_async: Submits the pipeline to the worker
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
from collections.abc import Coroutine, Generator
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BackgroundLoop:
    """An asyncio event loop running on its own daemon thread."""

    def __init__(self, name: str = "laakhay-rest-worker") -> None:
        self._name = name
        self._lock = threading.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def in_loop(self) -> bool:
        """Whether the calling thread is the worker thread."""
        return self._thread is not None and threading.get_ident() == self._thread.ident

    def _ensure_started(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._closed:
                raise RuntimeError("Worker loop is closed")
            if self._loop is None:
                loop = asyncio.new_event_loop()
                ready = threading.Event()
                thread = threading.Thread(
                    target=self._run, args=(loop, ready), name=self._name, daemon=True
                )
                thread.start()
                ready.wait()
                self._loop, self._thread = loop, thread
                logger.debug("Worker loop started", extra={"thread": self._name})
            return self._loop

    @staticmethod
    def _run(loop: asyncio.AbstractEventLoop, ready: threading.Event) -> None:
        asyncio.set_event_loop(loop)
        loop.call_soon(ready.set)
        try:
            loop.run_forever()
        finally:
            pending = asyncio.all_tasks(loop)
            for task in pending:
                task.cancel()
            if pending:
                loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            loop.run_until_complete(loop.shutdown_asyncgens())
            loop.close()

    def submit(self, coro: Coroutine[Any, Any, T]) -> concurrent.futures.Future[T]:
        """Schedule ``coro`` on the worker loop.

        Raises:
            RuntimeError: If the worker loop has been closed
        """
        try:
            loop = self._ensure_started()
        except RuntimeError:
            coro.close()
            raise
        return asyncio.run_coroutine_threadsafe(coro, loop)

    def close(self, timeout: float | None = 5.0) -> None:
        """Stop the loop and join the worker thread. Idempotent.

        Raises:
            RuntimeError: If called from the worker thread itself
        """
        if self.in_loop():
            raise RuntimeError("Cannot close the worker loop from inside the worker loop")
        with self._lock:
            if self._closed:
                return
            self._closed = True
            loop, thread = self._loop, self._thread
        if loop is None or thread is None:
            return
        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout)
        logger.debug("Worker loop stopped", extra={"thread": self._name})


class PendingResponse(Generic[T]):
    """Handle on a send running on the worker loop.

    ``await pending`` suspends the awaiting coroutine on its own loop;
    ``pending.result()`` blocks the calling thread. Both are safe from a
    thread that is itself running an event loop.
    """

    def __init__(self, future: concurrent.futures.Future[T], worker: BackgroundLoop) -> None:
        self._future = future
        self._worker = worker

    def __await__(self) -> Generator[Any, None, T]:
        return asyncio.wrap_future(self._future).__await__()

    def result(self, timeout: float | None = None) -> T:
        """Block until the send completes and return its result.

        Raises:
            RuntimeError: If called from the worker loop before completion
            TimeoutError: If ``timeout`` elapses first
            TransportError, DeserializationError: If the send failed
        """
        if self._worker.in_loop() and not self._future.done():
            raise RuntimeError(
                "Blocking on a pending response from the client's worker loop would deadlock; "
                "await it instead"
            )
        return self._future.result(timeout)

    def exception(self, timeout: float | None = None) -> BaseException | None:
        return self._future.exception(timeout)

    def done(self) -> bool:
        return self._future.done()

    def cancel(self) -> bool:
        return self._future.cancel()
