"""Shared test doubles: book models, a counting converter, a fake transport, and a books API."""

from __future__ import annotations

import asyncio
import json
import threading
from collections.abc import Iterable
from datetime import date
from typing import Any

from aiohttp import web
from pydantic import BaseModel, ConfigDict, Field

from laakhay.rest import Converter, RawResponse

BOOKS: list[dict[str, Any]] = [
    {"id": 1, "title": "Dune", "author": {"name": "Frank Herbert"}, "publishedOn": "1965-08-01"},
    {"id": 2, "title": "Hyperion", "author": {"name": "Dan Simmons"}, "publishedOn": "1989-05-26"},
    {"id": 3, "title": "Neuromancer", "author": {"name": "William Gibson"}, "publishedOn": None},
    {"id": 4, "title": "Solaris", "author": {"name": "Stanislaw Lem"}, "publishedOn": "1961-01-01"},
    {"id": 5, "title": "Ubik", "author": {"name": "Philip K. Dick"}, "publishedOn": "1969-01-01"},
]

BOOKS_JSON = json.dumps(BOOKS).encode("utf-8")

BOOKS_XML = b"""<?xml version="1.0" encoding="utf-8"?>
<books xmlns="urn:books">
  <book id="1"><title>Dune</title><author><name>Frank Herbert</name></author></book>
  <book id="2"><title>Hyperion</title><author><name>Dan Simmons</name></author></book>
  <book id="3"><title>Neuromancer</title><author><name>William Gibson</name></author></book>
  <book id="4"><title>Solaris</title><author><name>Stanislaw Lem</name></author></book>
  <book id="5"><title>Ubik</title><author><name>Philip K. Dick</name></author></book>
</books>
"""


class Author(BaseModel):
    name: str

    model_config = ConfigDict(frozen=True)


class Book(BaseModel):
    id: int
    title: str
    author: Author
    published_on: date | None = Field(None, alias="publishedOn")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class CountingConverter(Converter):
    """Converter for Author that counts its invocations."""

    def __init__(self) -> None:
        self.calls = 0

    def can_convert(self, target: Any) -> bool:
        return target is Author

    def convert(self, raw: Any, target: Any) -> Author:
        self.calls += 1
        return Author(name=raw["name"])


def raw_response(
    status: int,
    body: bytes | None = None,
    content_type: str | None = "application/json; charset=utf-8",
    **kwargs: Any,
) -> RawResponse:
    headers = {"Content-Type": content_type} if content_type else {}
    return RawResponse(status=status, headers=headers, body=body, **kwargs)


class FakeTransport:
    """In-memory transport keyed by (method, path).

    Records the loop and thread every send ran on so tests can assert that
    pipeline code never ran on the caller's loop.
    """

    def __init__(self, routes: dict[tuple[str, str], RawResponse | Exception]) -> None:
        self.routes = routes
        self.calls: list[dict[str, Any]] = []
        self.loops: list[asyncio.AbstractEventLoop] = []
        self.threads: list[int] = []
        self.closed = False

    async def send(
        self,
        method: str,
        url: str,
        headers: Iterable[tuple[str, str]],
        body: bytes | None,
    ) -> RawResponse:
        self.loops.append(asyncio.get_running_loop())
        self.threads.append(threading.get_ident())
        self.calls.append({"method": method, "url": url, "headers": list(headers), "body": body})
        # Suspend once so the continuation has to be scheduled by the running loop
        await asyncio.sleep(0.01)
        path = url.split("://", 1)[-1].split("/", 1)[-1].split("?", 1)[0]
        result = self.routes[(method, path)]
        if isinstance(result, Exception):
            raise result
        return result

    async def close(self) -> None:
        self.closed = True


def create_books_app() -> web.Application:
    """Books API used by the local-server tests."""

    async def list_books(request: web.Request) -> web.Response:
        return web.json_response(BOOKS)

    async def list_books_xml(request: web.Request) -> web.Response:
        return web.Response(body=BOOKS_XML, content_type="application/xml")

    async def delete_books(request: web.Request) -> web.Response:
        return web.Response(status=204)

    async def not_found(request: web.Request) -> web.Response:
        return web.Response(status=404)

    async def server_error(request: web.Request) -> web.Response:
        return web.json_response({"error": "boom"}, status=500)

    async def broken(request: web.Request) -> web.Response:
        return web.Response(text="definitely not json", content_type="application/json")

    async def echo(request: web.Request) -> web.Response:
        return web.json_response(
            {
                "method": request.method,
                "path": request.path,
                "query": [[k, v] for k, v in request.query.items()],
                "headers": [[k, v] for k, v in request.headers.items()],
                "body": await request.text(),
            }
        )

    app = web.Application()
    app.router.add_get("/api/books", list_books)
    app.router.add_delete("/api/books", delete_books)
    app.router.add_get("/api/books.xml", list_books_xml)
    app.router.add_get("/api/broken", broken)
    app.router.add_get("/notsuccess/notfound", not_found)
    app.router.add_get("/notsuccess/internalservererror", server_error)
    app.router.add_route("*", "/echo/{tail:.*}", echo)
    return app
