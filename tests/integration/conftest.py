"""Shared fixtures for integration tests.

The books API runs in-process on its own worker loop, so tests exercise the
real aiohttp transport without network access.
"""

import pytest
from aiohttp.test_utils import TestServer

from laakhay.rest import BackgroundLoop
from tests.mocks import create_books_app


@pytest.fixture(scope="session")
def books_server():
    """Base URL of a local books API server."""
    loop = BackgroundLoop(name="books-server")
    server = TestServer(create_books_app())
    loop.submit(server.start_server()).result(10)
    yield str(server.make_url("/"))
    loop.submit(server.close()).result(10)
    loop.close()
