"""REST runtime: transport and dispatch."""

from .dispatcher import Dispatcher
from .http_client import HTTPClient, ResponseHook
from .transport import Transport

__all__ = [
    "Dispatcher",
    "HTTPClient",
    "ResponseHook",
    "Transport",
]
