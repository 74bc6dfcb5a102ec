"""Runtime: dispatch, materialization, and the worker loop."""

from .materializer import STATUS_POLICY, ResponseMaterializer
from .rest import Dispatcher, HTTPClient, ResponseHook, Transport
from .worker import BackgroundLoop, PendingResponse

__all__ = [
    "STATUS_POLICY",
    "ResponseMaterializer",
    "Dispatcher",
    "HTTPClient",
    "ResponseHook",
    "Transport",
    "BackgroundLoop",
    "PendingResponse",
]
