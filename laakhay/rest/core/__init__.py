"""Core components."""

from .config import RestClientConfig
from .enums import ContentPolicy, HttpMethod, MaterializeState, MediaType, StatusClass
from .exceptions import (
    ConfigurationError,
    DeserializationError,
    RequestBuildError,
    RestError,
    TransportError,
)
from .request import RestRequest, RestRequestBuilder, request

__all__ = [
    "RestClientConfig",
    "HttpMethod",
    "StatusClass",
    "ContentPolicy",
    "MaterializeState",
    "MediaType",
    "RestError",
    "ConfigurationError",
    "RequestBuildError",
    "TransportError",
    "DeserializationError",
    "RestRequest",
    "RestRequestBuilder",
    "request",
]
