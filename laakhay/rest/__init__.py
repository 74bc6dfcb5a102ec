"""Laakhay REST - typed asynchronous REST client."""

from .clients import RestClient
from .core import (
    ConfigurationError,
    ContentPolicy,
    DeserializationError,
    HttpMethod,
    MaterializeState,
    MediaType,
    RequestBuildError,
    RestClientConfig,
    RestError,
    RestRequest,
    RestRequestBuilder,
    StatusClass,
    TransportError,
    request,
)
from .models import RawResponse, RestResponse
from .runtime import (
    STATUS_POLICY,
    BackgroundLoop,
    Dispatcher,
    HTTPClient,
    PendingResponse,
    ResponseMaterializer,
    Transport,
)
from .serialization import (
    Converter,
    Deserializer,
    DeserializerConfig,
    DeserializerRegistry,
    JsonDeserializer,
    TextDeserializer,
    TypeConverter,
    XmlDeserializer,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "RestClient",
    "RestClientConfig",
    # Requests
    "RestRequest",
    "RestRequestBuilder",
    "request",
    "HttpMethod",
    # Responses
    "RawResponse",
    "RestResponse",
    "PendingResponse",
    # Pipeline
    "Dispatcher",
    "ResponseMaterializer",
    "STATUS_POLICY",
    "StatusClass",
    "ContentPolicy",
    "MaterializeState",
    "MediaType",
    "Transport",
    "HTTPClient",
    "BackgroundLoop",
    # Deserialization
    "Converter",
    "TypeConverter",
    "DeserializerConfig",
    "Deserializer",
    "JsonDeserializer",
    "XmlDeserializer",
    "TextDeserializer",
    "DeserializerRegistry",
    # Exceptions
    "RestError",
    "ConfigurationError",
    "RequestBuildError",
    "TransportError",
    "DeserializationError",
]
