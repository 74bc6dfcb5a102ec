"""Response models returned by the send pipeline."""

from .response import RawResponse, RestResponse

__all__ = ["RawResponse", "RestResponse"]
