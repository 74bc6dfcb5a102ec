"""High-level clients."""

from .rest_client import RestClient

__all__ = ["RestClient"]
