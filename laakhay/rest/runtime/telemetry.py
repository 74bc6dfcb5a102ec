"""Structured logging for the send pipeline.

Every pipeline stage reports through these helpers so event names and
context keys stay consistent. Records carry their context in ``extra``;
the library never installs handlers.
"""

from __future__ import annotations

import logging

from ..core.enums import MaterializeState

logger = logging.getLogger(__name__)


def log_request_dispatched(*, method: str, url: str, has_body: bool) -> None:
    """Log a request handed to the transport."""
    logger.debug(
        "request_dispatched",
        extra={"method": method, "url": url, "has_body": has_body},
    )


def log_response_received(
    *,
    method: str,
    url: str,
    status: int,
    body_bytes: int | None,
    latency_ms: float,
) -> None:
    """Log a response returned by the transport.

    Args:
        method: Request method
        url: Resolved request URL
        status: HTTP status code
        body_bytes: Body length, or None if the response had no body
        latency_ms: Transport round-trip time in milliseconds
    """
    logger.debug(
        "response_received",
        extra={
            "method": method,
            "url": url,
            "status": status,
            "body_bytes": body_bytes,
            "latency_ms": latency_ms,
        },
    )


def log_response_materialized(*, status: int, state: MaterializeState, target: object) -> None:
    logger.debug(
        "response_materialized",
        extra={"status": status, "state": state.value, "target": repr(target)},
    )


def log_transport_failed(*, method: str, url: str, error_type: str, error_message: str) -> None:
    logger.warning(
        "transport_failed",
        extra={
            "method": method,
            "url": url,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_deserialization_failed(*, status: int, target: object, error_message: str) -> None:
    logger.warning(
        "deserialization_failed",
        extra={"status": status, "target": repr(target), "error_message": error_message},
    )
