"""Response materialization: status policy and deserialization.

Architecture:
    The materializer turns a RawResponse into a RestResponse[T]. It first
    classifies the response through STATUS_POLICY, a total table from
    StatusClass to ContentPolicy, then deserializes only when the policy
    says to read the body and the body is non-empty.

    Sent -> classify -> NO_CONTENT | ERROR_STATUS | EMPTY_BODY | DESERIALIZE
    DESERIALIZE -> materialized content, or DeserializationError

Design Decisions:
    - Table, not branches: the policy for every status class is listed in
      one place and checked for completeness at import time
    - Error statuses are results: 4xx/5xx return an envelope without
      content and with the real status, never an exception
    - Failed deserialization raises: absent content always means "no body
      was expected or present", never "the body was unreadable"
    - Stateless: materializing the same response twice gives equal results
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, TypeVar

from ..core.enums import ContentPolicy, MaterializeState, StatusClass
from ..core.exceptions import DeserializationError
from ..models import RawResponse, RestResponse
from ..serialization import DeserializerConfig, DeserializerRegistry
from .telemetry import log_deserialization_failed, log_response_materialized

T = TypeVar("T")

STATUS_POLICY: Mapping[StatusClass, ContentPolicy] = MappingProxyType(
    {
        StatusClass.INFORMATIONAL: ContentPolicy.NO_BODY,
        StatusClass.SUCCESS: ContentPolicy.READ_BODY,
        StatusClass.NO_CONTENT: ContentPolicy.NO_BODY,
        StatusClass.REDIRECTION: ContentPolicy.NO_BODY,
        StatusClass.CLIENT_ERROR: ContentPolicy.ERROR_STATUS,
        StatusClass.SERVER_ERROR: ContentPolicy.ERROR_STATUS,
    }
)

_missing = set(StatusClass) - set(STATUS_POLICY)
if _missing:
    raise RuntimeError(f"STATUS_POLICY has no entry for {sorted(c.value for c in _missing)}")


class ResponseMaterializer:
    """Applies the status policy and deserializes response bodies.

    Args:
        config: Converters and validation settings, read-only for the
            materializer's lifetime
        registry: Media type to deserializer mapping (JSON, XML and plain text by default)
    """

    def __init__(
        self,
        config: DeserializerConfig | None = None,
        registry: DeserializerRegistry | None = None,
    ) -> None:
        self._config = config or DeserializerConfig()
        self._registry = registry or DeserializerRegistry()

    @property
    def config(self) -> DeserializerConfig:
        return self._config

    @staticmethod
    def classify(raw: RawResponse) -> MaterializeState:
        """Decide what happens to the body of ``raw``."""
        policy = STATUS_POLICY[StatusClass.of(raw.status)]
        if policy is ContentPolicy.ERROR_STATUS:
            return MaterializeState.ERROR_STATUS
        if policy is ContentPolicy.NO_BODY:
            return MaterializeState.NO_CONTENT
        return MaterializeState.DESERIALIZE if raw.has_body else MaterializeState.EMPTY_BODY

    def materialize(self, raw: RawResponse, target: type[T] | Any) -> RestResponse[T]:
        """Build the typed response envelope for ``raw``.

        Args:
            raw: Response returned by the Dispatcher
            target: Type to deserialize the body into

        Returns:
            RestResponse whose content is set only for a successful,
            non-empty, deserializable response

        Raises:
            DeserializationError: If a body was expected but could not be converted
        """
        state = self.classify(raw)
        if not state.expects_content:
            log_response_materialized(status=raw.status, state=state, target=target)
            return RestResponse(http_response=raw)

        deserializer = self._registry.resolve(raw.media_type)
        try:
            content = deserializer.deserialize(
                raw.body, target, self._config, encoding=raw.charset
            )
        except DeserializationError as exc:
            exc.status_code = raw.status
            log_deserialization_failed(status=raw.status, target=target, error_message=str(exc))
            raise

        log_response_materialized(status=raw.status, state=state, target=target)
        return RestResponse(http_response=raw, content=content)
