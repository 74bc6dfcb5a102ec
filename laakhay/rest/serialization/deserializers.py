"""Format deserializers (JSON, XML) and the media type registry.

Each deserializer parses bytes into a plain document and binds it to the
target type with TypeBinder, so converters apply the same way whatever the
wire format.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from lxml import etree

from ..core.enums import MediaType
from ..core.exceptions import ConfigurationError, DeserializationError
from .binder import TypeBinder, is_sequence_type
from .config import DeserializerConfig


class Deserializer(ABC):
    """Parses a response body and binds it to a target type."""

    media_types: tuple[MediaType, ...] = ()
    coerce_singletons: bool = False

    @abstractmethod
    def parse(self, body: bytes, encoding: str) -> Any:
        """Parse raw bytes into a document (dicts, lists, scalars, or a tree)."""

    def shape(self, document: Any, target: Any) -> Any:
        """Adapt a parsed document to the shape of ``target`` before binding."""
        return document

    def deserialize(
        self,
        body: bytes,
        target: Any,
        config: DeserializerConfig,
        *,
        encoding: str | None = None,
    ) -> Any:
        """Deserialize ``body`` into a ``target`` value.

        Args:
            body: Non-empty response body
            target: Target type (scalar, model, or sequence of models)
            config: Converters and validation settings
            encoding: Charset announced by the response, if any

        Returns:
            The bound value

        Raises:
            DeserializationError: If parsing or binding fails
        """
        media_type = self.media_types[0].value if self.media_types else None
        try:
            document = self.parse(body, encoding or config.encoding)
        except (ValueError, LookupError, RecursionError, etree.XMLSyntaxError) as exc:
            raise DeserializationError(
                f"Malformed response body: {exc}", target=target, media_type=media_type
            ) from exc

        binder = TypeBinder(config, coerce_singletons=self.coerce_singletons)
        try:
            return binder.bind(self.shape(document, target), target)
        except Exception as exc:
            # Converters are caller code and may fail with any error type
            raise DeserializationError(
                f"Response body does not match {target!r}: {exc}",
                target=target,
                media_type=media_type,
            ) from exc


class TextDeserializer(Deserializer):
    """Plain text bodies, decoded with the response charset."""

    media_types = (MediaType.TEXT,)

    def parse(self, body: bytes, encoding: str) -> Any:
        return body.decode(encoding)


class JsonDeserializer(Deserializer):
    """JSON bodies via the standard json module."""

    media_types = (MediaType.JSON,)

    def parse(self, body: bytes, encoding: str) -> Any:
        return json.loads(body.decode(encoding))


class XmlDeserializer(Deserializer):
    """XML bodies via lxml.

    Elements become dicts keyed by local name (namespaces dropped),
    attributes become keys, repeated children become lists, and leaf
    elements become their stripped text. For sequence targets the root
    element is the collection and its children are the items.
    """

    media_types = (MediaType.XML,)
    coerce_singletons = True

    def parse(self, body: bytes, encoding: str) -> Any:
        # A declared encoding wins over the charset. Parsers are not shared:
        # lxml parser instances are not thread-safe.
        parser = etree.XMLParser(
            resolve_entities=False,
            no_network=True,
            encoding=None if _XML_DECLARED_ENCODING.match(body) else encoding,
        )
        return etree.fromstring(body, parser=parser)

    def shape(self, document: Any, target: Any) -> Any:
        if is_sequence_type(target):
            return [_element_to_python(child) for child in document if isinstance(child.tag, str)]
        return _element_to_python(document)


_XML_DECLARED_ENCODING = re.compile(rb"\s*<\?xml[^>]*\bencoding\s*=")


def _element_to_python(element: Any) -> Any:
    children = [child for child in element if isinstance(child.tag, str)]
    text = element.text.strip() if element.text and element.text.strip() else None
    if not children and not element.attrib:
        return text

    result: dict[str, Any] = {
        etree.QName(name).localname: value for name, value in element.attrib.items()
    }
    repeated: set[str] = set()
    for child in children:
        key = etree.QName(child).localname
        value = _element_to_python(child)
        if key not in result:
            result[key] = value
        elif key in repeated:
            result[key].append(value)
        else:
            result[key] = [result[key], value]
            repeated.add(key)
    if text is not None and not children:
        result["#text"] = text
    return result


class DeserializerRegistry:
    """Maps response media types to deserializers.

    Responses whose Content-Type is missing or has no registered
    deserializer use the default media type's deserializer.
    """

    def __init__(
        self,
        deserializers: Iterable[Deserializer] | None = None,
        *,
        default: MediaType = MediaType.JSON,
    ) -> None:
        if deserializers is None:
            deserializers = (JsonDeserializer(), XmlDeserializer(), TextDeserializer())
        self._by_media_type: dict[MediaType, Deserializer] = {}
        for deserializer in deserializers:
            for media_type in deserializer.media_types:
                self._by_media_type[media_type] = deserializer
        if default not in self._by_media_type:
            raise ConfigurationError(
                f"No deserializer registered for default media type {default.value}"
            )
        self._default = default

    @property
    def default(self) -> MediaType:
        return self._default

    def resolve(self, media_type: MediaType | None) -> Deserializer:
        if media_type is not None and media_type in self._by_media_type:
            return self._by_media_type[media_type]
        return self._by_media_type[self._default]

    def supported(self) -> list[MediaType]:
        return list(self._by_media_type)
