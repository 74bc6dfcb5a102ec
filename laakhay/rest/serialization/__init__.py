"""Deserialization seam: converters, type binding, and format deserializers."""

from .binder import TypeBinder, is_sequence_type
from .config import DeserializerConfig
from .converters import Converter, TypeConverter
from .deserializers import (
    Deserializer,
    DeserializerRegistry,
    JsonDeserializer,
    TextDeserializer,
    XmlDeserializer,
)

__all__ = [
    "Converter",
    "TypeConverter",
    "DeserializerConfig",
    "TypeBinder",
    "is_sequence_type",
    "Deserializer",
    "JsonDeserializer",
    "XmlDeserializer",
    "TextDeserializer",
    "DeserializerRegistry",
]
