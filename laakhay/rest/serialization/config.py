"""Deserializer configuration."""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..core.exceptions import ConfigurationError
from .converters import Converter


@dataclass(frozen=True)
class DeserializerConfig:
    """Read-only settings applied to every deserialization of one client.

    ``converters`` accepts any iterable and is stored as a tuple, so a list
    the caller keeps mutating after construction has no effect on the
    config. The client takes its own copy at construction as well.
    """

    converters: tuple[Converter, ...] = ()
    strict: bool = False
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        converters = tuple(self.converters)
        for converter in converters:
            if not isinstance(converter, Converter):
                raise ConfigurationError(
                    f"Converters must implement Converter, got {type(converter).__name__}"
                )
        object.__setattr__(self, "converters", converters)

    def with_converters(self, *converters: Converter) -> DeserializerConfig:
        """Return a new config with ``converters`` appended."""
        return replace(self, converters=(*self.converters, *converters))

    def copy(self) -> DeserializerConfig:
        return replace(self)
