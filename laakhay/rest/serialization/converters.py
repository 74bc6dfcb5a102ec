"""Custom converter capability.

A converter claims target types through ``can_convert`` and builds values
for them through ``convert``. During deserialization the binder asks every
registered converter, in registration order, before applying its own rules,
at every level of the target type (the root type, sequence items, model
fields, mapping values). The first converter that claims a type wins.

Any exception a converter raises is reported by the deserializer as
``DeserializationError``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any


class Converter(ABC):
    """Capability interface for caller-supplied type conversion."""

    @abstractmethod
    def can_convert(self, target: Any) -> bool:
        """Return True if this converter builds values of ``target``."""

    @abstractmethod
    def convert(self, raw: Any, target: Any) -> Any:
        """Build a ``target`` value from the parsed document fragment ``raw``."""


class TypeConverter(Converter):
    """Converter for exactly one target type, backed by a plain function.

    Example:
        >>> money = TypeConverter(Decimal, lambda raw: Decimal(str(raw)).quantize(Decimal("0.01")))
    """

    def __init__(self, target: Any, func: Callable[[Any], Any]) -> None:
        self.target = target
        self._func = func

    def can_convert(self, target: Any) -> bool:
        return target == self.target

    def convert(self, raw: Any, target: Any) -> Any:
        return self._func(raw)

    def __repr__(self) -> str:
        return f"TypeConverter({self.target!r})"
