"""Type binder: turns a parsed document into a value of the target type.

Architecture:
    Parsing (JSON text, XML tree) and binding are separate steps. Format
    deserializers produce plain Python documents (dicts, lists, scalars) and
    hand them to TypeBinder, which walks the target type recursively.

    At every node the binder first asks the configured converters whether
    they claim the node's type. Only when none does it fall back to its own
    rules:
    - sequences (list, tuple, set, Sequence, Iterable, ...)
    - mappings (dict, Mapping)
    - Optional and unions
    - pydantic models, field by field (aliases honored)
    - dataclasses, field by field
    - everything else through a pydantic TypeAdapter

Design Decisions:
    - Converter lookup at every level: a converter registered for a nested
      field type is reached even when the root type is a list of models
    - Models are validated after their fields are bound, so model validators
      still run on converter output
    - Only sequence-ness is inspected structurally; scalars and models are
      left to pydantic
"""

from __future__ import annotations

import collections.abc
import dataclasses
import types
import typing
from functools import lru_cache
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel, TypeAdapter

from .config import DeserializerConfig

_SEQUENCE_ORIGINS = frozenset(
    {
        list,
        tuple,
        set,
        frozenset,
        collections.abc.Sequence,
        collections.abc.MutableSequence,
        collections.abc.Iterable,
        collections.abc.Collection,
        collections.abc.Set,
        collections.abc.MutableSet,
    }
)
_MAPPING_ORIGINS = frozenset({dict, collections.abc.Mapping, collections.abc.MutableMapping})


def _unwrap(target: Any) -> Any:
    while get_origin(target) is typing.Annotated:
        target = get_args(target)[0]
    return target


def is_sequence_type(target: Any) -> bool:
    """Whether ``target`` describes a sequence of items (``str`` and ``bytes`` excluded)."""
    target = _unwrap(target)
    if target in (list, tuple, set, frozenset):
        return True
    return get_origin(target) in _SEQUENCE_ORIGINS


def _is_mapping_type(target: Any) -> bool:
    return target is dict or get_origin(target) in _MAPPING_ORIGINS


def _is_union(target: Any) -> bool:
    return get_origin(target) in (Union, types.UnionType)


@lru_cache(maxsize=256)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def _adapter_for(target: Any) -> TypeAdapter[Any]:
    try:
        return _adapter(target)
    except TypeError:
        # Unhashable type expression, build it uncached
        return TypeAdapter(target)


class TypeBinder:
    """Binds parsed documents to target types using a DeserializerConfig.

    Args:
        config: Converters and validation settings
        coerce_singletons: Accept a lone item (or a single-key wrapper
            element) where a sequence is expected. Used for XML, where a
            one-element list is indistinguishable from a single child.
    """

    def __init__(self, config: DeserializerConfig, *, coerce_singletons: bool = False) -> None:
        self._config = config
        self._coerce_singletons = coerce_singletons

    def bind(self, value: Any, target: Any) -> Any:
        """Bind ``value`` to ``target``.

        Raises:
            ValueError: If the value does not fit the target (includes pydantic
                ValidationError)
            TypeError: If the document shape is wrong for the target
        """
        return self._bind(value, target, "$")

    def _bind(self, value: Any, target: Any, path: str) -> Any:
        for converter in self._config.converters:
            if converter.can_convert(target):
                return converter.convert(value, target)

        target = _unwrap(target)
        if target is Any or target is object:
            return value
        if _is_union(target):
            return self._bind_union(value, target, path)
        if is_sequence_type(target):
            return self._bind_sequence(value, target, path)
        if _is_mapping_type(target):
            return self._bind_mapping(value, target, path)
        if isinstance(target, type) and issubclass(target, BaseModel):
            return self._bind_model(value, target, path)
        if isinstance(target, type) and dataclasses.is_dataclass(target):
            return self._bind_dataclass(value, target, path)
        return _adapter_for(target).validate_python(value, strict=self._config.strict or None)

    def _bind_union(self, value: Any, target: Any, path: str) -> Any:
        members = [arg for arg in get_args(target) if arg is not type(None)]
        if value is None and len(members) < len(get_args(target)):
            return None
        if len(members) == 1:
            return self._bind(value, members[0], path)

        errors: list[str] = []
        for member in members:
            try:
                return self._bind(value, member, path)
            except (ValueError, TypeError) as exc:
                errors.append(f"{member!r}: {exc}")
        raise ValueError(f"{path}: value matches no member of {target!r} ({'; '.join(errors)})")

    def _bind_sequence(self, value: Any, target: Any, path: str) -> Any:
        origin = get_origin(target) or target
        args = get_args(target)

        if not isinstance(value, list):
            if not self._coerce_singletons:
                raise TypeError(f"{path}: expected an array, got {type(value).__name__}")
            if value is None:
                value = []
            elif isinstance(value, dict) and len(value) == 1:
                inner = next(iter(value.values()))
                value = inner if isinstance(inner, list) else [inner]
            else:
                value = [value]

        if origin is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
            if len(args) != len(value):
                raise ValueError(f"{path}: expected {len(args)} items, got {len(value)}")
            return tuple(
                self._bind(item, arg, f"{path}[{i}]")
                for i, (item, arg) in enumerate(zip(value, args, strict=True))
            )

        item_type = args[0] if args else Any
        items = [self._bind(item, item_type, f"{path}[{i}]") for i, item in enumerate(value)]
        if origin is tuple:
            return tuple(items)
        if origin in (set, collections.abc.Set, collections.abc.MutableSet):
            return set(items)
        if origin is frozenset:
            return frozenset(items)
        return items

    def _bind_mapping(self, value: Any, target: Any, path: str) -> dict[Any, Any]:
        if not isinstance(value, dict):
            raise TypeError(f"{path}: expected an object, got {type(value).__name__}")
        args = get_args(target)
        key_type, value_type = args if len(args) == 2 else (Any, Any)
        return {
            self._bind(key, key_type, path): self._bind(item, value_type, f"{path}.{key}")
            for key, item in value.items()
        }

    def _bind_model(self, value: Any, target: type[BaseModel], path: str) -> BaseModel:
        if isinstance(value, target):
            return value
        if not isinstance(value, dict):
            raise TypeError(f"{path}: expected an object, got {type(value).__name__}")

        data = dict(value)
        for name, field in target.model_fields.items():
            alias = field.validation_alias if isinstance(field.validation_alias, str) else None
            for key in (alias, field.alias, name):
                if key is not None and key in data:
                    data[key] = self._bind(data[key], field.annotation, f"{path}.{key}")
                    break
        return target.model_validate(data, strict=self._config.strict or None)

    def _bind_dataclass(self, value: Any, target: type[Any], path: str) -> Any:
        if isinstance(value, target):
            return value
        if not isinstance(value, dict):
            raise TypeError(f"{path}: expected an object, got {type(value).__name__}")

        hints = typing.get_type_hints(target)
        kwargs = {
            field.name: self._bind(value[field.name], hints[field.name], f"{path}.{field.name}")
            for field in dataclasses.fields(target)
            if field.init and field.name in value
        }
        return target(**kwargs)
