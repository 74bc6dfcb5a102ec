"""Precise unit tests for TypeBinder.

Tests focus on converter routing at every nesting level and on the
structural rules (sequences, mappings, unions, models, dataclasses).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

import pytest
from pydantic import BaseModel, ValidationError

from laakhay.rest.serialization import (
    DeserializerConfig,
    TypeBinder,
    TypeConverter,
    is_sequence_type,
)
from tests.mocks import BOOKS, Author, Book, CountingConverter


class Genre(str, Enum):
    SCIFI = "scifi"
    FANTASY = "fantasy"


@dataclass
class Shelf:
    label: str
    books: list[Book]


class Library(BaseModel):
    name: str
    shelves: dict[str, list[Book]]


@pytest.fixture
def binder():
    return TypeBinder(DeserializerConfig())


class TestIsSequenceType:
    """Test sequence detection."""

    @pytest.mark.parametrize(
        "target",
        [list, list[int], tuple[int, ...], set[str], Sequence[Book], Iterable[Book], frozenset],
    )
    def test_sequences(self, target):
        """Test sequence targets are detected."""
        assert is_sequence_type(target)

    @pytest.mark.parametrize("target", [str, bytes, int, Book, dict[str, int], Any])
    def test_non_sequences(self, target):
        """Test strings, scalars, models and mappings are not sequences."""
        assert not is_sequence_type(target)


class TestTypeBinderStructure:
    """Test structural binding rules."""

    def test_scalars(self, binder):
        """Test scalars go through pydantic lax validation."""
        assert binder.bind("5", int) == 5
        assert binder.bind("2020-01-02", date) == date(2020, 1, 2)
        assert binder.bind("1.10", Decimal) == Decimal("1.10")
        assert binder.bind("scifi", Genre) is Genre.SCIFI

    def test_any_passes_through(self, binder):
        """Test Any returns the document unchanged."""
        assert binder.bind({"a": [1]}, Any) == {"a": [1]}

    def test_list_of_models(self, binder):
        """Test a JSON array binds to list of models."""
        books = binder.bind(BOOKS, list[Book])
        assert len(books) == 5
        assert books[0] == Book(
            id=1, title="Dune", author=Author(name="Frank Herbert"), published_on=date(1965, 8, 1)
        )
        assert books[2].published_on is None

    def test_abstract_sequence_yields_list(self, binder):
        """Test Sequence/Iterable targets produce lists."""
        assert binder.bind([1, 2], Sequence[int]) == [1, 2]
        assert binder.bind([1, 2], Iterable[int]) == [1, 2]

    def test_tuples_and_sets(self, binder):
        """Test tuple and set targets."""
        assert binder.bind(["1", "2"], tuple[int, ...]) == (1, 2)
        assert binder.bind(["1", "x"], tuple[int, str]) == (1, "x")
        assert binder.bind([1, 1, 2], set[int]) == {1, 2}

    def test_fixed_tuple_length_mismatch(self, binder):
        """Test fixed-length tuple rejects wrong arity."""
        with pytest.raises(ValueError, match="expected 2 items"):
            binder.bind([1, 2, 3], tuple[int, int])

    def test_sequence_requires_array(self, binder):
        """Test an object where an array is expected raises TypeError."""
        with pytest.raises(TypeError, match=r"\$: expected an array"):
            binder.bind({"id": 1}, list[Book])

    def test_optional(self, binder):
        """Test Optional accepts null and the inner type."""
        assert binder.bind(None, int | None) is None
        assert binder.bind("3", int | None) == 3

    def test_union_tries_members(self, binder):
        """Test unions bind to the first member that fits."""
        assert binder.bind({"name": "Lem"}, int | Author) == Author(name="Lem")

    def test_union_no_match(self, binder):
        """Test unions report when no member fits."""
        with pytest.raises(ValueError, match="matches no member"):
            binder.bind({"x": 1}, int | date)

    def test_mapping_values(self, binder):
        """Test mapping targets bind keys and values."""
        library = binder.bind({"name": "City", "shelves": {"a": BOOKS[:2]}}, Library)
        assert [b.id for b in library.shelves["a"]] == [1, 2]

    def test_dataclass(self, binder):
        """Test dataclass targets bind field by field."""
        shelf = binder.bind({"label": "top", "books": BOOKS[:1]}, Shelf)
        assert shelf == Shelf(label="top", books=[binder.bind(BOOKS[0], Book)])

    def test_model_validation_error_propagates(self, binder):
        """Test pydantic validation failures propagate unchanged."""
        bad = [{**BOOKS[0], "id": "not-a-number"}]
        with pytest.raises(ValidationError):
            binder.bind(bad, list[Book])

    def test_strict_mode(self):
        """Test strict config disables lax coercion."""
        strict = TypeBinder(DeserializerConfig(strict=True))
        with pytest.raises(ValidationError):
            strict.bind("5", int)


class TestTypeBinderConverters:
    """Test converter routing."""

    def test_converter_reached_for_nested_type(self):
        """Test a converter for a nested field type runs for every item."""
        converter = CountingConverter()
        binder = TypeBinder(DeserializerConfig(converters=[converter]))

        books = binder.bind(BOOKS, list[Book])

        assert converter.calls == 5
        assert books[4].author == Author(name="Philip K. Dick")

    def test_converter_reached_for_root_type(self):
        """Test converters can claim the root target."""
        binder = TypeBinder(
            DeserializerConfig(converters=[TypeConverter(list[Book], lambda raw: len(raw))])
        )
        assert binder.bind(BOOKS, list[Book]) == 5

    def test_first_matching_converter_wins(self):
        """Test converter order decides."""
        binder = TypeBinder(
            DeserializerConfig(
                converters=[
                    TypeConverter(int, lambda raw: "first"),
                    TypeConverter(int, lambda raw: "second"),
                ]
            )
        )
        assert binder.bind(1, int) == "first"

    def test_converter_output_is_validated_by_model(self):
        """Test model validation still runs on converter output."""
        binder = TypeBinder(
            DeserializerConfig(converters=[TypeConverter(Author, lambda raw: "not an author")])
        )
        with pytest.raises(ValidationError):
            binder.bind(BOOKS[0], Book)


class TestTypeBinderSingletons:
    """Test singleton coercion used by XML."""

    def test_lone_item_wrapped(self):
        """Test a single item becomes a one-element list."""
        binder = TypeBinder(DeserializerConfig(), coerce_singletons=True)
        assert binder.bind("7", list[int]) == [7]

    def test_wrapper_element_unwrapped(self):
        """Test a single-key wrapper dict yields its items."""
        binder = TypeBinder(DeserializerConfig(), coerce_singletons=True)
        assert binder.bind({"tag": ["a", "b"]}, list[str]) == ["a", "b"]
        assert binder.bind({"tag": "a"}, list[str]) == ["a"]

    def test_missing_becomes_empty(self):
        """Test an empty element binds to an empty list."""
        binder = TypeBinder(DeserializerConfig(), coerce_singletons=True)
        assert binder.bind(None, list[str]) == []
