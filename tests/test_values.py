"""Tests for cell value kinds, tagged equality and hashing."""

from __future__ import annotations

import pytest

from sheetdiff.hashing import canonical_json, content_digest
from sheetdiff.values import (
    MISSING,
    cell_kind,
    count_cells,
    values_equal,
)


class TestCellKind:
    """Tests for cell_kind."""

    def test_kinds(self) -> None:
        assert cell_kind("x") == "string"
        assert cell_kind(3) == "number"
        assert cell_kind(2.5) == "number"
        assert cell_kind(True) == "boolean"
        assert cell_kind(None) == "null"

    def test_unsupported_type(self) -> None:
        with pytest.raises(TypeError):
            cell_kind([1])  # type: ignore[arg-type]


class TestValuesEqual:
    """Tests for tagged equality."""

    def test_same_values(self) -> None:
        assert values_equal("a", "a")
        assert values_equal(None, None)
        assert values_equal(False, False)

    def test_int_and_float_are_both_numbers(self) -> None:
        assert values_equal(1, 1.0)

    def test_boolean_never_equals_number(self) -> None:
        assert not values_equal(True, 1)
        assert not values_equal(0, False)

    def test_string_never_equals_number(self) -> None:
        assert not values_equal("1", 1)

    def test_null_is_not_empty_string(self) -> None:
        assert not values_equal(None, "")

    def test_missing_only_equals_missing(self) -> None:
        assert values_equal(MISSING, MISSING)
        assert not values_equal(MISSING, None)
        assert not values_equal("", MISSING)


class TestGridHelpers:
    """Tests for ragged grid access."""

    def test_count_cells_ragged(self) -> None:
        assert count_cells([[1, 2, 3], [], [4]]) == 4


class TestContentDigest:
    """Tests for the content hasher."""

    def test_deterministic(self) -> None:
        assert content_digest([[1, "a"], [None]]) == content_digest([[1, "a"], [None]])

    def test_key_order_does_not_matter(self) -> None:
        assert content_digest({"a": 1, "b": 2}) == content_digest({"b": 2, "a": 1})

    def test_different_content_differs(self) -> None:
        assert content_digest([[1, 2]]) != content_digest([[1, 5]])

    def test_boolean_and_number_differ(self) -> None:
        assert content_digest([True]) != content_digest([1])

    def test_fixed_size_hex(self) -> None:
        digest = content_digest({"anything": list(range(100))})
        assert len(digest) == 32
        int(digest, 16)

    def test_canonical_json_keeps_unicode(self) -> None:
        assert canonical_json({"k": "é"}) == '{"k":"é"}'
