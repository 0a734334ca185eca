"""Tests for jsondelta.document."""

from __future__ import annotations

import pytest

from jsondelta.document import JsonKind, empty_like, is_container, is_scalar, json_equal, kind_of


class TestKinds:
    @pytest.mark.parametrize(
        ("value", "kind"),
        [
            (None, JsonKind.NULL),
            (True, JsonKind.BOOLEAN),
            (0, JsonKind.NUMBER),
            (1.5, JsonKind.NUMBER),
            ("", JsonKind.STRING),
            ([], JsonKind.ARRAY),
            ({}, JsonKind.OBJECT),
        ],
    )
    def test_kind_of(self, value, kind):
        assert kind_of(value) is kind

    def test_non_json_value_raises(self):
        with pytest.raises(TypeError, match="Not a JSON value: set"):
            kind_of({1})

    def test_scalar_and_container(self):
        assert is_scalar("x") and is_scalar(None) and is_scalar(False)
        assert not is_scalar([])
        assert is_container({}) and is_container([])
        assert not is_container("x")

    def test_empty_like(self):
        assert empty_like({"a": 1}) == {}
        assert empty_like([1]) == []
        assert empty_like("x") is None


class TestJsonEqual:
    def test_bool_is_not_number(self):
        assert not json_equal(True, 1)
        assert not json_equal(0, False)
        assert json_equal(True, True)

    def test_numbers_by_value(self):
        assert json_equal(1, 1.0)
        assert not json_equal(1, 2)

    def test_null(self):
        assert json_equal(None, None)
        assert not json_equal(None, 0)
        assert not json_equal(None, "")

    def test_objects_ignore_key_order(self):
        assert json_equal({"a": 1, "b": [1]}, {"b": [1], "a": 1})
        assert not json_equal({"a": 1}, {"a": 1, "b": 2})

    def test_nested_bool_mismatch(self):
        assert not json_equal({"a": [1]}, {"a": [True]})

    def test_arrays_are_ordered(self):
        assert not json_equal([1, 2], [2, 1])
        assert not json_equal([1], [1, 1])

    def test_string_vs_number(self):
        assert not json_equal("1", 1)

    def test_array_vs_object(self):
        assert not json_equal([], {})
