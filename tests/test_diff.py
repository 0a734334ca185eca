"""Tests for jsondelta.diff."""

from __future__ import annotations

import copy

import pytest

from jsondelta.diff import diff
from jsondelta.patch import JsonPatch, apply_patch

PAIRS = [
    ({}, {}),
    ({"a": 1}, {"a": 2}),
    ({"a": 1, "b": 2}, {"b": 2, "c": 3}),
    ({"a": {"b": {"c": 1}}}, {"a": {"b": {"c": 2, "d": [1]}}}),
    ([1, 2, 3], [1, 2, 3, 4, 5]),
    ([1, 2, 3, 4, 5], [1, 2]),
    ([1, 2, 3], [0, 1, 2, 3]),
    ([3, 2, 1], [1, 2, 3]),
    ([[1, 2], [3]], [[1], [3, 4], []]),
    ({"a": [1, {"b": 2}]}, {"a": [{"b": 2}, 1]}),
    ({"a": [1, 2]}, {"a": {"0": 1}}),
    ({"a": None}, {"a": False}),
    ({"a": 1}, {"a": True}),
    ({"a/b": 1, "~": 2}, {"a/b": 3, "~1": 2}),
    ({"": [1]}, {"": [2]}),
    ([], {}),
    ("text", 5),
    (None, {"a": 1}),
    ({"x": [{"y": [1, 2, 3]}]}, {"x": [{"y": []}, {"y": [1]}]}),
]


class TestApplyDiffIdentity:
    @pytest.mark.parametrize(("source", "target"), PAIRS)
    def test_apply_diff_reproduces_target(self, source, target):
        patch = diff(source, target)
        assert isinstance(patch, JsonPatch)
        result = apply_patch(source, patch)
        assert result == target
        assert type(result) is type(target)

    def test_booleans_survive(self):
        result = apply_patch({"a": 1}, diff({"a": 1}, {"a": True}))
        assert result["a"] is True

    def test_inputs_not_mutated(self):
        source = {"a": [1, {"b": 2}], "c": "x"}
        target = {"a": [{"b": 3}], "d": None}
        source_copy, target_copy = copy.deepcopy(source), copy.deepcopy(target)
        apply_patch(source, diff(source, target))
        assert source == source_copy
        assert target == target_copy


class TestDiffOperations:
    def test_equal_documents_give_empty_patch(self):
        assert len(diff({"a": [1, {"b": None}]}, {"a": [1, {"b": None}]})) == 0

    def test_object_member_changes(self):
        patch = diff({"a": 1, "b": 2, "c": 3}, {"a": 1, "c": 4, "d": 5})
        assert patch.to_json() == [
            {"op": "remove", "path": "/b"},
            {"op": "replace", "path": "/c", "value": 4},
            {"op": "add", "path": "/d", "value": 5},
        ]

    def test_nested_change_uses_full_path(self):
        patch = diff({"a": [1, {"b": 1}]}, {"a": [1, {"b": 2}]})
        assert patch.to_json() == [{"op": "replace", "path": "/a/1/b", "value": 2}]

    def test_array_growth_adds_at_end(self):
        patch = diff([1], [1, 2, 3])
        assert patch.to_json() == [
            {"op": "add", "path": "/1", "value": 2},
            {"op": "add", "path": "/2", "value": 3},
        ]

    def test_array_shrink_removes_with_running_offset(self):
        patch = diff([1, 2, 3, 4], [1])
        assert patch.to_json() == [{"op": "remove", "path": "/1"}] * 3

    def test_type_change_is_replace(self):
        patch = diff({"a": [1]}, {"a": {"0": 1}})
        assert patch.to_json() == [{"op": "replace", "path": "/a", "value": {"0": 1}}]

    def test_root_scalar_replace(self):
        assert diff(1, "x").to_json() == [{"op": "replace", "path": "", "value": "x"}]

    def test_keys_are_escaped(self):
        patch = diff({}, {"a/b": 1, "~": 2})
        assert [op.path for op in patch] == ["/a~1b", "/~0"]

    def test_integer_and_float_are_equal(self):
        assert len(diff({"a": 1}, {"a": 1.0})) == 0

    def test_only_add_remove_replace_emitted(self):
        patch = diff([3, 2, 1, {"a": [1]}], [1, 2, {"a": []}])
        assert {op.op for op in patch} <= {"add", "remove", "replace"}
