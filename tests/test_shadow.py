"""Tests for jsondelta.shadow."""

from __future__ import annotations

import pytest

from jsondelta.shadow import ROOT, NodeKind, ShadowTree


class TestMaterialization:
    def test_children_are_lazy(self):
        tree = ShadowTree({"a": 1})
        assert tree[ROOT].children is None
        assert len(tree.children(ROOT)) == 1
        assert tree[ROOT].children is not None

    def test_node_kinds(self):
        tree = ShadowTree({"o": {}, "a": [], "s": "x", "n": None})
        kinds = {tree[ref].slot: tree[ref].kind for ref in tree.children(ROOT)}
        assert kinds == {
            "o": NodeKind.OBJECT,
            "a": NodeKind.ARRAY,
            "s": NodeKind.LEAF,
            "n": NodeKind.LEAF,
        }

    def test_find_key(self):
        tree = ShadowTree({"a": 1, "b": 2})
        ref = tree.find_key(ROOT, "b")
        assert ref is not None
        assert tree[ref].value == 2
        assert tree[ref].parent == ROOT
        assert tree.find_key(ROOT, "z") is None

    def test_child_at(self):
        tree = ShadowTree(["x", "y"])
        ref = tree.child_at(ROOT, 1)
        assert tree[ref].value == "y"
        assert tree[ref].slot == 1

    def test_scalar_has_no_children(self):
        tree = ShadowTree(7)
        assert tree.children(ROOT) == []
        assert tree[ROOT].kind is NodeKind.LEAF


class TestEditing:
    def test_attach_shifts_array_siblings(self):
        tree = ShadowTree(["a", "b", "c"])
        new = tree.attach(ROOT, 1, "X")
        slots = [tree[ref].slot for ref in tree.children(ROOT)]
        assert slots == [0, 1, 2, 3]
        assert tree[new].slot == 1
        assert tree.fold() == ["a", "X", "b", "c"]

    def test_attach_appends_object_key(self):
        tree = ShadowTree({"a": 1})
        tree.attach(ROOT, "b", 2)
        assert tree.fold() == {"a": 1, "b": 2}

    def test_absent_nodes_are_skipped_by_fold(self):
        tree = ShadowTree({"a": 1})
        ref = tree.attach(ROOT, "b", present=False)
        assert tree[ref].kind is NodeKind.ABSENT
        assert tree.fold() == {"a": 1}

    def test_assign_makes_absent_node_present(self):
        tree = ShadowTree([1])
        ref = tree.attach(ROOT, 1, present=False)
        tree.assign(ref, 2)
        assert tree.fold() == [1, 2]

    def test_assign_drops_materialized_children(self):
        tree = ShadowTree({"a": {"b": 1}})
        ref = tree.find_key(ROOT, "a")
        tree.children(ref)
        tree.assign(ref, [1])
        assert tree[ref].children is None
        assert tree.fold() == {"a": [1]}

    def test_detach_shifts_array_siblings_left(self):
        tree = ShadowTree(["a", "b", "c"])
        tree.detach(tree.child_at(ROOT, 0))
        assert [tree[ref].slot for ref in tree.children(ROOT)] == [0, 1]
        assert tree.fold() == ["b", "c"]

    def test_detach_root_raises(self):
        tree = ShadowTree({})
        with pytest.raises(ValueError, match="root"):
            tree.detach(ROOT)


class TestFold:
    def test_fold_without_edits_returns_original(self):
        doc = {"a": [1, 2]}
        assert ShadowTree(doc).fold() is doc

    def test_fold_rebuilds_materialized_path_only(self):
        doc = {"a": {"b": [1]}, "c": {"d": 1}}
        tree = ShadowTree(doc)
        a = tree.find_key(ROOT, "a")
        b = tree.find_key(a, "b")
        tree.assign(b, [2])
        result = tree.fold()
        assert result == {"a": {"b": [2]}, "c": {"d": 1}}
        assert result is not doc
        assert result["a"] is not doc["a"]
        assert result["c"] is doc["c"]
        assert doc["a"]["b"] == [1]
