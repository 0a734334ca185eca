"""Transient mutable projection of a JSON document.

A :class:`ShadowTree` mirrors the part of a document a pointer walks
through.  Nodes live in a flat arena and refer to each other by integer
index, so the tree holds no object cycles.  Children of a node are only
materialized when a walk needs them; everything else keeps referencing the
original (shared) subtree.

A tree is built for exactly one pointer call and dropped after
:meth:`ShadowTree.fold` produced the new document.  It is not thread safe.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

ROOT = 0


class NodeKind(str, Enum):
    ABSENT = "absent"
    LEAF = "leaf"
    OBJECT = "object"
    ARRAY = "array"


@dataclass(slots=True)
class ShadowNode:
    """One location of the document.

    ``slot`` is the key (object parent) or index (array parent) under which
    the node sits; it is ``None`` for the root.  ``children`` stays ``None``
    until materialized.
    """

    value: Any
    present: bool = True
    parent: int | None = None
    slot: str | int | None = None
    children: list[int] | None = None

    @property
    def kind(self) -> NodeKind:
        if not self.present:
            return NodeKind.ABSENT
        if isinstance(self.value, dict):
            return NodeKind.OBJECT
        if isinstance(self.value, list):
            return NodeKind.ARRAY
        return NodeKind.LEAF


class ShadowTree:
    __slots__ = ("_nodes",)

    def __init__(self, document: Any) -> None:
        self._nodes: list[ShadowNode] = [ShadowNode(value=document)]

    def __getitem__(self, ref: int) -> ShadowNode:
        return self._nodes[ref]

    def _new_node(self, value: Any, *, present: bool, parent: int, slot: str | int) -> int:
        self._nodes.append(ShadowNode(value=value, present=present, parent=parent, slot=slot))
        return len(self._nodes) - 1

    def children(self, ref: int) -> list[int]:
        """Return the child refs of *ref*, materializing them on first use.

        Array children are kept ordered by slot.
        """
        node = self._nodes[ref]
        if node.children is None:
            node.children = []
            if node.present and isinstance(node.value, dict):
                for key, value in node.value.items():
                    node.children.append(self._new_node(value, present=True, parent=ref, slot=key))
            elif node.present and isinstance(node.value, list):
                for index, value in enumerate(node.value):
                    node.children.append(
                        self._new_node(value, present=True, parent=ref, slot=index)
                    )
        return node.children

    def find_key(self, ref: int, key: str) -> int | None:
        for child in self.children(ref):
            if self._nodes[child].slot == key:
                return child
        return None

    def child_at(self, ref: int, index: int) -> int:
        return self.children(ref)[index]

    def attach(self, ref: int, slot: str | int, value: Any = None, *, present: bool = True) -> int:
        """Create a child of *ref* at *slot* and return its ref.

        For an array parent, siblings at or after *slot* shift right by one.
        For an object parent the child is appended, so new keys fold last.
        """
        siblings = self.children(ref)
        child = self._new_node(value, present=present, parent=ref, slot=slot)
        if self._nodes[ref].kind is NodeKind.ARRAY:
            assert isinstance(slot, int)
            position = len(siblings)
            for i, sibling in enumerate(siblings):
                node = self._nodes[sibling]
                if node.slot >= slot:
                    node.slot += 1
                    position = min(position, i)
            siblings.insert(position, child)
        else:
            siblings.append(child)
        return child

    def detach(self, ref: int) -> None:
        """Unlink *ref* from its parent; later array siblings shift left."""
        node = self._nodes[ref]
        if node.parent is None:
            raise ValueError("Cannot detach the root node")
        siblings = self.children(node.parent)
        siblings.remove(ref)
        if self._nodes[node.parent].kind is NodeKind.ARRAY:
            for sibling in siblings:
                other = self._nodes[sibling]
                if other.slot > node.slot:
                    other.slot -= 1
        node.parent = None

    def assign(self, ref: int, value: Any) -> None:
        """Give *ref* a new value, dropping any materialized children."""
        node = self._nodes[ref]
        node.value = value
        node.present = True
        node.children = None

    def fold(self, ref: int = ROOT) -> Any:
        """Rebuild an immutable document bottom-up from the node at *ref*.

        Nodes whose children were never materialized contribute their
        original value unchanged.  Absent nodes are skipped.
        """
        node = self._nodes[ref]
        if node.children is None:
            return node.value
        live = [child for child in node.children if self._nodes[child].present]
        if isinstance(node.value, dict):
            return {self._nodes[child].slot: self.fold(child) for child in live}
        if isinstance(node.value, list):
            live.sort(key=lambda child: self._nodes[child].slot)
            return [self.fold(child) for child in live]
        return node.value
