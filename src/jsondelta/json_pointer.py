"""RFC 6901 JSON Pointer parsing, resolution and mutation.

A :class:`JsonPointer` is an immutable, validated pointer string.  Reading
and mutating go through one resolution pass over a
:class:`~jsondelta.shadow.ShadowTree`: the walk materializes the nodes on
the path, a mutation edits the shadow nodes, and a single fold rebuilds a
new document.  Input documents are never modified.

The ``-`` token addresses the position one past the end of an array and is
only legal as the final token.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .document import empty_like
from .errors import (
    IntermediateMissingError,
    InvalidIndexError,
    InvalidPointerError,
    NoSuchElementError,
    OutOfBoundsError,
    PathThroughLeafError,
)
from .shadow import ROOT, NodeKind, ShadowTree

APPEND_TOKEN = "-"

_POINTER_RE = re.compile(r"(/([^/~]|~[01])*)*")
_INDEX_RE = re.compile(r"0|[1-9][0-9]*")


def escape_json_pointer_token(token: str) -> str:
    """Escape a single JSON Pointer token (RFC 6901)."""
    return token.replace("~", "~0").replace("/", "~1")


def unescape_json_pointer_token(token: str) -> str:
    """Unescape a single JSON Pointer token (RFC 6901)."""
    return token.replace("~1", "/").replace("~0", "~")


def validate_json_pointer(path: str) -> None:
    """Raise :class:`~jsondelta.errors.InvalidPointerError` unless *path*
    matches the RFC 6901 grammar."""
    if not isinstance(path, str):
        raise InvalidPointerError(f"JSON Pointer must be a string, got {type(path).__name__}")
    if path == "":
        return
    if not path.startswith("/"):
        raise InvalidPointerError(f"JSON Pointer must start with '/' or be empty, got: {path!r}")
    if _POINTER_RE.fullmatch(path) is None:
        raise InvalidPointerError(
            f"Invalid JSON Pointer {path!r}: '~' must be followed by '0' or '1'"
        )


def parse_json_pointer(path: str) -> list[str]:
    """Split a JSON Pointer into unescaped tokens.

    The root pointer ``""`` returns an empty list.
    """
    validate_json_pointer(path)
    if path == "":
        return []
    return [unescape_json_pointer_token(tok) for tok in path[1:].split("/")]


def build_json_pointer(tokens: Iterable[str]) -> str:
    """Build a JSON Pointer string from raw tokens."""
    return "".join("/" + escape_json_pointer_token(str(token)) for token in tokens)


def _describe(tokens: Iterable[str]) -> str:
    return build_json_pointer(tokens) or "<root>"


@dataclass(frozen=True, slots=True)
class ResolvedLocation:
    """Outcome of resolving a pointer against a document.

    ``value`` is only meaningful when ``exists`` is true.  ``parent`` is the
    pointer to the containing array or object (``None`` for the root) and
    ``slot`` the index or key within it.  For an append position ``slot`` is
    the array length.
    """

    exists: bool
    value: Any
    parent: JsonPointer | None
    slot: str | int | None


class JsonPointer:
    """An immutable RFC 6901 JSON Pointer.

    Equality and hashing use the pointer string, so ``JsonPointer("/a")``
    can key a dict alongside other pointers.
    """

    __slots__ = ("_path", "_tokens")

    def __init__(self, path: str) -> None:
        validate_json_pointer(path)
        self._path = path
        self._tokens: tuple[str, ...] | None = None

    @classmethod
    def parse(cls, path: str | JsonPointer) -> JsonPointer:
        if isinstance(path, JsonPointer):
            return path
        return cls(path)

    @classmethod
    def from_tokens(cls, tokens: Iterable[str | int]) -> JsonPointer:
        """Build a pointer from raw (unescaped) tokens."""
        return cls(build_json_pointer(str(token) for token in tokens))

    @property
    def path(self) -> str:
        return self._path

    @property
    def tokens(self) -> tuple[str, ...]:
        if self._tokens is None:
            self._tokens = tuple(parse_json_pointer(self._path))
        return self._tokens

    @property
    def is_root(self) -> bool:
        return self._path == ""

    @property
    def parent(self) -> JsonPointer | None:
        """Pointer to the containing location, ``None`` for the root."""
        if self.is_root:
            return None
        return JsonPointer(self._path[: self._path.rindex("/")])

    def child(self, token: str | int) -> JsonPointer:
        return JsonPointer(self._path + "/" + escape_json_pointer_token(str(token)))

    def is_prefix_of(self, other: JsonPointer) -> bool:
        """True when *other* addresses a location strictly inside this one."""
        depth = len(self.tokens)
        return len(other.tokens) > depth and other.tokens[:depth] == self.tokens

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"JsonPointer({self._path!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, JsonPointer):
            return self._path == other._path
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._path)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _locate(self, tree: ShadowTree) -> int:
        """Walk the tokens over *tree* and return the addressed node ref.

        A missing final location is attached to its parent as an absent node,
        so it can serve as an insertion point.
        """
        ref = ROOT
        tokens = self.tokens
        last = len(tokens) - 1
        for i, token in enumerate(tokens):
            node = tree[ref]
            if node.kind is NodeKind.OBJECT:
                child = tree.find_key(ref, token)
                if child is not None:
                    ref = child
                    continue
                if i != last:
                    raise IntermediateMissingError(
                        f"Key {token!r} not found at {_describe(tokens[:i])} "
                        f"while resolving {self._path!r}"
                    )
                return tree.attach(ref, token, present=False)
            if node.kind is NodeKind.ARRAY:
                size = len(node.value)
                if token == APPEND_TOKEN:
                    index = size
                else:
                    if _INDEX_RE.fullmatch(token) is None:
                        raise InvalidIndexError(
                            f"Invalid array index {token!r} at {_describe(tokens[:i])} "
                            f"in {self._path!r}"
                        )
                    index = int(token)
                    if index > size:
                        raise OutOfBoundsError(
                            f"Array index {index} out of bounds (length {size}) "
                            f"at {_describe(tokens[:i])} in {self._path!r}"
                        )
                if index == size:
                    if i != last:
                        raise IntermediateMissingError(
                            f"Append position {token!r} at {_describe(tokens[:i])} "
                            f"can only end a pointer, got {self._path!r}"
                        )
                    return tree.attach(ref, size, present=False)
                ref = tree.child_at(ref, index)
                continue
            raise PathThroughLeafError(
                f"Cannot traverse into {type(node.value).__name__} at {_describe(tokens[:i])} "
                f"with token {token!r} in {self._path!r}"
            )
        return ref

    def resolve(self, document: Any) -> ResolvedLocation:
        tree = ShadowTree(document)
        node = tree[self._locate(tree)]
        return ResolvedLocation(
            exists=node.present,
            value=node.value if node.present else None,
            parent=self.parent,
            slot=node.slot,
        )

    def exists(self, document: Any) -> bool:
        """Whether the pointer addresses an existing value in *document*."""
        return self.resolve(document).exists

    def get(self, document: Any) -> Any:
        """Return the value at this pointer.

        The returned value is the document's own subtree, not a copy.
        """
        location = self.resolve(document)
        if not location.exists:
            raise NoSuchElementError(f"No value at {self._path!r}")
        return location.value

    # ------------------------------------------------------------------
    # Mutations, each returning a new document
    # ------------------------------------------------------------------

    def add(self, document: Any, value: Any) -> Any:
        """Insert *value* at this pointer.

        Array targets shift later elements right; ``-`` appends.  Object
        targets set or overwrite the key.  The root pointer replaces the
        whole document.
        """
        value = copy.deepcopy(value)
        tree = ShadowTree(document)
        ref = self._locate(tree)
        node = tree[ref]
        if node.parent is None:
            return value
        if node.present and tree[node.parent].kind is NodeKind.ARRAY:
            tree.attach(node.parent, node.slot, value)
        else:
            tree.assign(ref, value)
        return tree.fold()

    def replace(self, document: Any, value: Any) -> Any:
        """Overwrite the existing value at this pointer."""
        value = copy.deepcopy(value)
        tree = ShadowTree(document)
        ref = self._locate(tree)
        node = tree[ref]
        if not node.present:
            raise NoSuchElementError(f"Cannot replace {self._path!r}: no such element")
        if node.parent is None:
            return value
        tree.assign(ref, value)
        return tree.fold()

    def remove(self, document: Any) -> Any:
        """Delete the value at this pointer.

        Removing the root yields an empty container of the same kind
        (``None`` for a scalar document).
        """
        tree = ShadowTree(document)
        ref = self._locate(tree)
        node = tree[ref]
        if not node.present:
            raise NoSuchElementError(f"Cannot remove {self._path!r}: no such element")
        if node.parent is None:
            return empty_like(document)
        tree.detach(ref)
        return tree.fold()
