"""Helpers over the JSON document model.

Documents are plain Python JSON values (``None``, ``bool``, ``int``/``float``,
``str``, ``list`` and ``dict`` with string keys).  They are treated as
immutable: nothing in this package mutates a document it was given.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, TypeAlias

JsonValue: TypeAlias = None | bool | int | float | str | list[Any] | dict[str, Any]


class JsonKind(str, Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def kind_of(value: Any) -> JsonKind:
    """Classify *value* as one of the six JSON kinds.

    Raises :class:`TypeError` for values outside the JSON data model.
    """
    if value is None:
        return JsonKind.NULL
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, list):
        return JsonKind.ARRAY
    if isinstance(value, dict):
        return JsonKind.OBJECT
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


def is_container(value: Any) -> bool:
    return isinstance(value, (dict, list))


def empty_like(value: Any) -> JsonValue:
    """Return an empty container of the same kind as *value*.

    Scalars have no empty form; ``None`` is returned for them.
    """
    if isinstance(value, dict):
        return {}
    if isinstance(value, list):
        return []
    return None


def json_equal(left: Any, right: Any) -> bool:
    """Deep, JSON-aware equality.

    Unlike ``==``, booleans never equal numbers.  Numbers compare by value
    (``1`` equals ``1.0``) and object key order is irrelevant.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if isinstance(left, dict) and isinstance(right, dict):
        if left.keys() != right.keys():
            return False
        return all(json_equal(value, right[key]) for key, value in left.items())
    if isinstance(left, list) and isinstance(right, list):
        if len(left) != len(right):
            return False
        return all(json_equal(a, b) for a, b in zip(left, right, strict=True))
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    return left is None and right is None
