"""Compute a JSON Patch that turns one document into another.

The diff recurses structurally.  Objects are compared key by key; arrays
are compared position by position, so inserting an element near the start
of an array yields a cascade of nested edits rather than a single ``add``.
The only guarantee is ``apply_patch(source, diff(source, target)) == target``;
the patch is not minimal.
"""

from __future__ import annotations

import logging
from typing import Any

from .document import json_equal
from .json_pointer import JsonPointer
from .patch import JsonPatch, PatchBuilder

logger = logging.getLogger(__name__)

_ROOT = JsonPointer("")


def diff(source: Any, target: Any) -> JsonPatch:
    """Return a patch transforming *source* into *target*."""
    builder = PatchBuilder()
    _diff_values(builder, _ROOT, source, target)
    logger.debug("diff produced %d operations", len(builder))
    return builder.build()


def _diff_values(builder: PatchBuilder, pointer: JsonPointer, source: Any, target: Any) -> None:
    if json_equal(source, target):
        return
    if isinstance(source, dict) and isinstance(target, dict):
        _diff_objects(builder, pointer, source, target)
    elif isinstance(source, list) and isinstance(target, list):
        _diff_arrays(builder, pointer, source, target)
    else:
        builder.replace(pointer, target)


def _diff_objects(
    builder: PatchBuilder, pointer: JsonPointer, source: dict[str, Any], target: dict[str, Any]
) -> None:
    for key, value in source.items():
        if key in target:
            _diff_values(builder, pointer.child(key), value, target[key])
        else:
            builder.remove(pointer.child(key))
    for key, value in target.items():
        if key not in source:
            builder.add(pointer.child(key), value)


def _diff_arrays(
    builder: PatchBuilder, pointer: JsonPointer, source: list[Any], target: list[Any]
) -> None:
    # Each removal shifts the remaining source elements left by one.
    offset = 0
    for index in range(max(len(source), len(target))):
        if index < len(target):
            if index < len(source):
                _diff_values(builder, pointer.child(index), source[index], target[index])
            else:
                builder.add(pointer.child(index + offset), target[index])
        else:
            builder.remove(pointer.child(index + offset))
            offset -= 1
