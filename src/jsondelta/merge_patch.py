"""RFC 7396 JSON Merge Patch."""

from __future__ import annotations

import copy
from typing import Any


def merge_patch(target: Any, patch: Any) -> Any:
    """Merge *patch* into *target* and return the result.

    A non-object patch replaces the target wholesale.  An object patch is
    merged key by key: ``None`` (JSON ``null``) removes the key, any other
    value is merged recursively.  A target that is not an object is treated
    as ``{}``.  *target* is never mutated; values taken from *patch* are
    copied.

    Example::

        >>> merge_patch({"a": "b", "c": {"d": "e", "f": "g"}}, {"a": "z", "c": {"f": None}})
        {'a': 'z', 'c': {'d': 'e'}}
    """
    if not isinstance(patch, dict):
        return copy.deepcopy(patch)
    result = dict(target) if isinstance(target, dict) else {}
    for key, value in patch.items():
        if value is None:
            result.pop(key, None)
        else:
            result[key] = merge_patch(result[key] if key in result else {}, value)
    return result
