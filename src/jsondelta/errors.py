"""Exception taxonomy for pointer resolution, patching and merging.

Every error raised by :mod:`jsondelta` derives from :class:`JsonDeltaError`.
Pointer failures live under :class:`PointerError`; failures that concern a
patch document or its application live under :class:`PatchError`.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "IntermediateMissingError",
    "InvalidIndexError",
    "InvalidMoveError",
    "InvalidPointerError",
    "JsonDeltaError",
    "MalformedPatchError",
    "NoSuchElementError",
    "OutOfBoundsError",
    "PatchApplicationError",
    "PatchError",
    "PathThroughLeafError",
    "PointerError",
    "PolicyViolationError",
    "UnknownOperationError",
    "ValueMismatchError",
]


class JsonDeltaError(Exception):
    """Base exception for all jsondelta errors."""


# ---------------------------------------------------------------------------
# Pointer errors
# ---------------------------------------------------------------------------


class PointerError(JsonDeltaError):
    """A JSON Pointer could not be parsed or resolved."""


class InvalidPointerError(PointerError, ValueError):
    """The pointer string does not match the RFC 6901 grammar."""


class NoSuchElementError(PointerError):
    """The pointer addresses a location that holds no value."""


class OutOfBoundsError(PointerError):
    """An array index points past the end of the array (plus one)."""


class InvalidIndexError(PointerError):
    """A token applied to an array is not a valid array index."""


class IntermediateMissingError(PointerError):
    """A non-final token addresses a location that does not exist."""


class PathThroughLeafError(PointerError):
    """The pointer continues past a scalar value."""


# ---------------------------------------------------------------------------
# Patch errors
# ---------------------------------------------------------------------------


class PatchError(JsonDeltaError):
    """Base exception for patch-related errors."""


class MalformedPatchError(PatchError):
    """A patch document element is missing or mistypes a required field."""


class UnknownOperationError(MalformedPatchError):
    """The ``op`` member is not one of the six RFC 6902 operations."""


class ValueMismatchError(PatchError):
    """A ``test`` operation found a value different from the expected one."""


class InvalidMoveError(PatchError):
    """A ``move`` operation tried to move a location into its own child."""


class PolicyViolationError(PatchError):
    """Raised when a patch violates the active :class:`~jsondelta.patch.PatchPolicy`."""


class PatchApplicationError(PatchError):
    """An operation of a patch failed; the whole application is aborted.

    Attributes
    ----------
    index
        Position of the failing operation in the patch.
    operation
        The failing operation model.
    cause
        The underlying error (also available as ``__cause__``).
    """

    def __init__(self, index: int, operation: Any, cause: JsonDeltaError) -> None:
        self.index = index
        self.operation = operation
        self.cause = cause
        super().__init__(f"Operation {index} ({operation.op} {operation.path!r}) failed: {cause}")
