from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("jsondelta")
except PackageNotFoundError:  # pragma: no cover - local source tree without installed metadata
    __version__ = "0.1.0"

from .diff import diff
from .document import JsonKind, json_equal, kind_of
from .errors import (
    IntermediateMissingError,
    InvalidIndexError,
    InvalidMoveError,
    InvalidPointerError,
    JsonDeltaError,
    MalformedPatchError,
    NoSuchElementError,
    OutOfBoundsError,
    PatchApplicationError,
    PatchError,
    PathThroughLeafError,
    PointerError,
    PolicyViolationError,
    UnknownOperationError,
    ValueMismatchError,
)
from .json_pointer import (
    JsonPointer,
    ResolvedLocation,
    build_json_pointer,
    escape_json_pointer_token,
    parse_json_pointer,
    unescape_json_pointer_token,
)
from .merge_patch import merge_patch
from .patch import (
    AddOperation,
    CopyOperation,
    JsonPatch,
    MoveOperation,
    PatchBuilder,
    PatchOperation,
    PatchPolicy,
    RemoveOperation,
    ReplaceOperation,
    TestOperation,
    apply_patch,
    apply_patch_and_validate,
    normalize_patches,
)

__all__ = [
    "AddOperation",
    "CopyOperation",
    "IntermediateMissingError",
    "InvalidIndexError",
    "InvalidMoveError",
    "InvalidPointerError",
    "JsonDeltaError",
    "JsonKind",
    "JsonPatch",
    "JsonPointer",
    "MalformedPatchError",
    "MoveOperation",
    "NoSuchElementError",
    "OutOfBoundsError",
    "PatchApplicationError",
    "PatchBuilder",
    "PatchError",
    "PatchOperation",
    "PatchPolicy",
    "PathThroughLeafError",
    "PointerError",
    "PolicyViolationError",
    "RemoveOperation",
    "ReplaceOperation",
    "ResolvedLocation",
    "TestOperation",
    "UnknownOperationError",
    "ValueMismatchError",
    "apply_patch",
    "apply_patch_and_validate",
    "build_json_pointer",
    "diff",
    "escape_json_pointer_token",
    "json_equal",
    "kind_of",
    "merge_patch",
    "normalize_patches",
    "parse_json_pointer",
    "unescape_json_pointer_token",
]
