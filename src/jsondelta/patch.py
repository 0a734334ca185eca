"""RFC 6902 JSON Patch: operation models, application and building.

All six operations are supported: ``add``, ``remove``, ``replace``,
``move``, ``copy`` and ``test``.  Each operation is a frozen pydantic model;
the ``op`` member is the discriminator of :data:`PatchOperation`, so an
unknown operation is rejected when the patch is built and never reaches
application.

Key features:

* **Sequential application** -- operations run in order against one evolving
  document.  The first failure aborts with :class:`PatchApplicationError`
  naming the failing operation; later operations never take effect.
* **Immutable documents** -- the input document is never mutated; every step
  produces a new document through :class:`~jsondelta.json_pointer.JsonPointer`.
* **Atomic move** -- ``move`` removes the source, then adds at ``path`` in the
  resulting document, as RFC 6902 section 4.4 describes.
* **Policy enforcement** -- :class:`PatchPolicy` limits allowed operations,
  patch size and path depth.
* **Pydantic integration** -- :func:`apply_patch_and_validate` applies a patch
  and validates the result against a model or ``TypeAdapter``.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Annotated, Any, ClassVar, Literal, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .document import json_equal
from .errors import (
    InvalidMoveError,
    MalformedPatchError,
    PatchApplicationError,
    PointerError,
    PolicyViolationError,
    UnknownOperationError,
    ValueMismatchError,
)
from .json_pointer import APPEND_TOKEN, JsonPointer, validate_json_pointer

logger = logging.getLogger(__name__)

OpKind = Literal["add", "remove", "replace", "move", "copy", "test"]
ALL_OPS: frozenset[str] = frozenset({"add", "remove", "replace", "move", "copy", "test"})


def _checked_pointer(value: str) -> str:
    validate_json_pointer(value)
    return value


PointerPath = Annotated[str, AfterValidator(_checked_pointer)]

# ---------------------------------------------------------------------------
# Operation models
# ---------------------------------------------------------------------------


class _Operation(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: PointerPath

    @property
    def pointer(self) -> JsonPointer:
        return JsonPointer(self.path)

    def pointers(self) -> tuple[JsonPointer, ...]:
        """All pointers the operation touches."""
        return (self.pointer,)

    def apply(self, document: Any) -> Any:
        raise NotImplementedError


class _FromOperation(_Operation):
    from_: PointerPath = Field(alias="from")

    @property
    def source(self) -> JsonPointer:
        return JsonPointer(self.from_)

    def pointers(self) -> tuple[JsonPointer, ...]:
        return (self.pointer, self.source)


class AddOperation(_Operation):
    """Insert ``value`` at ``path``; array elements shift right."""

    op: Literal["add"] = "add"
    value: Any

    def apply(self, document: Any) -> Any:
        return self.pointer.add(document, self.value)


class RemoveOperation(_Operation):
    op: Literal["remove"] = "remove"

    def apply(self, document: Any) -> Any:
        return self.pointer.remove(document)


class ReplaceOperation(_Operation):
    op: Literal["replace"] = "replace"
    value: Any

    def apply(self, document: Any) -> Any:
        return self.pointer.replace(document, self.value)


class MoveOperation(_FromOperation):
    """Relocate the value at ``from`` to ``path``.

    The source is removed first and the value is added to the resulting
    document, so array indices in ``path`` refer to the array without the
    moved element.  ``from == path`` is a no-op.
    """

    op: Literal["move"] = "move"

    def apply(self, document: Any) -> Any:
        if self.from_ == self.path:
            return document
        source, target = self.source, self.pointer
        if source.is_prefix_of(target):
            raise InvalidMoveError(f"Cannot move {self.from_!r} into its own child {self.path!r}")
        value = source.get(document)
        return target.add(source.remove(document), value)


class CopyOperation(_FromOperation):
    op: Literal["copy"] = "copy"

    def apply(self, document: Any) -> Any:
        return self.pointer.add(document, self.source.get(document))


class TestOperation(_Operation):
    """Assert that the value at ``path`` equals ``value``."""

    __test__: ClassVar[bool] = False

    op: Literal["test"] = "test"
    value: Any

    def apply(self, document: Any) -> Any:
        actual = self.pointer.get(document)
        if not json_equal(actual, self.value):
            raise ValueMismatchError(
                f"Test failed at {self.path!r}: expected {self.value!r}, found {actual!r}"
            )
        return document


PatchOperation = Annotated[
    AddOperation
    | RemoveOperation
    | ReplaceOperation
    | MoveOperation
    | CopyOperation
    | TestOperation,
    Field(discriminator="op"),
]

_OPERATION_ADAPTER: TypeAdapter[PatchOperation] = TypeAdapter(PatchOperation)
_OPERATION_TYPES = (
    AddOperation,
    RemoveOperation,
    ReplaceOperation,
    MoveOperation,
    CopyOperation,
    TestOperation,
)


def parse_operation(item: Any) -> PatchOperation:
    """Validate one RFC 6902 operation object.

    Operation models pass through unchanged.

    Raises
    ------
    UnknownOperationError
        If ``op`` is not one of the six operations.
    MalformedPatchError
        If the item is not an object or a required member is missing or
        mistyped (including a malformed pointer).
    """
    if isinstance(item, _OPERATION_TYPES):
        return item
    if not isinstance(item, Mapping):
        raise MalformedPatchError(
            f"Patch operation must be an object, got {type(item).__name__}: {item!r}"
        )
    try:
        return _OPERATION_ADAPTER.validate_python(dict(item))
    except ValidationError as exc:
        if any(error["type"] == "union_tag_invalid" for error in exc.errors()):
            raise UnknownOperationError(f"Unknown patch operation {item.get('op')!r}") from exc
        raise MalformedPatchError(f"Cannot parse patch operation {dict(item)!r}: {exc}") from exc


# ---------------------------------------------------------------------------
# Policy
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class PatchPolicy:
    """Safety rails for patch application.

    The defaults allow everything RFC 6902 allows.

    Attributes
    ----------
    allowed_ops : frozenset[str]
        Operation kinds that may appear in a patch.
    max_ops : int | None
        Maximum number of operations in a single patch, ``None`` for no limit.
    max_path_depth : int | None
        Maximum number of tokens in any ``path`` or ``from`` pointer.
    allow_append : bool
        Whether the ``-`` (array append) token is permitted.
    """

    allowed_ops: frozenset[str] = field(default_factory=lambda: ALL_OPS)
    max_ops: int | None = None
    max_path_depth: int | None = None
    allow_append: bool = True


def _validate_policy(operations: Sequence[PatchOperation], policy: PatchPolicy) -> None:
    """Check that *operations* conform to *policy*.

    Raises :class:`PolicyViolationError` on the first violation found.
    """
    if policy.max_ops is not None and len(operations) > policy.max_ops:
        raise PolicyViolationError(
            f"Patch contains {len(operations)} operations, "
            f"but policy allows at most {policy.max_ops}"
        )
    for operation in operations:
        if operation.op not in policy.allowed_ops:
            raise PolicyViolationError(
                f"{operation.op.capitalize()} operations are not allowed by the current policy"
            )
        for pointer in operation.pointers():
            tokens = pointer.tokens
            if tokens and tokens[-1] == APPEND_TOKEN and not policy.allow_append:
                raise PolicyViolationError(
                    "Append (/-) operations are not allowed by the current policy"
                )
            if policy.max_path_depth is not None and len(tokens) > policy.max_path_depth:
                raise PolicyViolationError(
                    f"Path {str(pointer)!r} has depth {len(tokens)}, "
                    f"exceeding policy max_path_depth={policy.max_path_depth}"
                )


# ---------------------------------------------------------------------------
# Patch document
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class JsonPatch:
    """An immutable, ordered RFC 6902 patch."""

    operations: tuple[PatchOperation, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "operations", tuple(self.operations))

    @classmethod
    def from_json(cls, data: str | Iterable[Any]) -> JsonPatch:
        """Build a patch from its wire form.

        *data* is a JSON array of operation objects, either as text or as
        already-decoded Python values.
        """
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except json.JSONDecodeError as exc:
                raise MalformedPatchError(f"Patch is not valid JSON: {exc}") from exc
        if isinstance(data, JsonPatch):
            return data
        if isinstance(data, (Mapping, str, bytes)) or not isinstance(data, Iterable):
            raise MalformedPatchError(
                f"Patch document must be an array of operations, got {type(data).__name__}"
            )
        return cls(tuple(parse_operation(item) for item in data))

    def to_json(self) -> list[dict[str, Any]]:
        """Return the wire form (``from`` members keep their RFC name)."""
        return [operation.model_dump(by_alias=True) for operation in self.operations]

    def dumps(self) -> str:
        return json.dumps(self.to_json())

    def apply(self, document: Any, *, policy: PatchPolicy | None = None) -> Any:
        return apply_patch(document, self, policy=policy)

    def __len__(self) -> int:
        return len(self.operations)

    def __iter__(self) -> Iterator[PatchOperation]:
        return iter(self.operations)

    def __getitem__(self, index: int) -> PatchOperation:
        return self.operations[index]


class PatchBuilder:
    """Fluent builder for :class:`JsonPatch`.

    Example::

        patch = PatchBuilder().add("/a", 1).move("/b", "/a").build()
    """

    def __init__(self, patch: JsonPatch | Iterable[Any] | None = None) -> None:
        self._operations: list[PatchOperation] = []
        if patch is not None:
            self.extend(patch)

    def add(self, path: str | JsonPointer, value: Any) -> PatchBuilder:
        self._operations.append(AddOperation(path=str(path), value=value))
        return self

    def remove(self, path: str | JsonPointer) -> PatchBuilder:
        self._operations.append(RemoveOperation(path=str(path)))
        return self

    def replace(self, path: str | JsonPointer, value: Any) -> PatchBuilder:
        self._operations.append(ReplaceOperation(path=str(path), value=value))
        return self

    def move(self, path: str | JsonPointer, from_: str | JsonPointer) -> PatchBuilder:
        self._operations.append(MoveOperation(path=str(path), from_=str(from_)))
        return self

    def copy(self, path: str | JsonPointer, from_: str | JsonPointer) -> PatchBuilder:
        self._operations.append(CopyOperation(path=str(path), from_=str(from_)))
        return self

    def test(self, path: str | JsonPointer, value: Any) -> PatchBuilder:
        self._operations.append(TestOperation(path=str(path), value=value))
        return self

    def extend(self, patch: JsonPatch | Iterable[Any]) -> PatchBuilder:
        self._operations.extend(JsonPatch.from_json(patch))
        return self

    def build(self) -> JsonPatch:
        return JsonPatch(tuple(self._operations))

    def apply(self, document: Any) -> Any:
        return self.build().apply(document)

    def __len__(self) -> int:
        return len(self._operations)


# ---------------------------------------------------------------------------
# Public API: apply_patch
# ---------------------------------------------------------------------------


def apply_patch(
    doc: Any,
    patch: JsonPatch | str | Iterable[Any],
    *,
    policy: PatchPolicy | None = None,
) -> Any:
    """Apply a JSON Patch to *doc* and return the result.

    The input *doc* is **never mutated**; a deep copy is made before applying
    any operations.

    Parameters
    ----------
    doc
        The document to patch.
    patch
        A :class:`JsonPatch`, or anything :meth:`JsonPatch.from_json` accepts.
    policy
        Safety policy to enforce.  See :class:`PatchPolicy`.

    Returns
    -------
    Any
        The patched document.

    Raises
    ------
    MalformedPatchError
        If the patch document cannot be parsed.
    PolicyViolationError
        If the patch violates the active policy.  Nothing is applied.
    PatchApplicationError
        If an operation fails.  ``index`` and ``cause`` identify the failure.
    """
    patch = JsonPatch.from_json(patch)
    if policy is not None:
        _validate_policy(patch.operations, policy)
    result = copy.deepcopy(doc)
    for index, operation in enumerate(patch):
        try:
            result = operation.apply(result)
        except (PointerError, ValueMismatchError, InvalidMoveError) as exc:
            raise PatchApplicationError(index, operation, exc) from exc
        logger.debug("applied op %d: %s %s", index, operation.op, operation.path)
    logger.debug("applied patch of %d operations", len(patch))
    return result


# ---------------------------------------------------------------------------
# Public API: apply_patch_and_validate
# ---------------------------------------------------------------------------


T = TypeVar("T")


def apply_patch_and_validate(
    doc: Any,
    patch: JsonPatch | str | Iterable[Any],
    target: type[T] | TypeAdapter[T],
    *,
    policy: PatchPolicy | None = None,
) -> T:
    """Apply a patch then validate the result against a Pydantic type.

    If *doc* is a :class:`~pydantic.BaseModel` it is first converted to a
    ``dict`` via :meth:`~pydantic.BaseModel.model_dump`.

    Raises
    ------
    PatchError
        If the patch is malformed, violates the policy or fails to apply.
    pydantic.ValidationError
        If the patched document does not conform to *target*.
    """
    if isinstance(doc, BaseModel):
        doc = doc.model_dump(mode="json")

    patched = apply_patch(doc, patch, policy=policy)

    adapter: TypeAdapter[T] = target if isinstance(target, TypeAdapter) else TypeAdapter(target)
    return adapter.validate_python(patched)


# ---------------------------------------------------------------------------
# Public API: normalize_patches
# ---------------------------------------------------------------------------


def normalize_patches(patches: Any) -> list[PatchOperation]:
    """Coerce loosely shaped patch input into a list of operations.

    Handles the shapes tool-calling models commonly produce:

    * A ``list[dict]`` of raw operation dicts.
    * A JSON **string** containing a list of operations.
    * A ``dict`` with a ``"patches"`` key wrapping the actual list.
    * A JSON string wrapping a dict with a ``"patches"`` key.
    * A single ``dict`` (treated as a one-element list).
    * Already-validated operation models or a :class:`JsonPatch` (pass-through).

    Raises
    ------
    MalformedPatchError
        If the input cannot be interpreted as a list of operations.
    """
    if isinstance(patches, JsonPatch):
        return list(patches)

    # 1) If it's a string, parse it as JSON first.
    if isinstance(patches, str):
        try:
            patches = json.loads(patches)
        except json.JSONDecodeError as exc:
            raise MalformedPatchError(f"Cannot parse patch string as JSON: {patches!r}") from exc

    # 2) If it's a dict with a "patches" key, unwrap.
    if isinstance(patches, Mapping):
        patches = patches["patches"] if "patches" in patches else [patches]

    if not isinstance(patches, (list, tuple)):
        raise MalformedPatchError(
            f"Cannot normalize patches: expected list or dict, got {type(patches).__name__}"
        )
    return [parse_operation(item) for item in patches]


__all__ = [
    "ALL_OPS",
    "AddOperation",
    "CopyOperation",
    "JsonPatch",
    "MoveOperation",
    "OpKind",
    "PatchBuilder",
    "PatchOperation",
    "PatchPolicy",
    "RemoveOperation",
    "ReplaceOperation",
    "TestOperation",
    "apply_patch",
    "apply_patch_and_validate",
    "normalize_patches",
    "parse_operation",
]
