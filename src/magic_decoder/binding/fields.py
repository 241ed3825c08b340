"""Field descriptor table — the declared shape of a destination dataclass.

Introspects a dataclass once per call and reduces every field to a
``FieldSpec``: its name, a closed ``FieldKind``, and its raw tag metadata.
The coercion engine and the JSON binder both switch on ``FieldKind``
instead of inspecting types while they bind.

Tags live in the dataclass field's ``metadata`` mapping, keyed by
namespace::

    @dataclass
    class Item:
        id: int = tag(0, path="id")
        name: str = tag("", form="name", json="name")
        numbers: list[int] = tag(default_factory=list, form="numbers")
"""

import dataclasses
import types
from collections.abc import Mapping
from dataclasses import MISSING, dataclass
from datetime import datetime
from enum import Enum
from typing import Any, NewType, Union, get_args, get_origin, get_type_hints

# Unsigned integer field annotation: ``count: UInt = tag(UInt(0), form="count")``
UInt = NewType("UInt", int)

# Tag value meaning "never bind this field"
SKIP_TAG = "-"


class FieldKind(Enum):
    """Declared semantic type of a destination field."""

    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    STRING = "string"
    TIMESTAMP = "timestamp"
    INT_LIST = "int list"
    STRING_LIST = "string list"
    ANY = "any"
    EMBEDDED = "embedded"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One settable field of a destination dataclass."""

    name: str
    kind: FieldKind
    tags: Mapping[str, Any]

    def tag(self, namespace: str) -> str | None:
        """Return the bound key for *namespace*, or None if the field opts out.

        Only the first comma-separated component is the key, so
        ``"id,omitempty"`` binds ``"id"``. A missing or empty tag and the
        ``"-"`` sentinel all mean "skip".
        """
        raw = self.tags.get(namespace)
        if not isinstance(raw, str):
            return None
        key = raw.split(",", 1)[0]
        if not key or key == SKIP_TAG:
            return None
        return key


def tag(
    default: Any = MISSING,
    *,
    default_factory: Any = MISSING,
    **namespaces: str,
) -> Any:
    """Declare a dataclass field bound to one or more tag namespaces.

    A thin wrapper over ``dataclasses.field`` that stores *namespaces* as
    the field's metadata.
    """
    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata=namespaces,
    )


def is_mutable_record(obj: Any) -> bool:
    """Return True if *obj* is an instance of a non-frozen dataclass."""
    if obj is None or isinstance(obj, type) or not dataclasses.is_dataclass(obj):
        return False
    return not type(obj).__dataclass_params__.frozen  # type: ignore[attr-defined]


def is_mutable_record_type(cls: Any) -> bool:
    """Return True if *cls* is a non-frozen dataclass type."""
    if not isinstance(cls, type) or not dataclasses.is_dataclass(cls):
        return False
    return not cls.__dataclass_params__.frozen  # type: ignore[attr-defined]


def field_table(cls: type) -> tuple[FieldSpec, ...]:
    """Build the descriptor table for dataclass *cls*, in declaration order.

    Private fields (leading underscore) are not settable and are left out.
    """
    hints = _type_hints(cls)
    specs: list[FieldSpec] = []
    for f in dataclasses.fields(cls):
        if f.name.startswith("_"):
            continue
        hint = hints.get(f.name, f.type)
        specs.append(FieldSpec(name=f.name, kind=classify(hint), tags=f.metadata))
    return tuple(specs)


def classify(hint: Any) -> FieldKind:
    """Map a resolved type annotation to its ``FieldKind``."""
    hint = _unwrap_optional(hint)

    if isinstance(hint, str):
        hint = _BUILTIN_NAMES.get(hint, hint)

    # bool before int: bool is an int subclass, but must not bind as one
    if hint is bool:
        return FieldKind.BOOL
    if hint is UInt:
        return FieldKind.UINT
    if hint is int:
        return FieldKind.INT
    if hint is float:
        return FieldKind.FLOAT
    if hint is str:
        return FieldKind.STRING
    if hint is datetime:
        return FieldKind.TIMESTAMP
    if hint is Any or hint is object:
        return FieldKind.ANY

    if get_origin(hint) is list:
        args = get_args(hint)
        if args == (int,):
            return FieldKind.INT_LIST
        if args == (str,):
            return FieldKind.STRING_LIST
        return FieldKind.UNSUPPORTED

    if isinstance(hint, type) and dataclasses.is_dataclass(hint):
        return FieldKind.EMBEDDED

    return FieldKind.UNSUPPORTED


# Fallback for string annotations that cannot be resolved as a whole
_BUILTIN_NAMES: dict[str, Any] = {
    "bool": bool,
    "int": int,
    "UInt": UInt,
    "float": float,
    "str": str,
    "datetime": datetime,
    "Any": Any,
    "object": object,
    "list[int]": list[int],
    "list[str]": list[str],
}


def _type_hints(cls: type) -> dict[str, Any]:
    """Resolve annotations, falling back to raw ones if a name is undefined."""
    try:
        return get_type_hints(cls)
    except NameError:
        return {f.name: f.type for f in dataclasses.fields(cls)}


def _unwrap_optional(hint: Any) -> Any:
    """``X | None`` and ``Optional[X]`` bind as ``X``."""
    if get_origin(hint) in (Union, types.UnionType):
        args = [a for a in get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint
