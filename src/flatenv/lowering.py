# topmark:header:start
#
#   project      : Flatenv
#   file         : lowering.py
#   file_relpath : src/flatenv/lowering.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Convert Python objects into `StructuredValue` trees.

Mapping of Python shapes to model nodes:

| Python object                              | Node            |
|--------------------------------------------|-----------------|
| `StructuredValue` node                     | itself          |
| ``None``                                   | `OptionalValue` |
| ``bool``, ``int``, ``float``, ``str``, ``bytes`` | `Scalar`  |
| `enum.Enum` member                         | `EnumVariant` (member name) |
| dataclass instance                         | `Compound` (declaration order) |
| pydantic ``BaseModel`` instance            | `Compound` (declaration order) |
| `NamedTuple` instance                      | `TupleStruct`   |
| ``Mapping`` (``dict``, `Value`)            | `Compound`      |
| ``list``, ``tuple``, ``set``, ``frozenset`` | `SequenceValue` |

Dataclass fields created with `flatten_field` are marked ``flatten``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, cast

from pydantic import BaseModel

from flatenv.constants import FLATTEN_METADATA_KEY
from flatenv.errors import MessageError
from flatenv.model import (
    Compound,
    EnumVariant,
    Field,
    OptionalValue,
    Scalar,
    SequenceValue,
    StructuredValue,
    TupleStruct,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

_NODE_TYPES = (Scalar, OptionalValue, SequenceValue, Compound, EnumVariant, TupleStruct)


def flatten_field(**kwargs: Any) -> Any:
    """Declare a dataclass field whose children are emitted at the parent level.

    Example:
        >>> @dataclass
        ... class Settings:
        ...     extra: dict[str, str] = flatten_field(default_factory=dict)
    """
    metadata: dict[str, Any] = dict(kwargs.pop("metadata", None) or {})
    metadata[FLATTEN_METADATA_KEY] = True
    return dataclasses.field(metadata=metadata, **kwargs)


def is_flatten_field(f: dataclasses.Field[Any]) -> bool:
    """Return True when ``f`` was declared with `flatten_field`."""
    return bool(f.metadata.get(FLATTEN_METADATA_KEY, False))


def _is_named_tuple(obj: object) -> bool:
    return isinstance(obj, tuple) and hasattr(type(obj), "_fields")


def mapping_key(key: object) -> str:
    """Return the field name used for a mapping key.

    Raises:
        MessageError: If the key has no text form usable as a field name.
    """
    if isinstance(key, str):
        return key
    if isinstance(key, Enum):
        return key.name
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, int):
        return str(key)
    raise MessageError(f"Unsupported map key type: {type(key).__name__}")


def lower(obj: object, *, sort_keys: bool = False) -> StructuredValue:
    """Convert ``obj`` into a `StructuredValue`.

    Args:
        obj (object): The object to convert.
        sort_keys (bool): Emit mapping keys in sorted order.

    Returns:
        StructuredValue: The converted tree.

    Raises:
        MessageError: If ``obj`` (or a nested value) has no representation.
    """
    if isinstance(obj, _NODE_TYPES):
        return obj
    if obj is None:
        return OptionalValue(None)
    if isinstance(obj, Enum):
        return EnumVariant(obj.name)
    if isinstance(obj, (bool, int, float, str, bytes)):
        return Scalar(obj)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return Compound(
            tuple(
                Field(
                    f.name,
                    lower(getattr(obj, f.name), sort_keys=sort_keys),
                    flatten=is_flatten_field(f),
                )
                for f in dataclasses.fields(obj)
            )
        )
    if isinstance(obj, BaseModel):
        return Compound(
            tuple(
                Field(name, lower(getattr(obj, name), sort_keys=sort_keys))
                for name in type(obj).model_fields
            )
        )
    if _is_named_tuple(obj):
        items: Iterable[object] = cast("tuple[object, ...]", obj)
        return TupleStruct(tuple(lower(item, sort_keys=sort_keys) for item in items))
    if isinstance(obj, Mapping):
        mapping: Mapping[object, object] = cast("Mapping[object, object]", obj)
        entries = [(mapping_key(k), v) for k, v in mapping.items()]
        if sort_keys:
            entries.sort(key=lambda entry: entry[0])
        return Compound(tuple(Field(k, lower(v, sort_keys=sort_keys)) for k, v in entries))
    if isinstance(obj, (list, tuple, set, frozenset)):
        elements: Iterable[object] = cast("Iterable[object]", obj)
        if isinstance(obj, (set, frozenset)):
            elements = sorted(elements, key=repr)
        return SequenceValue(tuple(lower(item, sort_keys=sort_keys) for item in elements))

    raise MessageError(f"Cannot serialize value of type {type(obj).__name__}")
