# topmark:header:start
#
#   project      : Flatenv
#   file         : coercion.py
#   file_relpath : src/flatenv/coercion.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Build typed values from flat ``(key, value)`` string pairs.

The coercion engine works in two steps:

1. Shape: every key is lower-cased and matched against the target's field
   table (`field_specs`). Nested dataclasses and models collect the keys under
   ``<field>_``, mapping fields collect the same keys with the prefix removed,
   sequence fields split their value on ``,``, enum fields are looked up by
   member name. The result is a nested ``dict`` of strings.
2. Validate: the nested ``dict`` is handed to a pydantic ``TypeAdapter`` for
   the target type, which converts strings into ``bool``, ``int``, ``float``
   and friends and applies defaults.

Field tables are derived once per type from dataclass fields or pydantic
model fields, not from instances.

Notes:
    An empty right-hand side is the empty string, not ``None``: ``B=`` read into
    an ``str | None`` field gives ``""``. Only a missing key gives ``None``.
"""

from __future__ import annotations

import dataclasses
import functools
import types
import typing
from collections.abc import Mapping, MutableMapping
from collections.abc import Sequence as AbcSequence
from collections.abc import Set as AbcSet
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar, Union, cast

from pydantic import BaseModel, PydanticUserError, TypeAdapter, ValidationError

from flatenv.config.logging import get_logger
from flatenv.constants import KEY_SEPARATOR, SEQUENCE_SEPARATOR
from flatenv.errors import FlatenvError, MessageError
from flatenv.lowering import is_flatten_field
from flatenv.value import Value

if TYPE_CHECKING:
    from collections.abc import Iterable

    from flatenv.config.logging import FlatenvLogger

logger: FlatenvLogger = get_logger(__name__)

T = TypeVar("T")

_SEQUENCE_ORIGINS: tuple[Any, ...] = (list, tuple, set, frozenset, AbcSequence, AbcSet)
_MAPPING_ORIGINS: tuple[Any, ...] = (dict, Mapping, MutableMapping)


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Descriptor of one target field.

    Attributes:
        name (str): Attribute name; matched case-insensitively.
        annotation (Any): Resolved type annotation.
        required (bool): True when the field has no default.
        flatten (bool): True when the field collects all unclaimed keys.
    """

    name: str
    annotation: Any
    required: bool
    flatten: bool = False


def is_plain_class(tp: Any) -> bool:
    """Return True for a class that is not a parameterized generic alias."""
    return isinstance(tp, type) and typing.get_origin(tp) is None


def is_record_type(tp: Any) -> bool:
    """Return True for dataclass types and pydantic model classes."""
    if not is_plain_class(tp):
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


def is_mapping_type(tp: Any) -> bool:
    """Return True for ``dict``-like annotations (``dict[str, str]``, ``Mapping``, `Value`)."""
    origin: Any = typing.get_origin(tp) or tp
    if origin in _MAPPING_ORIGINS:
        return True
    return isinstance(origin, type) and issubclass(origin, Mapping)


def _is_sequence_type(tp: Any) -> bool:
    origin: Any = typing.get_origin(tp) or tp
    return origin in _SEQUENCE_ORIGINS


def _strip_annotated(tp: Any) -> Any:
    while typing.get_origin(tp) is typing.Annotated:
        tp = typing.get_args(tp)[0]
    return tp


def strip_optional(tp: Any) -> tuple[Any, bool]:
    """Return ``(inner, True)`` for ``X | None``, ``(tp, False)`` otherwise."""
    tp = _strip_annotated(tp)
    origin: Any = typing.get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args: tuple[Any, ...] = typing.get_args(tp)
        non_none: list[Any] = [a for a in args if a is not type(None)]
        if len(non_none) < len(args):
            if len(non_none) == 1:
                return _strip_annotated(non_none[0]), True
            return cast("Any", Union[tuple(non_none)]), True  # noqa: UP007
    return tp, False


@functools.lru_cache(maxsize=256)
def field_specs(target: type) -> tuple[FieldSpec, ...]:
    """Return the field table of a dataclass type or pydantic model class.

    Raises:
        MessageError: If ``target`` is neither, or its annotations cannot be resolved.
    """
    if is_plain_class(target) and issubclass(target, BaseModel):
        return tuple(
            FieldSpec(name, info.annotation, info.is_required())
            for name, info in target.model_fields.items()
        )
    if dataclasses.is_dataclass(target):
        try:
            hints: dict[str, Any] = typing.get_type_hints(target)
        except NameError as exc:
            raise MessageError(f"Cannot resolve annotations of {target.__name__}: {exc}") from exc
        return tuple(
            FieldSpec(
                f.name,
                hints.get(f.name, Any),
                f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING,
                flatten=is_flatten_field(f),
            )
            for f in dataclasses.fields(target)
            if f.init
        )
    raise MessageError(f"Unsupported target type: {target!r}")


def _enum_member(tp: type[Enum], raw: str) -> object:
    member: Enum | None = tp.__members__.get(raw)
    # Unknown names are left to pydantic, which matches enum values.
    return raw if member is None else member


def _coerce_scalar(tp: Any, raw: str) -> object:
    tp, _ = strip_optional(tp)
    if is_plain_class(tp) and issubclass(tp, Enum):
        return _enum_member(tp, raw)
    return raw


def _coerce_sequence(tp: Any, raw: str) -> list[object]:
    if not raw:
        return []
    parts: list[str] = raw.split(SEQUENCE_SEPARATOR)
    args: tuple[Any, ...] = typing.get_args(tp)
    if typing.get_origin(tp) is tuple and args and args[-1] is not Ellipsis:
        # Fixed-length tuple: one annotation per position.
        return [
            _coerce_scalar(args[i], part) if i < len(args) else part
            for i, part in enumerate(parts)
        ]
    elem: Any = args[0] if args else str
    return [_coerce_scalar(elem, part) for part in parts]


def _coerce_value(tp: Any, raw: str) -> object:
    if _is_sequence_type(tp):
        return _coerce_sequence(tp, raw)
    return _coerce_scalar(tp, raw)


def _collect(env: Mapping[str, str], prefix: str) -> dict[str, str]:
    return {k[len(prefix) :]: v for k, v in env.items() if k.startswith(prefix)}


def _shape(target: type, env: Mapping[str, str], prefix: str) -> dict[str, object]:
    """Return the nested string data for ``target`` from keys under ``prefix``."""
    data: dict[str, object] = {}
    claimed: set[str] = set()
    flattened: list[FieldSpec] = []

    for spec in field_specs(target):
        if spec.flatten:
            flattened.append(spec)
            continue

        key: str = prefix + spec.name.lower()
        tp, optional = strip_optional(spec.annotation)
        nested_prefix: str = key + KEY_SEPARATOR

        if is_record_type(tp) or is_mapping_type(tp):
            children: dict[str, str] = _collect(env, nested_prefix)
            if children:
                claimed.update(nested_prefix + k for k in children)
                if is_record_type(tp):
                    data[spec.name] = _shape(tp, env, nested_prefix)
                else:
                    data[spec.name] = children
                continue
            if key in env:
                claimed.add(key)
        elif key in env:
            claimed.add(key)
            data[spec.name] = _coerce_value(tp, env[key])
            continue

        if optional and spec.required:
            data[spec.name] = None
        else:
            logger.trace("no value for field %s (key %s)", spec.name, key)

    for spec in flattened:
        data[spec.name] = {
            k[len(prefix) :]: v
            for k, v in env.items()
            if k.startswith(prefix) and k not in claimed
        }
    return data


@functools.lru_cache(maxsize=256)
def _adapter(target: type) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def coerce_pairs(target: type[T], pairs: Iterable[tuple[str, str]]) -> T:
    """Build a ``target`` instance from ``(key, value)`` pairs.

    Keys are lower-cased; the last assignment of a key wins.

    Args:
        target (type[T]): A dataclass type, a pydantic model class, `Value`,
            or a ``dict``/``Mapping`` annotation.
        pairs (Iterable[tuple[str, str]]): Flat string assignments.

    Returns:
        T: The validated value.

    Raises:
        MessageError: If the data does not validate against ``target``, or
            pydantic cannot build a validator for one of its field types.
    """
    env: dict[str, str] = {}
    for key, value in pairs:
        env[key.lower()] = value

    if is_plain_class(target) and issubclass(target, Value):
        return cast("T", target.from_pairs(env.items()))

    if is_record_type(target):
        data: object = _shape(target, env, "")
    elif is_mapping_type(target):
        data = env
    else:
        raise MessageError(f"Unsupported target type: {target!r}")

    logger.trace("coercing %s from %r", getattr(target, "__name__", target), data)
    try:
        return cast("T", _adapter(target).validate_python(data))
    except (ValidationError, PydanticUserError) as exc:
        raise FlatenvError.wrap(exc) from exc
