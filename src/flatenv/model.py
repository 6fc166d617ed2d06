# topmark:header:start
#
#   project      : Flatenv
#   file         : model.py
#   file_relpath : src/flatenv/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Structured value model walked by the encoder.

A `StructuredValue` is a small tagged tree:

- `Scalar`: a leaf (``bool``, ``int``, ``float``, ``str`` or ``bytes``).
- `OptionalValue`: a present or absent value.
- `SequenceValue`: an ordered list of scalar-shaped elements.
- `Compound`: ordered named fields (struct- or map-shaped).
- `EnumVariant`: a named variant, optionally carrying a payload.
- `TupleStruct`: a positional compound; the format cannot express it.

Nodes are frozen. Callers build them directly or obtain them from
[`flatenv.lowering.lower`][flatenv.lowering.lower]; the encoder only reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

ScalarType = Union[bool, int, float, str, bytes]


@dataclass(frozen=True, slots=True)
class Scalar:
    """A leaf value."""

    value: ScalarType


@dataclass(frozen=True, slots=True)
class OptionalValue:
    """A value that may be absent (``value is None``)."""

    value: StructuredValue | None = None


@dataclass(frozen=True, slots=True)
class SequenceValue:
    """An ordered, homogeneous list of scalar-shaped elements."""

    items: tuple[StructuredValue, ...] = ()


@dataclass(frozen=True, slots=True)
class Field:
    """A named member of a `Compound`.

    Attributes:
        name (str): Field name as declared; the encoder uppercases it.
        value (StructuredValue): Field value.
        flatten (bool): Emit the children of a compound value at the parent's
            level instead of under ``name``.
    """

    name: str
    value: StructuredValue
    flatten: bool = False


@dataclass(frozen=True, slots=True)
class Compound:
    """A struct- or map-shaped value with ordered named fields."""

    fields: tuple[Field, ...] = ()

    @classmethod
    def of(cls, **values: StructuredValue) -> Compound:
        """Build a compound from keyword arguments, in argument order."""
        return cls(tuple(Field(name, value) for name, value in values.items()))

    def __len__(self) -> int:
        return len(self.fields)


@dataclass(frozen=True, slots=True)
class EnumVariant:
    """A named enum variant; ``payload`` is None for unit variants."""

    name: str
    payload: StructuredValue | None = None


@dataclass(frozen=True, slots=True)
class TupleStruct:
    """A compound with positional, unnamed fields."""

    items: tuple[StructuredValue, ...] = field(default_factory=tuple)


StructuredValue = Union[Scalar, OptionalValue, SequenceValue, Compound, EnumVariant, TupleStruct]
