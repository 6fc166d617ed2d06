# topmark:header:start
#
#   project      : Flatenv
#   file         : test_coercion.py
#   file_relpath : tests/codec/test_coercion.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for `flatenv.coercion`: shaping flat pairs into typed targets."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import pytest
from pydantic import BaseModel

from flatenv import MessageError, Value, flatten_field
from flatenv.coercion import (
    coerce_pairs,
    field_specs,
    is_mapping_type,
    is_plain_class,
    is_record_type,
    strip_optional,
)
from tests.conftest import parametrize

pytestmark: pytest.MarkDecorator = pytest.mark.codec


class Level(Enum):
    LOW = 1
    HIGH = 2


@dataclass
class Database:
    host: str
    port: int = 5432


@dataclass
class Service:
    name: str
    db: Database
    levels: list[Level] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)
    retry_delay: float = 1.0


@dataclass
class WithExtra:
    name: str
    extra: dict[str, str] = flatten_field(default_factory=dict)


@dataclass
class WithTuple:
    pair: tuple[int, str]
    many: tuple[int, ...] = ()


@dataclass
class OptionalNested:
    db: Optional[Database] = None  # noqa: UP007


class ModelDb(BaseModel):
    host: str
    port: int = 5432


class ModelService(BaseModel):
    name: str
    db: ModelDb
    debug: bool = False


class Opaque:
    """A class pydantic has no schema for."""


@dataclass
class OpaqueHolder:
    inner: Opaque


@dataclass
class ValueHolder:
    inner: Value


class ModelValueHolder(BaseModel):
    inner: Value = Value()


def test_nested_dataclass_with_defaults() -> None:
    """Nested records are built from ``<field>_`` keys; defaults fill the rest."""
    pairs = [("NAME", "api"), ("DB_HOST", "db.local"), ("RETRY_DELAY", "0.5")]
    assert coerce_pairs(Service, pairs) == Service(
        name="api", db=Database(host="db.local"), retry_delay=0.5
    )


def test_field_names_with_underscores() -> None:
    """A field containing ``_`` is matched by its full key."""
    service = coerce_pairs(Service, [("name", "x"), ("db_host", "h"), ("retry_delay", "3")])
    assert service.retry_delay == 3.0


def test_enum_sequence_by_member_name() -> None:
    """Sequence elements are split on ``,`` and enum names resolved."""
    service = coerce_pairs(Service, [("NAME", "x"), ("DB_HOST", "h"), ("LEVELS", "LOW,HIGH")])
    assert service.levels == [Level.LOW, Level.HIGH]


def test_empty_sequence() -> None:
    """An empty right-hand side is an empty sequence."""
    service = coerce_pairs(Service, [("NAME", "x"), ("DB_HOST", "h"), ("LEVELS", "")])
    assert service.levels == []


def test_mapping_field_collects_suffixes() -> None:
    """Mapping fields receive the keys under their prefix."""
    pairs = [("NAME", "x"), ("DB_HOST", "h"), ("LABELS_TEAM", "core"), ("LABELS_TIER", "1")]
    assert coerce_pairs(Service, pairs).labels == {"team": "core", "tier": "1"}


def test_flatten_field_collects_unclaimed_keys() -> None:
    """A flattened mapping receives every key no other field claimed."""
    value = coerce_pairs(WithExtra, [("NAME", "x"), ("HELLO", "world"), ("OTHER", "1")])
    assert value == WithExtra(name="x", extra={"hello": "world", "other": "1"})


def test_fixed_and_variadic_tuples() -> None:
    """Tuples are split positionally."""
    value = coerce_pairs(WithTuple, [("PAIR", "1,a"), ("MANY", "1,2,3")])
    assert value == WithTuple(pair=(1, "a"), many=(1, 2, 3))


def test_optional_nested_record() -> None:
    """An optional record is None without keys and built when keys exist."""
    assert coerce_pairs(OptionalNested, []) == OptionalNested(db=None)
    assert coerce_pairs(OptionalNested, [("DB_HOST", "h")]) == OptionalNested(
        db=Database(host="h")
    )


def test_pydantic_model_target() -> None:
    """Pydantic models are supported like dataclasses."""
    pairs = [("NAME", "svc"), ("DB_HOST", "h"), ("DB_PORT", "1"), ("DEBUG", "true")]
    assert coerce_pairs(ModelService, pairs) == ModelService(
        name="svc", db=ModelDb(host="h", port=1), debug=True
    )


def test_validation_error_is_wrapped() -> None:
    """Pydantic validation failures become `MessageError`."""
    with pytest.raises(MessageError, match="port"):
        coerce_pairs(Database, [("HOST", "h"), ("PORT", "not a number")])


def test_unsupported_field_type_is_wrapped() -> None:
    """A field type pydantic cannot validate raises `MessageError`."""
    with pytest.raises(MessageError, match="Opaque"):
        coerce_pairs(OpaqueHolder, [("INNER", "x")])


@parametrize("target", [ValueHolder, ModelValueHolder])
def test_value_field(target: type[ValueHolder | ModelValueHolder]) -> None:
    """`Value` fields validate from the keys under their prefix."""
    decoded = coerce_pairs(target, [("INNER_A", "1"), ("INNER_B", "two")])
    assert isinstance(decoded.inner, Value)
    assert decoded.inner == {"a": "1", "b": "two"}


def test_unsupported_target_raises() -> None:
    """Targets that are neither records nor mappings are rejected."""
    with pytest.raises(MessageError):
        coerce_pairs(int, [("A", "1")])


def test_field_specs_of_dataclass() -> None:
    """Field tables record requiredness and the flatten flag."""
    specs = {spec.name: spec for spec in field_specs(WithExtra)}
    assert specs["name"].required
    assert not specs["extra"].required
    assert specs["extra"].flatten


@parametrize(
    "tp, expected",
    [
        (Optional[int], (int, True)),  # noqa: UP007
        (int | None, (int, True)),
        (int, (int, False)),
    ],
)
def test_strip_optional(tp: object, expected: tuple[object, bool]) -> None:
    """Optional annotations are unwrapped."""
    assert strip_optional(tp) == expected


def test_type_predicates() -> None:
    """Record, mapping and class predicates agree with the annotation forms."""
    assert is_record_type(Database)
    assert is_record_type(ModelDb)
    assert not is_record_type(dict[str, str])
    assert is_mapping_type(dict[str, str])
    assert not is_mapping_type(list[str])
    assert is_plain_class(dict)
    assert not is_plain_class(dict[str, str])


def test_type_caches_are_bounded() -> None:
    """Field tables are cached per type in a bounded cache."""
    field_specs(Database)
    info = field_specs.cache_info()
    assert info.maxsize == 256
    assert info.currsize >= 1
