# topmark:header:start
#
#   project      : Flatenv
#   file         : value.py
#   file_relpath : src/flatenv/value.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Untyped representation of an environment file.

`Value` is a string-to-string mapping used when no fixed schema is known.
Iteration follows insertion order, so reading a file into a `Value` and
writing it back keeps the key order of the input. Equality ignores order,
like ``dict`` equality.

Example:
    >>> from flatenv import Value, from_str
    >>> from_str("HELLO=world")
    Value({'hello': 'world'})
"""

from __future__ import annotations

from collections import UserDict
from typing import TYPE_CHECKING, Any

from pydantic_core import core_schema

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pydantic import GetCoreSchemaHandler
    from pydantic_core import CoreSchema


class Value(UserDict[str, str]):
    """Flexible representation of environment variables.

    Keys and values are stored as ``str``; other objects are converted with
    ``str()`` on assignment.
    """

    def __setitem__(self, key: str, item: str) -> None:
        super().__setitem__(str(key), str(item))

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[object, object]]) -> Value:
        """Create a `Value` from ``(key, value)`` pairs; later pairs win."""
        value = cls()
        for key, item in pairs:
            value[str(key)] = str(item)
        return value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.data!r})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        """Validate `Value` fields of models and dataclasses as ``dict[str, str]``."""
        from_mapping: CoreSchema = core_schema.no_info_after_validator_function(
            cls, handler.generate_schema(dict[str, str])
        )
        return core_schema.union_schema(
            [core_schema.is_instance_schema(cls), from_mapping],
            serialization=core_schema.plain_serializer_function_ser_schema(dict),
        )
