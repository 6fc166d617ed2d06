# topmark:header:start
#
#   project      : Flatenv
#   file         : __init__.py
#   file_relpath : src/flatenv/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Flatenv package.

Flatenv serializes structured data into environment variable files and reads
them back. Nested fields are flattened into uppercase, underscore-joined keys;
keys are lower-cased when reading.

    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class Db:
    ...     host: str
    ...     port: int
    >>> @dataclass
    ... class Settings:
    ...     debug: bool
    ...     db: Db
    >>> to_string(Settings(True, Db("localhost", 5432)))
    'DEBUG=true\\nDB_HOST="localhost"\\nDB_PORT=5432'
    >>> from_str('DEBUG=true\\nDB_HOST="localhost"\\nDB_PORT=5432', Settings)
    Settings(debug=True, db=Db(host='localhost', port=5432))

Without a schema, `Value` gives untyped access to the assignments.
"""

from __future__ import annotations

from flatenv.config import Config
from flatenv.decoder import from_env, from_file, from_pairs, from_reader, from_str
from flatenv.encoder import Encoder, to_file, to_string, to_writer
from flatenv.errors import (
    EnvSyntaxError,
    EofError,
    ErrorKind,
    ExpectedBooleanError,
    ExpectedIntegerError,
    FlatenvError,
    MessageError,
    UnsupportedStructureInSeqError,
    UnsupportedTupleStructError,
)
from flatenv.lowering import flatten_field, lower
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
from flatenv.prefixed import Prefixed, prefixed
from flatenv.value import Value

__all__: list[str] = [
    "Compound",
    "Config",
    "Encoder",
    "EnumVariant",
    "EnvSyntaxError",
    "EofError",
    "ErrorKind",
    "ExpectedBooleanError",
    "ExpectedIntegerError",
    "Field",
    "FlatenvError",
    "MessageError",
    "OptionalValue",
    "Prefixed",
    "Scalar",
    "SequenceValue",
    "StructuredValue",
    "TupleStruct",
    "UnsupportedStructureInSeqError",
    "UnsupportedTupleStructError",
    "Value",
    "flatten_field",
    "from_env",
    "from_file",
    "from_pairs",
    "from_reader",
    "from_str",
    "lower",
    "prefixed",
    "to_file",
    "to_string",
    "to_writer",
]
