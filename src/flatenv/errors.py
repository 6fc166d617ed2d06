# topmark:header:start
#
#   project      : Flatenv
#   file         : errors.py
#   file_relpath : src/flatenv/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions raised by flatenv.

Usage:
    Every public operation either returns a complete result or raises a subclass
    of `FlatenvError`. There is no partial output and no local recovery.

    Failures surfaced by collaborators (line parsing, pydantic validation, file
    and stream I/O) are wrapped into `MessageError` with `FlatenvError.wrap`,
    chaining the original exception.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar


class ErrorKind(str, Enum):
    """Kinds of codec failures."""

    MESSAGE = "message"
    EOF = "eof"
    SYNTAX = "syntax"
    EXPECTED_BOOLEAN = "expected_boolean"
    EXPECTED_INTEGER = "expected_integer"
    UNSUPPORTED_TUPLE_STRUCT = "unsupported_tuple_struct"
    UNSUPPORTED_STRUCTURE_IN_SEQ = "unsupported_structure_in_seq"


class FlatenvError(Exception):
    """Base class for all flatenv errors."""

    kind: ClassVar[ErrorKind] = ErrorKind.MESSAGE
    default_message: ClassVar[str] = ""

    def __init__(self, message: str | None = None) -> None:
        self.message: str = message if message is not None else self.default_message
        super().__init__(self.message)

    @staticmethod
    def wrap(exc: BaseException) -> MessageError:
        """Return a `MessageError` carrying the text of ``exc``.

        Callers chain the original exception: ``raise FlatenvError.wrap(exc) from exc``.
        """
        return MessageError(str(exc))


class MessageError(FlatenvError):
    """Failure reported by a collaborator, or a caller-supplied custom error."""

    kind = ErrorKind.MESSAGE


class EofError(FlatenvError):
    """Input ended while a quoted value was still open."""

    kind = ErrorKind.EOF
    default_message = "Unexpected end of input"


class EnvSyntaxError(FlatenvError):
    """A key contains a forbidden character, or the input is malformed."""

    kind = ErrorKind.SYNTAX
    default_message = "Syntax error"


class ExpectedBooleanError(FlatenvError):
    """Reserved: a value could not be read as a boolean."""

    kind = ErrorKind.EXPECTED_BOOLEAN
    default_message = "Expected boolean"


class ExpectedIntegerError(FlatenvError):
    """Reserved: a value could not be read as an integer."""

    kind = ErrorKind.EXPECTED_INTEGER
    default_message = "Expected integer"


class UnsupportedTupleStructError(FlatenvError):
    """A positional (unnamed-field) compound was passed to the encoder."""

    kind = ErrorKind.UNSUPPORTED_TUPLE_STRUCT
    default_message = "Tuple structs are not supported"


class UnsupportedStructureInSeqError(FlatenvError):
    """A sequence or compound value was found inside a sequence."""

    kind = ErrorKind.UNSUPPORTED_STRUCTURE_IN_SEQ
    default_message = "Unsupported structure in sequence"
