# topmark:header:start
#
#   project      : Flatenv
#   file         : encoder.py
#   file_relpath : src/flatenv/encoder.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Encode structured values into environment file text.

The `Encoder` walks a `StructuredValue` depth-first and flattens it into
``KEY=VALUE`` lines:

- Compound fields extend the current key path; a field whose value is itself a
  (non-empty) compound contributes no line of its own, only its children do.
- Keys are uppercased and joined with ``_``, prefixed with the namespace prefix.
- Strings are double-quoted verbatim (no escaping), empty strings and ``None``
  give an empty right-hand side, sequences are comma-joined.

The key of a field is only written once the shape of its value is known, so
no partially written assignment ever has to be taken back.

Example:
    >>> to_string({"a": 1, "b": {"c": 2}})
    'A=1\\nB_C=2'
"""

from __future__ import annotations

import io
import math
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any

from flatenv.config import resolve_config
from flatenv.config.logging import get_logger
from flatenv.constants import (
    ASSIGNMENT,
    FORBIDDEN_KEY_CHARS,
    KEY_SEPARATOR,
    LINE_SEPARATOR,
    SEQUENCE_SEPARATOR,
)
from flatenv.errors import (
    EnvSyntaxError,
    FlatenvError,
    MessageError,
    UnsupportedStructureInSeqError,
    UnsupportedTupleStructError,
)
from flatenv.lowering import lower
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
    from os import PathLike

    from flatenv.config import Config
    from flatenv.config.logging import FlatenvLogger

logger: FlatenvLogger = get_logger(__name__)


@dataclass
class EncodingState:
    """Mutable state of a single traversal.

    Attributes:
        base_prefix (str): Uppercased namespace prefix, fixed for the call.
        prefix (list[str]): Segments of the current key path.
        in_sequence (bool): True while rendering the elements of a sequence.
        output (list[str]): Completed ``KEY=VALUE`` lines.
    """

    base_prefix: str = ""
    prefix: list[str] = field(default_factory=list)
    in_sequence: bool = False
    output: list[str] = field(default_factory=list)

    def current_key(self) -> str:
        """Return the fully qualified key of the current path."""
        return self.base_prefix + KEY_SEPARATOR.join(self.prefix)


def _unwrap(value: StructuredValue) -> StructuredValue | None:
    """Strip present `OptionalValue` layers; return None for an absent value."""
    while isinstance(value, OptionalValue):
        if value.value is None:
            return None
        value = value.value
    return value


def format_float(value: float) -> str:
    """Return the shortest exact decimal text of ``value`` without an exponent.

    Integral values have no fractional part (``3.0`` -> ``"3"``); non-finite
    values render as ``NaN``, ``inf`` and ``-inf``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text: str = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class Encoder:
    """Serializer turning one `StructuredValue` into environment file text.

    An encoder is used for exactly one traversal; create a new instance per call.
    """

    def __init__(self, prefix: str | None = None) -> None:
        self.state = EncodingState(base_prefix=(prefix or "").upper())

    def encode(self, value: StructuredValue) -> str:
        """Encode ``value`` and return the flat text.

        A compound root produces one line per leaf; any other root renders as a
        bare right-hand side (``5``, ``"x"``, ``"a","b"``).

        Raises:
            EnvSyntaxError: A key contains a forbidden character.
            UnsupportedStructureInSeqError: A sequence holds a sequence or compound.
            UnsupportedTupleStructError: A positional compound was found.
            MessageError: A value cannot be represented.
        """
        root = _unwrap(value)
        if isinstance(root, Compound):
            self._encode_compound(root)
        elif isinstance(root, EnumVariant) and root.payload is not None:
            self._encode_compound(Compound((Field(root.name, root.payload),)))
        else:
            return self._render(value)
        return LINE_SEPARATOR.join(self.state.output)

    # --- compounds ---

    def _encode_compound(self, compound: Compound) -> None:
        logger.trace("serialize compound with %d field(s)", len(compound))
        for fld in compound.fields:
            if fld.flatten:
                self._encode_flattened(fld)
                continue

            state = self.state
            prefix_before: list[str] = list(state.prefix)
            state.prefix.append(fld.name.upper())
            try:
                key: str = state.current_key()
                self._check_key(key)
                self._encode_field(key, fld.value)
            finally:
                state.prefix = prefix_before

    def _encode_flattened(self, fld: Field) -> None:
        logger.trace("serialize flattened field: %s", fld.name)
        inner = _unwrap(fld.value)
        if inner is None:
            return
        if not isinstance(inner, Compound):
            raise MessageError(f"Can only flatten compound values, field {fld.name!r} is not")
        self._encode_compound(inner)

    def _encode_field(self, key: str, value: StructuredValue) -> None:
        inner = _unwrap(value)
        if isinstance(inner, Compound) and len(inner):
            self._encode_compound(inner)
            return
        if isinstance(inner, EnumVariant) and inner.payload is not None:
            logger.trace("serialize variant with payload: %s", inner.name)
            self._encode_compound(Compound((Field(inner.name, inner.payload),)))
            return
        if isinstance(inner, Compound):
            # Nothing to flatten: keep the bare assignment.
            self.state.output.append(key + ASSIGNMENT)
            return
        self.state.output.append(key + ASSIGNMENT + self._render(value))

    def _check_key(self, key: str) -> None:
        logger.trace("serialize key: %s", key)
        if self.state.in_sequence:
            raise UnsupportedStructureInSeqError()
        if any(ch in FORBIDDEN_KEY_CHARS for ch in key):
            raise EnvSyntaxError(f"Syntax error: forbidden character in key {key!r}")

    # --- right-hand side values ---

    def _render(self, value: StructuredValue) -> str:
        if isinstance(value, Scalar):
            return self._render_scalar(value)
        if isinstance(value, OptionalValue):
            if value.value is None:
                logger.trace("serialize none")
                return ""
            logger.trace("serialize some")
            return self._render(value.value)
        if isinstance(value, EnumVariant):
            if value.payload is not None:
                logger.trace("serialize variant payload in sequence: %s", value.name)
                return self._render(value.payload)
            logger.trace("serialize unit variant: %s", value.name)
            return self._render_str(value.name)
        if isinstance(value, SequenceValue):
            return self._render_sequence(value)
        if isinstance(value, TupleStruct):
            raise UnsupportedTupleStructError()
        if isinstance(value, Compound):
            raise UnsupportedStructureInSeqError()
        raise MessageError(f"Unknown structured value: {type(value).__name__}")

    def _render_sequence(self, value: SequenceValue) -> str:
        logger.trace("serialize sequence of %d element(s)", len(value.items))
        state = self.state
        if state.in_sequence:
            raise UnsupportedStructureInSeqError()
        state.in_sequence = True
        try:
            parts: list[str] = [self._render(item).rstrip(LINE_SEPARATOR) for item in value.items]
        finally:
            state.in_sequence = False
        return SEQUENCE_SEPARATOR.join(parts)

    def _render_scalar(self, scalar: Scalar) -> str:
        v = scalar.value
        if isinstance(v, bool):
            logger.trace("serialize bool: %s", v)
            return "true" if v else "false"
        if isinstance(v, int):
            logger.trace("serialize int: %d", v)
            return str(v)
        if isinstance(v, float):
            logger.trace("serialize float: %r", v)
            return format_float(v)
        if isinstance(v, bytes):
            logger.trace("serialize bytes: %r", v)
            try:
                return self._render_str(v.decode("utf-8"))
            except UnicodeDecodeError as exc:
                raise EnvSyntaxError(f"Syntax error: bytes are not valid UTF-8 ({exc})") from exc
        return self._render_str(v)

    def _render_str(self, v: str) -> str:
        logger.trace("serialize str: %s", v)
        return f'"{v}"' if v else ""


# --- entry points ---


def to_string_inner(prefix: str | None, obj: object, config: Config | None = None) -> str:
    """Encode ``obj`` under an optional namespace prefix."""
    cfg: Config = resolve_config(config)
    logger.debug("Encoding %s (prefix=%r)", type(obj).__name__, prefix)
    value: StructuredValue = lower(obj, sort_keys=cfg.sort_keys)
    return Encoder(prefix).encode(value)


def _is_binary(writer: IO[Any]) -> bool:
    # Wrappers such as SpooledTemporaryFile only expose their mode.
    if isinstance(writer, (io.RawIOBase, io.BufferedIOBase)):
        return True
    mode: object = getattr(writer, "mode", "")
    return isinstance(mode, str) and "b" in mode


def to_writer_inner(
    prefix: str | None,
    writer: IO[Any],
    obj: object,
    config: Config | None = None,
) -> None:
    """Encode ``obj`` and write it to a text or binary stream."""
    cfg: Config = resolve_config(config)
    text: str = to_string_inner(prefix, obj, cfg)
    try:
        if _is_binary(writer):
            writer.write(text.encode(cfg.encoding))
        else:
            writer.write(text)
    except (OSError, ValueError, TypeError) as exc:
        raise FlatenvError.wrap(exc) from exc


def to_file_inner(
    prefix: str | None,
    path: str | PathLike[str],
    obj: object,
    config: Config | None = None,
) -> None:
    """Encode ``obj`` and write it to ``path``, replacing its content."""
    cfg: Config = resolve_config(config)
    text: str = to_string_inner(prefix, obj, cfg)
    logger.debug("Writing %d byte(s) to %s", len(text), path)
    try:
        Path(path).write_text(text, encoding=cfg.encoding)
    except OSError as exc:
        raise FlatenvError.wrap(exc) from exc


def to_string(obj: object, *, config: Config | None = None) -> str:
    """Serialize ``obj`` into environment file text.

    Args:
        obj (object): A `StructuredValue` or any object `flatenv.lowering.lower`
            accepts (dataclass, pydantic model, mapping, `Value`, ...).
        config (Config | None): Codec options; defaults when None.

    Returns:
        str: ``KEY=VALUE`` lines joined by ``\\n``, without trailing newline.

    Raises:
        FlatenvError: If ``obj`` cannot be represented.
    """
    return to_string_inner(None, obj, config)


def to_writer(writer: IO[Any], obj: object, *, config: Config | None = None) -> None:
    """Serialize ``obj`` into a text or binary stream.

    Raises:
        FlatenvError: If ``obj`` cannot be represented or writing fails.
    """
    to_writer_inner(None, writer, obj, config)


def to_file(path: str | PathLike[str], obj: object, *, config: Config | None = None) -> None:
    """Serialize ``obj`` into the file at ``path``.

    Raises:
        FlatenvError: If ``obj`` cannot be represented or writing fails.
    """
    to_file_inner(None, path, obj, config)
