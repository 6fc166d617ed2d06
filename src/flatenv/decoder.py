# topmark:header:start
#
#   project      : Flatenv
#   file         : decoder.py
#   file_relpath : src/flatenv/decoder.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Decode environment file text into typed or untyped values.

Every entry point follows the same path:

1. obtain ordered ``(key, value)`` pairs: from text through
   [`flatenv.parser.parse_pairs`][flatenv.parser.parse_pairs], or directly from
   the process environment;
2. when a namespace prefix is given, keep only keys starting with it
   (case-insensitively) and remove it;
3. hand the pairs to the untyped `Value` container (keys lower-cased, no
   coercion) or to the coercion engine for any other target.

Keys are always lower-cased, so ``HELLO=world`` reads back as ``{"hello": "world"}``.

Text inputs expand ``${VAR}`` references by default. The encoder writes
strings verbatim, so a value such as ``${HOME}x`` is expanded when it is read
back and does not round-trip. Pass ``Config(interpolate=False)`` to read such
values unchanged.
"""

from __future__ import annotations

import io
import os
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any, TypeVar, cast

from dotenv import find_dotenv

from flatenv.coercion import coerce_pairs, is_plain_class
from flatenv.config import resolve_config
from flatenv.config.logging import get_logger
from flatenv.constants import DEFAULT_ENV_FILE_NAME
from flatenv.errors import FlatenvError, MessageError
from flatenv.parser import parse_pairs
from flatenv.value import Value

if TYPE_CHECKING:
    from collections.abc import Iterable
    from os import PathLike

    from flatenv.config import Config
    from flatenv.config.logging import FlatenvLogger

logger: FlatenvLogger = get_logger(__name__)

T = TypeVar("T")


def strip_prefix(prefix: str, pairs: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    """Keep the pairs whose key starts with ``prefix`` and remove it.

    The comparison ignores case. Keys that consist of the prefix alone are dropped.
    """
    wanted: str = prefix.upper()
    out: list[tuple[str, str]] = []
    for key, value in pairs:
        if len(key) > len(wanted) and key.upper().startswith(wanted):
            out.append((key[len(wanted) :], value))
        else:
            logger.trace("discarding key without prefix %s: %s", wanted, key)
    return out


def from_pairs_inner(
    prefix: str | None,
    pairs: Iterable[tuple[str, str]],
    target: type[T],
) -> T:
    """Build ``target`` from ``(key, value)`` pairs under an optional prefix."""
    selected: Iterable[tuple[str, str]] = pairs if prefix is None else strip_prefix(prefix, pairs)
    if is_plain_class(target) and issubclass(target, Value):
        return cast("T", target.from_pairs((k.lower(), v) for k, v in selected))
    return coerce_pairs(target, selected)


def from_str_inner(
    prefix: str | None,
    text: str,
    target: type[T],
    config: Config | None = None,
) -> T:
    """Parse ``text`` and build ``target`` under an optional prefix."""
    cfg: Config = resolve_config(config)
    logger.debug("Decoding %d character(s) into %s (prefix=%r)", len(text), target, prefix)
    pairs: list[tuple[str, str]] = parse_pairs(text, interpolate=cfg.interpolate)
    return from_pairs_inner(prefix, pairs, target)


def from_reader_inner(
    prefix: str | None,
    reader: IO[Any],
    target: type[T],
    config: Config | None = None,
) -> T:
    """Read a text or binary stream to the end and decode it."""
    cfg: Config = resolve_config(config)
    try:
        content: str | bytes = reader.read()
        if isinstance(content, bytes):
            content = content.decode(cfg.encoding)
    except (OSError, UnicodeDecodeError, io.UnsupportedOperation) as exc:
        raise FlatenvError.wrap(exc) from exc
    return from_str_inner(prefix, content, target, cfg)


def from_file_inner(
    prefix: str | None,
    path: str | PathLike[str] | None,
    target: type[T],
    config: Config | None = None,
) -> T:
    """Read the file at ``path`` (or the nearest ``.env``) and decode it."""
    cfg: Config = resolve_config(config)
    if path is None:
        found: str = find_dotenv(DEFAULT_ENV_FILE_NAME, usecwd=True)
        if not found:
            raise MessageError(f"No {DEFAULT_ENV_FILE_NAME} file found")
        path = found
    logger.debug("Reading %s", path)
    try:
        text: str = Path(path).read_text(encoding=cfg.encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise FlatenvError.wrap(exc) from exc
    return from_str_inner(prefix, text, target, cfg)


def from_env_inner(prefix: str | None, target: type[T]) -> T:
    """Build ``target`` from the current process environment."""
    logger.debug("Decoding process environment into %s (prefix=%r)", target, prefix)
    return from_pairs_inner(prefix, list(os.environ.items()), target)


def from_pairs(
    pairs: Iterable[tuple[str, str]],
    target: type[T] = Value,  # type: ignore[assignment]
) -> T:
    """Build ``target`` from already parsed ``(key, value)`` pairs.

    Raises:
        FlatenvError: If the pairs do not fit ``target``.
    """
    return from_pairs_inner(None, pairs, target)


def from_str(
    text: str,
    target: type[T] = Value,  # type: ignore[assignment]
    *,
    config: Config | None = None,
) -> T:
    """Deserialize environment file text into ``target``.

    Args:
        text (str): Environment file content.
        target (type[T]): `Value` (default) for untyped access, a dataclass type,
            a pydantic model class, or a ``dict`` annotation.
        config (Config | None): Codec options; defaults when None.

    Returns:
        T: The decoded value.

    Raises:
        FlatenvError: If the text is malformed or does not fit ``target``.

    Example:
        >>> from_str("HELLO=world")
        Value({'hello': 'world'})
    """
    return from_str_inner(None, text, target, config)


def from_reader(
    reader: IO[Any],
    target: type[T] = Value,  # type: ignore[assignment]
    *,
    config: Config | None = None,
) -> T:
    """Deserialize a text or binary stream into ``target``.

    Raises:
        FlatenvError: If reading fails, the content is malformed, or it does
            not fit ``target``.
    """
    return from_reader_inner(None, reader, target, config)


def from_file(
    path: str | PathLike[str] | None = None,
    target: type[T] = Value,  # type: ignore[assignment]
    *,
    config: Config | None = None,
) -> T:
    """Deserialize an environment file into ``target``.

    When ``path`` is None, the nearest ``.env`` file is located from the current
    working directory upward.

    Raises:
        FlatenvError: If the file cannot be read, is malformed, or does not fit ``target``.
    """
    return from_file_inner(None, path, target, config)


def from_env(target: type[T] = Value) -> T:  # type: ignore[assignment]
    """Deserialize the process environment into ``target``.

    Raises:
        FlatenvError: If the environment does not fit ``target``.
    """
    return from_env_inner(None, target)
