# topmark:header:start
#
#   project      : Flatenv
#   file         : parser.py
#   file_relpath : src/flatenv/parser.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Split environment file text into ordered ``(key, value)`` pairs.

Grammar, one assignment per line:

- blank lines and lines starting with ``#`` are ignored;
- ``export KEY=VALUE`` is accepted;
- a value is a run of adjacent segments up to the end of the line:
  ``'single quoted'``, ``"double quoted"`` or unquoted text. Quoted segments
  may span lines;
- there are no escape sequences: a backslash is an ordinary character in
  every segment, so values the encoder writes (``"C:\\"``) read back
  unchanged;
- an unquoted ``#`` preceded by whitespace starts a comment; trailing
  whitespace of an unquoted value is dropped.

Adjacent segments are concatenated, so the encoder's sequence form
``A="x","y"`` reads back as ``x,y``.

``${VAR}`` and ``${VAR:-default}`` references in unquoted and double-quoted
segments are resolved with python-dotenv's variable parser, first against
earlier assignments of the same input, then against the process environment.
"""

from __future__ import annotations

import os
import re
from collections import ChainMap
from typing import TYPE_CHECKING, Final, NamedTuple

from dotenv.variables import parse_variables

from flatenv.config.logging import get_logger
from flatenv.errors import EnvSyntaxError, EofError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from flatenv.config.logging import FlatenvLogger

logger: FlatenvLogger = get_logger(__name__)

_HSPACE: Final[re.Pattern[str]] = re.compile(r"[^\S\r\n]*")
_NEWLINE: Final[re.Pattern[str]] = re.compile(r"\r\n|\n|\r")
_REST_OF_LINE: Final[re.Pattern[str]] = re.compile(r"[^\r\n]*")
_EXPORT: Final[re.Pattern[str]] = re.compile(r"export[^\S\r\n]+(?=[^=\s])")
_KEY: Final[re.Pattern[str]] = re.compile(r"[^=#\s]+")
_SINGLE_QUOTED: Final[re.Pattern[str]] = re.compile(r"'([^']*)'")
_DOUBLE_QUOTED: Final[re.Pattern[str]] = re.compile(r'"([^"]*)"')
_UNQUOTED: Final[re.Pattern[str]] = re.compile(r"[^'\"\s]+")


class Binding(NamedTuple):
    """A parsed assignment and the line it starts on."""

    key: str
    value: str
    line: int


class _Segment(NamedTuple):
    text: str
    expandable: bool


class Reader:
    """Cursor over the input text that keeps track of line numbers."""

    def __init__(self, text: str) -> None:
        self.text: str = text.removeprefix("\ufeff")
        self.pos: int = 0
        self.line: int = 1

    def has_next(self) -> bool:
        return self.pos < len(self.text)

    def peek(self) -> str:
        return self.text[self.pos : self.pos + 1]

    def match(self, regex: re.Pattern[str]) -> re.Match[str] | None:
        """Consume ``regex`` at the cursor; return None (consuming nothing) if it fails."""
        m = regex.match(self.text, self.pos)
        if m is not None:
            self.line += len(_NEWLINE.findall(m.group(0)))
            self.pos = m.end()
        return m


def _read_value(reader: Reader) -> list[_Segment]:
    segments: list[_Segment] = []
    while True:
        ch: str = reader.peek()
        line: int = reader.line
        if ch == "'":
            m = reader.match(_SINGLE_QUOTED)
            if m is None:
                raise EofError(f"Unexpected end of input: unterminated ' quote on line {line}")
            segments.append(_Segment(m.group(1), False))
        elif ch == '"':
            m = reader.match(_DOUBLE_QUOTED)
            if m is None:
                raise EofError(f'Unexpected end of input: unterminated " quote on line {line}')
            segments.append(_Segment(m.group(1), True))
        elif ch in ("", "\r", "\n"):
            return segments
        elif ch.isspace():
            ws = reader.match(_HSPACE)
            nxt: str = reader.peek()
            if nxt in ("", "\r", "\n", "#"):
                return segments
            if ws is not None:
                segments.append(_Segment(ws.group(0), False))
        else:
            m = reader.match(_UNQUOTED)
            if m is None:  # pragma: no cover - every remaining char matches
                raise EnvSyntaxError(f"Syntax error on line {line}")
            segments.append(_Segment(m.group(0), True))


def _iter_assignments(text: str) -> Iterator[tuple[str, list[_Segment], int]]:
    reader = Reader(text)
    while reader.has_next():
        reader.match(_HSPACE)
        ch: str = reader.peek()
        if ch in ("\r", "\n"):
            reader.match(_NEWLINE)
            continue
        if ch == "#":
            reader.match(_REST_OF_LINE)
            continue
        if not ch:
            break

        line: int = reader.line
        reader.match(_EXPORT)
        key_match = reader.match(_KEY)
        if key_match is None:
            raise EnvSyntaxError(f"Syntax error on line {line}: expected a key")
        key: str = key_match.group(0)
        reader.match(_HSPACE)
        if reader.peek() != "=":
            raise EnvSyntaxError(f"Syntax error on line {line}: expected '=' after {key!r}")
        reader.pos += 1
        reader.match(_HSPACE)

        segments: list[_Segment] = _read_value(reader)

        reader.match(_HSPACE)
        if reader.peek() == "#":
            reader.match(_REST_OF_LINE)
        if reader.peek() not in ("", "\r", "\n"):
            raise EnvSyntaxError(f"Syntax error on line {reader.line}: unexpected trailing text")

        yield key, segments, line


def iter_bindings(text: str) -> Iterator[Binding]:
    """Yield the assignments of ``text`` in order, without interpolation.

    Raises:
        EnvSyntaxError: A line has no key or no ``=``, or trailing text.
        EofError: A quoted value is not terminated.
    """
    for key, segments, line in _iter_assignments(text):
        yield Binding(key, "".join(s.text for s in segments), line)


def _expand(segments: list[_Segment], env: Mapping[str, str | None]) -> str:
    parts: list[str] = []
    for segment in segments:
        if segment.expandable and "${" in segment.text:
            parts.append("".join(atom.resolve(env) for atom in parse_variables(segment.text)))
        else:
            parts.append(segment.text)
    return "".join(parts)


def parse_pairs(
    text: str,
    *,
    interpolate: bool = True,
    environ: Mapping[str, str] | None = None,
) -> list[tuple[str, str]]:
    """Parse ``text`` into ordered ``(key, value)`` pairs.

    Duplicate keys are kept in input order; consumers decide which one wins.

    Args:
        text (str): Environment file content.
        interpolate (bool): Resolve ``${VAR}`` references.
        environ (Mapping[str, str] | None): Fallback for references not assigned
            in ``text``; the process environment when None.

    Returns:
        list[tuple[str, str]]: The assignments in input order.

    Raises:
        EnvSyntaxError: The text is malformed.
        EofError: A quoted value is not terminated.
    """
    pairs: list[tuple[str, str]] = []
    assigned: dict[str, str | None] = {}
    fallback: Mapping[str, str] = os.environ if environ is None else environ
    env: ChainMap[str, str | None] = ChainMap(assigned, dict(fallback))

    for key, segments, line in _iter_assignments(text):
        if interpolate:
            value: str = _expand(segments, env)
        else:
            value = "".join(s.text for s in segments)
        logger.trace("parsed line %d: %s", line, key)
        assigned[key] = value
        pairs.append((key, value))
    logger.debug("Parsed %d assignment(s)", len(pairs))
    return pairs
