# topmark:header:start
#
#   project      : Flatenv
#   file         : prefixed.py
#   file_relpath : src/flatenv/prefixed.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Namespace prefixes for encoding and decoding.

A prefix isolates one configuration block from others sharing the same file
or process environment:

    >>> env = prefixed("app_")
    >>> env.to_string({"hello": "world"})
    'APP_HELLO="world"'
    >>> env.from_str('APP_HELLO="world"\\nOTHER=1')
    Value({'hello': 'world'})

The prefix is uppercased and prepended verbatim, so include the separating
``_`` in it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import IO, TYPE_CHECKING, Any, TypeVar

from flatenv.decoder import (
    from_env_inner,
    from_file_inner,
    from_pairs_inner,
    from_reader_inner,
    from_str_inner,
)
from flatenv.encoder import to_file_inner, to_string_inner, to_writer_inner
from flatenv.value import Value

if TYPE_CHECKING:
    from collections.abc import Iterable
    from os import PathLike

    from flatenv.config import Config

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Prefixed:
    """Encode and decode under a fixed namespace prefix.

    Create instances through `prefixed`.

    Attributes:
        prefix (str): The uppercased namespace prefix.
        config (Config | None): Codec options shared by all calls.
    """

    prefix: str
    config: Config | None = None

    def to_string(self, obj: object) -> str:
        """Serialize ``obj`` with every key prefixed."""
        return to_string_inner(self.prefix, obj, self.config)

    def to_writer(self, writer: IO[Any], obj: object) -> None:
        """Serialize ``obj`` into a stream with every key prefixed."""
        to_writer_inner(self.prefix, writer, obj, self.config)

    def to_file(self, path: str | PathLike[str], obj: object) -> None:
        """Serialize ``obj`` into a file with every key prefixed."""
        to_file_inner(self.prefix, path, obj, self.config)

    def from_str(self, text: str, target: type[T] = Value) -> T:  # type: ignore[assignment]
        """Deserialize the prefixed keys of ``text`` into ``target``."""
        return from_str_inner(self.prefix, text, target, self.config)

    def from_reader(
        self,
        reader: IO[Any],
        target: type[T] = Value,  # type: ignore[assignment]
    ) -> T:
        """Deserialize the prefixed keys of a stream into ``target``."""
        return from_reader_inner(self.prefix, reader, target, self.config)

    def from_file(
        self,
        path: str | PathLike[str] | None = None,
        target: type[T] = Value,  # type: ignore[assignment]
    ) -> T:
        """Deserialize the prefixed keys of a file into ``target``."""
        return from_file_inner(self.prefix, path, target, self.config)

    def from_env(self, target: type[T] = Value) -> T:  # type: ignore[assignment]
        """Deserialize the prefixed process environment variables into ``target``."""
        return from_env_inner(self.prefix, target)

    def from_pairs(
        self,
        pairs: Iterable[tuple[str, str]],
        target: type[T] = Value,  # type: ignore[assignment]
    ) -> T:
        """Deserialize the prefixed ``(key, value)`` pairs into ``target``."""
        return from_pairs_inner(self.prefix, pairs, target)


def prefixed(prefix: str, *, config: Config | None = None) -> Prefixed:
    """Return a `Prefixed` codec for ``prefix`` (uppercased)."""
    return Prefixed(prefix.upper(), config)
