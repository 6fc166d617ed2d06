# topmark:header:start
#
#   project      : Flatenv
#   file         : model.py
#   file_relpath : src/flatenv/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Codec configuration.

`Config` is an immutable snapshot of the options that influence encoding and
decoding. It is passed explicitly to the public entry points; there is no
process-wide configuration.

Sources:
    - `Config.defaults` for the runtime defaults.
    - `Config.from_toml_file` for ``flatenv.toml`` or ``[tool.flatenv]`` in
      ``pyproject.toml``.
    - `Config.from_toml_dict` for an already parsed table.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from flatenv.config.io import (
    get_bool_value_checked,
    get_string_value_checked,
    load_config_table,
    load_defaults_dict,
    to_toml,
)
from flatenv.config.keys import Toml
from flatenv.config.logging import get_logger
from flatenv.constants import CONFIG_FILE_NAME, DEFAULT_ENCODING, PYPROJECT_FILE_NAME

if TYPE_CHECKING:
    from pathlib import Path

    from flatenv.config.io import TomlTable
    from flatenv.config.logging import FlatenvLogger

logger: FlatenvLogger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Config:
    """Immutable codec configuration.

    Attributes:
        interpolate (bool): Resolve ``${VAR}`` references while parsing unquoted
            and double-quoted values.
        sort_keys (bool): Emit the keys of mapping values (``dict``, `Value`) in
            sorted order. Dataclass and model fields keep declaration order.
        encoding (str): Text encoding for files and binary streams.
    """

    interpolate: bool = True
    sort_keys: bool = False
    encoding: str = DEFAULT_ENCODING

    @classmethod
    def defaults(cls) -> Config:
        """Return the runtime defaults."""
        return cls.from_toml_dict(load_defaults_dict())

    @classmethod
    def from_toml_dict(cls, table: TomlTable, *, where: str = "[tool.flatenv]") -> Config:
        """Build a `Config` from a parsed TOML table.

        Unknown keys and mistyped values are logged as warnings and ignored.

        Args:
            table (TomlTable): The flatenv table.
            where (str): Table location used in warnings.

        Returns:
            Config: The resulting configuration.
        """
        for key in table:
            if key not in Toml.ALL_KEYS:
                logger.warning("Ignoring unknown key %s.%s", where, key)

        base = cls()
        encoding: str = get_string_value_checked(
            table, Toml.KEY_ENCODING, where=where, default=base.encoding
        )
        try:
            codecs.lookup(encoding)
        except LookupError:
            logger.warning("Unknown encoding in %s.%s: %r", where, Toml.KEY_ENCODING, encoding)
            encoding = base.encoding

        return cls(
            interpolate=get_bool_value_checked(
                table, Toml.KEY_INTERPOLATE, where=where, default=base.interpolate
            ),
            sort_keys=get_bool_value_checked(
                table, Toml.KEY_SORT_KEYS, where=where, default=base.sort_keys
            ),
            encoding=encoding,
        )

    @classmethod
    def from_toml_file(cls, path: Path) -> Config:
        """Load configuration from ``flatenv.toml`` or ``pyproject.toml``.

        Unreadable or malformed files are logged and yield the defaults.

        Args:
            path (Path): Path to the TOML file.

        Returns:
            Config: The loaded configuration.
        """
        logger.debug("Loading flatenv config from %s", path)
        where: str = "[tool.flatenv]" if path.name == PYPROJECT_FILE_NAME else f"[{path.name}]"
        config = cls.from_toml_dict(load_config_table(path), where=where)
        logger.debug("Loaded config: %s", config)
        return config

    @classmethod
    def discover(cls, start: Path) -> Config:
        """Return the configuration of the nearest config file above ``start``.

        In each directory, ``flatenv.toml`` takes precedence over
        ``pyproject.toml``; a ``pyproject.toml`` without a ``[tool.flatenv]``
        table is skipped.

        Args:
            start (Path): Directory (or file) to start from.

        Returns:
            Config: The discovered configuration, or the defaults.
        """
        current: Path = start.resolve()
        if current.is_file():
            current = current.parent
        for directory in (current, *current.parents):
            candidate: Path = directory / CONFIG_FILE_NAME
            if candidate.is_file():
                return cls.from_toml_file(candidate)
            candidate = directory / PYPROJECT_FILE_NAME
            if candidate.is_file() and load_config_table(candidate):
                return cls.from_toml_file(candidate)
        logger.debug("No flatenv config found above %s; using defaults", start)
        return cls.defaults()

    def with_overrides(self, **overrides: Any) -> Config:
        """Return a copy with ``overrides`` applied."""
        return replace(self, **overrides)

    def to_toml_dict(self) -> TomlTable:
        """Return the configuration as a TOML table."""
        return {
            Toml.KEY_INTERPOLATE: self.interpolate,
            Toml.KEY_SORT_KEYS: self.sort_keys,
            Toml.KEY_ENCODING: self.encoding,
        }

    def to_toml(self) -> str:
        """Render the configuration as a ``flatenv.toml`` document."""
        return to_toml(self.to_toml_dict())


DEFAULT_CONFIG: Config = Config()


def resolve_config(config: Config | None) -> Config:
    """Return ``config`` or the defaults."""
    return DEFAULT_CONFIG if config is None else config
