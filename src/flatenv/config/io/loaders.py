# topmark:header:start
#
#   project      : Flatenv
#   file         : loaders.py
#   file_relpath : src/flatenv/config/io/loaders.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Load TOML configuration sources.

Parsing is done with `tomlkit` and returned as plain `dict` structures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from flatenv.config.keys import Toml
from flatenv.config.logging import get_logger
from flatenv.constants import PYPROJECT_FILE_NAME

from .guards import get_table_value

if TYPE_CHECKING:
    from pathlib import Path

    from flatenv.config.logging import FlatenvLogger

    from .types import TomlTable

logger: FlatenvLogger = get_logger(__name__)


def load_defaults_dict() -> TomlTable:
    """Return flatenv's runtime defaults as a new dict.

    Returns:
        A TOML-table-compatible dict containing the runtime defaults.
    """
    return {
        Toml.KEY_INTERPOLATE: True,
        Toml.KEY_SORT_KEYS: False,
        Toml.KEY_ENCODING: "utf-8",
    }


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    Args:
        path: Path to a TOML document.

    Returns:
        The parsed TOML content.

    Notes:
        - Errors are logged and an empty dict is returned on failure.
        - Encoding is assumed to be UTF-8.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
        data_any: Any = doc.unwrap()
        return cast("TomlTable", data_any) if isinstance(data_any, dict) else {}
    except OSError as e:
        logger.error("Error loading TOML from %s: %s", path, e)
        return {}
    except TomlkitParseError as e:
        logger.error("Error decoding TOML from %s: %s", path, e)
        return {}


def load_config_table(path: Path) -> TomlTable:
    """Return the flatenv table of a config file.

    For ``pyproject.toml`` this is the ``[tool.flatenv]`` section; for any other
    file (``flatenv.toml``) it is the top-level table.

    Args:
        path: Path to ``flatenv.toml`` or ``pyproject.toml``.

    Returns:
        The flatenv table, empty when missing.
    """
    toml_data: TomlTable = load_toml_dict(path)
    if path.name != PYPROJECT_FILE_NAME:
        return toml_data

    section: TomlTable = get_table_value(
        get_table_value(toml_data, Toml.SECTION_TOOL), Toml.SECTION_FLATENV
    )
    if not section:
        logger.debug("[tool.flatenv] section missing in %s", path)
    return section
