# topmark:header:start
#
#   project      : Flatenv
#   file         : getters.py
#   file_relpath : src/flatenv/config/io/getters.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Checked value getters for TOML config tables.

Each getter validates the expected shape of a value. A value of the wrong
type is reported with a **warning** and replaced by ``default``; a missing key
silently yields ``default``. User mistakes in configuration files are thus
surfaced without failing the codec.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from flatenv.config.logging import get_logger

if TYPE_CHECKING:
    from flatenv.config.logging import FlatenvLogger

    from .types import TomlTable

logger: FlatenvLogger = get_logger(__name__)


def get_bool_value_checked(
    table: TomlTable,
    key: str,
    *,
    where: str,
    default: bool = False,
) -> bool:
    """Return a boolean value, warning when the type is not `bool`.

    Integers are *not* coerced: ``interpolate = 1`` is reported and ignored.

    Args:
        table (TomlTable): Table to query.
        key (str): Key to extract.
        where (str): Table location used in the warning (e.g. ``"[tool.flatenv]"``).
        default (bool): Value returned when the key is missing or mistyped.

    Returns:
        bool: The configured value or ``default``.
    """
    value: Any | None = table.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value

    loc: Final[str] = f"{where}.{key}"
    logger.warning("Expected boolean in %s, got %s: %r", loc, type(value).__name__, value)
    return default


def get_string_value_checked(
    table: TomlTable,
    key: str,
    *,
    where: str,
    default: str = "",
) -> str:
    """Return a string value, warning when the type is not `str`.

    Args:
        table (TomlTable): Table to query.
        key (str): Key to extract.
        where (str): Table location used in the warning.
        default (str): Value returned when the key is missing or mistyped.

    Returns:
        str: The configured value or ``default``.
    """
    value: Any | None = table.get(key)
    if value is None:
        return default
    if isinstance(value, str):
        return value

    loc: Final[str] = f"{where}.{key}"
    logger.warning("Expected string in %s, got %s: %r", loc, type(value).__name__, value)
    return default
