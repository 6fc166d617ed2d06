# topmark:header:start
#
#   project      : Flatenv
#   file         : keys.py
#   file_relpath : src/flatenv/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Canonical TOML section and key names for flatenv configuration.

Configuration lives in ``flatenv.toml`` or under ``[tool.flatenv]`` in
``pyproject.toml``. Renaming or removing a key is a breaking change.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML section names and keys used by flatenv configuration."""

    # [tool.flatenv] in pyproject.toml
    SECTION_TOOL: Final[str] = "tool"
    SECTION_FLATENV: Final[str] = "flatenv"

    # Resolve ${VAR} references while parsing.
    KEY_INTERPOLATE: Final[str] = "interpolate"
    # Emit mapping keys in sorted order.
    KEY_SORT_KEYS: Final[str] = "sort_keys"
    # Text encoding for files and binary streams.
    KEY_ENCODING: Final[str] = "encoding"

    ALL_KEYS: Final[frozenset[str]] = frozenset({KEY_INTERPOLATE, KEY_SORT_KEYS, KEY_ENCODING})
