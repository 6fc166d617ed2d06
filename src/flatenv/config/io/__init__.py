# topmark:header:start
#
#   project      : Flatenv
#   file         : __init__.py
#   file_relpath : src/flatenv/config/io/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""TOML I/O helpers for flatenv configuration.

Typical flow:
    1. Start from the runtime defaults (``load_defaults_dict``).
    2. Load ``flatenv.toml`` or the ``[tool.flatenv]`` table (``load_config_table``).
    3. Read values with the checked getters.
    4. Serialize back to TOML when needed (``to_toml``).
"""

from __future__ import annotations

from .getters import get_bool_value_checked, get_string_value_checked
from .guards import get_table_value, is_toml_table
from .loaders import load_config_table, load_defaults_dict, load_toml_dict
from .render import to_toml
from .types import TomlTable

__all__: list[str] = [
    "TomlTable",
    "get_bool_value_checked",
    "get_string_value_checked",
    "get_table_value",
    "is_toml_table",
    "load_config_table",
    "load_defaults_dict",
    "load_toml_dict",
    "to_toml",
]
