# topmark:header:start
#
#   project      : Flatenv
#   file         : constants.py
#   file_relpath : src/flatenv/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Flatenv constants."""

from __future__ import annotations

from typing import Final

# Joins the segments of a key path: {"b": {"c": 2}} -> B_C=2
KEY_SEPARATOR: Final[str] = "_"

# Joins sequence elements on the right-hand side: A="x","y"
SEQUENCE_SEPARATOR: Final[str] = ","

ASSIGNMENT: Final[str] = "="
LINE_SEPARATOR: Final[str] = "\n"

# Characters that may not appear in a fully qualified key.
FORBIDDEN_KEY_CHARS: Final[frozenset[str]] = frozenset({" ", "#", '"', "'"})

# Dataclass field metadata key marking a field whose children are emitted
# at the parent's level.
FLATTEN_METADATA_KEY: Final[str] = "flatenv.flatten"

LOG_LEVEL_ENV_VAR: Final[str] = "FLATENV_LOG_LEVEL"

DEFAULT_ENV_FILE_NAME: Final[str] = ".env"
DEFAULT_ENCODING: Final[str] = "utf-8"

CONFIG_FILE_NAME: Final[str] = "flatenv.toml"
PYPROJECT_FILE_NAME: Final[str] = "pyproject.toml"
