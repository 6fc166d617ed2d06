# topmark:header:start
#
#   project      : Flatenv
#   file         : __init__.py
#   file_relpath : src/flatenv/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration and logging for flatenv."""

from __future__ import annotations

from flatenv.config.model import DEFAULT_CONFIG, Config, resolve_config

__all__: list[str] = [
    "DEFAULT_CONFIG",
    "Config",
    "resolve_config",
]
