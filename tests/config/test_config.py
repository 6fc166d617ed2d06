# topmark:header:start
#
#   project      : Flatenv
#   file         : test_config.py
#   file_relpath : tests/config/test_config.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for `flatenv.config.Config` and its TOML I/O helpers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import tomlkit

from flatenv.config import DEFAULT_CONFIG, Config, resolve_config
from flatenv.config.io import (
    get_bool_value_checked,
    get_string_value_checked,
    get_table_value,
    load_config_table,
    load_toml_dict,
    to_toml,
)

if TYPE_CHECKING:
    from pathlib import Path

    import pytest


def test_defaults_match_dataclass_defaults() -> None:
    """`Config.defaults` agrees with a plain `Config()`."""
    assert Config.defaults() == Config()
    assert resolve_config(None) is DEFAULT_CONFIG


def test_from_toml_dict_reads_known_keys() -> None:
    """Known keys override the defaults."""
    config = Config.from_toml_dict({"interpolate": False, "sort_keys": True, "encoding": "latin-1"})
    assert config == Config(interpolate=False, sort_keys=True, encoding="latin-1")


def test_from_toml_dict_warns_on_unknown_and_mistyped(caplog: pytest.LogCaptureFixture) -> None:
    """Unknown keys and wrong types are reported and ignored."""
    with caplog.at_level(logging.WARNING):
        config = Config.from_toml_dict({"interpolate": 1, "bogus": True})
    assert config == Config()
    assert "Ignoring unknown key [tool.flatenv].bogus" in caplog.text
    assert "Expected boolean in [tool.flatenv].interpolate" in caplog.text


def test_invalid_encoding_falls_back(caplog: pytest.LogCaptureFixture) -> None:
    """An encoding Python does not know is replaced by the default."""
    with caplog.at_level(logging.WARNING):
        config = Config.from_toml_dict({"encoding": "no-such-codec"})
    assert config.encoding == "utf-8"
    assert "Unknown encoding" in caplog.text


def test_from_pyproject(tmp_path: Path) -> None:
    """``[tool.flatenv]`` is read from ``pyproject.toml``."""
    path: Path = tmp_path / "pyproject.toml"
    path.write_text('[project]\nname = "x"\n\n[tool.flatenv]\nsort_keys = true\n', "utf-8")
    assert Config.from_toml_file(path) == Config(sort_keys=True)


def test_discover_prefers_flatenv_toml(tmp_path: Path) -> None:
    """``flatenv.toml`` wins over ``pyproject.toml`` in the same directory."""
    (tmp_path / "pyproject.toml").write_text("[tool.flatenv]\nsort_keys = true\n", "utf-8")
    (tmp_path / "flatenv.toml").write_text("interpolate = false\n", "utf-8")
    child: Path = tmp_path / "sub"
    child.mkdir()
    assert Config.discover(child) == Config(interpolate=False)


def test_discover_skips_pyproject_without_table(tmp_path: Path) -> None:
    """A ``pyproject.toml`` without ``[tool.flatenv]`` does not stop the search."""
    (tmp_path / "flatenv.toml").write_text("sort_keys = true\n", "utf-8")
    child: Path = tmp_path / "pkg"
    child.mkdir()
    (child / "pyproject.toml").write_text('[project]\nname = "pkg"\n', "utf-8")
    assert Config.discover(child) == Config(sort_keys=True)


def test_with_overrides_returns_copy() -> None:
    """Overrides produce a new frozen instance."""
    base = Config()
    changed: Config = base.with_overrides(sort_keys=True)
    assert changed.sort_keys and not base.sort_keys


def test_to_toml_round_trip() -> None:
    """Rendered TOML parses back to the same configuration."""
    config = Config(interpolate=False, encoding="utf-16")
    parsed: Any = tomlkit.parse(config.to_toml()).unwrap()
    assert Config.from_toml_dict(parsed) == config


def test_load_toml_dict_logs_parse_errors(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    """Malformed TOML is logged and yields an empty table."""
    path: Path = tmp_path / "flatenv.toml"
    path.write_text("interpolate = = true\n", "utf-8")
    with caplog.at_level(logging.ERROR):
        assert load_toml_dict(path) == {}
    assert "Error decoding TOML" in caplog.text
    assert load_config_table(tmp_path / "missing.toml") == {}


def test_checked_getters() -> None:
    """Getters return values of the right type and defaults otherwise."""
    table: dict[str, Any] = {"flag": True, "name": "x", "wrong": 3}
    assert get_bool_value_checked(table, "flag", where="[t]") is True
    assert get_bool_value_checked(table, "missing", where="[t]", default=True) is True
    assert get_string_value_checked(table, "name", where="[t]") == "x"
    assert get_string_value_checked(table, "wrong", where="[t]", default="d") == "d"
    assert get_table_value({"tool": {"flatenv": {}}}, "tool") == {"flatenv": {}}


def test_to_toml_strips_none() -> None:
    """``None`` values are left out of the rendered document."""
    assert "missing" not in to_toml({"present": 1, "missing": None})
