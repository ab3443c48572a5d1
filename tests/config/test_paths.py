# topmark:header:start
#
#   project      : xType
#   file         : test_paths.py
#   file_relpath : tests/config/test_paths.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Tests for path normalization and XDG directory lookup."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from xtype.config.paths import (
    abs_path_from,
    default_config_file,
    default_state_file,
    xdg_config_dirs,
    xdg_config_home,
    xdg_data_dirs,
    xdg_state_home,
)


def test_abs_path_from(tmp_path: Path) -> None:
    assert abs_path_from(tmp_path, "a/b.toml") == (tmp_path / "a" / "b.toml").resolve()
    assert abs_path_from(tmp_path, "/etc/xdg") == Path("/etc/xdg").resolve()


def test_absolute_env_values_are_honored() -> None:
    env = {"XDG_CONFIG_HOME": "/cfg", "XDG_STATE_HOME": "/state"}
    assert xdg_config_home(env) == Path("/cfg")
    assert default_config_file(env) == Path("/cfg/xtype/xtype.toml")
    assert xdg_state_home(env) == Path("/state")
    assert default_state_file(env) == Path("/state/xtype/catalog.json")


def test_relative_env_values_are_ignored() -> None:
    env = {"XDG_CONFIG_HOME": "relative/cfg"}
    assert xdg_config_home(env) == Path.home() / ".config"


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, [Path("/usr/local/share"), Path("/usr/share")]),
        ("", [Path("/usr/local/share"), Path("/usr/share")]),
        (os.pathsep.join(["/opt/share", "rel", "/x"]), [Path("/opt/share"), Path("/x")]),
    ],
)
def test_xdg_data_dirs(value: str | None, expected: list[Path]) -> None:
    env = {} if value is None else {"XDG_DATA_DIRS": value}
    assert xdg_data_dirs(env) == expected


def test_xdg_config_dirs_default() -> None:
    assert xdg_config_dirs({}) == [Path("/etc/xdg")]
