# topmark:header:start
#
#   project      : xType
#   file         : paths.py
#   file_relpath : src/xtype/config/paths.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Pure helpers for path normalization and XDG base directory lookup.

These utilities centralize the path rules used by config loading, the
persisted catalog slot and the freedesktop backend. They do **no I/O** beyond
``Path.resolve()`` and only read the process environment.

Key behaviors:
    - ``abs_path_from(base, raw)``: resolve ``raw`` against ``base`` when
      relative; always returns an absolute, resolved :class:`pathlib.Path`.
    - ``xdg_*_home()``: the per-user XDG directories, honoring the environment
      variable when it holds an absolute path and falling back to the
      documented default under ``$HOME`` otherwise.
    - ``xdg_data_dirs()`` / ``xdg_config_dirs()``: the system search lists,
      *excluding* the per-user directory.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from xtype.constants import CONFIG_FILE_NAME, STATE_FILE_NAME

if TYPE_CHECKING:
    from collections.abc import Mapping
    from os import PathLike

APP_DIR_NAME = "xtype"


def abs_path_from(base: Path, raw: str | PathLike[str]) -> Path:
    """Return an absolute Path for *raw* using *base* if *raw* is relative."""
    p = Path(raw).expanduser()
    return (base / p).resolve() if not p.is_absolute() else p.resolve()


def _env_dir(name: str, default: Path, env: Mapping[str, str] | None) -> Path:
    environ = os.environ if env is None else env
    value = environ.get(name, "")
    # Relative XDG values are invalid and must be ignored
    if value and os.path.isabs(value):
        return Path(value)
    return default


def _env_dirs(name: str, default: str, env: Mapping[str, str] | None) -> list[Path]:
    environ = os.environ if env is None else env
    value = environ.get(name, "") or default
    return [Path(part) for part in value.split(os.pathsep) if part and os.path.isabs(part)]


def xdg_config_home(env: Mapping[str, str] | None = None) -> Path:
    """``$XDG_CONFIG_HOME`` or ``~/.config``."""
    return _env_dir("XDG_CONFIG_HOME", Path.home() / ".config", env)


def xdg_data_home(env: Mapping[str, str] | None = None) -> Path:
    """``$XDG_DATA_HOME`` or ``~/.local/share``."""
    return _env_dir("XDG_DATA_HOME", Path.home() / ".local" / "share", env)


def xdg_state_home(env: Mapping[str, str] | None = None) -> Path:
    """``$XDG_STATE_HOME`` or ``~/.local/state``."""
    return _env_dir("XDG_STATE_HOME", Path.home() / ".local" / "state", env)


def xdg_data_dirs(env: Mapping[str, str] | None = None) -> list[Path]:
    """``$XDG_DATA_DIRS`` or ``/usr/local/share:/usr/share``."""
    return _env_dirs("XDG_DATA_DIRS", "/usr/local/share:/usr/share", env)


def xdg_config_dirs(env: Mapping[str, str] | None = None) -> list[Path]:
    """``$XDG_CONFIG_DIRS`` or ``/etc/xdg``."""
    return _env_dirs("XDG_CONFIG_DIRS", "/etc/xdg", env)


def default_config_file(env: Mapping[str, str] | None = None) -> Path:
    """Location of the user configuration file."""
    return xdg_config_home(env) / APP_DIR_NAME / CONFIG_FILE_NAME


def default_state_file(env: Mapping[str, str] | None = None) -> Path:
    """Location of the persisted catalog."""
    return xdg_state_home(env) / APP_DIR_NAME / STATE_FILE_NAME
