# topmark:header:start
#
#   project      : xType
#   file         : io.py
#   file_relpath : src/xtype/config/io.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Lightweight TOML I/O helpers for xType configuration.

Pure helpers for reading and writing TOML, kept apart from
[`xtype.config.model`][xtype.config.model] to keep the model small.

Two families of getters exist:
    * *Lenient* getters (``get_table_value``) return an empty default and
      only log at debug level.
    * *Checked* getters (``get_string_value_or_none``, ``get_float_value``,
      ``get_string_list``) raise [`ConfigError`][xtype.core.errors.ConfigError]
      when a key is present with the wrong shape.

Parsing and rendering both go through `tomlkit`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from xtype.config.logging import XtypeLogger, get_logger
from xtype.core.errors import ConfigError

if TYPE_CHECKING:
    from pathlib import Path

logger: XtypeLogger = get_logger(__name__)

TomlTable = dict[str, Any]


def parse_toml_text(text: str, source: str = "<string>") -> TomlTable:
    """Parse TOML text into a plain dict.

    Raises:
        ConfigError: If ``text`` is not valid TOML.
    """
    try:
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
    except TomlkitParseError as e:
        raise ConfigError(f"Invalid TOML in {source}: {e}") from e
    data_any: Any = doc.unwrap()
    return cast("TomlTable", data_any) if isinstance(data_any, dict) else {}


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    Args:
        path (Path): Path to the TOML document. Encoding is assumed to be UTF-8.

    Returns:
        TomlTable: The parsed TOML content.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    data = parse_toml_text(text, str(path))
    logger.debug("Loaded TOML from %s (%d top-level keys)", path, len(data))
    return data


def get_table_value(table: TomlTable, key: str) -> TomlTable:
    """Return the sub-table at ``key``, or an empty dict when missing or not a table."""
    value: Any = table.get(key)
    if isinstance(value, dict):
        return cast("TomlTable", value)
    if value is not None:
        logger.debug("Expected a table for %r, got %r; ignoring", key, value)
    return {}


def get_string_value_or_none(table: TomlTable, key: str, where: str = "") -> str | None:
    """Return the string at ``key`` (``None`` when absent).

    Raises:
        ConfigError: If the value is present but not a string.
    """
    value: Any = table.get(key)
    if value is None or isinstance(value, str):
        return value
    raise ConfigError(f"{where}{key} must be a string, got {value!r}")


def get_float_value(table: TomlTable, key: str, default: float, where: str = "") -> float:
    """Return the number at ``key`` as a float (``default`` when absent).

    Raises:
        ConfigError: If the value is present but not a number.
    """
    value: Any = table.get(key)
    if value is None:
        return default
    # bool is an int subclass but never a meaningful duration
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{where}{key} must be a number, got {value!r}")
    return float(value)


def get_string_list(table: TomlTable, key: str, where: str = "") -> list[str]:
    """Return the list of strings at ``key`` (empty when absent).

    Raises:
        ConfigError: If the value is present but not a list of strings.
    """
    value: Any = table.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(
        isinstance(item, str) for item in cast("list[object]", value)
    ):
        raise ConfigError(f"{where}{key} must be a list of strings, got {value!r}")
    return list(cast("list[str]", value))


def _strip_none_for_toml(value: object) -> object:
    """Remove TOML-incompatible ``None`` from mappings and lists."""
    if isinstance(value, Mapping):
        m: Mapping[object, object] = cast("Mapping[object, object]", value)
        return {str(k): _strip_none_for_toml(v) for k, v in m.items() if v is not None}
    if isinstance(value, list):
        items: list[object] = cast("list[object]", value)
        return [_strip_none_for_toml(v) for v in items if v is not None]
    return value


def to_toml(table: TomlTable) -> str:
    """Serialize ``table`` to TOML text, omitting ``None`` values."""
    cleaned: Any = _strip_none_for_toml(table)
    return cast("str", cast("Any", tomlkit).dumps(cast("Mapping[str, Any]", cleaned)))
