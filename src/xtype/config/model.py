# topmark:header:start
#
#   project      : xType
#   file         : model.py
#   file_relpath : src/xtype/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Immutable runtime configuration and its layered loading.

Sources, lowest to highest precedence:
    1. runtime defaults defined in code (`Config()`);
    2. one TOML file: the ``--config`` path if given, else ``$XTYPE_CONFIG``,
       else ``$XDG_CONFIG_HOME/xtype/xtype.toml`` when it exists;
    3. explicit overrides (CLI options), applied with `Config.with_overrides`.

Relative paths inside a config file are resolved against that file's
directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

from xtype.config.io import (
    TomlTable,
    get_float_value,
    get_string_list,
    get_string_value_or_none,
    get_table_value,
    load_toml_dict,
)
from xtype.config.keys import Toml
from xtype.config.logging import XtypeLogger, get_logger
from xtype.config.paths import abs_path_from, default_config_file, default_state_file
from xtype.constants import CONFIG_ENV, DEFAULT_STATUS_SECONDS, SEED_EXTENSIONS
from xtype.core.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger: XtypeLogger = get_logger(__name__)

DEFAULT_BACKEND = "freedesktop"


def normalize_extension(raw: str) -> str:
    """Lower-case an extension and drop a leading dot (``".MP3"`` → ``"mp3"``)."""
    return raw.strip().lstrip(".").lower()


@dataclass(frozen=True)
class Config:
    """Resolved xType configuration.

    Attributes:
        backend (str): Name of the OS backend (built-in or plugin).
        backend_catalog (Path | None): Catalog file used by the ``static`` backend.
        state_file (Path): Where the catalog is persisted.
        status_seconds (float): Visibility window of status messages.
        extra_extensions (tuple[str, ...]): Extensions probed after the built-in seeds.
        config_file (Path | None): The file this configuration was read from, if any.
    """

    backend: str = DEFAULT_BACKEND
    backend_catalog: Path | None = None
    state_file: Path = field(default_factory=default_state_file)
    status_seconds: float = DEFAULT_STATUS_SECONDS
    extra_extensions: tuple[str, ...] = ()
    config_file: Path | None = None

    def __post_init__(self) -> None:
        if not self.backend:
            raise ConfigError("backend name must not be empty")
        if self.status_seconds <= 0:
            raise ConfigError(
                f"{Toml.SECTION_STATUS}.{Toml.KEY_VISIBILITY_SECONDS} must be positive, "
                f"got {self.status_seconds}"
            )

    @property
    def seed_extensions(self) -> tuple[str, ...]:
        """Built-in seed extensions followed by the configured extras (deduplicated)."""
        return tuple(dict.fromkeys((*SEED_EXTENSIONS, *self.extra_extensions)))

    @classmethod
    def from_toml_dict(cls, data: TomlTable, *, base_dir: Path) -> Config:
        """Build a config from a parsed TOML document layered over the defaults.

        Args:
            data (TomlTable): Parsed document.
            base_dir (Path): Directory relative paths are resolved against.

        Returns:
            Config: The resulting configuration.

        Raises:
            ConfigError: If a value has the wrong type or is out of range.
        """
        for section in data:
            if section not in Toml.ALL_SECTIONS:
                logger.warning("Ignoring unknown config section [%s]", section)

        backend_tbl = get_table_value(data, Toml.SECTION_BACKEND)
        store_tbl = get_table_value(data, Toml.SECTION_STORE)
        status_tbl = get_table_value(data, Toml.SECTION_STATUS)
        discovery_tbl = get_table_value(data, Toml.SECTION_DISCOVERY)

        kwargs: dict[str, Any] = {}
        name = get_string_value_or_none(backend_tbl, Toml.KEY_BACKEND_NAME, "backend.")
        if name is not None:
            kwargs["backend"] = name.strip()
        catalog = get_string_value_or_none(backend_tbl, Toml.KEY_BACKEND_CATALOG, "backend.")
        if catalog:
            kwargs["backend_catalog"] = abs_path_from(base_dir, catalog)
        state_file = get_string_value_or_none(store_tbl, Toml.KEY_STATE_FILE, "store.")
        if state_file:
            kwargs["state_file"] = abs_path_from(base_dir, state_file)
        kwargs["status_seconds"] = get_float_value(
            status_tbl, Toml.KEY_VISIBILITY_SECONDS, DEFAULT_STATUS_SECONDS, "status."
        )
        extras = get_string_list(discovery_tbl, Toml.KEY_EXTRA_EXTENSIONS, "discovery.")
        kwargs["extra_extensions"] = tuple(
            ext for ext in (normalize_extension(raw) for raw in extras) if ext
        )
        return cls(**kwargs)

    def with_overrides(
        self,
        *,
        backend: str | None = None,
        backend_catalog: Path | None = None,
        state_file: Path | None = None,
    ) -> Config:
        """Return a copy with every non-``None`` override applied."""
        changes: dict[str, Any] = {}
        if backend is not None:
            changes["backend"] = backend
        if backend_catalog is not None:
            changes["backend_catalog"] = backend_catalog.absolute()
        if state_file is not None:
            changes["state_file"] = state_file.absolute()
        return replace(self, **changes) if changes else self

    def to_toml_dict(self) -> TomlTable:
        """Render this configuration as a TOML-compatible dict."""
        return {
            Toml.SECTION_BACKEND: {
                Toml.KEY_BACKEND_NAME: self.backend,
                Toml.KEY_BACKEND_CATALOG: (
                    str(self.backend_catalog) if self.backend_catalog else None
                ),
            },
            Toml.SECTION_STORE: {Toml.KEY_STATE_FILE: str(self.state_file)},
            Toml.SECTION_STATUS: {Toml.KEY_VISIBILITY_SECONDS: self.status_seconds},
            Toml.SECTION_DISCOVERY: {Toml.KEY_EXTRA_EXTENSIONS: list(self.extra_extensions)},
        }


def find_config_file(
    explicit: Path | None = None, env: Mapping[str, str] | None = None
) -> Path | None:
    """Return the config file to read, or ``None`` to use defaults only.

    Raises:
        ConfigError: If an explicitly requested file (argument or
            ``$XTYPE_CONFIG``) does not exist.
    """
    environ = os.environ if env is None else env
    if explicit is not None:
        if not explicit.is_file():
            raise ConfigError(f"Config file not found: {explicit}")
        return explicit
    from_env = environ.get(CONFIG_ENV)
    if from_env:
        path = Path(from_env).expanduser()
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path} (from ${CONFIG_ENV})")
        return path
    user_file = default_config_file(environ)
    return user_file if user_file.is_file() else None


def load_config(
    path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> Config:
    """Resolve the effective configuration.

    Args:
        path (Path | None): Explicit config file (``--config``).
        env (Mapping[str, str] | None): Environment to read; defaults to ``os.environ``.

    Returns:
        Config: The effective configuration.

    Raises:
        ConfigError: On a missing explicit file or an invalid value.
    """
    source = find_config_file(path, env)
    if source is None:
        logger.debug("No config file found; using defaults")
        return Config()

    config = Config.from_toml_dict(load_toml_dict(source), base_dir=source.parent.absolute())
    logger.debug("Loaded configuration from %s", source)
    return replace(config, config_file=source)
