# topmark:header:start
#
#   project      : xType
#   file         : cmd_common.py
#   file_relpath : src/xtype/cli/cmd_common.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Common command utilities for Click-based commands.

Plumbing shared by the commands: reading group state from ``ctx.obj``,
resolving the configuration once per invocation, and opening a loaded
[`RegistryStore`][xtype.registry.store.RegistryStore]. Engine errors are
translated into CLI errors carrying the right exit code here, so command
bodies stay free of ``try``/``except``.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

import click

from xtype.app import build_store
from xtype.cli.console import ConsoleLike, get_console_safely
from xtype.cli.errors import translate_engine_errors
from xtype.config.logging import XtypeLogger, get_logger
from xtype.config.model import Config, load_config

if TYPE_CHECKING:
    from collections.abc import Iterator

    from xtype.registry.store import RegistryStore

logger: XtypeLogger = get_logger(__name__)


def get_console(ctx: click.Context) -> ConsoleLike:
    """Return the console initialized by the group."""
    ctx.ensure_object(dict)
    console: ConsoleLike | None = ctx.obj.get("console")
    return console if console is not None else get_console_safely()


def get_effective_verbosity(ctx: click.Context) -> int:
    """Return program-output verbosity (negative when quiet, 0 by default)."""
    ctx.ensure_object(dict)
    return int(ctx.obj.get("verbosity_level", 0))


def resolve_config(ctx: click.Context) -> Config:
    """Return the effective configuration, resolving and caching it on first use.

    Raises:
        XtypeConfigError: If the configuration cannot be loaded.
    """
    ctx.ensure_object(dict)
    cached: Config | None = ctx.obj.get("config")
    if cached is not None:
        return cached
    with translate_engine_errors():
        config = load_config(ctx.obj.get("config_path")).with_overrides(
            backend=ctx.obj.get("backend"),
            backend_catalog=ctx.obj.get("catalog"),
            state_file=ctx.obj.get("state_file"),
        )
    ctx.obj["config"] = config
    return config


@contextmanager
def open_store(ctx: click.Context, *, load: bool = True) -> Iterator[RegistryStore]:
    """Build a store for this invocation and close it afterwards.

    Args:
        ctx (click.Context): Current Click context.
        load (bool): Restore (or discover) the catalog and wait for it before
            handing the store over.

    Raises:
        XtypeConfigError: If the backend cannot be created.
    """
    config = resolve_config(ctx)
    with translate_engine_errors():
        store = build_store(config)
    with store:
        if load:
            store.load()
            store.wait_until_idle()
            logger.debug("Catalog ready: %d file types", len(store.catalog))
        yield store


def echo_status(ctx: click.Context, store: RegistryStore) -> None:
    """Print the latest status message unless ``--quiet`` is active."""
    message = store.status.last_message
    if message:
        get_console(ctx).status(message)
