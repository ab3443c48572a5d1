# topmark:header:start
#
#   project      : xType
#   file         : main.py
#   file_relpath : src/xtype/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Click entry point for the ``xtype`` command.

Group-level options are resolved once and placed into ``ctx.obj``; the
configuration itself is loaded lazily by the first command that needs it
(see [`xtype.cli.cmd_common.resolve_config`][xtype.cli.cmd_common.resolve_config]).
"""

from __future__ import annotations

from pathlib import Path

import click

from xtype.cli.commands.categories import categories_command
from xtype.cli.commands.config import config_command
from xtype.cli.commands.list_types import list_command
from xtype.cli.commands.refresh import refresh_command, reset_command
from xtype.cli.commands.set_handler import set_category_command, set_command
from xtype.cli.commands.version import version_command
from xtype.cli.console import ClickConsole
from xtype.cli.options import (
    ColorMode,
    common_color_options,
    common_verbose_options,
    resolve_color_mode,
    resolve_verbosity,
)
from xtype.config.logging import get_logger, resolve_env_log_level, setup_logging

logger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Initialize shared state (verbosity, logging, color) on the Click context."""
    ctx.ensure_object(dict)

    ctx.obj["verbosity_level"] = resolve_verbosity(verbose, quiet)

    level_env = resolve_env_log_level()
    ctx.obj["log_level"] = level_env
    setup_logging(level=level_env)

    effective_color_mode = ColorMode.NEVER if no_color else (color_mode or ColorMode.AUTO)
    enable_color = resolve_color_mode(cli_mode=effective_color_mode, output_format=None)
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color
    ctx.obj["console"] = ClickConsole(
        enable_color=enable_color, verbosity=ctx.obj["verbosity_level"]
    )


@click.group(
    cls=click.Group,
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    help="Browse file types and change the applications that open them.",
)
@common_verbose_options
@common_color_options
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: $XTYPE_CONFIG or $XDG_CONFIG_HOME/xtype/xtype.toml).",
)
@click.option("--backend", default=None, help="OS backend to use (freedesktop, static, ...).")
@click.option(
    "--catalog",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Type catalog file for the static backend.",
)
@click.option(
    "--state-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where the catalog is persisted.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
    config_path: Path | None,
    backend: str | None,
    catalog: Path | None,
    state_file: Path | None,
) -> None:
    """Entry point for the xType CLI."""
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        color_mode=color_mode,
        no_color=no_color,
    )
    ctx.obj["config_path"] = config_path
    ctx.obj["backend"] = backend
    ctx.obj["catalog"] = catalog
    ctx.obj["state_file"] = state_file

    if ctx.invoked_subcommand is None:
        console = ctx.obj["console"]
        console.print("Hint: use 'xtype list' to see file types and their default applications.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(version_command)

cli.add_command(config_command)

cli.add_command(list_command)

cli.add_command(categories_command)

cli.add_command(set_command)

cli.add_command(set_category_command)

cli.add_command(refresh_command)

cli.add_command(reset_command)

if __name__ == "__main__":
    cli()
