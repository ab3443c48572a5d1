# topmark:header:start
#
#   project      : xType
#   file         : config.py
#   file_relpath : src/xtype/cli/commands/config.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""xType `config` command.

Prints the effective configuration (defaults, config file and CLI overrides
merged) as TOML, ready to be saved as ``xtype.toml``.
"""

from __future__ import annotations

import json

import click

from xtype.cli.cmd_common import get_console, get_effective_verbosity, resolve_config
from xtype.cli.options import output_format_option
from xtype.cli.utils import OutputFormat, build_meta_payload
from xtype.config.io import to_toml


@click.command(name="config", help="Show the effective configuration.")
@output_format_option
@click.pass_context
def config_command(ctx: click.Context, *, output_format: OutputFormat | None) -> None:
    """Dump the effective configuration."""
    console = get_console(ctx)
    fmt = output_format or OutputFormat.DEFAULT
    config = resolve_config(ctx)
    table = config.to_toml_dict()

    if fmt in (OutputFormat.JSON, OutputFormat.NDJSON):
        payload = {"meta": build_meta_payload(), "config": table}
        console.print(json.dumps(payload, indent=2 if fmt == OutputFormat.JSON else None))
        return

    toml_text = to_toml(table)
    if fmt == OutputFormat.MARKDOWN:
        console.print("```toml")
        console.print(toml_text, nl=False)
        console.print("```")
        return

    if get_effective_verbosity(ctx) > 0:
        source = config.config_file or "built-in defaults"
        console.print(console.styled(f"# Effective configuration (from {source})", dim=True))
    console.print(toml_text, nl=False)
