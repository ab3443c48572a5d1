# topmark:header:start
#
#   project      : xType
#   file         : version.py
#   file_relpath : src/xtype/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""xType `version` command.

Prints the xType version installed in the active Python environment.
"""

from __future__ import annotations

import json

import click

from xtype.cli.cmd_common import get_console, get_effective_verbosity
from xtype.cli.options import output_format_option
from xtype.cli.utils import OutputFormat
from xtype.constants import XTYPE_VERSION


@click.command(name="version", help="Show the current version of xType.")
@output_format_option
@click.pass_context
def version_command(ctx: click.Context, *, output_format: OutputFormat | None) -> None:
    """Show the current version of xType."""
    console = get_console(ctx)
    fmt = output_format or OutputFormat.DEFAULT

    if fmt in (OutputFormat.JSON, OutputFormat.NDJSON):
        console.print(json.dumps({"version": XTYPE_VERSION}))
    elif fmt == OutputFormat.MARKDOWN:
        console.print("# xType Version\n")
        console.print(f"**xType version: {XTYPE_VERSION}**")
    elif get_effective_verbosity(ctx) > 0:
        console.print(console.styled("xType version:\n", bold=True, underline=True))
        console.print(f"    {console.styled(XTYPE_VERSION, bold=True)}")
    else:
        console.print(console.styled(XTYPE_VERSION, bold=True))
