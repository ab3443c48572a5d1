# topmark:header:start
#
#   project      : xType
#   file         : list_types.py
#   file_relpath : src/xtype/cli/commands/list_types.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""xType `list` command.

Loads the catalog (running discovery on first use), applies the search and
category filters, and prints the filtered view in the requested format.
"""

from __future__ import annotations

import json

import click

from xtype.cli.cli_types import KeyedChoice
from xtype.cli.cmd_common import get_console, get_effective_verbosity, open_store
from xtype.cli.options import output_format_option
from xtype.cli.utils import (
    OutputFormat,
    build_meta_payload,
    descriptor_payload,
    format_extensions,
    handler_label,
    render_markdown_table,
)
from xtype.filetypes.model import Category


@click.command(
    name="list",
    help="List file types and the application that opens each of them.",
)
@click.option(
    "--search",
    "-s",
    default="",
    help="Keep types whose description or an extension contains TEXT (case-insensitive).",
)
@click.option(
    "--category",
    "-c",
    type=KeyedChoice(Category),
    default=None,
    help=f"Keep only one category ({', '.join(Category.keys())}).",
)
@click.option(
    "--long",
    "-l",
    "long_format",
    is_flag=True,
    help="Also show type identifiers and application locations.",
)
@output_format_option
@click.pass_context
def list_command(
    ctx: click.Context,
    *,
    search: str,
    category: Category | None,
    long_format: bool,
    output_format: OutputFormat | None,
) -> None:
    """List the filtered catalog."""
    console = get_console(ctx)
    fmt = output_format or OutputFormat.DEFAULT

    with open_store(ctx) as store:
        store.set_filter(search, category)
        rows = [(d, store.classify(d)) for d in store.filtered]
        total = len(store.catalog)

    if fmt == OutputFormat.JSON:
        payload = {
            "meta": build_meta_payload(),
            "types": [descriptor_payload(d, c) for d, c in rows],
        }
        console.print(json.dumps(payload, indent=2))
        return
    if fmt == OutputFormat.NDJSON:
        for d, c in rows:
            console.print(json.dumps({"kind": "type", **descriptor_payload(d, c)}))
        return
    if fmt == OutputFormat.MARKDOWN:
        headers = ["Description", "Extensions", "Category", "Default application"]
        if long_format:
            headers += ["Identifier", "Location"]
        table: list[list[str]] = []
        for d, c in rows:
            row = [d.description, format_extensions(d.extensions), c.label, handler_label(d)]
            if long_format:
                row += [d.id, str(d.default_handler_location or "")]
            table.append(row)
        console.print(render_markdown_table(headers, table), nl=False)
        return

    if not rows:
        console.print("No matching file types.")
        return
    width = max(len(d.description) for d, _ in rows)
    for d, c in rows:
        handler = handler_label(d)
        styled_handler = console.styled(handler, fg="cyan" if d.has_handler else "bright_black")
        console.print(
            f"{console.styled(f'{d.description:<{width}}', bold=True)}  "
            f"{styled_handler}  {format_extensions(d.extensions)}"
        )
        if long_format:
            console.print(f"    id: {d.id}  category: {c.label}")
            if d.default_handler_location is not None:
                console.print(f"    at: {d.default_handler_location}")
    if get_effective_verbosity(ctx) > 0:
        console.print()
        console.print(f"{len(rows)} of {total} file types shown")
