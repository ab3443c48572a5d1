# topmark:header:start
#
#   project      : xType
#   file         : categories.py
#   file_relpath : src/xtype/cli/commands/categories.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""xType `categories` command: number of catalog entries per category."""

from __future__ import annotations

import json

import click

from xtype.cli.cmd_common import get_console, open_store
from xtype.cli.options import output_format_option
from xtype.cli.utils import OutputFormat, build_meta_payload, render_markdown_table
from xtype.filetypes.model import Category


@click.command(name="categories", help="Count file types per category.")
@output_format_option
@click.pass_context
def categories_command(ctx: click.Context, *, output_format: OutputFormat | None) -> None:
    """Print how many catalog entries fall in each category."""
    console = get_console(ctx)
    fmt = output_format or OutputFormat.DEFAULT

    counts: dict[Category, int] = dict.fromkeys(Category, 0)
    with open_store(ctx) as store:
        for descriptor in store.catalog:
            counts[store.classify(descriptor)] += 1

    if fmt == OutputFormat.JSON:
        payload = {
            "meta": build_meta_payload(),
            "categories": {c.value: n for c, n in counts.items()},
        }
        console.print(json.dumps(payload, indent=2))
    elif fmt == OutputFormat.NDJSON:
        for c, n in counts.items():
            console.print(json.dumps({"kind": "category", "category": c.value, "count": n}))
    elif fmt == OutputFormat.MARKDOWN:
        rows = [[c.label, str(n)] for c, n in counts.items()]
        table = render_markdown_table(["Category", "Types"], rows, align={1: "right"})
        console.print(table, nl=False)
    else:
        width = max(len(c.label) for c in Category)
        for c, n in counts.items():
            console.print(f"{console.styled(f'{c.label:<{width}}', bold=True)}  {n:>4}")
