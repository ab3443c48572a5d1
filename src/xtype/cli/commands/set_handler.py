# topmark:header:start
#
#   project      : xType
#   file         : set_handler.py
#   file_relpath : src/xtype/cli/commands/set_handler.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""xType `set` and `set-category` commands.

Both change the default application recorded in the catalog and ask the OS
backend to bind the matching types. Binding is best effort: a type the OS
refuses is logged and skipped, and the catalog is updated regardless.
"""

from __future__ import annotations

from pathlib import Path

import click

from xtype.cli.cli_types import KeyedChoice
from xtype.cli.cmd_common import echo_status, get_console, open_store
from xtype.cli.errors import XtypeNotFoundError
from xtype.filetypes.model import Category

_APPLICATION = click.Path(path_type=Path)


def _require_application(application: Path) -> Path:
    location = application.expanduser()
    if not location.exists():
        raise XtypeNotFoundError(f"Application not found: {application}")
    return location.absolute()


@click.command(name="set", help="Make APPLICATION the default for one file type.")
@click.argument("type_id")
@click.argument("application", type=_APPLICATION)
@click.pass_context
def set_command(ctx: click.Context, *, type_id: str, application: Path) -> None:
    """Reassign the default application of the catalog entry TYPE_ID."""
    location = _require_application(application)
    with open_store(ctx) as store:
        if store.set_handler(type_id, location) is None:
            get_console(ctx).warn(f"Unknown file type {type_id!r}: nothing changed.")
            return
        echo_status(ctx, store)


@click.command(
    name="set-category",
    help="Make APPLICATION the default for every file type in CATEGORY.",
)
@click.argument("category", type=KeyedChoice(Category))
@click.argument("application", type=_APPLICATION)
@click.pass_context
def set_category_command(ctx: click.Context, *, category: Category, application: Path) -> None:
    """Reassign the default application of a whole category."""
    location = _require_application(application)
    with open_store(ctx) as store:
        store.set_category_handler(category, location)
        echo_status(ctx, store)
