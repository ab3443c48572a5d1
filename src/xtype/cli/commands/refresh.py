# topmark:header:start
#
#   project      : xType
#   file         : refresh.py
#   file_relpath : src/xtype/cli/commands/refresh.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""xType `refresh` and `reset` commands.

``refresh`` re-resolves the default application of every known type, for
example after another program changed the bindings. ``reset`` forgets the
persisted catalog and runs discovery again.
"""

from __future__ import annotations

import click

from xtype.cli.cmd_common import echo_status, open_store


@click.command(name="refresh", help="Re-read the default application of every file type.")
@click.pass_context
def refresh_command(ctx: click.Context) -> None:
    """Refresh handlers and wait for the result."""
    with open_store(ctx) as store:
        store.refresh()
        store.wait_until_idle()
        echo_status(ctx, store)


@click.command(name="reset", help="Discard the saved catalog and discover file types again.")
@click.pass_context
def reset_command(ctx: click.Context) -> None:
    """Rebuild the catalog from scratch."""
    with open_store(ctx, load=False) as store:
        store.reset()
        store.wait_until_idle()
        echo_status(ctx, store)
