# topmark:header:start
#
#   project      : xType
#   file         : __main__.py
#   file_relpath : src/xtype/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Module entry point for running xType via ``python -m xtype``.

Delegates to :func:`xtype.cli.main.cli`, the same entry point as the
``xtype`` console script.

Examples:
    List audio types and their default applications::

        python -m xtype list --category audio
"""

from __future__ import annotations

from xtype.cli.main import cli

if __name__ == "__main__":
    cli()
