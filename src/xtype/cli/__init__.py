# topmark:header:start
#
#   project      : xType
#   file         : __init__.py
#   file_relpath : src/xtype/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Click command line interface for xType.

The entry point is [`xtype.cli.main.cli`][xtype.cli.main.cli]; each command
lives in its own module under [`xtype.cli.commands`][xtype.cli.commands].
"""
