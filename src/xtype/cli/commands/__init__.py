# topmark:header:start
#
#   project      : xType
#   file         : __init__.py
#   file_relpath : src/xtype/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""xType CLI commands, one module per command."""
