# topmark:header:start
#
#   project      : xType
#   file         : __init__.py
#   file_relpath : src/xtype/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""xType package.

xType catalogs the file types known to the operating system, shows which
application opens each of them by default, and reassigns those defaults one
type or one category at a time. It exposes a small engine
([`xtype.app.build_store`][xtype.app.build_store]) and a CLI.
"""

from __future__ import annotations
