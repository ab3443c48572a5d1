# topmark:header:start
#
#   project      : xType
#   file         : __init__.py
#   file_relpath : src/xtype/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Configuration handling for xType.

The [`Config`][xtype.config.model.Config] dataclass lives in
[`xtype.config.model`][xtype.config.model]; logging setup in
[`xtype.config.logging`][xtype.config.logging]. This package module stays
import-light because every xType module imports its logger from here.
"""
