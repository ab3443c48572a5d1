# topmark:header:start
#
#   project      : xType
#   file         : __init__.py
#   file_relpath : src/xtype/core/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Core building blocks shared by the xType engine and its frontends.

Currently exposes the exception hierarchy and small enum helpers. Modules in
this package have no dependency on the CLI or on any OS backend.
"""

from __future__ import annotations

from .errors import BackendError, BindingError, CatalogDecodeError, ConfigError, XtypeError

__all__ = [
    "XtypeError",
    "BackendError",
    "BindingError",
    "CatalogDecodeError",
    "ConfigError",
]
