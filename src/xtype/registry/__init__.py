# topmark:header:start
#
#   project      : xType
#   file         : __init__.py
#   file_relpath : src/xtype/registry/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Stateful side of xType: the catalog store, its persistence and status.

Everything here is driven from a single owner context; see
[`xtype.registry.store`][xtype.registry.store] for the threading model.
"""

from __future__ import annotations

from .filtering import filter_catalog, matches_search
from .persistence import CatalogStateFile
from .status import StatusChannel
from .store import LoadState, RegistryStore

__all__ = [
    "CatalogStateFile",
    "LoadState",
    "RegistryStore",
    "StatusChannel",
    "filter_catalog",
    "matches_search",
]
