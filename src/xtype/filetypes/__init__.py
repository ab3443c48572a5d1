# topmark:header:start
#
#   project      : xType
#   file         : __init__.py
#   file_relpath : src/xtype/filetypes/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""File type model, discovery, classification and default handler resolution.

This package holds everything that turns OS type metadata into catalog
entries. It has no state of its own; the catalog lives in
[`xtype.registry.store.RegistryStore`][xtype.registry.store.RegistryStore].
"""

from __future__ import annotations

from .classifier import Classifier
from .discovery import CatalogBuilder
from .model import NO_HANDLER, Category, Handler, TypeDescriptor, application_name
from .resolver import HandlerResolver
from .services import Anchor, DefaultHandlerService, OSType, TypeMetadataService

__all__ = [
    "Anchor",
    "CatalogBuilder",
    "Category",
    "Classifier",
    "DefaultHandlerService",
    "Handler",
    "HandlerResolver",
    "NO_HANDLER",
    "OSType",
    "TypeDescriptor",
    "TypeMetadataService",
    "application_name",
]
