# topmark:header:start
#
#   project      : xType
#   file         : errors.py
#   file_relpath : src/xtype/core/errors.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Exceptions raised by the xType engine.

None of these is fatal to the registry store: a corrupt catalog triggers a
rediscovery, a failed binding is logged and skipped. Frontends map the ones
that reach them (configuration and backend errors) to exit codes.
"""

from __future__ import annotations


class XtypeError(Exception):
    """Base class for all xType engine errors."""


class CatalogDecodeError(XtypeError):
    """Persisted catalog cannot be decoded (invalid JSON, schema or shape)."""


class BindingError(XtypeError):
    """Rebinding a type identifier to an application failed."""

    def __init__(self, identifier: str, identity: str, reason: str) -> None:
        super().__init__(f"Cannot bind {identifier} to {identity}: {reason}")
        self.identifier = identifier
        self.identity = identity
        self.reason = reason


class BackendError(XtypeError):
    """An OS backend cannot be constructed or is unknown."""


class ConfigError(XtypeError):
    """Configuration file is unreadable or contains invalid values."""
