# topmark:header:start
#
#   project      : xType
#   file         : __init__.py
#   file_relpath : src/xtype/backends/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""OS backends and their registry.

A backend is the pair of OS collaborators the engine needs: a
[`TypeMetadataService`][xtype.filetypes.services.TypeMetadataService] and a
[`DefaultHandlerService`][xtype.filetypes.services.DefaultHandlerService].
Backends are produced by *factories* taking the resolved
[`Config`][xtype.config.model.Config].

Notes:
    * Built-in factories are imported lazily from their modules.
    * Plugins are discovered via the ``xtype.backends`` entry point group; an
      entry point must load to a factory callable.
    * The factory table is built on first access and cached thereafter. A
      plugin cannot shadow a built-in name.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from importlib import import_module
from importlib.metadata import EntryPoints, entry_points
from typing import TYPE_CHECKING, Any, Callable, Final

from xtype.config.logging import XtypeLogger, get_logger
from xtype.constants import BACKEND_ENTRYPOINT_GROUP
from xtype.core.errors import BackendError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from xtype.config.model import Config
    from xtype.filetypes.services import DefaultHandlerService, TypeMetadataService

logger: XtypeLogger = get_logger(__name__)


@dataclass(frozen=True)
class Backend:
    """A named pair of OS services."""

    name: str
    metadata: TypeMetadataService
    handlers: DefaultHandlerService


BackendFactory = Callable[["Config"], Backend]

_BUILTIN_BACKENDS: Final[dict[str, str]] = {
    "freedesktop": "xtype.backends.freedesktop",
    "static": "xtype.backends.static",
}


def _load_builtin(name: str, modname: str) -> BackendFactory:
    mod = import_module(modname)
    factory: Any = getattr(mod, "create_backend", None)
    if not callable(factory):
        raise BackendError(f"Built-in backend module {modname} has no create_backend()")
    return factory


def _iter_plugin_factories() -> Iterable[tuple[str, BackendFactory]]:
    """Yield ``(name, factory)`` pairs provided by external plugins."""
    try:
        eps = entry_points()
    except Exception:
        logger.exception("Failed to read entry points")
        return

    candidates: EntryPoints = eps.select(group=BACKEND_ENTRYPOINT_GROUP)
    for ep in candidates:
        try:
            factory: Any = ep.load()
        except Exception:
            logger.exception("Failed loading backend from entry point %s", ep.name)
            continue
        if not callable(factory):
            logger.warning("Entry point %s is not a backend factory: %r", ep.name, factory)
            continue
        yield ep.name, factory


@lru_cache(maxsize=1)
def get_backend_factories() -> dict[str, BackendFactory]:
    """Return (and cache) the backend factory table (lazy; import-time light)."""
    table: dict[str, BackendFactory] = {}
    for name, modname in _BUILTIN_BACKENDS.items():
        try:
            table[name] = _load_builtin(name, modname)
        except (ImportError, BackendError):
            logger.exception("Failed to load built-in backend %s", name)
    for name, factory in _iter_plugin_factories():
        if name in table:
            logger.warning("Plugin backend %s shadows an existing backend; ignoring", name)
            continue
        table[name] = factory
    logger.debug("Available backends: %s", ", ".join(sorted(table)))
    return table


def available_backends() -> list[str]:
    """Sorted names of every known backend."""
    return sorted(get_backend_factories())


def create_backend(config: Config) -> Backend:
    """Instantiate the backend named by ``config.backend``.

    Raises:
        BackendError: If the name is unknown or the factory fails.
    """
    factory = get_backend_factories().get(config.backend)
    if factory is None:
        raise BackendError(
            f"Unknown backend {config.backend!r} (available: {', '.join(available_backends())})"
        )
    backend = factory(config)
    logger.debug("Using backend %s", backend.name)
    return backend
