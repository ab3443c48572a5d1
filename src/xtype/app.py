# topmark:header:start
#
#   project      : xType
#   file         : app.py
#   file_relpath : src/xtype/app.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Composition root: wire a configured backend into a `RegistryStore`.

Frontends build exactly one store per session with `build_store` and drive it
from their own thread. Nothing in xType holds a process-wide store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from xtype.backends import Backend, create_backend
from xtype.config.logging import XtypeLogger, get_logger
from xtype.filetypes.classifier import Classifier
from xtype.filetypes.discovery import CatalogBuilder
from xtype.filetypes.resolver import HandlerResolver
from xtype.registry.persistence import CatalogStateFile
from xtype.registry.status import StatusChannel
from xtype.registry.store import RegistryStore

if TYPE_CHECKING:
    from xtype.config.model import Config
    from xtype.registry.status import StatusListener

logger: XtypeLogger = get_logger(__name__)


def build_store(
    config: Config,
    *,
    backend: Backend | None = None,
    status_listener: StatusListener | None = None,
) -> RegistryStore:
    """Create a store for ``config``.

    Args:
        config (Config): Effective configuration.
        backend (Backend | None): Pre-built backend; created from
            ``config.backend`` when omitted.
        status_listener (StatusListener | None): Called with every status message.

    Returns:
        RegistryStore: A new, not yet loaded store. Close it when done.

    Raises:
        BackendError: If the configured backend cannot be created.
    """
    backend = backend or create_backend(config)
    resolver = HandlerResolver(backend.metadata, backend.handlers)
    status = StatusChannel(
        visibility_seconds=config.status_seconds,
        listeners=[status_listener] if status_listener else (),
    )
    logger.debug(
        "Building store: backend=%s state_file=%s", backend.name, config.state_file
    )
    return RegistryStore(
        metadata=backend.metadata,
        handlers=backend.handlers,
        state_file=CatalogStateFile(config.state_file),
        status=status,
        resolver=resolver,
        builder=CatalogBuilder(
            backend.metadata, resolver, seed_extensions=config.seed_extensions
        ),
        classifier=Classifier(backend.metadata),
    )
