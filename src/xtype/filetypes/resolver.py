# topmark:header:start
#
#   project      : xType
#   file         : resolver.py
#   file_relpath : src/xtype/filetypes/resolver.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Resolve the current default application for a file type.

OS bindings between types and applications are populated inconsistently,
depending on how each application registered itself. No single query is
reliable for every type, so `HandlerResolver` runs an ordered list of probes
and accepts the first candidate that exists on disk:

1. the application bound to the type identifier;
2. the application that would open a throwaway file with the preferred
   extension;
3. the default role handler identity, resolved to an installed application;
4. probe 1 repeated for the type of every tagged extension.

The same resolver instance is shared by catalog discovery and by the
registry store's refresh so the probe order is defined once.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Callable, TypeVar

from xtype.config.logging import XtypeLogger, get_logger
from xtype.constants import PROBE_FILE_STEM
from xtype.filetypes.model import NO_HANDLER, Handler

if TYPE_CHECKING:
    from collections.abc import Iterator

    from xtype.filetypes.model import TypeDescriptor
    from xtype.filetypes.services import DefaultHandlerService, OSType, TypeMetadataService

logger: XtypeLogger = get_logger(__name__)

PathExists = Callable[[Path], bool]

_A = TypeVar("_A")
_R = TypeVar("_R")


class HandlerResolver:
    """Multi-strategy default handler lookup.

    Args:
        metadata (TypeMetadataService): OS type metadata collaborator.
        handlers (DefaultHandlerService): OS default handler collaborator.
        exists (PathExists): Predicate used to verify candidates; defaults to
            `os.path.exists`.
        probe_stem (str): Path (without suffix) of the throwaway file used by
            strategy 2. The file is never created.
    """

    def __init__(
        self,
        metadata: TypeMetadataService,
        handlers: DefaultHandlerService,
        *,
        exists: PathExists = os.path.exists,
        probe_stem: str = PROBE_FILE_STEM,
    ) -> None:
        self._metadata = metadata
        self._handlers = handlers
        self._exists = exists
        self._probe_stem = probe_stem

    def resolve(self, os_type: OSType) -> Handler:
        """Return the default handler for ``os_type``, or `NO_HANDLER`.

        Never raises: a failing probe counts as a miss.

        Args:
            os_type (OSType): The type to resolve.

        Returns:
            Handler: Name and location of the application, both ``None`` if no
            strategy produced an existing application.
        """
        for strategy, candidate in self._candidates(os_type):
            if candidate is None:
                continue
            if self._accept(candidate):
                logger.trace("%s: %s resolved to %s", os_type.identifier, strategy, candidate)
                return Handler.for_location(candidate)
            logger.trace(
                "%s: %s returned missing application %s", os_type.identifier, strategy, candidate
            )
        logger.debug("No default application found for %s", os_type.identifier)
        return NO_HANDLER

    def refresh(self, descriptor: TypeDescriptor) -> TypeDescriptor:
        """Re-resolve the handler of a catalog entry.

        Args:
            descriptor (TypeDescriptor): Entry to refresh.

        Returns:
            TypeDescriptor: A copy with the current handler, or ``descriptor``
            unchanged when its type identifier no longer resolves.
        """
        try:
            os_type = self._metadata.type_for_identifier(descriptor.type_identifier)
        except Exception as exc:
            logger.debug("Cannot look up %s: %s", descriptor.type_identifier, exc)
            return descriptor
        if os_type is None:
            return descriptor
        return descriptor.with_handler(self.resolve(os_type))

    def _accept(self, candidate: Path) -> bool:
        try:
            return bool(self._exists(candidate))
        except OSError:
            return False

    def _candidates(self, os_type: OSType) -> Iterator[tuple[str, Path | None]]:
        """Yield ``(strategy, candidate)`` pairs lazily, in probe order."""
        yield "type binding", self._probe(
            self._handlers.default_application_for_type, os_type.identifier
        )

        primary = os_type.primary_extension
        if primary:
            probe_path = Path(f"{self._probe_stem}.{primary}")
            yield "extension probe", self._probe(self._handlers.application_to_open, probe_path)

        identity = self._probe(self._handlers.default_role_handler, os_type.identifier)
        if identity:
            yield f"role handler {identity}", self._probe(
                self._handlers.application_for_identity, identity
            )

        for ext in os_type.extensions:
            ext_type = self._probe(self._metadata.type_for_extension, ext)
            if ext_type is None:
                continue
            yield f"extension .{ext} binding", self._probe(
                self._handlers.default_application_for_type, ext_type.identifier
            )

    @staticmethod
    def _probe(call: Callable[[_A], _R | None], arg: _A) -> _R | None:
        try:
            return call(arg)
        except Exception as exc:  # probes are best effort; a failure is a miss
            logger.trace("Probe %s(%r) failed: %s", getattr(call, "__name__", call), arg, exc)
            return None
