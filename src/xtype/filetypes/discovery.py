# topmark:header:start
#
#   project      : xType
#   file         : discovery.py
#   file_relpath : src/xtype/filetypes/discovery.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Catalog discovery.

Builds the full catalog of `TypeDescriptor` objects from two sources:

1. a fixed seed list of well-known extensions (see
   [`SEED_EXTENSIONS`][xtype.constants.SEED_EXTENSIONS]), and
2. every OS type with an extension tag that conforms to one of a few broad
   anchors (audio, movie, image, text, pdf, archive, zip, data).

Discovery is expensive (hundreds of OS queries plus one handler resolution per
type). It is pure apart from those read-only queries and is meant to run on
the registry store's worker context. It never fails outright: a lookup that
raises is logged and skipped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Final, TypeVar

from xtype.config.logging import XtypeLogger, get_logger
from xtype.constants import SEED_EXTENSIONS
from xtype.filetypes.model import TypeDescriptor, humanize_identifier
from xtype.filetypes.services import Anchor

if TYPE_CHECKING:
    from collections.abc import Iterable

    from xtype.filetypes.resolver import HandlerResolver
    from xtype.filetypes.services import OSType, TypeMetadataService

logger: XtypeLogger = get_logger(__name__)

_A = TypeVar("_A")
_R = TypeVar("_R")

DISCOVERY_ANCHORS: Final[tuple[Anchor, ...]] = (
    Anchor.AUDIO,
    Anchor.MOVIE,
    Anchor.IMAGE,
    Anchor.TEXT,
    Anchor.PDF,
    Anchor.ARCHIVE,
    Anchor.ZIP,
    Anchor.DATA,
)


def dedupe_by_id(items: Iterable[TypeDescriptor]) -> list[TypeDescriptor]:
    """Deduplicate by `TypeDescriptor.id`; later items overwrite earlier ones.

    The returned list keeps the position of the first occurrence of each id.
    """
    unique: dict[str, TypeDescriptor] = {}
    for item in items:
        if item.id in unique:
            logger.debug("Duplicate type id %s (keeping last)", item.id)
        unique[item.id] = item
    return list(unique.values())


def sort_by_description(items: Iterable[TypeDescriptor]) -> list[TypeDescriptor]:
    """Return ``items`` sorted by description (ties broken by id for stable output)."""
    return sorted(items, key=lambda d: (d.description, d.id))


class CatalogBuilder:
    """Discover the set of known file types.

    Args:
        metadata (TypeMetadataService): OS type metadata collaborator.
        resolver (HandlerResolver): Shared resolver attaching default handlers.
        seed_extensions (Iterable[str]): Extensions probed before the anchors.
        anchors (Iterable[Anchor]): Anchors whose conforming types are enumerated.
    """

    def __init__(
        self,
        metadata: TypeMetadataService,
        resolver: HandlerResolver,
        *,
        seed_extensions: Iterable[str] = SEED_EXTENSIONS,
        anchors: Iterable[Anchor] = DISCOVERY_ANCHORS,
    ) -> None:
        self._metadata = metadata
        self._resolver = resolver
        self._seed_extensions: tuple[str, ...] = tuple(
            dict.fromkeys(ext.lstrip(".").lower() for ext in seed_extensions if ext)
        )
        self._anchors: tuple[Anchor, ...] = tuple(anchors)

    def discover(self) -> list[TypeDescriptor]:
        """Run a full discovery pass.

        Returns:
            list[TypeDescriptor]: Unique descriptors sorted by description.
        """
        found: list[TypeDescriptor] = []
        processed: set[str] = set()

        for ext in self._seed_extensions:
            os_type = self._safe(self._metadata.type_for_extension, ext)
            if os_type is None or os_type.identifier in processed:
                continue
            processed.add(os_type.identifier)
            descriptor = self.build_descriptor(os_type)
            if descriptor is not None:
                found.append(descriptor)

        for anchor in self._anchors:
            conforming: Iterable[OSType] = self._safe(self._list_conforming, anchor) or ()
            for os_type in conforming:
                if os_type.identifier in processed:
                    continue
                processed.add(os_type.identifier)
                descriptor = self.build_descriptor(os_type)
                if descriptor is not None:
                    found.append(descriptor)

            anchor_type = self._safe(self._metadata.anchor_type, anchor)
            if anchor_type is not None and anchor_type.identifier not in processed:
                descriptor = self.build_descriptor(anchor_type)
                if descriptor is not None:
                    processed.add(anchor_type.identifier)
                    found.append(descriptor)

        catalog = sort_by_description(dedupe_by_id(found))
        logger.info("Discovered %d file types", len(catalog))
        return catalog

    def build_descriptor(self, os_type: OSType) -> TypeDescriptor | None:
        """Build a catalog entry from an OS type.

        Args:
            os_type (OSType): Type reported by the metadata service.

        Returns:
            TypeDescriptor | None: The descriptor, or ``None`` if the type is not
            declared, is dynamic, or carries no usable extension.
        """
        if not os_type.is_stable:
            logger.trace("Skipping unstable type %s", os_type.identifier)
            return None

        primary = os_type.primary_extension
        if not primary:
            logger.trace("Skipping %s: no filename extension", os_type.identifier)
            return None

        extensions = {ext for ext in os_type.extensions if ext}
        extensions.add(primary)

        description = (os_type.description or "").strip() or humanize_identifier(
            os_type.identifier
        )
        handler = self._resolver.resolve(os_type)
        return TypeDescriptor(
            id=os_type.identifier,
            description=description,
            extensions=tuple(sorted(extensions)),
            type_identifier=os_type.identifier,
        ).with_handler(handler)

    def _list_conforming(self, anchor: Anchor) -> list[OSType]:
        return list(self._metadata.types_conforming_to(anchor))

    @staticmethod
    def _safe(call: Callable[[_A], _R | None], arg: _A) -> _R | None:
        try:
            return call(arg)
        except Exception as exc:
            logger.debug("Lookup %s(%r) failed: %s", getattr(call, "__name__", call), arg, exc)
            return None
