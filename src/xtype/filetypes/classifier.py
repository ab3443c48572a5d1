# topmark:header:start
#
#   project      : xType
#   file         : classifier.py
#   file_relpath : src/xtype/filetypes/classifier.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Derive a coarse `Category` for a catalog entry.

Classification is a pure function of the descriptor and of the conformance
facts reported by the metadata service. It is never stored, so new or
changed OS type declarations are picked up without rebuilding the catalog.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from xtype.config.logging import XtypeLogger, get_logger
from xtype.constants import ARCHIVE_EXTENSIONS
from xtype.filetypes.model import Category
from xtype.filetypes.services import Anchor

if TYPE_CHECKING:
    from collections.abc import Iterable

    from xtype.filetypes.model import TypeDescriptor
    from xtype.filetypes.services import OSType, TypeMetadataService

logger: XtypeLogger = get_logger(__name__)

# Checked in order; the first category with a conforming anchor wins.
CONFORMANCE_RULES: Final[tuple[tuple[Category, tuple[Anchor, ...]], ...]] = (
    (Category.AUDIO, (Anchor.AUDIO,)),
    (Category.VIDEO, (Anchor.MOVIE, Anchor.VIDEO)),
    (Category.IMAGE, (Anchor.IMAGE,)),
    (Category.TEXT, (Anchor.TEXT, Anchor.PLAIN_TEXT, Anchor.RTF, Anchor.RTFD)),
    (Category.ARCHIVE, (Anchor.ARCHIVE, Anchor.ZIP, Anchor.GZIP, Anchor.BZ2)),
)


class Classifier:
    """Map descriptors to categories using a `TypeMetadataService`.

    Args:
        metadata (TypeMetadataService): OS type metadata collaborator.
        archive_extensions (Iterable[str]): Extensions classified as archives when
            the OS reports no archive conformance.
    """

    def __init__(
        self,
        metadata: TypeMetadataService,
        *,
        archive_extensions: Iterable[str] = ARCHIVE_EXTENSIONS,
    ) -> None:
        self._metadata = metadata
        self._archive_extensions: frozenset[str] = frozenset(
            ext.lower() for ext in archive_extensions
        )

    def __call__(self, descriptor: TypeDescriptor) -> Category:
        return self.classify(descriptor)

    def classify(self, descriptor: TypeDescriptor) -> Category:
        """Return the category of ``descriptor``; never raises.

        Args:
            descriptor (TypeDescriptor): Catalog entry to classify.

        Returns:
            Category: The first matching category, `Category.OTHER` if none.
        """
        first_ext: str | None = descriptor.extensions[0] if descriptor.extensions else None
        os_type = self._lookup(descriptor.type_identifier, first_ext)
        if os_type is None:
            return Category.OTHER

        for category, anchors in CONFORMANCE_RULES:
            if any(self._conforms(os_type, anchor) for anchor in anchors):
                return category

        if first_ext is not None and first_ext.lower() in self._archive_extensions:
            return Category.ARCHIVE
        return Category.OTHER

    def _lookup(self, identifier: str, extension: str | None) -> OSType | None:
        try:
            os_type = self._metadata.type_for_identifier(identifier)
            if os_type is None and extension:
                os_type = self._metadata.type_for_extension(extension)
        except Exception as exc:  # OS lookups must not break classification
            logger.debug("Type lookup failed for %s: %s", identifier, exc)
            return None
        return os_type

    def _conforms(self, os_type: OSType, anchor: Anchor) -> bool:
        try:
            return self._metadata.conforms_to(os_type, anchor)
        except Exception as exc:
            logger.debug("Conformance check %s -> %s failed: %s", os_type.identifier, anchor, exc)
            return False
