# topmark:header:start
#
#   project      : xType
#   file         : model.py
#   file_relpath : src/xtype/filetypes/model.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Data model of the xType catalog.

Defines the `TypeDescriptor` record (one distinct file type and its current
default handler), the coarse `Category` enumeration, and the `Handler`
value returned by the resolver.

Notes:
    * `Category` is never stored on a descriptor. It is derived on demand by
      [`Classifier`][xtype.filetypes.classifier.Classifier] so it follows
      changes to the classification rules without a catalog rebuild.
    * Descriptors are immutable; the registry store replaces them in place
      (same index) when a handler changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import NamedTuple

from xtype.constants import PUBLIC_TYPE_PREFIX
from xtype.core.enum_mixins import KeyedStrEnum


class Category(KeyedStrEnum):
    """Coarse file category used for filtering and bulk reassignment.

    Attributes:
        AUDIO: Sound files.
        VIDEO: Movies and video streams.
        IMAGE: Still images.
        TEXT: Plain and rich text.
        ARCHIVE: Compressed files and disk images.
        OTHER: Anything not matched above.
    """

    AUDIO = ("audio", "Audio", ("sound", "music"))
    VIDEO = ("video", "Video", ("movie", "movies", "videos"))
    IMAGE = ("image", "Image", ("images", "picture", "photo"))
    TEXT = ("text", "Text", ("document", "documents"))
    ARCHIVE = ("archive", "Archive", ("archives", "compressed"))
    OTHER = ("other", "Other", ())


class Handler(NamedTuple):
    """A resolved default application: display name and location on disk."""

    name: str | None
    location: Path | None

    @classmethod
    def for_location(cls, location: Path) -> Handler:
        """Build a handler whose name is derived from ``location``."""
        return cls(application_name(location), location)

    def __bool__(self) -> bool:
        return self.location is not None


NO_HANDLER = Handler(None, None)


def application_name(location: Path | str) -> str:
    """Return the human-readable name of an application from its location.

    The directory part and the last suffix are dropped, so
    ``/Applications/Keka.app`` gives ``Keka`` and
    ``/usr/share/applications/vlc.desktop`` gives ``vlc``.
    """
    path = Path(location)
    return path.stem or path.name


def humanize_identifier(identifier: str) -> str:
    """Turn an opaque type identifier into a readable label.

    Strips the ``public.`` namespace (and the media type of MIME-style
    identifiers, plus their ``x-``/``vnd.`` markers), turns hyphens into
    spaces and capitalizes every word.

    Examples:
        ``public.mpeg-4-audio`` → ``Mpeg 4 Audio``;
        ``application/x-7z-compressed`` → ``7z Compressed``.
    """
    label = identifier
    if label.startswith(PUBLIC_TYPE_PREFIX):
        label = label[len(PUBLIC_TYPE_PREFIX) :]
    elif "/" in label:
        label = label.rsplit("/", 1)[1]
        for marker in ("x-", "vnd."):
            if label.startswith(marker):
                label = label[len(marker) :]
    label = label.replace("-", " ").replace("_", " ").strip()
    if not label:
        return identifier
    return " ".join(word[:1].upper() + word[1:].lower() for word in label.split())


@dataclass(frozen=True)
class TypeDescriptor:
    """One distinct file type in the catalog.

    Attributes:
        id (str): Stable unique identifier (OS-assigned, opaque).
        description (str): Human-readable label; never empty.
        extensions (tuple[str, ...]): Sorted, deduplicated filename extensions; never empty.
        type_identifier (str): Canonical OS handle used to query/set handlers.
        default_handler_name (str | None): Name of the resolved default application.
        default_handler_location (Path | None): Location of that application.

    Raises:
        ValueError: If an invariant is violated (empty description or
            extensions, or only one of the two handler fields set).
    """

    id: str
    description: str
    extensions: tuple[str, ...]
    type_identifier: str
    default_handler_name: str | None = None
    default_handler_location: Path | None = field(default=None)

    def __post_init__(self) -> None:
        if not self.description:
            raise ValueError(f"TypeDescriptor {self.id!r} has an empty description")
        if not self.extensions:
            raise ValueError(f"TypeDescriptor {self.id!r} has no extensions")
        if (self.default_handler_name is None) != (self.default_handler_location is None):
            raise ValueError(
                f"TypeDescriptor {self.id!r}: handler name and location must be set together"
            )
        # Normalize to a sorted, deduplicated tuple whatever iterable was passed in
        object.__setattr__(self, "extensions", tuple(sorted(set(self.extensions))))

    @property
    def handler(self) -> Handler:
        """Current default handler (possibly `NO_HANDLER`)."""
        return Handler(self.default_handler_name, self.default_handler_location)

    @property
    def has_handler(self) -> bool:
        """True if a default application is known for this type."""
        return self.default_handler_location is not None

    def with_handler(self, handler: Handler) -> TypeDescriptor:
        """Return a copy carrying ``handler`` (``NO_HANDLER`` clears it)."""
        return replace(
            self,
            default_handler_name=(
                (handler.name or application_name(handler.location))
                if handler.location is not None
                else None
            ),
            default_handler_location=handler.location,
        )
