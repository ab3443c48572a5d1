# topmark:header:start
#
#   project      : xType
#   file         : services.py
#   file_relpath : src/xtype/filetypes/services.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Abstract OS collaborators consumed by the xType engine.

The engine never talks to the operating system directly. It consumes two
services:

* `TypeMetadataService` answers questions about file types: which type an
  extension maps to, what a type's tags and description are, and how it
  relates to a fixed set of broad `Anchor` categories.
* `DefaultHandlerService` answers which application opens a type, and can
  rebind a type to another application.

Concrete implementations live in [`xtype.backends`][xtype.backends]. Both
protocols are `runtime_checkable` so plugin factories can be validated.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path


class Anchor(str, Enum):
    """Broad, OS-independent type categories used for conformance queries."""

    AUDIO = "audio"
    MOVIE = "movie"
    VIDEO = "video"
    IMAGE = "image"
    TEXT = "text"
    PLAIN_TEXT = "plain-text"
    RTF = "rtf"
    RTFD = "rtfd"
    PDF = "pdf"
    ARCHIVE = "archive"
    ZIP = "zip"
    GZIP = "gzip"
    BZ2 = "bz2"
    DATA = "data"


@dataclass(frozen=True)
class OSType:
    """A file type as reported by the OS.

    Attributes:
        identifier (str): OS type identifier (UTI, MIME type, ...).
        extensions (tuple[str, ...]): Filename extensions tagged on the type.
        preferred_extension (str | None): The OS-preferred extension, if any.
        description (str | None): Localized description, if the OS has one.
        is_declared (bool): The type is publicly declared by an installed
            component (as opposed to invented on the fly).
        is_dynamic (bool): The type was synthesized for an unknown tag.
    """

    identifier: str
    extensions: tuple[str, ...] = ()
    preferred_extension: str | None = None
    description: str | None = None
    is_declared: bool = True
    is_dynamic: bool = False

    @property
    def is_stable(self) -> bool:
        """True for declared, non-dynamic types: the only ones xType catalogs or binds."""
        return self.is_declared and not self.is_dynamic

    @property
    def primary_extension(self) -> str | None:
        """Preferred extension, else the first tagged one."""
        if self.preferred_extension:
            return self.preferred_extension
        return self.extensions[0] if self.extensions else None


@runtime_checkable
class TypeMetadataService(Protocol):
    """OS collaborator A: file type metadata."""

    def type_for_extension(self, extension: str) -> OSType | None:
        """Return the type an extension (without dot) maps to, if any."""
        ...

    def type_for_identifier(self, identifier: str) -> OSType | None:
        """Return the type with this identifier, if known."""
        ...

    def anchor_type(self, anchor: Anchor) -> OSType | None:
        """Return the OS type standing for ``anchor`` itself, if it has one."""
        ...

    def types_conforming_to(self, anchor: Anchor) -> Iterable[OSType]:
        """Enumerate every type with an extension tag that conforms to ``anchor``."""
        ...

    def conforms_to(self, os_type: OSType, anchor: Anchor) -> bool:
        """Return True if ``os_type`` conforms to ``anchor``."""
        ...


@runtime_checkable
class DefaultHandlerService(Protocol):
    """OS collaborator B: default application bindings."""

    def default_application_for_type(self, identifier: str) -> Path | None:
        """Return the application bound to a type identifier, if any."""
        ...

    def application_to_open(self, path: Path) -> Path | None:
        """Return the application that would open the file at ``path``."""
        ...

    def default_role_handler(self, identifier: str) -> str | None:
        """Return the identity (bundle id, desktop id, ...) bound to a type."""
        ...

    def application_for_identity(self, identity: str) -> Path | None:
        """Return the installed application with this identity."""
        ...

    def identity_for_application(self, location: Path) -> str | None:
        """Return the identity of the application installed at ``location``."""
        ...

    def set_default_handler(self, identifier: str, identity: str) -> None:
        """Bind ``identifier`` to the application with ``identity``.

        Raises:
            BindingError: If the OS refuses or fails the rebinding.
        """
        ...
