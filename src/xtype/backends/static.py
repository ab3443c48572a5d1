# topmark:header:start
#
#   project      : xType
#   file         : static.py
#   file_relpath : src/xtype/backends/static.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""In-memory backend loaded from a TOML catalog.

The ``static`` backend answers every OS query from tables held in memory. It
is used by the test suite, for demos, and on hosts without a desktop
database. Bindings made through it live for the lifetime of the process.

Catalog format (paths relative to the catalog file are allowed)::

    [applications]
    "org.videolan.vlc" = "Applications/VLC.app"

    [[types]]
    identifier = "public.mp3"
    description = "MP3 audio"
    extensions = ["mp3"]
    conforms_to = ["audio"]
    default = "org.videolan.vlc"

Optional per-type keys: ``preferred_extension``, ``role_handler`` (an
identity), ``declared`` and ``dynamic`` (booleans).

An unknown extension maps to a *dynamic* type (``dyn.<ext>``) the way
Launch Services invents one, so discovery exercises its stability filter.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final, cast

from xtype.backends import Backend
from xtype.config.io import TomlTable, get_table_value, load_toml_dict
from xtype.config.logging import XtypeLogger, get_logger
from xtype.config.model import normalize_extension
from xtype.config.paths import abs_path_from
from xtype.core.errors import BackendError, BindingError, ConfigError
from xtype.filetypes.services import Anchor, OSType

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from xtype.config.model import Config

logger: XtypeLogger = get_logger(__name__)

BACKEND_NAME: Final[str] = "static"

# Identifiers standing for each anchor, Launch Services style.
ANCHOR_IDENTIFIERS: Final[dict[Anchor, str]] = {
    Anchor.AUDIO: "public.audio",
    Anchor.MOVIE: "public.movie",
    Anchor.VIDEO: "public.video",
    Anchor.IMAGE: "public.image",
    Anchor.TEXT: "public.text",
    Anchor.PLAIN_TEXT: "public.plain-text",
    Anchor.RTF: "public.rtf",
    Anchor.RTFD: "com.apple.rtfd",
    Anchor.PDF: "com.adobe.pdf",
    Anchor.ARCHIVE: "public.archive",
    Anchor.ZIP: "public.zip-archive",
    Anchor.GZIP: "org.gnu.gnu-zip-archive",
    Anchor.BZ2: "public.bzip2-archive",
    Anchor.DATA: "public.data",
}

DYNAMIC_PREFIX: Final[str] = "dyn."


class StaticTypeMetadata:
    """`TypeMetadataService` backed by an in-memory type table.

    Args:
        types (Iterable[tuple[OSType, Iterable[Anchor]]]): Types with the anchors
            each one conforms to. The first type tagging an extension owns it.
    """

    def __init__(self, types: Iterable[tuple[OSType, Iterable[Anchor]]] = ()) -> None:
        self._by_id: dict[str, OSType] = {}
        self._by_ext: dict[str, OSType] = {}
        self._conformance: dict[str, frozenset[Anchor]] = {}
        for os_type, anchors in types:
            self.add_type(os_type, anchors)

    def add_type(self, os_type: OSType, conforms_to: Iterable[Anchor] = ()) -> None:
        """Register ``os_type``; a type with the same identifier is replaced."""
        self._by_id[os_type.identifier] = os_type
        self._conformance[os_type.identifier] = frozenset(conforms_to)
        for ext in os_type.extensions:
            self._by_ext.setdefault(ext.lower(), os_type)

    @property
    def types(self) -> list[OSType]:
        """Every registered type, in registration order."""
        return list(self._by_id.values())

    def type_for_extension(self, extension: str) -> OSType | None:
        ext = normalize_extension(extension)
        if not ext:
            return None
        known = self._by_ext.get(ext)
        if known is not None:
            return known
        return OSType(
            identifier=f"{DYNAMIC_PREFIX}{ext}",
            extensions=(ext,),
            preferred_extension=ext,
            is_declared=False,
            is_dynamic=True,
        )

    def type_for_identifier(self, identifier: str) -> OSType | None:
        return self._by_id.get(identifier)

    def anchor_type(self, anchor: Anchor) -> OSType | None:
        identifier = ANCHOR_IDENTIFIERS[anchor]
        return self._by_id.get(identifier) or OSType(identifier=identifier)

    def types_conforming_to(self, anchor: Anchor) -> list[OSType]:
        return [
            t for t in self._by_id.values() if t.extensions and self.conforms_to(t, anchor)
        ]

    def conforms_to(self, os_type: OSType, anchor: Anchor) -> bool:
        if os_type.identifier == ANCHOR_IDENTIFIERS[anchor]:
            return True
        return anchor in self._conformance.get(os_type.identifier, frozenset())


class StaticHandlerService:
    """`DefaultHandlerService` backed by in-memory binding tables.

    Args:
        metadata (StaticTypeMetadata): Used to map probe paths to types.
        applications (Mapping[str, Path]): Installed applications by identity.
        defaults (Mapping[str, str]): Type identifier → identity of its default application.
        role_handlers (Mapping[str, str]): Type identifier → role handler identity.
    """

    def __init__(
        self,
        metadata: StaticTypeMetadata,
        *,
        applications: Mapping[str, Path] | None = None,
        defaults: Mapping[str, str] | None = None,
        role_handlers: Mapping[str, str] | None = None,
    ) -> None:
        self._metadata = metadata
        self._applications: dict[str, Path] = dict(applications or {})
        self._defaults: dict[str, str] = dict(defaults or {})
        self._role_handlers: dict[str, str] = dict(role_handlers or {})
        self._lock = threading.Lock()
        self.bindings: list[tuple[str, str]] = []

    def install(self, identity: str, location: Path) -> None:
        """Register an application under ``identity``."""
        with self._lock:
            self._applications[identity] = location

    def default_application_for_type(self, identifier: str) -> Path | None:
        with self._lock:
            identity = self._defaults.get(identifier)
            return self._applications.get(identity) if identity else None

    def application_to_open(self, path: Path) -> Path | None:
        os_type = self._metadata.type_for_extension(path.suffix)
        if os_type is None or not os_type.is_stable:
            return None
        return self.default_application_for_type(os_type.identifier)

    def default_role_handler(self, identifier: str) -> str | None:
        with self._lock:
            return self._role_handlers.get(identifier)

    def application_for_identity(self, identity: str) -> Path | None:
        with self._lock:
            return self._applications.get(identity)

    def identity_for_application(self, location: Path) -> str | None:
        target = location.resolve()
        with self._lock:
            for identity, app in self._applications.items():
                if app == location or app.resolve() == target:
                    return identity
        return None

    def set_default_handler(self, identifier: str, identity: str) -> None:
        with self._lock:
            if identity not in self._applications:
                raise BindingError(identifier, identity, "application is not installed")
            self._defaults[identifier] = identity
            self._role_handlers[identifier] = identity
            self.bindings.append((identifier, identity))
        logger.debug("Bound %s to %s", identifier, identity)


def _parse_anchors(raw: object, where: str) -> list[Anchor]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise BackendError(f"{where}: conforms_to must be a list")
    anchors: list[Anchor] = []
    for item in cast("list[object]", raw):
        try:
            anchors.append(Anchor(str(item)))
        except ValueError as e:
            raise BackendError(f"{where}: unknown anchor {item!r}") from e
    return anchors


def _parse_type(
    entry: TomlTable, index: int
) -> tuple[OSType, list[Anchor], str | None, str | None]:
    where = f"types[{index}]"
    identifier = entry.get("identifier")
    if not isinstance(identifier, str) or not identifier:
        raise BackendError(f"{where}: missing identifier")
    raw_exts: Any = entry.get("extensions", [])
    if not isinstance(raw_exts, list):
        raise BackendError(f"{where}: extensions must be a list")
    extensions = tuple(normalize_extension(str(e)) for e in cast("list[object]", raw_exts))
    preferred = entry.get("preferred_extension")
    description = entry.get("description")
    os_type = OSType(
        identifier=identifier,
        extensions=tuple(e for e in extensions if e),
        preferred_extension=normalize_extension(preferred) if isinstance(preferred, str) else None,
        description=description if isinstance(description, str) else None,
        is_declared=bool(entry.get("declared", True)),
        is_dynamic=bool(entry.get("dynamic", False)),
    )
    default = entry.get("default")
    role = entry.get("role_handler")
    return (
        os_type,
        _parse_anchors(entry.get("conforms_to"), where),
        default if isinstance(default, str) else None,
        role if isinstance(role, str) else None,
    )


def load_static_catalog(path: Path) -> tuple[StaticTypeMetadata, StaticHandlerService]:
    """Read a static backend catalog file.

    Raises:
        BackendError: If the file cannot be read or is malformed.
    """
    try:
        data = load_toml_dict(path)
    except ConfigError as e:
        raise BackendError(str(e)) from e

    base_dir = path.parent.absolute()
    applications = {
        identity: abs_path_from(base_dir, str(location))
        for identity, location in get_table_value(data, "applications").items()
    }

    raw_types: Any = data.get("types", [])
    if not isinstance(raw_types, list):
        raise BackendError(f"{path}: 'types' must be an array of tables")

    metadata = StaticTypeMetadata()
    defaults: dict[str, str] = {}
    role_handlers: dict[str, str] = {}
    for index, entry in enumerate(cast("list[object]", raw_types)):
        if not isinstance(entry, dict):
            raise BackendError(f"{path}: types[{index}] must be a table")
        os_type, anchors, default, role = _parse_type(cast("TomlTable", entry), index)
        metadata.add_type(os_type, anchors)
        if default:
            defaults[os_type.identifier] = default
        if role:
            role_handlers[os_type.identifier] = role

    logger.debug(
        "Loaded static catalog %s: %d types, %d applications",
        path,
        len(metadata.types),
        len(applications),
    )
    handlers = StaticHandlerService(
        metadata, applications=applications, defaults=defaults, role_handlers=role_handlers
    )
    return metadata, handlers


def create_backend(config: Config) -> Backend:
    """Factory for the ``static`` backend.

    Raises:
        BackendError: If no catalog file is configured.
    """
    if config.backend_catalog is None:
        raise BackendError("The static backend needs a catalog file ([backend] catalog)")
    metadata, handlers = load_static_catalog(config.backend_catalog)
    return Backend(BACKEND_NAME, metadata, handlers)
