# topmark:header:start
#
#   project      : xType
#   file         : freedesktop.py
#   file_relpath : src/xtype/backends/freedesktop.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Backend for freedesktop.org desktops (Linux, BSD).

Type metadata comes from the shared-mime-info database found under
``$XDG_DATA_HOME`` and ``$XDG_DATA_DIRS``:

* ``mime/globs2`` (or the older ``mime/globs``): extension → MIME type;
* ``mime/subclasses``: the conformance hierarchy;
* ``mime/aliases``: alternative names of a type;
* ``mime/<media>/<subtype>.xml``: the human-readable ``<comment>``.

When no database is installed the stdlib ``mimetypes`` table is used
instead; it has no hierarchy, so conformance falls back to the media type.

Default applications are read with ``xdg-mime query default`` and, when that
tool is missing, from the ``[Default Applications]`` group of the
``mimeapps.list`` files. Applications are identified by their desktop file
id (``vlc.desktop``). Bindings go through ``xdg-mime default`` or, without it,
into the user's ``mimeapps.list``.
"""

from __future__ import annotations

import configparser
import mimetypes
import re
import shutil
import subprocess
import threading
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Final

from xtype.backends import Backend
from xtype.config.logging import XtypeLogger, get_logger
from xtype.config.model import normalize_extension
from xtype.config.paths import xdg_config_dirs, xdg_config_home, xdg_data_dirs, xdg_data_home
from xtype.core.errors import BindingError
from xtype.filetypes.services import Anchor, OSType

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from xtype.config.model import Config

logger: XtypeLogger = get_logger(__name__)

BACKEND_NAME: Final[str] = "freedesktop"

SUBPROCESS_TIMEOUT: Final[float] = 5.0
DEFAULT_WEIGHT: Final[int] = 50

MIMEAPPS_LIST: Final[str] = "mimeapps.list"
LEGACY_DEFAULTS_LIST: Final[str] = "defaults.list"
DEFAULT_APPS_GROUP: Final[str] = "Default Applications"
ADDED_ASSOCIATIONS_GROUP: Final[str] = "Added Associations"

OCTET_STREAM: Final[str] = "application/octet-stream"
PLAIN_TEXT: Final[str] = "text/plain"

_SMI_NS: Final[str] = "{http://www.freedesktop.org/standards/shared-mime-info}"
_XML_LANG: Final[str] = "{http://www.w3.org/XML/1998/namespace}lang"

# Only plain "*.ext" patterns map to a filename extension.
_SIMPLE_GLOB: Final[re.Pattern[str]] = re.compile(r"^\*\.([^*?\[\]]+)$")

# Anchors matched on the media part of the type or of any ancestor.
_ANCHOR_MEDIA: Final[dict[Anchor, str]] = {
    Anchor.AUDIO: "audio",
    Anchor.MOVIE: "video",
    Anchor.VIDEO: "video",
    Anchor.IMAGE: "image",
    Anchor.TEXT: "text",
}

ARCHIVE_MIME_TYPES: Final[frozenset[str]] = frozenset(
    {
        "application/zip",
        "application/gzip",
        "application/x-gzip",
        "application/x-bzip",
        "application/x-bzip2",
        "application/x-xz",
        "application/zstd",
        "application/x-tar",
        "application/x-compressed-tar",
        "application/x-bzip-compressed-tar",
        "application/x-xz-compressed-tar",
        "application/x-7z-compressed",
        "application/vnd.rar",
        "application/x-rar",
        "application/x-rar-compressed",
        "application/x-cd-image",
        "application/x-iso9660-image",
        "application/x-apple-diskimage",
        "application/vnd.ms-cab-compressed",
        "application/x-arj",
        "application/x-lha",
        "application/x-lzh-compressed",
    }
)

# Anchors matched on the exact type or any ancestor.
_ANCHOR_TYPES: Final[dict[Anchor, frozenset[str]]] = {
    Anchor.PLAIN_TEXT: frozenset({PLAIN_TEXT}),
    Anchor.RTF: frozenset({"application/rtf", "text/rtf"}),
    Anchor.RTFD: frozenset(),
    Anchor.PDF: frozenset({"application/pdf"}),
    Anchor.ARCHIVE: ARCHIVE_MIME_TYPES,
    Anchor.ZIP: frozenset({"application/zip"}),
    Anchor.GZIP: frozenset({"application/gzip", "application/x-gzip"}),
    Anchor.BZ2: frozenset({"application/x-bzip2", "application/x-bzip"}),
}

# MIME type standing for the anchor itself, where there is one.
ANCHOR_IDENTIFIERS: Final[dict[Anchor, str]] = {
    Anchor.PLAIN_TEXT: PLAIN_TEXT,
    Anchor.RTF: "application/rtf",
    Anchor.PDF: "application/pdf",
    Anchor.ZIP: "application/zip",
    Anchor.GZIP: "application/gzip",
    Anchor.BZ2: "application/x-bzip2",
    Anchor.DATA: OCTET_STREAM,
}


@dataclass
class MimeDatabase:
    """Parsed shared-mime-info tables.

    Attributes:
        globs (dict[str, tuple[int, str]]): Extension → (weight, MIME type) of its best glob.
        extensions (dict[str, list[str]]): MIME type → its extensions, best glob first.
        parents (dict[str, set[str]]): MIME type → direct super types.
        aliases (dict[str, str]): Alias → canonical MIME type.
        xml_roots (list[Path]): ``mime`` directories holding per-type XML files.
    """

    globs: dict[str, tuple[int, str]] = field(default_factory=dict)
    extensions: dict[str, list[str]] = field(default_factory=dict)
    parents: dict[str, set[str]] = field(default_factory=dict)
    aliases: dict[str, str] = field(default_factory=dict)
    xml_roots: list[Path] = field(default_factory=list)

    def add_glob(self, weight: int, mime: str, ext: str) -> None:
        """Record that ``*.ext`` matches ``mime``; the heavier glob owns the extension."""
        best = self.globs.get(ext)
        if best is None or weight > best[0]:
            self.globs[ext] = (weight, mime)
        exts = self.extensions.setdefault(mime, [])
        if ext not in exts:
            exts.append(ext)

    def canonical(self, mime: str) -> str:
        """Resolve an alias to its canonical type."""
        return self.aliases.get(mime, mime)

    def lineage(self, mime: str) -> set[str]:
        """``mime`` and all of its super types, including the implicit ones."""
        seen: set[str] = set()
        todo = [self.canonical(mime)]
        while todo:
            current = todo.pop()
            if current in seen:
                continue
            seen.add(current)
            todo.extend(self.parents.get(current, ()))
        # Implicit super types defined by shared-mime-info
        if any(t.startswith("text/") for t in seen):
            seen.add(PLAIN_TEXT)
        seen.add(OCTET_STREAM)
        return seen


def _iter_lines(path: Path) -> Iterable[str]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return
    except OSError as e:
        logger.warning("Cannot read %s: %s", path, e)
        return
    for line in text.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            yield line


def _parse_glob_line(line: str, *, weighted: bool) -> tuple[int, str, str] | None:
    parts = line.split(":")
    if weighted:
        if len(parts) < 3:
            return None
        weight_raw, mime, pattern = parts[0], parts[1], parts[2]
        try:
            weight = int(weight_raw)
        except ValueError:
            return None
    else:
        if len(parts) < 2:
            return None
        weight, mime, pattern = DEFAULT_WEIGHT, parts[0], parts[1]
    if pattern == "__NOGLOBS__":
        return None
    match = _SIMPLE_GLOB.match(pattern)
    if not match:
        return None
    return weight, mime, match.group(1).lower()


def load_mime_database(data_dirs: Sequence[Path]) -> MimeDatabase:
    """Read the shared-mime-info database from ``data_dirs`` (highest precedence first).

    Falls back to the stdlib ``mimetypes`` table when no glob file is found.
    """
    db = MimeDatabase()
    found_globs = False
    for data_dir in data_dirs:
        mime_dir = data_dir / "mime"
        if not mime_dir.is_dir():
            continue
        db.xml_roots.append(mime_dir)

        globs2 = mime_dir / "globs2"
        weighted = globs2.is_file()
        glob_file = globs2 if weighted else mime_dir / "globs"
        for line in _iter_lines(glob_file):
            parsed = _parse_glob_line(line, weighted=weighted)
            if parsed is not None:
                found_globs = True
                db.add_glob(*parsed)

        for line in _iter_lines(mime_dir / "subclasses"):
            child, _, parent = line.partition(" ")
            if child and parent:
                db.parents.setdefault(child, set()).add(parent.strip())

        for line in _iter_lines(mime_dir / "aliases"):
            alias, _, canonical = line.partition(" ")
            if alias and canonical:
                db.aliases.setdefault(alias, canonical.strip())

    if not found_globs:
        logger.info("No shared-mime-info database found; using the mimetypes table")
        mimetypes.init()
        for suffix, mime in sorted(mimetypes.types_map.items()):
            db.add_glob(DEFAULT_WEIGHT, mime, normalize_extension(suffix))

    logger.debug(
        "MIME database: %d extensions, %d types, %d subclass entries",
        len(db.globs),
        len(db.extensions),
        len(db.parents),
    )
    return db


def read_mime_comment(xml_path: Path) -> str | None:
    """Return the untranslated ``<comment>`` of a per-type XML file, if any."""
    try:
        root = ET.parse(xml_path).getroot()
    except FileNotFoundError:
        return None
    except (OSError, ET.ParseError) as e:
        logger.debug("Cannot parse %s: %s", xml_path, e)
        return None
    for comment in root.iter(f"{_SMI_NS}comment"):
        if _XML_LANG not in comment.attrib and comment.text:
            return comment.text.strip()
    return None


class FreedesktopTypeMetadata:
    """`TypeMetadataService` over the shared-mime-info database.

    The database is read on first use. Safe to call from the worker and the
    owner thread concurrently.

    Args:
        data_dirs (Sequence[Path] | None): XDG data directories, highest
            precedence first. Defaults to ``$XDG_DATA_HOME`` + ``$XDG_DATA_DIRS``.
    """

    def __init__(self, data_dirs: Sequence[Path] | None = None) -> None:
        self._data_dirs: list[Path] = (
            list(data_dirs) if data_dirs is not None else [xdg_data_home(), *xdg_data_dirs()]
        )
        self._db: MimeDatabase | None = None
        self._descriptions: dict[str, str | None] = {}
        self._lock = threading.Lock()

    @property
    def database(self) -> MimeDatabase:
        """The parsed database (loaded on first access)."""
        with self._lock:
            if self._db is None:
                self._db = load_mime_database(self._data_dirs)
            return self._db

    def _description(self, mime: str) -> str | None:
        with self._lock:
            if mime in self._descriptions:
                return self._descriptions[mime]
        db = self.database
        description: str | None = None
        media, _, subtype = mime.partition("/")
        if subtype:
            for root in db.xml_roots:
                description = read_mime_comment(root / media / f"{subtype}.xml")
                if description:
                    break
        with self._lock:
            self._descriptions[mime] = description
        return description

    def _is_known(self, mime: str) -> bool:
        db = self.database
        return mime in db.extensions or mime in db.parents or self._description(mime) is not None

    def _os_type(self, mime: str) -> OSType:
        exts = tuple(self.database.extensions.get(mime, ()))
        return OSType(
            identifier=mime,
            extensions=exts,
            preferred_extension=exts[0] if exts else None,
            description=self._description(mime),
        )

    def type_for_extension(self, extension: str) -> OSType | None:
        best = self.database.globs.get(normalize_extension(extension))
        if best is None:
            return None
        return self._os_type(self.database.canonical(best[1]))

    def type_for_identifier(self, identifier: str) -> OSType | None:
        mime = self.database.canonical(identifier)
        if not self._is_known(mime):
            return None
        return self._os_type(mime)

    def anchor_type(self, anchor: Anchor) -> OSType | None:
        identifier = ANCHOR_IDENTIFIERS.get(anchor)
        if identifier is None:
            return None
        return self.type_for_identifier(identifier)

    def types_conforming_to(self, anchor: Anchor) -> list[OSType]:
        db = self.database
        return [
            self._os_type(mime)
            for mime in sorted(db.extensions)
            if self._conforms(mime, anchor)
        ]

    def conforms_to(self, os_type: OSType, anchor: Anchor) -> bool:
        return self._conforms(os_type.identifier, anchor)

    def _conforms(self, mime: str, anchor: Anchor) -> bool:
        if anchor is Anchor.DATA:
            return True
        lineage = self.database.lineage(mime)
        media = _ANCHOR_MEDIA.get(anchor)
        if media is not None:
            return any(t.partition("/")[0] == media for t in lineage)
        return not lineage.isdisjoint(_ANCHOR_TYPES.get(anchor, frozenset()))


Runner = Callable[..., "subprocess.CompletedProcess[str]"]


class FreedesktopHandlerService:
    """`DefaultHandlerService` over ``xdg-mime``, ``mimeapps.list`` and desktop files.

    Args:
        metadata (FreedesktopTypeMetadata | None): Maps probe paths to MIME types.
        data_dirs (Sequence[Path]): XDG data directories, highest precedence first.
        config_dirs (Sequence[Path]): XDG config directories, highest precedence
            first; the first one receives bindings written without ``xdg-mime``.
        xdg_mime (str | None): Path of the ``xdg-mime`` tool; ``None`` reads and
            writes ``mimeapps.list`` directly.
        runner (Runner): ``subprocess.run`` compatible callable.
    """

    def __init__(
        self,
        metadata: FreedesktopTypeMetadata | None = None,
        *,
        data_dirs: Sequence[Path],
        config_dirs: Sequence[Path],
        xdg_mime: str | None = None,
        runner: Runner = subprocess.run,
    ) -> None:
        self._metadata = metadata
        self._data_dirs = list(data_dirs)
        self._config_dirs = list(config_dirs)
        self._xdg_mime = xdg_mime
        self._runner = runner

    # ------------------------------------------------------------ xdg-mime

    def _run_xdg_mime(self, *args: str) -> subprocess.CompletedProcess[str] | None:
        if self._xdg_mime is None:
            return None
        cmd = [self._xdg_mime, *args]
        try:
            return self._runner(cmd, capture_output=True, text=True, timeout=SUBPROCESS_TIMEOUT)
        except FileNotFoundError:
            logger.warning("%s not found; falling back to mimeapps.list", self._xdg_mime)
            self._xdg_mime = None
            return None
        except subprocess.TimeoutExpired:
            logger.warning("%s timed out", " ".join(cmd))
            return None

    # ------------------------------------------------------- mimeapps.list

    def _mimeapps_files(self) -> list[Path]:
        files = [d / MIMEAPPS_LIST for d in self._config_dirs]
        for data_dir in self._data_dirs:
            files.append(data_dir / "applications" / MIMEAPPS_LIST)
            files.append(data_dir / "applications" / LEGACY_DEFAULTS_LIST)
        return files

    @staticmethod
    def _new_parser() -> configparser.ConfigParser:
        parser = configparser.ConfigParser(interpolation=None, strict=False, delimiters=("=",))
        parser.optionxform = str  # type: ignore[assignment]
        return parser

    def _read_mimeapps(self, path: Path) -> configparser.ConfigParser | None:
        if not path.is_file():
            return None
        parser = self._new_parser()
        try:
            parser.read(path, encoding="utf-8")
        except (OSError, configparser.Error) as e:
            logger.warning("Cannot parse %s: %s", path, e)
            return None
        return parser

    def _lookup_group(self, group: str, mime: str) -> str | None:
        for path in self._mimeapps_files():
            parser = self._read_mimeapps(path)
            if parser is None or not parser.has_option(group, mime):
                continue
            for entry in parser.get(group, mime).split(";"):
                entry = entry.strip()
                if entry:
                    return entry
        return None

    def _write_user_default(self, mime: str, desktop_id: str) -> None:
        if not self._config_dirs:
            raise BindingError(mime, desktop_id, "no writable config directory")
        path = self._config_dirs[0] / MIMEAPPS_LIST
        parser = self._read_mimeapps(path) or self._new_parser()
        if not parser.has_section(DEFAULT_APPS_GROUP):
            parser.add_section(DEFAULT_APPS_GROUP)
        parser.set(DEFAULT_APPS_GROUP, mime, f"{desktop_id};")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as fh:
                parser.write(fh, space_around_delimiters=False)
        except OSError as e:
            raise BindingError(mime, desktop_id, str(e)) from e
        logger.debug("Wrote %s=%s to %s", mime, desktop_id, path)

    # ------------------------------------------------------------ service

    def default_application_for_type(self, identifier: str) -> Path | None:
        result = self._run_xdg_mime("query", "default", identifier)
        if result is not None and result.returncode == 0:
            desktop_id = result.stdout.strip()
            return self.application_for_identity(desktop_id) if desktop_id else None
        role = self.default_role_handler(identifier)
        return self.application_for_identity(role) if role else None

    def application_to_open(self, path: Path) -> Path | None:
        if self._metadata is None:
            return None
        os_type = self._metadata.type_for_extension(path.suffix)
        if os_type is None:
            return None
        return self.default_application_for_type(os_type.identifier)

    def default_role_handler(self, identifier: str) -> str | None:
        return self._lookup_group(DEFAULT_APPS_GROUP, identifier) or self._lookup_group(
            ADDED_ASSOCIATIONS_GROUP, identifier
        )

    def application_for_identity(self, identity: str) -> Path | None:
        # Desktop file ids map "-" to sub directories: "kde-foo.desktop" may be kde/foo.desktop
        relative = [identity]
        if "-" in identity:
            relative.append(identity.replace("-", "/", 1))
        for data_dir in self._data_dirs:
            for rel in relative:
                candidate = data_dir / "applications" / rel
                if candidate.is_file():
                    return candidate
        return None

    def identity_for_application(self, location: Path) -> str | None:
        if location.suffix != ".desktop":
            return None
        for data_dir in self._data_dirs:
            try:
                rel = location.relative_to(data_dir / "applications")
            except ValueError:
                continue
            desktop_id = "-".join(rel.parts)
            if self.application_for_identity(desktop_id) is not None:
                return desktop_id
        if self.application_for_identity(location.name) is not None:
            return location.name
        return None

    def set_default_handler(self, identifier: str, identity: str) -> None:
        if self.application_for_identity(identity) is None:
            raise BindingError(identifier, identity, "no such desktop file")
        result = self._run_xdg_mime("default", identity, identifier)
        if result is None:
            self._write_user_default(identifier, identity)
        elif result.returncode != 0:
            reason = result.stderr.strip() or f"xdg-mime exited with {result.returncode}"
            raise BindingError(identifier, identity, reason)
        logger.debug("Bound %s to %s", identifier, identity)


def create_backend(config: Config) -> Backend:
    """Factory for the ``freedesktop`` backend, honoring the XDG environment."""
    data_dirs = [xdg_data_home(), *xdg_data_dirs()]
    config_dirs = [xdg_config_home(), *xdg_config_dirs()]
    metadata = FreedesktopTypeMetadata(data_dirs)
    handlers = FreedesktopHandlerService(
        metadata,
        data_dirs=data_dirs,
        config_dirs=config_dirs,
        xdg_mime=shutil.which("xdg-mime"),
    )
    return Backend(BACKEND_NAME, metadata, handlers)
