# topmark:header:start
#
#   project      : xType
#   file         : persistence.py
#   file_relpath : src/xtype/registry/persistence.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Persisted catalog: one named JSON slot, read and written wholesale.

Document shape::

    {
      "meta": {"tool": "xtype", "schema": 1},
      "types": [
        {
          "id": "public.mp3",
          "description": "MP3 audio",
          "extensions": ["mp3"],
          "type_identifier": "public.mp3",
          "default_handler_name": "Music",
          "default_handler_location": "file:///System/Applications/Music.app"
        }
      ]
    }

Notes:
    * Handler fields are omitted when absent, never written as ``null``.
    * The application location is stored as a ``file://`` URI and parsed
      back into a `Path`. An unparsable location is treated as absent
      (and the handler name is dropped with it).
    * Writes go to a temporary file in the target directory followed by
      `os.replace`, so the slot always holds a complete snapshot.
    * Anything that does not match the shape raises `CatalogDecodeError`;
      the registry store treats that as corruption and rediscovers.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final
from urllib.parse import urlparse
from urllib.request import url2pathname

from xtype.config.logging import XtypeLogger, get_logger
from xtype.constants import STATE_SCHEMA_VERSION
from xtype.core.errors import CatalogDecodeError
from xtype.filetypes.model import TypeDescriptor

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

logger: XtypeLogger = get_logger(__name__)

KEY_META: Final[str] = "meta"
KEY_TOOL: Final[str] = "tool"
KEY_SCHEMA: Final[str] = "schema"
KEY_TYPES: Final[str] = "types"

KEY_ID: Final[str] = "id"
KEY_DESCRIPTION: Final[str] = "description"
KEY_EXTENSIONS: Final[str] = "extensions"
KEY_TYPE_IDENTIFIER: Final[str] = "type_identifier"
KEY_HANDLER_NAME: Final[str] = "default_handler_name"
KEY_HANDLER_LOCATION: Final[str] = "default_handler_location"


def location_to_uri(location: Path) -> str:
    """Encode an application location as a normalized ``file://`` URI."""
    return location.absolute().as_uri()


def location_from_uri(raw: str) -> Path | None:
    """Parse a stored application location; ``None`` if it cannot be parsed."""
    if not raw:
        return None
    try:
        parsed = urlparse(raw)
    except ValueError:
        return None
    if parsed.scheme == "file":
        if parsed.netloc not in ("", "localhost") or not parsed.path:
            return None
        return Path(url2pathname(parsed.path))
    if not parsed.scheme and raw.startswith("/"):
        return Path(raw)
    return None


def encode_descriptor(descriptor: TypeDescriptor) -> dict[str, Any]:
    """Return the JSON-ready mapping for one descriptor."""
    data: dict[str, Any] = {
        KEY_ID: descriptor.id,
        KEY_DESCRIPTION: descriptor.description,
        KEY_EXTENSIONS: list(descriptor.extensions),
        KEY_TYPE_IDENTIFIER: descriptor.type_identifier,
    }
    if descriptor.default_handler_name is not None:
        data[KEY_HANDLER_NAME] = descriptor.default_handler_name
    if descriptor.default_handler_location is not None:
        data[KEY_HANDLER_LOCATION] = location_to_uri(descriptor.default_handler_location)
    return data


def _require_str(item: dict[str, Any], key: str, index: int) -> str:
    value = item.get(key)
    if not isinstance(value, str) or not value:
        raise CatalogDecodeError(f"types[{index}].{key}: expected a non-empty string")
    return value


def decode_descriptor(item: object, index: int = 0) -> TypeDescriptor:
    """Decode one stored descriptor.

    Raises:
        CatalogDecodeError: If the entry does not have the expected shape.
    """
    if not isinstance(item, dict):
        raise CatalogDecodeError(f"types[{index}]: expected an object")
    data: dict[str, Any] = item

    extensions = data.get(KEY_EXTENSIONS)
    if (
        not isinstance(extensions, list)
        or not extensions
        or not all(isinstance(e, str) and e for e in extensions)
    ):
        raise CatalogDecodeError(f"types[{index}].{KEY_EXTENSIONS}: expected non-empty strings")

    name = data.get(KEY_HANDLER_NAME)
    if name is not None and not isinstance(name, str):
        raise CatalogDecodeError(f"types[{index}].{KEY_HANDLER_NAME}: expected a string")
    raw_location = data.get(KEY_HANDLER_LOCATION)
    if raw_location is not None and not isinstance(raw_location, str):
        raise CatalogDecodeError(f"types[{index}].{KEY_HANDLER_LOCATION}: expected a string")

    location = location_from_uri(raw_location) if raw_location is not None else None
    if location is None or not name:
        name, location = None, None

    return TypeDescriptor(
        id=_require_str(data, KEY_ID, index),
        description=_require_str(data, KEY_DESCRIPTION, index),
        extensions=tuple(extensions),
        type_identifier=_require_str(data, KEY_TYPE_IDENTIFIER, index),
        default_handler_name=name,
        default_handler_location=location,
    )


def encode_catalog(catalog: Iterable[TypeDescriptor]) -> str:
    """Serialize a catalog (order preserved) to JSON text."""
    document = {
        KEY_META: {KEY_TOOL: "xtype", KEY_SCHEMA: STATE_SCHEMA_VERSION},
        KEY_TYPES: [encode_descriptor(d) for d in catalog],
    }
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def decode_catalog(text: str) -> list[TypeDescriptor]:
    """Parse JSON text produced by `encode_catalog`.

    Raises:
        CatalogDecodeError: On invalid JSON, unknown schema or malformed entries.
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CatalogDecodeError(f"Invalid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise CatalogDecodeError("Expected a JSON object at top level")

    meta = document.get(KEY_META)
    if not isinstance(meta, dict) or meta.get(KEY_SCHEMA) != STATE_SCHEMA_VERSION:
        raise CatalogDecodeError(f"Unsupported catalog schema: {meta!r}")

    items = document.get(KEY_TYPES)
    if not isinstance(items, list):
        raise CatalogDecodeError(f"'{KEY_TYPES}' must be a list")

    try:
        return [decode_descriptor(item, index) for index, item in enumerate(items)]
    except ValueError as exc:  # invariant violations raised by TypeDescriptor
        raise CatalogDecodeError(str(exc)) from exc


class CatalogStateFile:
    """The single named slot holding the persisted catalog.

    Args:
        path (Path): Location of the JSON document.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r})"

    def exists(self) -> bool:
        """True if a persisted catalog is present."""
        return self.path.is_file()

    def read(self) -> list[TypeDescriptor] | None:
        """Return the persisted catalog, or ``None`` if the slot is empty.

        Raises:
            CatalogDecodeError: If the slot exists but cannot be read or decoded.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise CatalogDecodeError(f"Cannot read {self.path}: {exc}") from exc
        catalog = decode_catalog(text)
        logger.debug("Read %d file types from %s", len(catalog), self.path)
        return catalog

    def write(self, catalog: Sequence[TypeDescriptor]) -> None:
        """Atomically replace the slot with ``catalog``.

        Write failures are logged and swallowed: the in-memory catalog stays
        authoritative and the next successful write brings the slot up to date.
        """
        text = encode_catalog(catalog)
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(text)
            os.replace(tmp_name, self.path)
            tmp_name = None
            logger.debug("Persisted %d file types to %s", len(catalog), self.path)
        except OSError as exc:
            logger.warning("Cannot persist catalog to %s: %s", self.path, exc)
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

    def clear(self) -> None:
        """Delete the persisted catalog (no error if absent)."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Cannot delete %s: %s", self.path, exc)
