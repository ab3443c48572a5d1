# topmark:header:start
#
#   project      : xType
#   file         : utils.py
#   file_relpath : src/xtype/cli/utils.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Rendering helpers shared by the CLI commands.

Click-free data shaping (payload builders, Markdown tables, extension
lists) lives here; printing goes through the console of each command.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from xtype.constants import VALUE_NOT_SET, XTYPE_VERSION
from xtype.registry.persistence import location_to_uri

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from xtype.filetypes.model import Category, TypeDescriptor


class OutputFormat(str, Enum):
    """Output format for CLI rendering.

    Members:
        DEFAULT: Human-friendly text; may include ANSI color if enabled.
        JSON: One JSON document.
        NDJSON: One JSON object per line.
        MARKDOWN: A GitHub-flavored Markdown table.
    """

    DEFAULT = "default"
    JSON = "json"
    NDJSON = "ndjson"
    MARKDOWN = "markdown"


def build_meta_payload() -> dict[str, str]:
    """Metadata attached to every machine-readable document."""
    return {"tool": "xtype", "version": XTYPE_VERSION}


def format_extensions(extensions: Sequence[str]) -> str:
    """Render extensions as ``.mp3 .mpga``."""
    return " ".join(f".{ext}" for ext in extensions)


def descriptor_payload(descriptor: TypeDescriptor, category: Category) -> dict[str, Any]:
    """Machine-readable view of one catalog entry."""
    location = descriptor.default_handler_location
    return {
        "id": descriptor.id,
        "description": descriptor.description,
        "extensions": list(descriptor.extensions),
        "category": category.value,
        "type_identifier": descriptor.type_identifier,
        "default_handler_name": descriptor.default_handler_name,
        "default_handler_location": location_to_uri(location) if location else None,
    }


def handler_label(descriptor: TypeDescriptor) -> str:
    """Name of the default application, or a placeholder."""
    return descriptor.default_handler_name or VALUE_NOT_SET


def render_markdown_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    *,
    align: Mapping[int, str] | None = None,
) -> str:
    """Render a GitHub-flavored Markdown table with padded columns.

    Args:
        headers (Sequence[str]): Column headers.
        rows (Sequence[Sequence[str]]): Rows, each as long as ``headers``.
        align (Mapping[int, str] | None): Column index to ``"left"`` (default),
            ``"right"`` or ``"center"``.

    Returns:
        str: The table, ending with a newline (empty if there are no headers).

    Raises:
        ValueError: If a row length differs from the number of headers.
    """
    if not headers:
        return ""
    ncols = len(headers)
    for r in rows:
        if len(r) != ncols:
            raise ValueError("All rows must have the same number of columns as headers")

    widths = [len(str(h)) for h in headers]
    for r in rows:
        for i, cell in enumerate(r):
            widths[i] = max(widths[i], len(str(cell)))

    def _sep_for(i: int) -> str:
        style = (align or {}).get(i, "left").lower()
        w = max(1, widths[i])
        if style == "right":
            return "-" * (w - 1) + ":" if w > 1 else ":"
        if style == "center":
            return ":" + ("-" * (w - 2) if w > 2 else "-") + ":"
        return "-" * w

    def _line(cells: Sequence[str]) -> str:
        return "| " + " | ".join(f"{str(c):<{widths[i]}}" for i, c in enumerate(cells)) + " |"

    lines = [_line(headers), "| " + " | ".join(_sep_for(i) for i in range(ncols)) + " |"]
    lines.extend(_line(r) for r in rows)
    return "\n".join(lines) + "\n"
