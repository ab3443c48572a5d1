# topmark:header:start
#
#   project      : xType
#   file         : filtering.py
#   file_relpath : src/xtype/registry/filtering.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Pure catalog filtering (search text + category)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from xtype.filetypes.model import Category, TypeDescriptor


def matches_search(descriptor: TypeDescriptor, search_text: str) -> bool:
    """Case-insensitive substring match against description or any extension.

    An empty search text matches everything.
    """
    needle = search_text.casefold()
    if not needle:
        return True
    if needle in descriptor.description.casefold():
        return True
    return any(needle in ext.casefold() for ext in descriptor.extensions)


def filter_catalog(
    catalog: Iterable[TypeDescriptor],
    search_text: str,
    category: Category | None,
    classify: Callable[[TypeDescriptor], Category],
) -> list[TypeDescriptor]:
    """Return the entries of ``catalog`` passing the search and category filters.

    Args:
        catalog (Iterable[TypeDescriptor]): Entries to filter; order is preserved.
        search_text (str): Search text; empty matches everything.
        category (Category | None): Required category; ``None`` matches everything.
        classify (Callable[[TypeDescriptor], Category]): Category function.

    Returns:
        list[TypeDescriptor]: The matching entries.
    """
    return [
        d
        for d in catalog
        if matches_search(d, search_text) and (category is None or classify(d) == category)
    ]
