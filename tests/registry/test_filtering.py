# topmark:header:start
#
#   project      : xType
#   file         : test_filtering.py
#   file_relpath : tests/registry/test_filtering.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Tests for search and category filtering."""

from __future__ import annotations

import pytest

from xtype.filetypes.model import Category, TypeDescriptor
from xtype.registry.filtering import filter_catalog, matches_search


def _entry(type_id: str, description: str, *extensions: str) -> TypeDescriptor:
    return TypeDescriptor(
        id=type_id, description=description, extensions=extensions, type_identifier=type_id
    )


CATALOG = [
    _entry("public.jpeg", "JPEG image", "jpg", "jpeg"),
    _entry("public.mp3", "MP3 audio", "mp3"),
    _entry("public.zip-archive", "ZIP archive", "zip"),
]
CATEGORIES = {
    "public.jpeg": Category.IMAGE,
    "public.mp3": Category.AUDIO,
    "public.zip-archive": Category.ARCHIVE,
}


def _classify(d: TypeDescriptor) -> Category:
    return CATEGORIES[d.id]


@pytest.mark.parametrize(
    "needle, expected",
    [
        ("", True),
        ("jpeg", True),
        ("JPG", True),
        ("image", True),
        ("Imag", True),
        ("png", False),
        ("public", False),
    ],
)
def test_matches_search(needle: str, expected: bool) -> None:
    assert matches_search(CATALOG[0], needle) is expected


def test_no_filters_keep_everything_in_order() -> None:
    assert filter_catalog(CATALOG, "", None, _classify) == CATALOG


def test_search_and_category_combine() -> None:
    assert filter_catalog(CATALOG, "p", None, _classify) == CATALOG[:3]
    assert filter_catalog(CATALOG, "p", Category.AUDIO, _classify) == [CATALOG[1]]
    assert filter_catalog(CATALOG, "zip", Category.AUDIO, _classify) == []


def test_filtered_view_is_always_a_subset() -> None:
    for needle in ("", "a", "mp", "x", "zzz"):
        for category in (None, *Category):
            result = filter_catalog(CATALOG, needle, category, _classify)
            assert all(d in CATALOG for d in result)
            assert all(matches_search(d, needle) for d in result)
            assert category is None or all(_classify(d) is category for d in result)
