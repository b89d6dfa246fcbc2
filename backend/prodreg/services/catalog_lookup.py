# Overview: Pure catalog helpers over product/category snapshots (no database access).

"""
Catalog Lookup

Shared by the scan pipeline and the catalog routes. Everything here works on
plain sequences of Product/Category rows (or look-alike objects).

DANGLING CATEGORIES: a product may keep a category_id that no longer
resolves; resolve_category() returns None for it and callers render
"no category".
"""
from __future__ import annotations

from typing import Any, Iterable, Sequence

ALL = "all"

GENERATED_CODE_NAME_LENGTH = 10
GENERATED_CODE_SUFFIX_LENGTH = 6


def resolve_category(product: Any, categories: Iterable[Any]) -> Any | None:
    category_id = getattr(product, "category_id", None)
    if category_id is None:
        return None
    for category in categories:
        if category.id == category_id:
            return category
    return None


def filter_products(
    products: Sequence[Any],
    *,
    category_id: Any = ALL,
    query: str = "",
) -> list[Any]:
    """
    Product picker filter: category ("all" = any) and case-insensitive
    substring over name or code.
    """
    needle = (query or "").lower()
    result = []
    for product in products:
        if category_id not in (None, "", ALL) and str(product.category_id) != str(category_id):
            continue
        if needle:
            in_name = needle in product.name.lower()
            in_code = bool(product.qr_code) and needle in product.qr_code.lower()
            if not (in_name or in_code):
                continue
        result.append(product)
    return result


def filter_names(names: Sequence[str], query: str = "") -> list[str]:
    if not query:
        return list(names)
    needle = query.lower()
    return [n for n in names if needle in n.lower()]


def generate_qr_code(name: str, now_ms: int) -> str:
    """
    Build a fresh product code: name without whitespace, first 10 chars,
    uppercased, then "_" and the last 6 digits of a millisecond timestamp.
    """
    prefix = "".join(name.split())[:GENERATED_CODE_NAME_LENGTH].upper()
    return f"{prefix}_{str(now_ms)[-GENERATED_CODE_SUFFIX_LENGTH:]}"

