# Overview: QR scan resolution pipeline; turns one raw scan event into a product or a normalized code.

"""
QR Resolution Pipeline

One scan event in, one ScanResolution out (or None for empty input).

PIPELINE:
1. Remap raw text through the configured keyboard layout
2. Apply the ordered pattern fixes
3. Code matcher on the cleaned text (EXACT > NORMALIZED > PREFIX)
4. Code matcher on the ORIGINAL raw text (the scanner layout may have been
   right after all, and remapping corrupted a valid code)
5. Case-insensitive substring containment, only for cleaned text longer
   than 5 characters
6. Miss: report the cleaned text plus the raw text

MODES (caller-supplied, never inferred):
- registration:  look the code up; a hit selects the product
- catalog-entry: no lookup; the cleaned text becomes the product's code

A miss is an outcome, not an exception. Only an unknown mode raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from .code_matcher import match_code, match_substring
from .layout_remap import DEFAULT_REMAP, KeyboardRemap
from .catalog_lookup import resolve_category


MODE_REGISTRATION = "registration"
MODE_CATALOG_ENTRY = "catalog-entry"

SCAN_MODES = [MODE_REGISTRATION, MODE_CATALOG_ENTRY]

MATCH_SUBSTRING = "SUBSTRING"
RAW_PREFIX = "RAW_"

SUBSTRING_MIN_LENGTH = 6


class ScanError(ValueError):
    """Raised for invalid scan requests (not for unmatched codes)."""


@dataclass(frozen=True)
class ScanResolution:
    mode: str
    raw: str
    normalized: str
    code: str
    product: Any = None
    category: Any = None
    matched_by: str | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        if self.mode == MODE_CATALOG_ENTRY:
            return True
        return self.product is not None

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "mode": self.mode,
            "raw": self.raw,
            "normalized": self.normalized,
            "code": self.code,
            "matched_by": self.matched_by,
            "product": self.product.to_dict() if self.product is not None else None,
            "category": self.category.to_dict() if self.category is not None else None,
            "message": self.message,
        }


def _lookup(cleaned: str, raw: str, products: Sequence[Any]) -> tuple[Any, str | None]:
    hit = match_code(cleaned, products)
    if hit:
        return hit.product, hit.tier

    hit = match_code(raw, products)
    if hit:
        return hit.product, RAW_PREFIX + hit.tier

    if len(cleaned) >= SUBSTRING_MIN_LENGTH:
        product = match_substring(cleaned, products)
        if product is not None:
            return product, MATCH_SUBSTRING

    return None, None


def resolve_scan(
    raw: str | None,
    products: Sequence[Any] = (),
    *,
    mode: str = MODE_REGISTRATION,
    remapper: KeyboardRemap = DEFAULT_REMAP,
    categories: Sequence[Any] = (),
) -> ScanResolution | None:
    """
    Resolve one scan event.

    Returns None for empty/missing input (nothing to report).

    Raises:
        ScanError: unknown mode
    """
    if mode not in SCAN_MODES:
        raise ScanError(f"mode must be one of: {', '.join(SCAN_MODES)}")
    if not raw:
        return None

    cleaned = remapper.clean(raw)

    if mode == MODE_CATALOG_ENTRY:
        return ScanResolution(
            mode=mode,
            raw=raw,
            normalized=cleaned,
            code=cleaned,
            message=f"QR code scanned: {cleaned}",
        )

    product, matched_by = _lookup(cleaned, raw, products)
    if product is None:
        return ScanResolution(
            mode=mode,
            raw=raw,
            normalized=cleaned,
            code=cleaned,
            message=f"No product found for QR code: {cleaned} (raw: {raw})",
        )

    return ScanResolution(
        mode=mode,
        raw=raw,
        normalized=cleaned,
        code=product.qr_code,
        product=product,
        category=resolve_category(product, categories),
        matched_by=matched_by,
        message=f"Product found: {product.name}",
    )
