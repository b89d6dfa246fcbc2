# Overview: Tiered QR-code matching against a product catalog snapshot.

"""
Code Matcher - first-class product lookup by (possibly damaged) QR code

WHY: Product codes are not unique in practice and scanners garble them, so
a single equality lookup misses too often. Deterministic tiers keep the
result predictable: a stronger tier on ANY product beats a weaker tier on
an earlier product.

TIERS (first hit wins, catalog order within a tier):
- EXACT:      candidate == product code
- NORMALIZED: equal after uppercasing and stripping everything but A-Z/0-9
- PREFIX:     candidate contains the code's first 6 chars, or the code
              contains the candidate's first 6 chars (both >= 6 chars)

Products without a code are never matched. Nothing here touches the
database; callers pass a snapshot (list of Product rows or any objects with
a qr_code attribute).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Sequence


TIER_EXACT = "EXACT"
TIER_NORMALIZED = "NORMALIZED"
TIER_PREFIX = "PREFIX"

MATCH_TIERS = [TIER_EXACT, TIER_NORMALIZED, TIER_PREFIX]

PREFIX_LENGTH = 6

_NON_CODE_CHARS = re.compile(r"[^A-Z0-9]")


@dataclass(frozen=True)
class CodeMatch:
    product: Any
    tier: str

    @property
    def code(self) -> str:
        return self.product.qr_code


def normalize_code(value: str) -> str:
    """Uppercase, then drop everything that is not A-Z or 0-9."""
    return _NON_CODE_CHARS.sub("", value.upper())


def _coded(products: Iterable[Any]) -> list[Any]:
    return [p for p in products if getattr(p, "qr_code", None)]


def _exact(candidate: str, code: str) -> bool:
    return candidate == code


def _normalized(candidate: str, code: str) -> bool:
    normalized = normalize_code(candidate)
    return bool(normalized) and normalized == normalize_code(code)


def _prefix(candidate: str, code: str) -> bool:
    if len(candidate) < PREFIX_LENGTH or len(code) < PREFIX_LENGTH:
        return False
    return code[:PREFIX_LENGTH] in candidate or candidate[:PREFIX_LENGTH] in code


_TIER_TESTS = {
    TIER_EXACT: _exact,
    TIER_NORMALIZED: _normalized,
    TIER_PREFIX: _prefix,
}


def match_code(
    candidate: str | None,
    products: Sequence[Any],
    tiers: Sequence[str] = MATCH_TIERS,
) -> CodeMatch | None:
    """
    Find the best matching product for a candidate code.

    Returns a CodeMatch (product + tier) or None. An empty candidate never
    matches.
    """
    if not candidate:
        return None

    coded = _coded(products)
    for tier in tiers:
        test = _TIER_TESTS[tier]
        for product in coded:
            if test(candidate, product.qr_code):
                return CodeMatch(product=product, tier=tier)
    return None


def match_substring(candidate: str | None, products: Sequence[Any]) -> Any | None:
    """
    Case-insensitive containment in either direction.

    Last-resort lookup used by the scan pipeline for long codes.
    """
    if not candidate:
        return None
    needle = candidate.lower()
    for product in _coded(products):
        code = product.qr_code.lower()
        if needle in code or code in needle:
            return product
    return None
