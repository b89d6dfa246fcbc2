# Overview: Keyboard-layout remapping for raw scanner text.

"""
Layout Remapper

WHY: Wireless QR scanners act as keyboards. When the scanner is configured
for a different layout than the workstation, every character on the digit
row arrives as its shifted/unshifted neighbour ("&" instead of "1", "à"
instead of "0"). Letters are identical on both layouts and pass through.

The tables below are data, not logic. Which table is active is a deployment
setting (SCAN_KEYBOARD_LAYOUT), and the pattern fixes can be overridden with
SCAN_PATTERN_FIXES.

NOT IDEMPOTENT: remapping text that was already correct corrupts every
character that happens to be a key in the table. Callers must remap the
raw scan exactly once and keep the raw text around for fallback lookups.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping


class LayoutError(ValueError):
    """Raised when an unknown keyboard layout is configured."""


# Belgian/French AZERTY digit row read as QWERTY.
AZERTY_TO_QWERTY: dict[str, str] = {
    "&": "1",
    "é": "2",
    '"': "3",
    "'": "4",
    "(": "5",
    "§": "6",
    "è": "7",
    "!": "8",
    "ç": "9",
    "à": "0",
    "°": "_",
}

# Literal fragments seen on printed labels that the table alone cannot fix.
AZERTY_PATTERN_FIXES: list[tuple[str, str]] = [
    ('°(!&(""', "_581533"),
    ("°(!&(", "_5815"),
]

LAYOUTS: dict[str, tuple[dict[str, str], list[tuple[str, str]]]] = {
    "azerty": (AZERTY_TO_QWERTY, AZERTY_PATTERN_FIXES),
    "none": ({}, []),
}


@dataclass(frozen=True)
class KeyboardRemap:
    table: Mapping[str, str] = field(default_factory=dict)
    pattern_fixes: tuple[tuple[str, str], ...] = ()

    def remap(self, text: str) -> str:
        """Translate every character through the table; unknown characters pass through."""
        return "".join(self.table.get(ch, ch) for ch in text)

    def apply_pattern_fixes(self, text: str) -> str:
        """
        Apply every fix whose fragment occurs in text, in list order.

        Each rule replaces the first occurrence of its fragment; later rules
        see the output of earlier ones.
        """
        for wrong, correct in self.pattern_fixes:
            if wrong and wrong in text:
                text = text.replace(wrong, correct, 1)
        return text

    def clean(self, text: str) -> str:
        return self.apply_pattern_fixes(self.remap(text))


def build_remap(
    layout: str = "azerty",
    pattern_fixes: Iterable[Iterable[str]] | None = None,
) -> KeyboardRemap:
    """
    Build a KeyboardRemap for a named layout.

    pattern_fixes, when given, replaces the layout's built-in list. It
    accepts any iterable of 2-item sequences (JSON config yields lists).
    """
    key = (layout or "none").strip().lower()
    if key not in LAYOUTS:
        raise LayoutError(
            f"Unknown keyboard layout '{layout}'. Expected one of: {', '.join(sorted(LAYOUTS))}"
        )
    table, default_fixes = LAYOUTS[key]

    if pattern_fixes is None:
        fixes = tuple(default_fixes)
    else:
        fixes = []
        for pair in pattern_fixes:
            pair = tuple(pair)
            if len(pair) != 2:
                raise LayoutError("Each pattern fix must be a [wrong, correct] pair")
            fixes.append((str(pair[0]), str(pair[1])))
        fixes = tuple(fixes)

    return KeyboardRemap(table=dict(table), pattern_fixes=fixes)


def remap_from_config(config: Mapping) -> KeyboardRemap:
    """Build the remapper from a Flask config mapping."""
    return build_remap(
        config.get("SCAN_KEYBOARD_LAYOUT", "azerty"),
        config.get("SCAN_PATTERN_FIXES"),
    )


DEFAULT_REMAP = build_remap("azerty")


def remap(text: str, remapper: KeyboardRemap = DEFAULT_REMAP) -> str:
    return remapper.remap(text)
