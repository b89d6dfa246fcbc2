import pytest

from prodreg.models import Category, Product
from prodreg.services.code_matcher import TIER_EXACT, TIER_NORMALIZED
from prodreg.services.layout_remap import KeyboardRemap, build_remap
from prodreg.services.scan_service import (
    MATCH_SUBSTRING,
    MODE_CATALOG_ENTRY,
    MODE_REGISTRATION,
    RAW_PREFIX,
    ScanError,
    resolve_scan,
)


def test_remapped_scan_resolves_exact(catalog, categories):
    resolution = resolve_scan("IFLSàà&", catalog, categories=categories)

    assert resolution.ok
    assert resolution.normalized == "IFLS001"
    assert resolution.product.name == "Interflon Metal Clean spray 500ml"
    assert resolution.matched_by == TIER_EXACT
    assert resolution.category.name == "Smeermiddelen"
    assert resolution.message == "Product found: Interflon Metal Clean spray 500ml"


def test_matched_code_becomes_canonical_code(catalog):
    resolution = resolve_scan("if-fl_ààé", catalog)

    assert resolution.matched_by == TIER_NORMALIZED
    assert resolution.normalized == "if-fl_002"
    assert resolution.code == "IFFL002"


def test_raw_text_fallback_when_remap_corrupts_a_valid_code():
    product = Product(id=1, name="Label printer", qr_code="ZK!&")

    resolution = resolve_scan("ZK!&", [product])

    assert resolution.normalized == "ZK81"
    assert resolution.product is product
    assert resolution.matched_by == RAW_PREFIX + TIER_EXACT


def test_substring_tier_for_long_cleaned_text():
    product = Product(id=1, name="Short code", qr_code="AB12")

    resolution = resolve_scan("ZZAB12ZZ", [product])

    assert resolution.product is product
    assert resolution.matched_by == MATCH_SUBSTRING


def test_substring_tier_skipped_for_short_cleaned_text():
    product = Product(id=1, name="Short code", qr_code="AB12")

    resolution = resolve_scan("ZAB12", [product])

    assert not resolution.ok
    assert resolution.product is None


def test_miss_reports_cleaned_and_raw_text(catalog):
    resolution = resolve_scan("XY&é", catalog)

    assert not resolution.ok
    assert resolution.code == "XY12"
    assert resolution.message == "No product found for QR code: XY12 (raw: XY&é)"
    assert resolution.to_dict()["product"] is None


@pytest.mark.parametrize("raw", ["", None])
def test_empty_scan_returns_nothing(catalog, raw):
    assert resolve_scan(raw, catalog) is None


def test_catalog_entry_mode_never_looks_up(catalog):
    resolution = resolve_scan("IFLSàà&", catalog, mode=MODE_CATALOG_ENTRY)

    assert resolution.ok
    assert resolution.product is None
    assert resolution.code == "IFLS001"
    assert resolution.message == "QR code scanned: IFLS001"


def test_catalog_entry_mode_with_unknown_code():
    resolution = resolve_scan("NEW&", [], mode=MODE_CATALOG_ENTRY)
    assert resolution.ok
    assert resolution.code == "NEW1"


def test_unknown_mode_raises(catalog):
    with pytest.raises(ScanError):
        resolve_scan("IFLS001", catalog, mode="inventory")


def test_pattern_fixes_run_after_remap():
    remapper = KeyboardRemap(table={"&": "1"}, pattern_fixes=(("X1", "_58"), ("_58Y", "_581533")))
    product = Product(id=1, name="Labelled", qr_code="IF_581533")

    resolution = resolve_scan("IFX&Y", [product], remapper=remapper)

    assert resolution.normalized == "IF_581533"
    assert resolution.matched_by == TIER_EXACT


def test_identity_layout_keeps_raw_text(catalog):
    resolution = resolve_scan("IFLS001", catalog, remapper=build_remap("none"), mode=MODE_REGISTRATION)
    assert resolution.matched_by == TIER_EXACT


def test_dangling_category_resolves_to_none(categories):
    product = Product(id=1, name="Orphan", qr_code="ORPHAN1", category_id=99)

    resolution = resolve_scan("ORPHAN1", [product], categories=categories)

    assert resolution.ok
    assert resolution.category is None
    assert resolution.to_dict()["category"] is None


def test_resolution_to_dict_shape(catalog, categories):
    data = resolve_scan("IFMKàà§", catalog, categories=categories).to_dict()
    assert data["ok"] is True
    assert data["mode"] == MODE_REGISTRATION
    assert data["product"]["qr_code"] == "IFMK006"
    assert data["category"]["name"] == "Onderhoud"
