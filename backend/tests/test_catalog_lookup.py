"""
Pure catalog helpers: category resolution and picker filters over snapshots.
"""

from prodreg.models import Category, Product
from prodreg.services.catalog_lookup import (
    ALL,
    filter_names,
    filter_products,
    resolve_category,
)


def test_resolve_category(catalog, categories):
    assert resolve_category(catalog[0], categories).name == "Smeermiddelen"
    assert resolve_category(catalog[2], categories).name == "Reinigers"


def test_missing_or_dangling_category_is_none(categories):
    assert resolve_category(Product(id=1, name="A"), categories) is None
    assert resolve_category(Product(id=2, name="B", category_id=99), categories) is None
    assert resolve_category(Product(id=3, name="C", category_id=1), []) is None


def test_filter_products_without_database(catalog):
    assert filter_products(catalog, category_id=ALL) == catalog
    assert [p.qr_code for p in filter_products(catalog, category_id="3")] == ["IFMK006"]
    assert [p.qr_code for p in filter_products(catalog, category_id=2, query="foam")] == ["IFMC005"]


def test_filter_products_skips_missing_codes_in_text_search():
    uncoded = Product(id=1, name="Kit", qr_code=None)
    coded = Product(id=2, name="Spray", qr_code="KIT-01")
    assert filter_products([uncoded, coded], query="kit-") == [coded]


def test_filter_names():
    assert filter_names(["Hal 1", "Kantoor"], "hal") == ["Hal 1"]
    assert filter_names([], "x") == []


def test_lookup_accepts_plain_category_rows():
    assert resolve_category(Product(id=1, name="A", category_id=5), [Category(id=5, name="Vijf")]).name == "Vijf"
