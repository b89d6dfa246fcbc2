# backend/prodreg/services/catalog_service.py
"""
Catalog Service

Products, categories and the plain name lists (users, locations, purposes).

DANGLING CATEGORIES: deleting a category does not touch products. A product
may keep a category_id that no longer resolves (see catalog_lookup).
"""
from __future__ import annotations

import time
from typing import Any

from ..extensions import db
from ..models import Category, Product, User, Location, Purpose
from ..validation import ConflictError, ValidationError, clean_name
from .catalog_lookup import generate_qr_code

PRODUCT_MUTABLE_FIELDS = {"name", "qr_code", "category_id", "attachment_url", "attachment_name"}

REFERENCE_LISTS = {
    "users": User,
    "locations": Location,
    "purposes": Purpose,
}


class CatalogError(ValueError):
    """Raised for unknown reference lists."""


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)


def list_products() -> list[Product]:
    """Catalog snapshot in insertion order (the matcher relies on a stable order)."""
    return db.session.query(Product).order_by(Product.id.asc()).all()


def get_product(product_id: int) -> Product | None:
    return db.session.query(Product).filter_by(id=product_id).first()


def create_product(*, patch: dict) -> Product:
    if not patch.get("name"):
        raise ValidationError("name is required")
    product = Product()
    apply_product_patch(product, patch)
    db.session.add(product)
    db.session.commit()
    return product


def update_product(*, product_id: int, patch: dict) -> Product | None:
    product = get_product(product_id)
    if not product:
        return None
    apply_product_patch(product, patch)
    db.session.commit()
    return product


def delete_product(*, product_id: int) -> bool:
    product = get_product(product_id)
    if not product:
        return False
    db.session.delete(product)
    db.session.commit()
    return True


def assign_generated_qr_code(*, product_id: int) -> Product | None:
    """Replace the product's code with a freshly generated one."""
    product = get_product(product_id)
    if not product:
        return None
    now_ms = int(time.time() * 1000)
    product.qr_code = generate_qr_code(product.name, now_ms)
    db.session.commit()
    return product


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

def list_categories() -> list[Category]:
    return db.session.query(Category).order_by(Category.id.asc()).all()


def create_category(name: Any) -> Category:
    name = clean_name(name)
    if db.session.query(Category).filter_by(name=name).first():
        raise ConflictError(f"Category '{name}' already exists")
    category = Category(name=name)
    db.session.add(category)
    db.session.commit()
    return category


def update_category(*, category_id: int, name: Any) -> Category | None:
    category = db.session.query(Category).filter_by(id=category_id).first()
    if not category:
        return None
    name = clean_name(name)
    clash = db.session.query(Category).filter(Category.name == name, Category.id != category_id).first()
    if clash:
        raise ConflictError(f"Category '{name}' already exists")
    category.name = name
    db.session.commit()
    return category


def delete_category(*, category_id: int) -> bool:
    """Delete a category. Products keep their (now dangling) category_id."""
    category = db.session.query(Category).filter_by(id=category_id).first()
    if not category:
        return False
    db.session.delete(category)
    db.session.commit()
    return True


# ---------------------------------------------------------------------------
# Users / locations / purposes
# ---------------------------------------------------------------------------

def _list_model(kind: str):
    model = REFERENCE_LISTS.get(kind)
    if model is None:
        raise CatalogError(f"Unknown list '{kind}'. Expected one of: {', '.join(REFERENCE_LISTS)}")
    return model


def list_names(kind: str) -> list[str]:
    model = _list_model(kind)
    return [row.name for row in db.session.query(model).order_by(model.id.asc()).all()]


def add_name(kind: str, name: Any):
    model = _list_model(kind)
    name = clean_name(name)
    if db.session.query(model).filter_by(name=name).first():
        raise ConflictError(f"'{name}' already exists in {kind}")
    row = model(name=name)
    db.session.add(row)
    db.session.commit()
    return row


def rename(kind: str, old_name: str, new_name: Any):
    """
    Rename an entry. Existing registrations keep the old name: they store
    denormalized strings.
    """
    model = _list_model(kind)
    row = db.session.query(model).filter_by(name=old_name).first()
    if not row:
        return None
    new_name = clean_name(new_name)
    if new_name != old_name and db.session.query(model).filter_by(name=new_name).first():
        raise ConflictError(f"'{new_name}' already exists in {kind}")
    row.name = new_name
    db.session.commit()
    return row


def remove_name(kind: str, name: str) -> bool:
    model = _list_model(kind)
    row = db.session.query(model).filter_by(name=name).first()
    if not row:
        return False
    db.session.delete(row)
    db.session.commit()
    return True
