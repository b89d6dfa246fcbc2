# Overview: Flask API routes for the catalog and reference lists; parses input and returns JSON responses.

# backend/prodreg/routes/catalog.py
"""
Catalog routes

Products, categories and the users/locations/purposes name lists.

Deleting a category leaves products pointing at the old id; product
listings report such products with "category": null.
"""
from flask import Blueprint, request, jsonify, current_app

from ..models import Product
from ..services import catalog_lookup, catalog_service
from ..services.catalog_service import CatalogError
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_product,
    ValidationError,
    ConflictError,
)

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={"name", "qr_code", "category_id", "attachment_url", "attachment_name"},
    required_on_create={"name"},
)

catalog_bp = Blueprint("catalog", __name__, url_prefix="/api")


def _product_payload(product, categories) -> dict:
    data = product.to_dict()
    category = catalog_lookup.resolve_category(product, categories)
    data["category"] = category.to_dict() if category else None
    return data


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

@catalog_bp.get("/products")
def list_products_route():
    """
    List products.

    Query params:
    - category_id: int or "all" (optional)
    - query: str (optional) - substring of name or QR code
    """
    category_id = request.args.get("category_id", catalog_lookup.ALL)
    query = request.args.get("query", "")

    categories = catalog_service.list_categories()
    products = catalog_lookup.filter_products(
        catalog_service.list_products(),
        category_id=category_id,
        query=query,
    )
    return {
        "items": [_product_payload(p, categories) for p in products],
        "count": len(products),
    }


def _split_attachment_size(payload: dict):
    payload = dict(payload)
    size = payload.pop("attachment_size", None)
    if size is not None and (not isinstance(size, int) or isinstance(size, bool)):
        raise ValidationError("attachment_size must be an integer")
    return payload, size


@catalog_bp.post("/products")
def create_product_route():
    payload = request.get_json(silent=True) or {}

    try:
        payload, attachment_size = _split_attachment_size(payload)
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch, attachment_size)
        created = catalog_service.create_product(patch=patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    return _product_payload(created, catalog_service.list_categories()), 201


@catalog_bp.put("/products/<int:product_id>")
def update_product_route(product_id: int):
    payload = request.get_json(silent=True) or {}

    try:
        payload, attachment_size = _split_attachment_size(payload)
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
        enforce_rules_product(patch, attachment_size)
    except ValidationError as e:
        return {"error": str(e)}, 400

    updated = catalog_service.update_product(product_id=product_id, patch=patch)
    if not updated:
        return {"error": "Product not found"}, 404

    return _product_payload(updated, catalog_service.list_categories()), 200


@catalog_bp.delete("/products/<int:product_id>")
def delete_product_route(product_id: int):
    if not catalog_service.delete_product(product_id=product_id):
        return {"error": "Product not found"}, 404
    return {"ok": True}, 200


@catalog_bp.post("/products/<int:product_id>/generate-qr")
def generate_qr_route(product_id: int):
    try:
        product = catalog_service.assign_generated_qr_code(product_id=product_id)
    except Exception:
        current_app.logger.exception("Failed to generate QR code")
        return jsonify({"error": "Internal server error"}), 500

    if not product:
        return {"error": "Product not found"}, 404
    return {
        "product": _product_payload(product, catalog_service.list_categories()),
        "message": f"QR code generated: {product.qr_code}",
    }, 200


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

@catalog_bp.get("/categories")
def list_categories_route():
    categories = catalog_service.list_categories()
    return {"items": [c.to_dict() for c in categories], "count": len(categories)}


@catalog_bp.post("/categories")
def create_category_route():
    data = request.get_json(silent=True) or {}
    try:
        category = catalog_service.create_category(data.get("name"))
    except ValidationError as e:
        return {"error": str(e)}, 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    return category.to_dict(), 201


@catalog_bp.put("/categories/<int:category_id>")
def update_category_route(category_id: int):
    data = request.get_json(silent=True) or {}
    try:
        category = catalog_service.update_category(category_id=category_id, name=data.get("name"))
    except ValidationError as e:
        return {"error": str(e)}, 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    if not category:
        return {"error": "Category not found"}, 404
    return category.to_dict(), 200


@catalog_bp.delete("/categories/<int:category_id>")
def delete_category_route(category_id: int):
    if not catalog_service.delete_category(category_id=category_id):
        return {"error": "Category not found"}, 404
    return {"ok": True}, 200


# ---------------------------------------------------------------------------
# Users / locations / purposes
# ---------------------------------------------------------------------------

@catalog_bp.get("/<any(users, locations, purposes):kind>")
def list_names_route(kind: str):
    names = catalog_lookup.filter_names(catalog_service.list_names(kind), request.args.get("query", ""))
    return {"items": names, "count": len(names)}


@catalog_bp.post("/<any(users, locations, purposes):kind>")
def add_name_route(kind: str):
    data = request.get_json(silent=True) or {}
    try:
        row = catalog_service.add_name(kind, data.get("name"))
    except (ValidationError, CatalogError) as e:
        return {"error": str(e)}, 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    return row.to_dict(), 201


@catalog_bp.put("/<any(users, locations, purposes):kind>/<path:name>")
def rename_route(kind: str, name: str):
    data = request.get_json(silent=True) or {}
    try:
        row = catalog_service.rename(kind, name, data.get("name"))
    except (ValidationError, CatalogError) as e:
        return {"error": str(e)}, 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    if not row:
        return {"error": "Not found"}, 404
    return row.to_dict(), 200


@catalog_bp.delete("/<any(users, locations, purposes):kind>/<path:name>")
def remove_name_route(kind: str, name: str):
    if not catalog_service.remove_name(kind, name):
        return {"error": "Not found"}, 404
    return {"ok": True}, 200
