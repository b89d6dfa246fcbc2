# Overview: Flask API route for QR scan resolution; parses input and returns JSON responses.

# backend/prodreg/routes/scan.py
"""
Scan API

POST /api/scan {"raw": "<scanner text>", "mode": "registration" | "catalog-entry"}

- 200 with ok=true:  product found (registration) or code cleaned (catalog-entry)
- 200 with ok=false: no product matched; message names cleaned and raw text
- 204: empty scan, nothing to report
"""

from flask import Blueprint, request, jsonify, current_app

from ..services import catalog_service
from ..services.layout_remap import remap_from_config
from ..services.scan_service import resolve_scan, ScanError, MODE_REGISTRATION


scan_bp = Blueprint("scan", __name__, url_prefix="/api/scan")


@scan_bp.post("")
def resolve_scan_route():
    data = request.get_json(silent=True) or {}
    raw = data.get("raw")
    mode = data.get("mode") or MODE_REGISTRATION

    if raw is not None and not isinstance(raw, str):
        return jsonify({"error": "raw must be a string"}), 400

    try:
        remapper = remap_from_config(current_app.config)
        resolution = resolve_scan(
            raw,
            catalog_service.list_products(),
            mode=mode,
            remapper=remapper,
            categories=catalog_service.list_categories(),
        )
    except ScanError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to resolve scan")
        return jsonify({"error": "Internal server error"}), 500

    if resolution is None:
        return "", 204

    if not resolution.ok:
        current_app.logger.info("Scan miss: normalized=%r raw=%r", resolution.normalized, resolution.raw)

    return jsonify(resolution.to_dict()), 200
