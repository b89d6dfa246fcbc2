# Overview: Flask API routes for the registration log; history view, statistics and CSV import/export.

"""
Registration routes

GET  /api/registrations             filtered + sorted history view
POST /api/registrations             register product usage now
DEL  /api/registrations/<id>
GET  /api/registrations/statistics  always over the full log
GET  /api/registrations/export      CSV of the filtered + sorted view
POST /api/registrations/import      CSV upload (multipart "file" or text body)

Filter query params: query, user, location, date_from, date_to,
sort_by (date|user|product|location|purpose), sort_order (newest|oldest).
"""

from flask import Blueprint, Response, request, jsonify, current_app

from ..services import registration_service
from ..services.csv_codec import CsvError, export_csv, export_filename, import_csv
from ..services.query_service import FilterCriteria, QueryError, compute_statistics, query_registrations
from ..validation import ValidationError


registrations_bp = Blueprint("registrations", __name__, url_prefix="/api/registrations")


@registrations_bp.get("")
def list_registrations_route():
    try:
        criteria = FilterCriteria.from_args(request.args)
    except QueryError as e:
        return jsonify({"error": str(e)}), 400

    snapshot = registration_service.list_registrations()
    view = query_registrations(snapshot, criteria)
    return jsonify({
        "items": [r.to_dict() for r in view],
        "count": len(view),
        "total": len(snapshot),
        "criteria": criteria.to_dict(),
    }), 200


@registrations_bp.post("")
def create_registration_route():
    payload = request.get_json(silent=True) or {}
    try:
        fields = registration_service.validate_registration_payload(payload)
        registration = registration_service.create_registration(**fields)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to save registration")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({
        "registration": registration.to_dict(),
        "message": "Product registered",
    }), 201


@registrations_bp.delete("/<int:registration_id>")
def delete_registration_route(registration_id: int):
    if not registration_service.delete_registration(registration_id):
        return jsonify({"error": "Registration not found"}), 404
    return jsonify({"ok": True}), 200


@registrations_bp.get("/statistics")
def statistics_route():
    stats = compute_statistics(registration_service.list_registrations())
    return jsonify(stats.to_dict()), 200


@registrations_bp.get("/export")
def export_route():
    try:
        criteria = FilterCriteria.from_args(request.args)
        view = query_registrations(registration_service.list_registrations(), criteria)
        content = export_csv(view)
    except (QueryError, CsvError) as e:
        return jsonify({"error": str(e)}), 400

    filename = export_filename(prefix=current_app.config.get("EXPORT_FILENAME_PREFIX", "product-registraties"))
    current_app.logger.info("Exported %d registrations to %s", len(view), filename)
    return Response(
        content,
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _read_upload() -> str:
    if "file" in request.files:
        return request.files["file"].stream.read().decode("utf-8")
    return request.get_data(as_text=True)


@registrations_bp.post("/import")
def import_route():
    try:
        text = _read_upload()
    except UnicodeDecodeError:
        return jsonify({"error": "CSV file must be UTF-8 encoded"}), 400

    try:
        summary = import_csv(text, registration_service.append_registration)
    except CsvError as e:
        return jsonify({"error": str(e)}), 400

    current_app.logger.info("CSV import: %s", summary.message)
    for error in summary.errors:
        current_app.logger.warning("CSV import row failed: %s", error)
    return jsonify(summary.to_dict()), 200
