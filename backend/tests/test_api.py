"""
HTTP API tests.

Verifies:
- Scan endpoint resolves, reports misses and rejects bad modes
- Registration history view, statistics and CSV transfer
- Catalog and reference list CRUD, including dangling categories
"""

import io

import pytest


CSV_HEADER = "Datum,Tijd,Gebruiker,Product,Locatie,Doel,QR Code"


# =============================================================================
# SYSTEM
# =============================================================================


def test_health(client, db_session):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json()["checks"]["database"]["status"] == "healthy"


# =============================================================================
# SCAN
# =============================================================================


class TestScan:

    def test_scan_hit(self, client, seeded):
        resp = client.post("/api/scan", json={"raw": "IFLSàà&"})
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["ok"] is True
        assert data["code"] == "IFLS001"
        assert data["product"]["name"] == "Interflon Metal Clean spray 500ml"
        assert data["category"]["name"] == "Smeermiddelen"

    def test_scan_miss_is_not_an_error(self, client, seeded):
        resp = client.post("/api/scan", json={"raw": "QQ&é", "mode": "registration"})
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["ok"] is False
        assert data["message"] == "No product found for QR code: QQ12 (raw: QQ&é)"

    def test_catalog_entry_mode(self, client, seeded):
        resp = client.post("/api/scan", json={"raw": "NEWàà&", "mode": "catalog-entry"})
        data = resp.get_json()
        assert data["ok"] is True
        assert data["code"] == "NEW001"
        assert data["product"] is None

    def test_empty_scan(self, client, db_session):
        resp = client.post("/api/scan", json={"raw": ""})
        assert resp.status_code == 204

    @pytest.mark.parametrize("body", [{"raw": "X", "mode": "inventory"}, {"raw": 12}])
    def test_bad_requests(self, client, db_session, body):
        resp = client.post("/api/scan", json=body)
        assert resp.status_code == 400
        assert "error" in resp.get_json()


# =============================================================================
# REGISTRATIONS
# =============================================================================


class TestRegistrationLog:

    def test_default_view(self, client, seeded):
        resp = client.get("/api/registrations")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["count"] == 13
        assert data["total"] == 13
        assert data["items"][0]["date"] == "2025-06-16"
        assert data["criteria"]["sort_order"] == "newest"

    def test_filtered_view(self, client, seeded):
        resp = client.get("/api/registrations", query_string={
            "user": "Tom Peckstadt",
            "location": "Warehouse Dematic groot boven",
            "sort_order": "oldest",
        })
        data = resp.get_json()
        assert data["count"] == 4
        assert data["total"] == 13
        assert [r["date"] for r in data["items"]] == ["2025-06-10", "2025-06-12", "2025-06-15", "2025-06-16"]

    def test_invalid_sort_key(self, client, seeded):
        resp = client.get("/api/registrations?sort_by=price")
        assert resp.status_code == 400

    def test_create(self, client, seeded):
        resp = client.post("/api/registrations", json={
            "user_name": "Jan Janssen",
            "product_name": "Interflon Fin Super",
            "location": "Kantoor 1.1",
            "purpose": "Presentatie",
        })
        assert resp.status_code == 201
        registration = resp.get_json()["registration"]
        assert registration["qr_code"] == "IFMK006"
        assert registration["timestamp"].startswith(registration["date"])
        assert len(registration["time"]) == 8

    def test_create_missing_fields(self, client, db_session):
        resp = client.post("/api/registrations", json={"user_name": "Jan"})
        assert resp.status_code == 400
        assert "Missing required fields" in resp.get_json()["error"]

    def test_delete(self, client, seeded):
        first = client.get("/api/registrations").get_json()["items"][0]
        assert client.delete(f"/api/registrations/{first['id']}").status_code == 200
        assert client.delete(f"/api/registrations/{first['id']}").status_code == 404

    def test_statistics_ignore_filters(self, client, seeded):
        resp = client.get("/api/registrations/statistics?user=Nele%20Herteleer")
        data = resp.get_json()
        assert data["total"] == 13
        assert data["most_active_user"] == {"name": "Tom Peckstadt", "count": 6}
        assert len(data["daily"]) == 7


# =============================================================================
# CSV
# =============================================================================


class TestCsvTransfer:

    def test_export_filtered_view(self, client, seeded):
        resp = client.get("/api/registrations/export?user=Nele%20Herteleer")
        assert resp.status_code == 200
        assert resp.mimetype == "text/csv"
        assert 'filename="product-registraties-' in resp.headers["Content-Disposition"]

        lines = resp.get_data(as_text=True).strip().split("\n")
        assert lines[0] == CSV_HEADER
        assert len(lines) == 2
        assert '"Nele Herteleer"' in lines[1]

    def test_export_empty_view(self, client, db_session):
        resp = client.get("/api/registrations/export")
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "No data to export"

    def test_import_file(self, client, db_session):
        content = "\n".join([
            CSV_HEADER,
            '"2025-06-15","10:00","Tom","Kit","Hal","Test","IFD003"',
            '"2025-06-15","11:00","","Kit","Hal","Test",""',
            '"2025-06-16","12:00:30","Nele","Lube","Hal","Demo",""',
        ])
        resp = client.post(
            "/api/registrations/import",
            data={"file": (io.BytesIO(content.encode("utf-8")), "log.csv")},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["message"] == "2 of 2 registrations imported"

        items = client.get("/api/registrations?sort_order=oldest").get_json()["items"]
        assert [(r["date"], r["time"]) for r in items] == [("2025-06-15", "10:00"), ("2025-06-16", "12:00:30")]
        assert items[0]["qr_code"] == "IFD003"
        assert items[1]["qr_code"] is None

    def test_import_round_trip(self, client, seeded):
        exported = client.get("/api/registrations/export").get_data(as_text=True)
        resp = client.post("/api/registrations/import", data=exported, content_type="text/csv")
        assert resp.get_json()["message"] == "13 of 13 registrations imported"
        assert client.get("/api/registrations").get_json()["total"] == 26

    def test_import_bad_header(self, client, db_session):
        resp = client.post("/api/registrations/import", data="a,b,c\n1,2,3\n", content_type="text/csv")
        assert resp.status_code == 400
        assert "Invalid CSV format" in resp.get_json()["error"]


# =============================================================================
# CATALOG
# =============================================================================


class TestCatalog:

    def test_list_products_with_filters(self, client, seeded):
        data = client.get("/api/products?query=ifls").get_json()
        assert data["count"] == 1
        assert data["items"][0]["category"]["name"] == "Smeermiddelen"

    def test_create_product(self, client, db_session):
        resp = client.post("/api/products", json={
            "name": "Interflon Degreaser",
            "qr_code": "IFDG007",
            "attachment_url": "https://example.invalid/sheet.pdf",
            "attachment_name": "sheet.pdf",
            "attachment_size": 1024,
        })
        assert resp.status_code == 201
        data = resp.get_json()
        assert data["qr_code"] == "IFDG007"
        assert data["category"] is None

    @pytest.mark.parametrize("body", [
        {"name": ""},
        {"qr_code": "X"},
        {"name": "X", "price": 3},
        {"name": "X", "attachment_url": "u", "attachment_name": "sheet.docx"},
        {"name": "X", "attachment_url": "u", "attachment_name": "big.pdf", "attachment_size": 11 * 1024 * 1024},
        {"name": "X", "category_id": "abc"},
        {"name": "X", "category_id": 1.5},
        {"name": "X", "category_id": True},
    ])
    def test_create_product_rejects(self, client, db_session, body):
        resp = client.post("/api/products", json=body)
        assert resp.status_code == 400

    def test_product_payload_is_coerced_and_has_no_lock_column(self, client, db_session):
        resp = client.post("/api/products", json={"name": "  Kit  ", "qr_code": "", "category_id": " 7 "})
        assert resp.status_code == 201
        data = resp.get_json()
        assert data["name"] == "Kit"
        assert data["qr_code"] is None
        assert data["category_id"] == 7
        assert "version_id" not in data

        resp = client.put(f"/api/products/{data['id']}", json={"name": "Kit XL"})
        assert resp.status_code == 200
        assert resp.get_json()["name"] == "Kit XL"
        assert "version_id" not in resp.get_json()

    def test_update_and_generate_code(self, client, db_session):
        product = client.post("/api/products", json={"name": "Fin Super"}).get_json()

        resp = client.put(f"/api/products/{product['id']}", json={"qr_code": "FIN001"})
        assert resp.get_json()["qr_code"] == "FIN001"

        resp = client.post(f"/api/products/{product['id']}/generate-qr")
        data = resp.get_json()
        assert data["product"]["qr_code"].startswith("FINSUPER_")
        assert data["message"] == f"QR code generated: {data['product']['qr_code']}"

    def test_missing_product(self, client, db_session):
        assert client.put("/api/products/404", json={"name": "X"}).status_code == 404
        assert client.delete("/api/products/404").status_code == 404
        assert client.post("/api/products/404/generate-qr").status_code == 404

    def test_deleted_category_renders_as_null(self, client, db_session):
        category = client.post("/api/categories", json={"name": "Tijdelijk"}).get_json()
        product = client.post("/api/products", json={"name": "A", "category_id": category["id"]}).get_json()
        assert product["category"]["name"] == "Tijdelijk"

        assert client.delete(f"/api/categories/{category['id']}").status_code == 200

        item = client.get("/api/products").get_json()["items"][0]
        assert item["category_id"] == category["id"]
        assert item["category"] is None

    def test_category_conflict(self, client, db_session):
        client.post("/api/categories", json={"name": "Reinigers"})
        resp = client.post("/api/categories", json={"name": "Reinigers"})
        assert resp.status_code == 409


class TestReferenceListsApi:

    def test_list_with_query(self, client, seeded):
        data = client.get("/api/users?query=peck").get_json()
        assert data["items"] == ["Tom Peckstadt", "Wim Peckstadt"]

    def test_add_rename_remove(self, client, db_session):
        assert client.post("/api/locations", json={"name": "Hal3"}).status_code == 201
        assert client.post("/api/locations", json={"name": "Hal3"}).status_code == 409

        resp = client.put("/api/locations/Hal3", json={"name": "Hal4"})
        assert resp.get_json()["name"] == "Hal4"

        assert client.delete("/api/locations/Hal4").status_code == 200
        assert client.delete("/api/locations/Hal4").status_code == 404

    def test_blank_name(self, client, db_session):
        assert client.post("/api/purposes", json={"name": " "}).status_code == 400
