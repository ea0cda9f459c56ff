"""Tests for the REST product endpoints."""

from tests.fixtures.api import CUSTOMER, MANAGER, VIEWER


class TestGate:
    def test_anonymous_caller_gets_401(self, api_client):
        response = api_client.get("/api/v1/products")

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["data"] == {"status": 401, "code": "rest_not_logged_in"}
        assert body["request_id"] == response.headers["X-Request-ID"]

    def test_missing_manage_capability_gets_403(self, api_client):
        response = api_client.get("/api/v1/products", headers=CUSTOMER)

        assert response.status_code == 403
        assert response.json()["message"] == "You do not have permission to manage products."

    def test_rate_limit_returns_429_with_retry_after(self, api_client, rate_limiter):
        rate_limiter.requests = 2

        for _ in range(2):
            assert api_client.get("/api/v1/categories", headers=MANAGER).status_code == 200
        response = api_client.get("/api/v1/categories", headers=MANAGER)

        assert response.status_code == 429
        assert int(response.headers["Retry-After"]) > 0
        assert response.json()["data"]["code"] == "rest_rate_limit"

    def test_security_headers(self, api_client):
        response = api_client.get("/api/v1/categories", headers=MANAGER)

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"


class TestListProducts:
    def test_envelope_and_pagination_headers(self, api_client):
        response = api_client.get(
            "/api/v1/products", params={"per_page": 10}, headers=MANAGER
        )

        assert response.status_code == 200
        assert response.headers["X-WP-Total"] == "3"
        assert response.headers["X-WP-TotalPages"] == "1"
        body = response.json()
        assert body["success"] is True
        assert [p["id"] for p in body["data"]["products"]] == [3, 2, 1]

    def test_bad_params_fall_back_to_defaults(self, api_client):
        response = api_client.get(
            "/api/v1/products",
            params={"page": "abc", "per_page": "9999", "orderby": "rand"},
            headers=MANAGER,
        )

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["page"] == 1
        assert data["per_page"] == 100

    def test_filters(self, api_client):
        response = api_client.get(
            "/api/v1/products", params={"category": "hats"}, headers=MANAGER
        )
        assert [p["id"] for p in response.json()["data"]["products"]] == [2]


class TestUpdateProduct:
    def test_updates_field(self, api_client, product_store):
        response = api_client.post(
            "/api/v1/products/1",
            json={"field": "regular_price", "value": "29,90"},
            headers=MANAGER,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Regular price for product #1 changed: 19.99 → 29.90"
        assert body["data"]["old_value"] == "19.99"
        assert body["data"]["product"]["regular_price"] == "29.90"
        assert product_store.products[1].regular_price == "29.90"

    def test_put_and_patch_are_accepted(self, api_client):
        for method in ("put", "patch"):
            response = api_client.request(
                method.upper(),
                "/api/v1/products/1",
                json={"field": "stock_status", "value": "outofstock"},
                headers=MANAGER,
            )
            assert response.status_code == 200

    def test_invalid_value_is_400(self, api_client):
        response = api_client.post(
            "/api/v1/products/1",
            json={"field": "regular_price", "value": "-3"},
            headers=MANAGER,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Price cannot be negative"
        assert response.json()["data"]["code"] == "wpe_invalid_field"

    def test_unknown_field_is_400(self, api_client):
        response = api_client.post(
            "/api/v1/products/1", json={"field": "weight", "value": "1"}, headers=MANAGER
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Unknown field: weight"

    def test_missing_field_is_400(self, api_client):
        response = api_client.post("/api/v1/products/1", json={"value": "1"}, headers=MANAGER)

        assert response.status_code == 400
        assert response.json()["data"]["code"] == "invalid_argument"

    def test_missing_product_is_404(self, api_client):
        response = api_client.post(
            "/api/v1/products/404",
            json={"field": "regular_price", "value": "1"},
            headers=MANAGER,
        )

        assert response.status_code == 404
        assert response.json()["data"]["code"] == "wpe_product_not_found"

    def test_viewer_cannot_write(self, api_client, product_store):
        response = api_client.post(
            "/api/v1/products/1",
            json={"field": "regular_price", "value": "1"},
            headers=VIEWER,
        )

        assert response.status_code == 403
        assert product_store.saves == []

    def test_save_failure_is_400(self, api_client, product_store):
        product_store.reject_saves.add(1)
        response = api_client.post(
            "/api/v1/products/1",
            json={"field": "regular_price", "value": "1"},
            headers=MANAGER,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Failed to save product"


class TestBulkUpdate:
    def test_reports_counts(self, api_client, product_store):
        product_store.reject_saves.add(3)
        response = api_client.post(
            "/api/v1/products/bulk",
            json={"product_ids": [1, 2, 3], "field": "tax_status", "value": "shipping"},
            headers=MANAGER,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["updated"] == 2
        assert data["failed"] == 1
        assert data["errors"] == {"3": "Failed to save product"}

    def test_gate_names_first_failing_id(self, api_client, product_store):
        response = api_client.post(
            "/api/v1/products/bulk",
            json={"product_ids": [1, 77, 88], "field": "tax_status", "value": "none"},
            headers=MANAGER,
        )

        assert response.status_code == 403
        assert response.json()["message"] == "You do not have permission to edit product #77."
        assert product_store.saves == []

    def test_empty_selection_is_400(self, api_client):
        response = api_client.post(
            "/api/v1/products/bulk",
            json={"product_ids": [], "field": "tax_status", "value": "none"},
            headers=MANAGER,
        )
        assert response.status_code == 400


class TestLookups:
    def test_categories(self, api_client):
        response = api_client.get("/api/v1/categories", headers=MANAGER)

        assert response.status_code == 200
        assert [c["slug"] for c in response.json()["data"]] == ["shoes", "hats"]

    def test_tax_classes(self, api_client):
        response = api_client.get("/api/v1/tax-classes", headers=MANAGER)

        assert response.json()["data"][0] == {"slug": "", "name": "Standard"}

    def test_unknown_route_uses_envelope(self, api_client):
        response = api_client.get("/api/v1/nothing-here", headers=MANAGER)

        assert response.status_code == 404
        assert response.json()["success"] is False
