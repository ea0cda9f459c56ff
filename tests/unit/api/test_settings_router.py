"""Tests for the settings and editor bootstrap endpoints."""

from src.price_editor.core.security import verify_nonce
from src.price_editor.entities.settings import DEFAULT_COLUMNS, EditorSettingsRepository
from tests.fixtures.api import CUSTOMER, MANAGER


class TestSettingsEndpoints:
    def test_defaults_when_nothing_stored(self, api_client):
        response = api_client.get("/api/v1/settings", headers=MANAGER)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["start_category"] == "all"
        assert data["default_columns"] == DEFAULT_COLUMNS

    def test_save_with_notices(self, api_client, session):
        response = api_client.put(
            "/api/v1/settings",
            json={
                "start_category": "gloves",
                "default_columns": ["sku", "status"],
                "instructions": "<b>Be careful</b>",
            },
            headers=MANAGER,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["notices"] == ["Invalid category selected. Using default value."]
        assert data["settings"]["default_columns"] == ["sku", "status"]

        stored = EditorSettingsRepository(session).get()
        assert stored.instructions == "Be careful"
        assert stored.start_category == "all"

    def test_valid_category_is_saved(self, api_client):
        api_client.put("/api/v1/settings", json={"start_category": "hats"}, headers=MANAGER)

        response = api_client.get("/api/v1/settings", headers=MANAGER)
        assert response.json()["data"]["start_category"] == "hats"

    def test_requires_manage_capability(self, api_client):
        assert api_client.get("/api/v1/settings", headers=CUSTOMER).status_code == 403


class TestEditorContext:
    def test_bootstrap_payload(self, api_client, manager_user):
        response = api_client.get("/api/v1/editor/context", headers=MANAGER)

        assert response.status_code == 200
        data = response.json()["data"]
        assert verify_nonce(manager_user.id, data["nonce"])
        assert data["rest_base"] == "/api/v1"
        assert data["ajax_url"] == "/api/v1/ajax"
        assert data["settings"]["start_category"] == "all"
        assert "sku" in data["columns"]
        assert {f["name"] for f in data["fields"]} >= {"title", "regular_price"}
        assert [c["slug"] for c in data["categories"]] == ["shoes", "hats"]
        assert data["tax_classes"][0]["name"] == "Standard"
        assert data["page_length"] == 50
