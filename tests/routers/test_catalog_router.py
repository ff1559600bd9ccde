"""
Tests for catalog endpoints
"""

import pytest
from fastapi.testclient import TestClient

from storefront.main import app
from storefront.services.catalog_service import get_catalog_service


@pytest.fixture
def client(catalog_service):
    app.dependency_overrides[get_catalog_service] = lambda: catalog_service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestProducts:

    def test_list_products(self, client):
        response = client.get("/api/catalog/products")

        assert response.status_code == 200
        data = response.json()
        assert data["product_count"] == 4
        garment = data["products"][0]
        assert garment["type"] == "garment"
        assert garment["editions"] == ["shemah_israel"]
        assert garment["models"] == ["modelo_1", "modelo_2"]

    def test_refresh_reloads(self, client, catalog_client):
        client.get("/api/catalog/products")
        response = client.post("/api/catalog/refresh")

        assert response.status_code == 200
        assert catalog_client.fetch_garments.await_count == 2

    def test_correlation_id_echoed(self, client):
        response = client.get("/api/catalog/products", headers={"x-correlation-id": "abc-123"})
        assert response.headers["x-correlation-id"] == "abc-123"


class TestBrowse:

    def test_empty_selection(self, client):
        response = client.post("/api/catalog/browse", json={})

        assert response.status_code == 200
        data = response.json()
        assert data["available_genders"] == ["masculino", "femenino"]
        assert data["available_types"] == []
        assert data["displayed_media"] == []

    def test_garment_cascade(self, client):
        response = client.post("/api/catalog/browse", json={
            "gender": "masculino",
            "product_type": "garment",
            "edition": "shemah_israel",
            "model": "modelo_2",
        })

        data = response.json()
        assert data["selection"]["model"] == "modelo_2"
        assert data["available_colors"] == ["azul"]
        assert [tile["variant_id"] for tile in data["displayed_media"]] == ["2"]

    def test_accessories_listed_as_products(self, client):
        response = client.post("/api/catalog/browse", json={"gender": "masculino", "product_type": "accessory"})

        data = response.json()
        assert data["displayed_media"] == []
        assert [p["display_name"] for p in data["displayed_products"]] == ["talith", "kipa"]

    def test_custom_edition(self, client):
        response = client.post("/api/catalog/browse", json={
            "gender": "masculino",
            "product_type": "garment",
            "edition": "Custom",
        })

        data = response.json()
        assert data["is_custom"] is True
        assert data["available_models"] == []
        assert data["custom_order_link"].startswith("https://wa.me/")

    def test_invalid_product_type_rejected(self, client):
        response = client.post("/api/catalog/browse", json={"gender": "masculino", "product_type": "poster"})
        assert response.status_code == 422
        assert response.json()["error"] == "Validation error"


class TestQuote:

    def test_quote(self, client):
        response = client.post("/api/catalog/quote", json={
            "product_id": "garment-shemah_israel",
            "variant_id": "1",
            "with_fringe_addon": True,
        })

        assert response.status_code == 200
        assert response.json()["unit_price"] == pytest.approx(41.4)

    def test_quote_unknown_product(self, client):
        response = client.post("/api/catalog/quote", json={"product_id": "garment-nope"})

        assert response.status_code == 404
        assert "not found" in response.json()["error"]


class TestAddonAndCustomOrder:

    def test_fringe_addon(self, client):
        response = client.get("/api/catalog/addon")
        assert response.json() == {"image": "/api/images?path=download%2Ftz.jpg", "fee": 6.0}

    def test_custom_order_link(self, client):
        response = client.get("/api/catalog/custom-order")
        assert response.json()["link"].startswith("https://wa.me/593983811117?text=")
