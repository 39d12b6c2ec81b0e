from uuid import uuid4

import pytest

from modules.warehouses.models import Warehouse

pytestmark = pytest.mark.integration

WAREHOUSES_URL = "/api/v1/warehouses/"


class TestWarehouseApi:
    def test_list(self, auth_client, warehouses):
        response = auth_client.get(WAREHOUSES_URL)
        assert response.status_code == 200
        assert [w["name"] for w in response.json()] == ["Far", "Near"]

    def test_retrieve(self, auth_client, near_warehouse):
        response = auth_client.get(f"{WAREHOUSES_URL}{near_warehouse.id}/")
        assert response.status_code == 200
        assert response.json()["stock"] == 5

    def test_retrieve_missing_404(self, auth_client):
        assert auth_client.get(f"{WAREHOUSES_URL}{uuid4()}/").status_code == 404

    def test_put_stock(self, auth_client, near_warehouse):
        response = auth_client.put(
            f"{WAREHOUSES_URL}{near_warehouse.id}/stock/", {"stock": 40}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["stock"] == 40
        near_warehouse.refresh_from_db()
        assert near_warehouse.stock == 40

    def test_put_negative_stock_400(self, auth_client, near_warehouse):
        response = auth_client.put(
            f"{WAREHOUSES_URL}{near_warehouse.id}/stock/", {"stock": -1}, format="json"
        )
        assert response.status_code == 400
        assert Warehouse.objects.get(pk=near_warehouse.pk).stock == 5

    def test_put_stock_missing_404(self, auth_client):
        response = auth_client.put(
            f"{WAREHOUSES_URL}{uuid4()}/stock/", {"stock": 1}, format="json"
        )
        assert response.status_code == 404

    def test_restock_makes_order_possible(self, auth_client, near_warehouse):
        payload = {"quantity": 8, "latitude": 0.0, "longitude": 0.0}
        assert (
            auth_client.post("/api/v1/orders/", payload, format="json").status_code
            == 409
        )
        auth_client.put(
            f"{WAREHOUSES_URL}{near_warehouse.id}/stock/", {"stock": 8}, format="json"
        )
        assert (
            auth_client.post("/api/v1/orders/", payload, format="json").status_code
            == 201
        )
