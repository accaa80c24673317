"""
餐品API集成测试
"""

from datetime import timedelta

import pytest

from .conftest import bearer


@pytest.fixture
def item_payload(clock):
    return {
        "name": "Fried Rice",
        "canteen_name": "West Canteen",
        "canteen_location": "Block C",
        "quantity_available": 4,
        "original_price": "9.00",
        "discounted_price": "4.50",
        "available_until": (clock.now + timedelta(hours=3)).isoformat(),
    }


class TestFoodItemsAPI:
    """餐品API测试"""

    def test_staff_creates_item(self, client, staff_headers, item_payload):
        response = client.post("/api/v1/food-items", headers=staff_headers, json=item_payload)

        assert response.status_code == 200
        item = response.json()["data"]
        assert item["name"] == "Fried Rice"
        assert item["is_active"] is True

        listed = client.get("/api/v1/food-items").json()["data"]
        assert [i["id"] for i in listed] == [item["id"]]
        assert listed[0]["creator"]["external_id"] == "staff-001"

    def test_student_cannot_create(self, client, student_headers, item_payload):
        response = client.post("/api/v1/food-items", headers=student_headers, json=item_payload)

        assert response.status_code == 403
        assert response.json()["error_code"] == "PERMISSION_DENIED"

    def test_anonymous_cannot_create(self, client, item_payload):
        assert client.post("/api/v1/food-items", json=item_payload).status_code == 401

    def test_admin_counts_as_staff(self, client, admin_headers, item_payload):
        assert client.post("/api/v1/food-items", headers=admin_headers, json=item_payload).status_code == 200

    def test_invalid_payload(self, client, staff_headers, item_payload):
        item_payload.pop("canteen_name")
        response = client.post("/api/v1/food-items", headers=staff_headers, json=item_payload)

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_zero_quantity_rejected(self, client, staff_headers, item_payload):
        item_payload["quantity_available"] = 0
        assert client.post("/api/v1/food-items", headers=staff_headers, json=item_payload).status_code == 400

    def test_get_missing_item(self, client):
        response = client.get("/api/v1/food-items/999")

        assert response.status_code == 404
        assert response.json()["error_code"] == "FOOD_ITEM_NOT_FOUND"

    def test_my_items(self, client, staff_headers, make_item, other_staff):
        mine = make_item()
        make_item(staff=other_staff)

        response = client.get("/api/v1/food-items/my", headers=staff_headers)

        assert [i["id"] for i in response.json()["data"]] == [mine.id]

    def test_owner_updates_item(self, client, staff_headers, make_item):
        item = make_item()

        response = client.put(f"/api/v1/food-items/{item.id}", headers=staff_headers,
                              json={"quantity_available": 10})

        assert response.status_code == 200
        assert response.json()["data"]["quantity_available"] == 10

    def test_non_owner_update_is_not_found(self, client, make_item, other_staff):
        item = make_item()

        response = client.put(f"/api/v1/food-items/{item.id}", headers=bearer(other_staff),
                              json={"name": "Hijacked"})

        assert response.status_code == 404

    def test_owner_deletes_item(self, client, staff_headers, make_item):
        item = make_item()

        assert client.delete(f"/api/v1/food-items/{item.id}", headers=staff_headers).status_code == 200
        assert client.get(f"/api/v1/food-items/{item.id}").status_code == 404

    def test_non_owner_delete_is_not_found(self, client, make_item, other_staff):
        item = make_item()

        assert client.delete(f"/api/v1/food-items/{item.id}", headers=bearer(other_staff)).status_code == 404
        assert client.get(f"/api/v1/food-items/{item.id}").status_code == 200
