"""
领取与捐赠API集成测试
"""

from .conftest import bearer


class TestClaimsAPI:
    """领取API测试"""

    def test_reserve_verify_complete_flow(self, client, student_headers, staff_headers, make_item):
        item = make_item(quantity=2, original="10.00", discounted="4.00")

        reserved = client.post("/api/v1/food-claims", headers=student_headers,
                               json={"food_item_id": item.id})
        assert reserved.status_code == 200
        claim = reserved.json()["data"]
        assert claim["status"] == "reserved"
        assert claim["food_item"]["quantity_available"] == 1

        verified = client.post("/api/v1/food-claims/verify", headers=staff_headers,
                               json={"claim_code": claim["claim_code"].lower()})
        assert verified.status_code == 200
        assert verified.json()["data"]["valid"] is True
        assert verified.json()["data"]["claim"]["user"]["external_id"] == "student-001"

        completed = client.post(f"/api/v1/food-claims/{claim['id']}/complete", headers=staff_headers)
        assert completed.status_code == 200
        assert completed.json()["data"]["status"] == "claimed"

        again = client.post(f"/api/v1/food-claims/{claim['id']}/complete", headers=staff_headers)
        assert again.status_code == 409
        assert again.json()["error_code"] == "CLAIM_WRONG_STATE"

        stats = client.get("/api/v1/stats").json()["data"]
        assert stats["total_meals_saved"] == 1
        assert stats["total_savings"] == 6.0

    def test_staff_cannot_reserve(self, client, staff_headers, make_item):
        response = client.post("/api/v1/food-claims", headers=staff_headers,
                               json={"food_item_id": make_item().id})
        assert response.status_code == 403

    def test_reserve_sold_out(self, client, student_headers, other_student, make_item):
        item = make_item(quantity=1)
        client.post("/api/v1/food-claims", headers=student_headers, json={"food_item_id": item.id})

        response = client.post("/api/v1/food-claims", headers=bearer(other_student),
                               json={"food_item_id": item.id})

        assert response.status_code == 409
        assert response.json()["error_code"] == "FOOD_ITEM_NOT_AVAILABLE"

    def test_verify_unknown_code(self, client, staff_headers):
        response = client.post("/api/v1/food-claims/verify", headers=staff_headers,
                               json={"claim_code": "AAAAAAA"})
        assert response.status_code == 404

    def test_student_cannot_verify(self, client, student_headers):
        response = client.post("/api/v1/food-claims/verify", headers=student_headers,
                               json={"claim_code": "AAAAAAA"})
        assert response.status_code == 403

    def test_verify_expired(self, client, claims, student_user, staff_headers, make_item, clock):
        claim = claims.reserve(student_user.id, make_item(hours=5).id)
        clock.advance(hours=3)

        response = client.post("/api/v1/food-claims/verify", headers=staff_headers,
                               json={"claim_code": claim.claim_code})

        assert response.status_code == 410
        assert response.json()["error_code"] == "CLAIM_EXPIRED"

    def test_complete_by_code(self, client, claims, student_user, staff_headers, make_item):
        claim = claims.reserve(student_user.id, make_item().id)

        response = client.put(f"/api/v1/food-claims/code/{claim.claim_code}/claim", headers=staff_headers)

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "claimed"

    def test_my_claims_and_cancel(self, client, student_headers, make_item):
        item = make_item(quantity=3)
        claim = client.post("/api/v1/food-claims", headers=student_headers,
                            json={"food_item_id": item.id, "quantity_claimed": 2}).json()["data"]

        mine = client.get("/api/v1/food-claims/my", headers=student_headers).json()["data"]
        assert [c["id"] for c in mine] == [claim["id"]]

        cancelled = client.post(f"/api/v1/food-claims/{claim['id']}/cancel", headers=student_headers)
        assert cancelled.status_code == 200
        assert cancelled.json()["data"]["food_item"]["quantity_available"] == 3

    def test_cancel_other_students_claim(self, client, claims, student_user, other_student, make_item):
        claim = claims.reserve(student_user.id, make_item().id)

        response = client.post(f"/api/v1/food-claims/{claim.id}/cancel", headers=bearer(other_student))

        assert response.status_code == 403

    def test_active_reservations(self, client, claims, student_user, staff_headers, student_headers, make_item):
        claim = claims.reserve(student_user.id, make_item().id)

        assert client.get("/api/v1/food-claims/active", headers=student_headers).status_code == 403
        active = client.get("/api/v1/food-claims/active", headers=staff_headers).json()["data"]
        assert [c["id"] for c in active] == [claim.id]

    def test_lookup_and_qr(self, client, claims, student_user, other_student, student_headers,
                           staff_headers, make_item):
        claim = claims.reserve(student_user.id, make_item().id)

        own = client.get(f"/api/v1/food-claims/code/{claim.claim_code}", headers=student_headers)
        assert own.status_code == 200
        assert own.json()["data"]["id"] == claim.id

        other = client.get(f"/api/v1/food-claims/code/{claim.claim_code}", headers=bearer(other_student))
        assert other.status_code == 404

        qr = client.get(f"/api/v1/food-claims/code/{claim.claim_code}/qr", headers=staff_headers)
        assert qr.status_code == 200
        assert qr.headers["content-type"] == "image/png"
        assert qr.content.startswith(b"\x89PNG")


class TestDonationsAPI:
    """捐赠API测试"""

    def test_donation_flow(self, client, staff_headers, make_item, clock):
        make_item(quantity=2, hours=1)
        make_item(quantity=3, hours=1)
        clock.advance(hours=2)

        transferred = client.post("/api/v1/donations/transfer-expired", headers=staff_headers)
        assert transferred.json()["data"]["transferred_count"] == 2
        again = client.post("/api/v1/donations/transfer-expired", headers=staff_headers)
        assert again.json()["data"]["transferred_count"] == 0

        donations = client.get("/api/v1/donations", headers=staff_headers).json()["data"]
        assert len(donations) == 2
        donation_id = donations[0]["id"]

        early = client.put(f"/api/v1/donations/{donation_id}/collect", headers=staff_headers)
        assert early.status_code == 409

        missing_phone = client.put(f"/api/v1/donations/{donation_id}/reserve", headers=staff_headers,
                                   json={"ngo_name": "Food Bank", "ngo_contact_person": "Bob"})
        assert missing_phone.status_code == 400

        reserved = client.put(f"/api/v1/donations/{donation_id}/reserve", headers=staff_headers, json={
            "ngo_name": "Food Bank", "ngo_contact_person": "Bob", "ngo_phone_number": "555-0100"
        })
        assert reserved.status_code == 200
        assert reserved.json()["data"]["status"] == "reserved_for_ngo"

        collected = client.put(f"/api/v1/donations/{donation_id}/collect", headers=staff_headers)
        assert collected.json()["data"]["status"] == "collected"

    def test_list_all_donations(self, client, staff_headers, make_item, other_staff, clock):
        make_item(hours=1, staff=other_staff)
        clock.advance(hours=2)
        client.post("/api/v1/donations/transfer-expired", headers=staff_headers)

        assert client.get("/api/v1/donations", headers=staff_headers).json()["data"] == []
        everything = client.get("/api/v1/donations", headers=staff_headers, params={"all": "true"})
        assert len(everything.json()["data"]) == 1

    def test_students_cannot_manage_donations(self, client, student_headers):
        assert client.post("/api/v1/donations/transfer-expired", headers=student_headers).status_code == 403
        assert client.get("/api/v1/donations", headers=student_headers).status_code == 403
