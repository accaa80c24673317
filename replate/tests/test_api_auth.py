"""
认证与用户API集成测试
"""

from .conftest import bearer


class TestAuthAPI:
    """认证API测试"""

    def test_login_returns_token(self, client):
        response = client.post("/api/v1/auth/login", json={
            "external_id": "sso-42", "role": "staff", "first_name": "Sam"
        })

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["data"]["token_type"] == "Bearer"
        assert data["data"]["user"]["role"] == "staff"

        me = client.get("/api/v1/auth/me", headers={
            "Authorization": f"Bearer {data['data']['token']}"
        })
        assert me.status_code == 200
        assert me.json()["data"]["external_id"] == "sso-42"

    def test_login_missing_external_id(self, client):
        response = client.post("/api/v1/auth/login", json={"role": "student"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_login_rejects_unknown_field(self, client):
        response = client.post("/api/v1/auth/login", json={"external_id": "x", "is_admin": True})
        assert response.status_code == 400

    def test_missing_token(self, client):
        response = client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()["error_code"] == "AUTHENTICATION_REQUIRED"

    def test_invalid_token(self, client):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_token_for_unknown_user(self, client, test_db, user_service):
        from ..schemas.user import LoginRequest

        ghost = user_service.upsert(LoginRequest(external_id="ghost"))
        headers = bearer(ghost)
        test_db.execute_query("DELETE FROM users WHERE id = ?", [ghost.id])

        assert client.get("/api/v1/auth/me", headers=headers).status_code == 401

    def test_demo_login(self, client):
        first = client.post("/api/v1/auth/demo-login/staff")
        second = client.post("/api/v1/auth/demo-login/staff")

        assert first.status_code == 200
        user = first.json()["data"]["user"]
        assert user["external_id"] == "demo-staff-main"
        assert user["role"] == "staff"
        assert second.json()["data"]["user"]["id"] == user["id"]

    def test_demo_login_rejects_admin(self, client):
        assert client.post("/api/v1/auth/demo-login/admin").status_code == 400


class TestUsersAPI:
    """用户资料API测试"""

    def test_get_and_update_profile(self, client, student_headers):
        response = client.put("/api/v1/users/me", headers=student_headers,
                              json={"phone_number": "555-0000"})

        assert response.status_code == 200
        assert response.json()["data"]["phone_number"] == "555-0000"

        profile = client.get("/api/v1/users/me", headers=student_headers).json()["data"]
        assert profile["phone_number"] == "555-0000"
        assert profile["role"] == "student"

    def test_role_not_editable(self, client, student_headers):
        response = client.put("/api/v1/users/me", headers=student_headers, json={"role": "admin"})
        assert response.status_code == 400


class TestMiscAPI:
    """健康检查、统计和日志API测试"""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_public_stats(self, client):
        response = client.get("/api/v1/stats")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total_meals_saved"] == 0
        assert data["total_savings"] == 0
        assert isinstance(data["total_savings"], float)

    def test_staff_stats_requires_staff(self, client, student_headers, staff_headers):
        assert client.get("/api/v1/stats/staff", headers=student_headers).status_code == 403
        response = client.get("/api/v1/stats/staff", headers=staff_headers)
        assert response.status_code == 200
        assert response.json()["data"]["items_listed"] == 0

    def test_logs(self, client, student_headers, admin_headers):
        mine = client.get("/api/v1/logs/my", headers=student_headers)
        assert mine.status_code == 200
        actions = [log["action"] for log in mine.json()["data"]["logs"]]
        assert "user_upsert" in actions

        assert client.get("/api/v1/logs/all", headers=student_headers).status_code == 403
        everything = client.get("/api/v1/logs/all", headers=admin_headers,
                                params={"action": "user_upsert"})
        assert everything.status_code == 200
        assert everything.json()["data"]["total"] >= 2

    def test_demo_seed(self, client):
        first = client.post("/api/v1/demo/seed")
        second = client.post("/api/v1/demo/seed")

        assert first.json()["data"]["created"] == 3
        assert second.json()["data"]["created"] == 0
        items = client.get("/api/v1/food-items").json()["data"]
        assert {i["name"] for i in items} == {
            "Margherita Pizza", "Chicken Caesar Salad", "Vegetarian Wrap"
        }
