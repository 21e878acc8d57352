"""API tests for the child profile endpoints."""

from fastapi.testclient import TestClient


class TestChildProfile:
    """Tests for /api/child-profile."""

    def test_no_profile_yet(self, test_app: TestClient, auth_headers) -> None:
        response = test_app.get("/api/child-profile", headers=auth_headers())

        assert response.status_code == 200
        assert response.json() is None

    def test_save_and_update(self, test_app: TestClient, auth_headers) -> None:
        created = test_app.post(
            "/api/child-profile",
            json={"child_name": "Maya", "date_of_birth": "2019-04-12"},
            headers=auth_headers(),
        )
        updated = test_app.post(
            "/api/child-profile", json={"child_name": "Maya Rose"}, headers=auth_headers()
        )
        fetched = test_app.get("/api/child-profile", headers=auth_headers())

        assert created.status_code == 200
        assert created.json()["child_name"] == "Maya"
        assert created.json()["date_of_birth"] == "2019-04-12"
        assert updated.json()["child_name"] == "Maya Rose"
        assert fetched.json()["child_name"] == "Maya Rose"
        assert fetched.json()["user_id"] == "user_1"

    def test_save_requires_name(self, test_app: TestClient, auth_headers) -> None:
        response = test_app.post("/api/child-profile", json={"child_name": ""}, headers=auth_headers())

        assert response.status_code == 400
        assert response.json()["detail"] == "Child name is required"

    def test_public_lookup_exposes_name_only(self, test_app: TestClient, auth_headers) -> None:
        test_app.post(
            "/api/child-profile",
            json={"child_name": "Maya", "date_of_birth": "2019-04-12"},
            headers=auth_headers(),
        )

        response = test_app.get("/api/child-profile/user_1")

        assert response.status_code == 200
        assert response.json() == {"child_name": "Maya"}

    def test_public_lookup_missing(self, test_app: TestClient) -> None:
        response = test_app.get("/api/child-profile/nobody")

        assert response.status_code == 200
        assert response.json() is None
