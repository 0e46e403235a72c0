"""
Tests for user profiles, health endpoints and error envelopes
"""

from uuid import uuid4


class TestUsers:

    def test_create_and_fetch(self, client):
        response = client.post("/v1/users", json={
            "email": "sam@example.com",
            "full_name": "Sam Rivera",
            "age": 15,
            "sport": "soccer",
            "experience_level": "intermediate",
        })

        assert response.status_code == 201
        user_id = response.json()["id"]

        fetched = client.get(f"/v1/users/{user_id}").json()
        assert fetched["email"] == "sam@example.com"
        assert fetched["age"] == 15

    def test_duplicate_email_is_409(self, client, test_user):
        response = client.post("/v1/users", json={"email": test_user.email})

        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"

    def test_missing_user_is_404(self, client):
        response = client.get(f"/v1/users/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    def test_age_out_of_range_is_422(self, client):
        assert client.post("/v1/users", json={"email": "kid@example.com", "age": 3}).status_code == 422


class TestHealth:

    def test_ping(self, client):
        assert client.get("/ping").status_code == 200

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
