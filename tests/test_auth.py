"""Tests for the /auth blueprint and the access-token gate."""
from datetime import timedelta

from conftest import auth_header, make_app
from models import storage

POST = {"title": "First Post", "content": "This is the first post content"}


class TestRegister:
    def test_register_returns_user_and_tokens(self, client):
        response = client.post("/auth/register", json={
            "username": "testuser", "email": "test@test.com", "password": "testpass",
        })
        assert response.status_code == 201
        body = response.get_json()
        assert body["user"]["username"] == "testuser"
        assert body["user"]["email"] == "test@test.com"
        assert "password" not in body["user"]
        assert body["access_token"]
        assert body["refresh_token"]

    def test_missing_fields(self, client):
        response = client.post("/auth/register", json={"email": "test@test.com"})
        assert response.status_code == 400
        body = response.get_json()
        assert body["error"] == "VALIDATION_ERROR"
        assert set(body["details"]) == {"username", "password"}

    def test_duplicate_email(self, client, user):
        response = client.post("/auth/register", json={
            "username": "someoneelse", "email": user.email, "password": "pw",
        })
        assert response.status_code == 400
        assert response.get_json()["error"] == "CONFLICT"
        assert response.get_json()["message"] == "User already exists"

    def test_duplicate_username(self, client, user):
        response = client.post("/auth/register", json={
            "username": user.username, "email": "fresh@test.com", "password": "pw",
        })
        assert response.status_code == 400
        assert response.get_json()["error"] == "CONFLICT"


class TestLogin:
    def test_login(self, client, user):
        response = client.post("/auth/login", json={"email": user.email, "password": user.password})
        assert response.status_code == 200
        body = response.get_json()
        assert body["user"]["id"] == user.id
        assert body["access_token"] and body["refresh_token"]

    def test_login_email_is_case_insensitive(self, client, user):
        response = client.post("/auth/login", json={"email": user.email.upper(), "password": user.password})
        assert response.status_code == 200

    def test_wrong_password(self, client, user):
        response = client.post("/auth/login", json={"email": user.email, "password": "wrongpassword"})
        assert response.status_code == 401

    def test_unknown_user(self, client):
        response = client.post("/auth/login", json={"email": "nonexistent@test.com", "password": "password"})
        assert response.status_code == 401
        assert response.get_json()["message"] == "Invalid credentials"

    def test_empty_body(self, client):
        assert client.post("/auth/login", json={}).status_code == 401

    def test_non_string_fields_are_invalid_credentials(self, client, user):
        response = client.post("/auth/login", json={"email": 5, "password": ["x"]})
        assert response.status_code == 401
        assert response.get_json()["message"] == "Invalid credentials"

    def test_non_object_body(self, client):
        assert client.post("/auth/login", json=["a", "b"]).status_code == 401


class TestAccessGate:
    def test_no_token(self, client):
        assert client.post("/posts", json=POST).status_code == 401

    def test_malformed_header(self, client):
        response = client.post("/posts", json=POST, headers={"Authorization": "InvalidFormat"})
        assert response.status_code == 401
        assert response.get_json()["error"] == "UNAUTHORIZED"

    def test_tampered_token(self, client, user):
        response = client.post("/posts", json=POST, headers=auth_header(user.access_token + "a"))
        assert response.status_code == 403
        assert response.get_json()["error"] == "FORBIDDEN"

    def test_refresh_token_is_rejected_as_access_token(self, client, user):
        response = client.post("/posts", json=POST, headers=auth_header(user.refresh_token))
        assert response.status_code == 403

    def test_valid_token(self, client, user):
        assert client.post("/posts", json=POST, headers=user.headers).status_code == 201

    def test_expired_token_then_refresh(self, tmp_path):
        app = make_app(tmp_path, JWT_ACCESS_EXPIRES=timedelta(seconds=0))
        try:
            client = app.test_client()
            tokens = client.post("/auth/register", json={
                "username": "shortlived", "email": "short@test.com", "password": "pw",
            }).get_json()

            response = client.post("/posts", json=POST, headers=auth_header(tokens["access_token"]))
            assert response.status_code == 403

            refreshed = client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
            assert refreshed.status_code == 200
            assert refreshed.get_json()["refresh_token"] != tokens["refresh_token"]
        finally:
            storage.drop_all()


class TestRefresh:
    def test_refresh_returns_new_pair(self, client, user):
        response = client.post("/auth/refresh", json={"refresh_token": user.refresh_token})
        assert response.status_code == 200
        body = response.get_json()
        assert body["access_token"]
        assert body["refresh_token"] != user.refresh_token

        retry = client.post("/posts", json=POST, headers=auth_header(body["access_token"]))
        assert retry.status_code == 201

    def test_double_use_fails(self, client, user):
        first = client.post("/auth/refresh", json={"refresh_token": user.refresh_token})
        assert first.status_code == 200

        second = client.post("/auth/refresh", json={"refresh_token": user.refresh_token})
        assert second.status_code == 403
        assert second.get_json()["message"] == "Invalid refresh token"

    def test_missing_token(self, client):
        response = client.post("/auth/refresh", json={})
        assert response.status_code == 401

    def test_non_object_body_counts_as_missing_token(self, client):
        response = client.post("/auth/refresh", json=["x"])
        assert response.status_code == 401
        assert response.get_json()["error"] == "UNAUTHORIZED"

    def test_invalid_token(self, client):
        response = client.post("/auth/refresh", json={"refresh_token": "invalid-token-12345"})
        assert response.status_code == 403

    def test_access_token_cannot_refresh(self, client, user):
        response = client.post("/auth/refresh", json={"refresh_token": user.access_token})
        assert response.status_code == 403


class TestLogout:
    def test_missing_token(self, client):
        response = client.post("/auth/logout", json={})
        assert response.status_code == 400
        assert response.get_json()["message"] == "Refresh token required"

    def test_non_object_body_counts_as_missing_token(self, client):
        response = client.post("/auth/logout", json="abc")
        assert response.status_code == 400
        assert response.get_json()["message"] == "Refresh token required"

    def test_logout(self, client, user):
        response = client.post("/auth/logout", json={"refresh_token": user.refresh_token})
        assert response.status_code == 200
        assert response.get_json()["message"] == "Logout successful"

    def test_refresh_after_logout_fails(self, client, user):
        client.post("/auth/logout", json={"refresh_token": user.refresh_token})
        response = client.post("/auth/refresh", json={"refresh_token": user.refresh_token})
        assert response.status_code == 403

    def test_logout_unknown_token_is_ok(self, client):
        response = client.post("/auth/logout", json={"refresh_token": "not-a-token"})
        assert response.status_code == 200

    def test_logout_keeps_other_sessions(self, client, user):
        login = client.post("/auth/login", json={"email": user.email, "password": user.password}).get_json()
        client.post("/auth/logout", json={"refresh_token": user.refresh_token})
        response = client.post("/auth/refresh", json={"refresh_token": login["refresh_token"]})
        assert response.status_code == 200
