"""Tests for auth endpoints and token resolution."""

from types import SimpleNamespace

from tests.conftest import OWNER_ID, CONTRACTOR_A_ID

NEW_USER_ID = "88888888-8888-8888-8888-888888888888"


def _auth_user(user_id, email="user@example.com", user_metadata=None, app_metadata=None):
    return SimpleNamespace(
        id=user_id,
        email=email,
        user_metadata=user_metadata or {},
        app_metadata=app_metadata or {},
        created_at="2024-01-01T00:00:00+00:00",
        updated_at=None,
    )


class TestRegisterAndLogin:
    def test_register_creates_profile(self, client, fake_db):
        fake_db.auth.sign_up.return_value = SimpleNamespace(user=_auth_user(NEW_USER_ID, "new@example.com"))

        response = client.post("/api/v1/auth/register", json={
            "email": "new@example.com",
            "password": "s3cret-pass",
            "user_type": "contractor",
        })

        assert response.status_code == 201
        body = response.json()
        assert body["user_id"] == NEW_USER_ID
        assert body["profile"]["user_type"] == "contractor"
        assert body["profile"]["full_name"] == "new"
        assert body["warning"] is None

    def test_register_duplicate_email(self, client, fake_db):
        fake_db.auth.sign_up.side_effect = Exception("User already registered")
        response = client.post("/api/v1/auth/register", json={
            "email": "dup@example.com", "password": "x", "user_type": "homeowner",
        })
        assert response.status_code == 400

    def test_register_profile_failure_returns_warning(self, client, fake_db):
        fake_db.auth.sign_up.return_value = SimpleNamespace(user=_auth_user(OWNER_ID, "owner@example.com"))
        # OWNER_ID already has a profile, so the insert hits the unique key
        response = client.post("/api/v1/auth/register", json={
            "email": "owner@example.com", "password": "x", "user_type": "homeowner",
        })
        assert response.status_code == 201
        assert response.json()["profile"] is None
        assert "profile creation failed" in response.json()["warning"]

    def test_login(self, client, fake_db):
        fake_db.auth.sign_in_with_password.return_value = SimpleNamespace(
            user=_auth_user(OWNER_ID, "owner@example.com"),
            session=SimpleNamespace(access_token="jwt-token"),
        )
        response = client.post("/api/v1/auth/login", json={"email": "owner@example.com", "password": "pw"})
        assert response.status_code == 200
        assert response.json()["access_token"] == "jwt-token"

    def test_login_invalid_credentials(self, client, fake_db):
        fake_db.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")
        response = client.post("/api/v1/auth/login", json={"email": "owner@example.com", "password": "bad"})
        assert response.status_code == 401


class TestCurrentUser:
    def test_me_includes_profile_and_permissions(self, client, fake_db):
        fake_db.auth.get_user.return_value = SimpleNamespace(user=_auth_user(CONTRACTOR_A_ID))
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer token-a"})

        assert response.status_code == 200
        body = response.json()
        assert body["profile"]["full_name"] == "Acme Builders"
        assert body["profile_created"] is False
        assert "bids:create" in body["permissions"]
        assert "projects:create" not in body["permissions"]

    def test_me_creates_missing_profile_from_metadata(self, client, fake_db):
        fake_db.auth.get_user.return_value = SimpleNamespace(
            user=_auth_user(NEW_USER_ID, user_metadata={"user_type": "homeowner", "full_name": "New Owner"})
        )
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer token-new"})

        assert response.json()["profile_created"] is True
        assert fake_db.rows("profiles", id=NEW_USER_ID)[0]["full_name"] == "New Owner"

    def test_token_lookups_are_cached(self, client, fake_db):
        fake_db.auth.get_user.return_value = SimpleNamespace(user=_auth_user(OWNER_ID))
        headers = {"Authorization": "Bearer same-token"}
        client.get("/api/v1/profiles/me", headers=headers)
        client.get("/api/v1/profiles/me", headers=headers)
        assert fake_db.auth.get_user.call_count == 1

    def test_invalid_token(self, client, fake_db):
        fake_db.auth.get_user.side_effect = Exception("invalid JWT: token is expired")
        response = client.get("/api/v1/profiles/me", headers={"Authorization": "Bearer stale"})
        assert response.status_code == 401

    def test_set_admin_requires_admin(self, client, fake_db):
        fake_db.auth.get_user.return_value = SimpleNamespace(user=_auth_user(OWNER_ID))
        response = client.post(
            "/api/v1/auth/set-admin",
            json={"user_id": CONTRACTOR_A_ID},
            headers={"Authorization": "Bearer owner-token"},
        )
        assert response.status_code == 403

    def test_set_admin_without_service_key(self, client, fake_db):
        fake_db.auth.get_user.return_value = SimpleNamespace(
            user=_auth_user(OWNER_ID, app_metadata={"type": "admin"})
        )
        response = client.post(
            "/api/v1/auth/set-admin",
            json={"user_id": CONTRACTOR_A_ID},
            headers={"Authorization": "Bearer admin-token"},
        )
        assert response.status_code == 500
