"""End-to-end tests for the /api/v1/auth endpoints."""

from __future__ import annotations

import pytest

from sessionauth.services._shared.errors import GENERIC_AUTH_MESSAGE
from tests.factories.refresh_token import RefreshTokenFactory
from tests.factories.user import UserFactory
from tests.helpers.auth import AUTH, bearer, login


def _assert_generic_401(resp):
    assert resp.status_code == 401
    assert resp.mimetype == "application/problem+json"
    body = resp.get_json()
    assert body["detail"] == GENERIC_AUTH_MESSAGE
    assert body["code"] == "unauthorized"


class TestLogin:
    def test_login_by_email_and_username(self, client):
        user = UserFactory(email="alice@example.com", username="alice")

        by_email = login(client, "Alice@Example.com")
        by_username = login(client, "alice")

        for data in (by_email, by_username):
            assert data["token_type"] == "bearer"
            assert data["expires_in"] > 0
            assert data["user"]["id"] == user.id
            assert "password_hash" not in data["user"]
        assert by_email["refresh_token"] != by_username["refresh_token"]

    @pytest.mark.parametrize(
        ("identifier", "password"),
        [("nobody@example.com", "secret123"), ("bob@example.com", "wrong-pass1")],
    )
    def test_bad_credentials_are_indistinguishable(self, client, identifier, password):
        UserFactory(email="bob@example.com")

        resp = client.post(
            f"{AUTH}/login", json={"identifier": identifier, "password": password}
        )
        _assert_generic_401(resp)

    def test_disabled_account_gets_same_401(self, client):
        UserFactory(email="carol@example.com", enabled=False)

        resp = client.post(
            f"{AUTH}/login", json={"identifier": "carol@example.com", "password": "secret123"}
        )
        _assert_generic_401(resp)

    def test_missing_fields_are_422(self, client):
        resp = client.post(f"{AUTH}/login", json={"identifier": "x"})
        assert resp.status_code == 422
        assert "password" in resp.get_json()["details"]["errors"]


class TestRegister:
    def test_register_returns_tokens_and_creates_preferences(self, client, session):
        from sessionauth.models.notification_preferences import NotificationPreferences

        resp = client.post(
            f"{AUTH}/register",
            json={"email": "New@Example.com", "password": "abc12345", "username": "newbie"},
        )

        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert data["user"]["email"] == "new@example.com"
        assert data["user"]["is_admin"] is False
        assert session.get(NotificationPreferences, data["user"]["id"]) is not None

        me = client.get(f"{AUTH}/me", headers=bearer(data["access_token"]))
        assert me.get_json()["data"]["username"] == "newbie"

    def test_duplicate_email_is_409(self, client):
        UserFactory(email="dup@example.com")

        resp = client.post(
            f"{AUTH}/register", json={"email": "DUP@example.com", "password": "abc12345"}
        )
        assert resp.status_code == 409

    def test_weak_password_lists_every_violation(self, client):
        resp = client.post(f"{AUTH}/register", json={"email": "w@example.com", "password": "abc"})

        assert resp.status_code == 422
        violations = resp.get_json()["details"]["violations"]
        assert len(violations) == 2

    def test_malformed_email_is_422(self, client):
        resp = client.post(f"{AUTH}/register", json={"email": "nope", "password": "abc12345"})
        assert resp.status_code == 422


class TestRefreshAndLogout:
    def test_refresh_issues_access_token_without_rotation(self, client):
        UserFactory(email="dan@example.com")
        tokens = login(client, "dan@example.com")

        first = client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        second = client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})

        assert first.status_code == second.status_code == 200
        data = first.get_json()["data"]
        assert set(data) == {"access_token", "token_type", "expires_in"}
        me = client.get(f"{AUTH}/me", headers=bearer(data["access_token"]))
        assert me.status_code == 200

    def test_unknown_refresh_token_is_401(self, client):
        _assert_generic_401(client.post(f"{AUTH}/refresh", json={"refresh_token": "garbage"}))

    def test_logout_revokes_and_never_fails(self, client):
        UserFactory(email="erin@example.com")
        tokens = login(client, "erin@example.com")

        resp = client.post(f"{AUTH}/logout", json={"refresh_token": tokens["refresh_token"]})
        assert resp.status_code == 200
        assert client.post(f"{AUTH}/logout", json={"refresh_token": "garbage"}).status_code == 200
        assert client.post(f"{AUTH}/logout").status_code == 200

        _assert_generic_401(
            client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        )

    @pytest.mark.parametrize(
        "body",
        [{"refresh_token": 123}, {"refresh_token": None}, [1, 2], "just-a-string", {}],
    )
    def test_logout_ignores_malformed_bodies(self, client, body):
        resp = client.post(f"{AUTH}/logout", json=body)

        assert resp.status_code == 200
        assert resp.get_json() == {"data": None}

    def test_logout_ignores_non_json_payload(self, client):
        resp = client.post(f"{AUTH}/logout", data="{not json", content_type="application/json")

        assert resp.status_code == 200

    def test_logout_all_revokes_every_session(self, client):
        UserFactory(email="finn@example.com")
        first = login(client, "finn@example.com")
        second = login(client, "finn@example.com")

        resp = client.post(f"{AUTH}/logout-all", headers=bearer(first["access_token"]))
        assert resp.status_code == 200

        for tokens in (first, second):
            _assert_generic_401(
                client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
            )


class TestAuthenticatedEndpoints:
    def test_missing_and_malformed_bearer_are_generic_401(self, client):
        _assert_generic_401(client.get(f"{AUTH}/me"))
        _assert_generic_401(client.get(f"{AUTH}/me", headers=bearer("not-a-jwt")))

    def test_refresh_token_is_not_accepted_as_bearer(self, client):
        UserFactory(email="gia@example.com")
        tokens = login(client, "gia@example.com")

        resp = client.get(f"{AUTH}/me", headers=bearer(tokens["refresh_token"]))
        assert resp.status_code in (401, 422)

    def test_disabled_owner_loses_access_immediately(self, client, session):
        user = UserFactory(email="hal@example.com")
        tokens = login(client, "hal@example.com")

        user.enabled = False
        session.commit()

        _assert_generic_401(client.get(f"{AUTH}/me", headers=bearer(tokens["access_token"])))

    def test_change_password_forces_relogin(self, client):
        UserFactory(email="ivy@example.com")
        tokens = login(client, "ivy@example.com")
        headers = bearer(tokens["access_token"])

        wrong = client.post(
            f"{AUTH}/change-password",
            headers=headers,
            json={"current_password": "nope", "new_password": "fresh123"},
        )
        _assert_generic_401(wrong)

        ok = client.post(
            f"{AUTH}/change-password",
            headers=headers,
            json={"current_password": "secret123", "new_password": "fresh123"},
        )
        assert ok.status_code == 200
        _assert_generic_401(
            client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        )
        login(client, "ivy@example.com", "fresh123")

    def test_sessions_list_and_revoke_own_only(self, client):
        UserFactory(email="jo@example.com")
        foreign = RefreshTokenFactory()
        login(client, "jo@example.com")
        tokens = login(client, "jo@example.com")
        headers = bearer(tokens["access_token"])

        rows = client.get(f"{AUTH}/sessions", headers=headers).get_json()["data"]
        assert len(rows) == 2
        assert set(rows[0]) == {"token_id", "created_at", "expires_at"}

        resp = client.delete(f"{AUTH}/sessions/{foreign.id}", headers=headers)
        assert resp.status_code == 404

        resp = client.delete(f"{AUTH}/sessions/{rows[0]['token_id']}", headers=headers)
        assert resp.status_code == 200
        rows_after = client.get(f"{AUTH}/sessions", headers=headers).get_json()["data"]
        assert len(rows_after) == 1

    def test_validate_token(self, client):
        UserFactory(email="kim@example.com")
        tokens = login(client, "kim@example.com")

        def is_valid(token):
            resp = client.post(f"{AUTH}/validate-token", json={"token": token})
            return resp.get_json()["data"]["is_valid"]

        assert is_valid(tokens["access_token"]) is True
        assert is_valid(tokens["refresh_token"]) is False
        assert is_valid("garbage") is False


class TestAdminEndpoints:
    def test_non_admin_is_forbidden(self, client):
        UserFactory(email="lee@example.com")
        tokens = login(client, "lee@example.com")

        resp = client.post(f"{AUTH}/sessions/sweep", headers=bearer(tokens["access_token"]))
        assert resp.status_code == 403

    def test_admin_can_sweep_and_disable(self, client):
        from datetime import timedelta

        from sessionauth.models.base import utcnow

        UserFactory(email="root@example.com", is_admin=True)
        target = UserFactory(email="mo@example.com")
        target_tokens = login(client, "mo@example.com")
        RefreshTokenFactory(expires_at=utcnow() - timedelta(days=1))
        admin = bearer(login(client, "root@example.com")["access_token"])

        sweep = client.post(f"{AUTH}/sessions/sweep", headers=admin)
        assert sweep.status_code == 200
        assert sweep.get_json()["data"]["deleted"] >= 1

        disable = client.post(f"{AUTH}/users/{target.id}/disable", headers=admin)
        assert disable.status_code == 200
        _assert_generic_401(
            client.post(f"{AUTH}/refresh", json={"refresh_token": target_tokens["refresh_token"]})
        )

        missing = client.post(f"{AUTH}/users/999999/disable", headers=admin)
        assert missing.status_code == 404
