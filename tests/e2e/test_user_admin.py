"""End-to-end tests for the user administration endpoints."""

from provision.domain.value import Role
from tests.harness import create_api_fixture

api = create_api_fixture()


class TestUserAdminEndpoints:
    """Role, access, history and duplicate cleanup over HTTP."""

    def test_health(self, api):
        assert api.client.get("/health").json() == {"status": "ok"}

    def test_session_without_account_is_rejected(self, api):
        api.sign_in("admin@example.com")

        response = api.client.get("/users")

        assert response.status_code == 401

    def test_list_users(self, api):
        admin = api.seed_user("admin@example.com", Role.ADMIN)
        api.seed_user("p@example.org", Role.PILOT)
        api.sign_in("admin@example.com", admin)

        response = api.client.get("/users", params={"role": "pilot"})

        assert response.status_code == 200
        body = response.json()
        assert [u["email"] for u in body["users"]] == ["p@example.org"]
        assert body["role_stats"] == {"admin": 1, "client": 0, "pilot": 1}

    def test_change_role_and_read_history(self, api):
        # Arrange
        admin = api.seed_user("admin@example.com", Role.ADMIN)
        target = api.seed_user("c@example.org", Role.CLIENT)
        api.sign_in("admin@example.com", admin)

        # Act
        changed = api.client.patch(
            f"/users/{target.id}/role", json={"role": "pilot", "reason": "licensed"}
        )
        history = api.client.get(f"/users/{target.id}/history")

        # Assert
        assert changed.status_code == 200
        assert changed.json()["user"]["role"] == "pilot"
        [event] = history.json()["role_history"]
        assert event["role"] == "pilot"
        assert event["changed_by"] == "admin@example.com"
        assert event["reason"] == "licensed"

    def test_unknown_role_is_rejected(self, api):
        admin = api.seed_user("admin@example.com", Role.ADMIN)
        target = api.seed_user("c@example.org", Role.CLIENT)
        api.sign_in("admin@example.com", admin)

        response = api.client.patch(f"/users/{target.id}/role", json={"role": "wizard"})

        assert response.status_code == 422

    def test_deactivate_user(self, api):
        admin = api.seed_user("admin@example.com", Role.ADMIN)
        target = api.seed_user("c@example.org", Role.CLIENT, has_access=True)
        api.sign_in("admin@example.com", admin)

        response = api.client.patch(
            f"/users/{target.id}/access", json={"has_access": False}
        )

        assert response.status_code == 200
        assert response.json()["user"]["has_access"] is False
        assert response.json()["event"]["action"] == "deactivated"

    def test_admin_cannot_deactivate_self(self, api):
        admin = api.seed_user("admin@example.com", Role.ADMIN)
        api.sign_in("admin@example.com", admin)

        response = api.client.patch(
            f"/users/{admin.id}/access", json={"has_access": False}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "self_modification_denied"

    def test_missing_user_is_not_found(self, api):
        admin = api.seed_user("admin@example.com", Role.ADMIN)
        api.sign_in("admin@example.com", admin)

        response = api.client.patch(
            "/users/00000000-0000-0000-0000-000000000001/role", json={"role": "pilot"}
        )

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_cleanup_duplicates_without_duplicates(self, api):
        admin = api.seed_user("admin@example.com", Role.ADMIN)
        api.seed_user("one@example.org")
        api.sign_in("admin@example.com", admin)

        response = api.client.post(
            "/users/cleanup-duplicates", json={"email": "one@example.org"}
        )

        assert response.status_code == 200
        assert response.json()["changed"] is False
