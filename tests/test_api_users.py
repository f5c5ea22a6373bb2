"""Tests for identity, roles and the dashboard."""

from conftest import ADMIN_HEADERS
from transcript_hub.models import Role


class TestSignedInUser:
    def test_anonymous(self, client):
        resp = client.get("/api/auth/user")
        assert resp.status_code == 401
        assert resp.json() == {"message": "Unauthorized"}

    def test_first_login_creates_viewer(self, client):
        resp = client.get(
            "/api/auth/user",
            headers={
                "X-User-Id": "u-42",
                "X-User-Email": "amina@example.com",
                "X-User-First-Name": "Amina",
            },
        )
        data = resp.json()
        assert data["id"] == "u-42"
        assert data["role"] == "viewer"
        assert data["firstName"] == "Amina"

    def test_admin_email_bootstraps_admin(self, client):
        resp = client.get("/api/auth/user", headers=ADMIN_HEADERS)
        assert resp.json()["role"] == "admin"

    def test_profile_refresh_keeps_role(self, client, as_role):
        as_role(Role.ARABIC_EDITOR, "u-7")
        resp = client.get("/api/auth/user", headers={"X-User-Id": "u-7", "X-User-Last-Name": "Haddad"})
        assert resp.json()["role"] == "arabic_transcripts_editor"
        assert resp.json()["lastName"] == "Haddad"


class TestUserAdmin:
    def test_list_users_admin_only(self, client, as_role):
        viewer = as_role(Role.VIEWER)
        assert client.get("/api/admin/users", headers=viewer).status_code == 403
        resp = client.get("/api/admin/users", headers=ADMIN_HEADERS)
        assert {u["id"] for u in resp.json()} == {"viewer", "admin-1"}

    def test_change_role(self, client, as_role):
        viewer = as_role(Role.VIEWER)
        resp = client.patch(
            "/api/admin/users/viewer/role",
            json={"role": "translations_editor"},
            headers=ADMIN_HEADERS,
        )
        assert resp.json()["role"] == "translations_editor"
        assert client.get("/api/auth/user", headers=viewer).json()["role"] == "translations_editor"

    def test_change_role_invalid(self, client, as_role):
        as_role(Role.VIEWER)
        resp = client.patch("/api/admin/users/viewer/role", json={"role": "owner"}, headers=ADMIN_HEADERS)
        assert resp.status_code == 400

    def test_change_role_unknown_user(self, client):
        resp = client.patch("/api/admin/users/ghost/role", json={"role": "admin"}, headers=ADMIN_HEADERS)
        assert resp.status_code == 404


class TestDashboard:
    def test_requires_sign_in(self, client):
        assert client.get("/api/dashboard/stats").status_code == 401

    def test_stats(self, client, video, as_role):
        resp = client.get("/api/dashboard/stats", headers=as_role(Role.VIEWER))
        assert resp.json() == {
            "totalVideos": 1,
            "totalTranscripts": 2,
            "totalLanguages": 2,
            "totalPlaylists": 0,
            "pendingIssues": 0,
            "openTasks": 0,
        }
