"""Tests for task assignment endpoints."""

import pytest

from conftest import ADMIN_HEADERS
from transcript_hub.models import Role


@pytest.fixture
def editor(as_role):
    return as_role(Role.ARABIC_EDITOR, "editor-1")


@pytest.fixture
def task(client, editor):
    resp = client.post(
        "/api/tasks",
        json={
            "description": "Review lesson one",
            "assignedToUserId": "editor-1",
            "taskLink": "/videos/1",
        },
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 200
    return resp.json()


class TestTasks:
    def test_create(self, task):
        assert task["status"] == "In-Progress"
        assert task["createdByUserId"] == "admin-1"
        assert task["assignedTo"]["id"] == "editor-1"
        assert task["createdBy"]["email"] == "admin@example.com"

    def test_create_for_unknown_user(self, client):
        resp = client.post(
            "/api/tasks", json={"description": "x", "assignedToUserId": "ghost"}, headers=ADMIN_HEADERS
        )
        assert resp.status_code == 400

    def test_non_admin_cannot_create(self, client, editor):
        resp = client.post(
            "/api/tasks", json={"description": "x", "assignedToUserId": "editor-1"}, headers=editor
        )
        assert resp.status_code == 403

    def test_assignee_sees_own_tasks_only(self, client, task, as_role):
        other = as_role(Role.TRANSLATIONS_EDITOR, "editor-2")
        client.post(
            "/api/tasks", json={"description": "Translate", "assignedToUserId": "editor-2"}, headers=ADMIN_HEADERS
        )
        resp = client.get("/api/tasks?userId=editor-2", headers=as_role(Role.ARABIC_EDITOR, "editor-1"))
        assert [t["id"] for t in resp.json()] == [task["id"]]
        assert len(client.get("/api/tasks", headers=other).json()) == 1

    def test_admin_filters(self, client, task):
        assert len(client.get("/api/tasks", headers=ADMIN_HEADERS).json()) == 1
        assert client.get("/api/tasks?userId=nobody", headers=ADMIN_HEADERS).json() == []
        assert client.get("/api/tasks?status=Complete", headers=ADMIN_HEADERS).json() == []

    def test_invalid_status_filter(self, client, task):
        assert client.get("/api/tasks?status=Done", headers=ADMIN_HEADERS).status_code == 400

    def test_assignee_updates_status_only(self, client, task, editor):
        resp = client.put(
            f"/api/tasks/{task['id']}",
            json={"status": "Complete", "description": "Changed"},
            headers=editor,
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "Complete"
        assert resp.json()["description"] == "Review lesson one"

    def test_other_user_denied(self, client, task, as_role):
        resp = client.put(
            f"/api/tasks/{task['id']}", json={"status": "Complete"}, headers=as_role(Role.VIEWER)
        )
        assert resp.status_code == 403
        assert resp.json()["message"] == "Access denied"

    def test_admin_updates_anything(self, client, task):
        resp = client.put(
            f"/api/tasks/{task['id']}",
            json={"description": "Review lesson two", "taskLink": None},
            headers=ADMIN_HEADERS,
        )
        assert resp.json()["description"] == "Review lesson two"
        assert resp.json()["taskLink"] is None

    def test_delete(self, client, task, editor):
        assert client.delete(f"/api/tasks/{task['id']}", headers=editor).status_code == 403
        resp = client.delete(f"/api/tasks/{task['id']}", headers=ADMIN_HEADERS)
        assert resp.json() == {"message": "Task deleted successfully"}
        assert client.put(f"/api/tasks/{task['id']}", json={}, headers=ADMIN_HEADERS).status_code == 404
