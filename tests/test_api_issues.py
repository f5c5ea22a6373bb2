"""Tests for reported issue endpoints."""

import pytest

from conftest import ADMIN_HEADERS
from transcript_hub.api.deps import RateLimiter
from transcript_hub.errors import RateLimitError
from transcript_hub.models import Role


@pytest.fixture
def issue(client, video):
    resp = client.post(
        "/api/reported-issues",
        json={
            "videoId": video["id"],
            "segmentIndex": 2,
            "description": "Wrong word at 0:09",
            "contactEmail": "reader@example.com",
        },
    )
    assert resp.status_code == 200
    return resp.json()


class TestReportIssue:
    def test_anonymous_report(self, issue, video):
        assert issue["status"] == "Pending"
        assert issue["videoId"] == video["id"]
        assert issue["reportedByUserId"] is None

    def test_signed_in_reporter_recorded(self, client, video, as_role):
        resp = client.post(
            "/api/reported-issues",
            json={"videoId": video["id"], "description": "Typo"},
            headers=as_role(Role.VIEWER, "reader-1"),
        )
        assert resp.json()["reportedByUserId"] == "reader-1"

    def test_description_required(self, client):
        resp = client.post("/api/reported-issues", json={"description": ""})
        assert resp.status_code == 400

    def test_unknown_video(self, client):
        resp = client.post("/api/reported-issues", json={"videoId": 999, "description": "Typo"})
        assert resp.status_code == 400

    def test_rate_limited(self, client, app):
        app.state.report_limiter.limit = 2
        for _ in range(2):
            assert client.post("/api/reported-issues", json={"description": "Typo"}).status_code == 200
        resp = client.post("/api/reported-issues", json={"description": "Typo"})
        assert resp.status_code == 429
        assert "Rate limit exceeded" in resp.json()["message"]

        app.state.report_limiter.reset()
        assert client.post("/api/reported-issues", json={"description": "Typo"}).status_code == 200


class TestTriage:
    def test_list_admin_only(self, client, issue, as_role):
        assert client.get("/api/reported-issues").status_code == 401
        assert client.get("/api/reported-issues", headers=as_role(Role.ARABIC_EDITOR)).status_code == 403
        resp = client.get("/api/reported-issues", headers=ADMIN_HEADERS)
        assert [i["id"] for i in resp.json()] == [issue["id"]]
        assert resp.json()[0]["video"]["youtubeId"] == "dQw4w9WgXcQ"

    def test_resolve(self, client, issue):
        resp = client.put(
            f"/api/reported-issues/{issue['id']}",
            json={"status": "Complete", "adminNote": "Fixed in draft"},
            headers=ADMIN_HEADERS,
        )
        assert resp.json()["status"] == "Complete"
        assert resp.json()["adminNote"] == "Fixed in draft"
        stats = client.get("/api/dashboard/stats", headers=ADMIN_HEADERS).json()
        assert stats["pendingIssues"] == 0

    def test_get_and_delete(self, client, issue):
        assert client.get(f"/api/reported-issues/{issue['id']}", headers=ADMIN_HEADERS).status_code == 200
        resp = client.delete(f"/api/reported-issues/{issue['id']}", headers=ADMIN_HEADERS)
        assert resp.json() == {"message": "Issue deleted successfully"}
        assert client.get(f"/api/reported-issues/{issue['id']}", headers=ADMIN_HEADERS).status_code == 404

    def test_deleting_video_keeps_issue(self, client, issue, video):
        client.delete(f"/api/videos/{video['id']}", headers=ADMIN_HEADERS)
        resp = client.get(f"/api/reported-issues/{issue['id']}", headers=ADMIN_HEADERS)
        assert resp.json()["videoId"] is None


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestRateLimiter:
    def test_limit_per_client(self):
        limiter = RateLimiter(limit_per_minute=2, timer=FakeClock())
        limiter.check("10.0.0.1")
        limiter.check("10.0.0.1")
        with pytest.raises(RateLimitError):
            limiter.check("10.0.0.1")
        limiter.check("10.0.0.2")

    def test_window_slides(self):
        clock = FakeClock()
        limiter = RateLimiter(limit_per_minute=1, timer=clock)
        limiter.check("10.0.0.1")
        clock.now += 61
        limiter.check("10.0.0.1")

    def test_idle_clients_are_evicted(self):
        clock = FakeClock()
        limiter = RateLimiter(limit_per_minute=5, timer=clock)
        for i in range(3):
            limiter.check(f"10.0.0.{i}")
        assert len(limiter) == 3

        clock.now += 61
        limiter.check("10.0.0.99")
        assert len(limiter) == 1

    def test_max_clients(self):
        limiter = RateLimiter(limit_per_minute=5, max_clients=2, timer=FakeClock())
        for i in range(5):
            limiter.check(f"10.0.0.{i}")
        assert len(limiter) == 2
