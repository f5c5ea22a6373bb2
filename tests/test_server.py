"""Tests for app wiring and lifespan."""

import threading

import pytest
from fastapi.testclient import TestClient

from transcript_hub import __version__
from transcript_hub.api.deps import run_blocking
from transcript_hub.cache import VideoDetailsCache
from transcript_hub.config import Settings
from transcript_hub.db import Database
from transcript_hub.providers import AssistantClient, YouTubeCaptionProvider, YouTubeClient
from transcript_hub.server import create_app


class TestServer:
    def test_lifespan_builds_services(self):
        app = create_app(Settings(database_url="sqlite://"))
        with TestClient(app):
            assert isinstance(app.state.db, Database)
            assert isinstance(app.state.video_cache, VideoDetailsCache)
            assert isinstance(app.state.youtube, YouTubeClient)
            assert isinstance(app.state.captions, YouTubeCaptionProvider)
            assert isinstance(app.state.assistant, AssistantClient)
            assert app.state.report_limiter.limit == 10

    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["version"] == __version__
        assert data["videoCache"]["size"] == 0

    def test_routes_registered(self, app):
        paths = {route.path for route in app.routes}
        for path in (
            "/api/auth/user",
            "/api/playlists",
            "/api/videos/{video_id}/transcripts/auto",
            "/api/transcripts/{transcript_id}/import-srt",
            "/api/transcripts/{transcript_id}/srt",
            "/api/tasks",
            "/api/reported-issues",
            "/api/assistant/conversations/{conversation_id}/message",
        ):
            assert path in paths

    def test_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("TRANSCRIPT_HUB_PORT", "9000")
        monkeypatch.setenv("TRANSCRIPT_HUB_ADMIN_EMAILS", '["boss@example.com"]')
        settings = Settings()
        assert settings.port == 9000
        assert settings.admin_emails == ["boss@example.com"]


class TestRunBlocking:
    @pytest.mark.asyncio
    async def test_runs_off_the_event_loop_thread(self):
        def work(a, b=0):
            return threading.get_ident(), a + b

        ident, total = await run_blocking(work, 1, b=2)
        assert total == 3
        assert ident != threading.get_ident()

    @pytest.mark.asyncio
    async def test_propagates_errors(self):
        def fail():
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            await run_blocking(fail)
