"""Shared test fixtures."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from transcript_hub.config import Settings
from transcript_hub.db import Database
from transcript_hub.models import Role, Segment, VideoDetails
from transcript_hub.server import create_app
from transcript_hub.storage import Storage

VIDEO_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
ADMIN_HEADERS = {"X-User-Id": "admin-1", "X-User-Email": "admin@example.com"}


@pytest.fixture
def sample_segments():
    return [
        Segment(time="0:00", text="بسم الله"),
        Segment(time="0:04", text="this is a test"),
        Segment(time="0:09", text="of the transcript"),
        Segment(time="1:15", text="editing system"),
        Segment(time="1:02:03", text="goodbye"),
    ]


@pytest.fixture
def video_details():
    return VideoDetails(
        id="dQw4w9WgXcQ",
        title="Lesson One: Greetings",
        description="First lesson",
        duration="4:13",
        thumbnail_url="https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg",
    )


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def storage(database):
    session = database.session()
    yield Storage(session)
    session.close()


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        youtube_api_key="test-key",
        admin_emails=["admin@example.com"],
        rate_limit_per_minute=100,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app, video_details):
    with TestClient(app) as test_client:
        app.state.youtube = AsyncMock()
        app.state.youtube.get_video_details = AsyncMock(return_value=video_details)
        app.state.captions = AsyncMock()
        app.state.assistant = AsyncMock()
        yield test_client


@pytest.fixture
def as_role(app, client):
    """Headers of a signed-in user holding ``role``."""

    def _headers(role: Role, user_id: str | None = None) -> dict:
        user_id = user_id or role.value.replace("_", "-")
        session = app.state.db.session()
        try:
            Storage(session).upsert_user(user_id, email=f"{user_id}@example.com", role=role)
        finally:
            session.close()
        return {"X-User-Id": user_id}

    return _headers


@pytest.fixture
def video(client):
    resp = client.post(
        "/api/videos",
        json={"youtubeUrl": VIDEO_URL, "languages": ["ar", "en"]},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 200
    return resp.json()


@pytest.fixture
def transcripts(client, video):
    """The ar and en transcripts created with ``video``, keyed by language."""
    resp = client.get(f"/api/videos/{video['id']}/transcripts", headers=ADMIN_HEADERS)
    return {t["language"]: t for t in resp.json()}
