"""YouTube Data API client for video metadata."""

import logging

import httpx

from transcript_hub.cache import VideoDetailsCache
from transcript_hub.errors import UpstreamError
from transcript_hub.models import VideoDetails
from transcript_hub.utils import parse_iso_duration

logger = logging.getLogger(__name__)


class YouTubeClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://www.googleapis.com/youtube/v3",
        cache: VideoDetailsCache | None = None,
    ):
        self._api_key = api_key
        self._cache = cache
        self._client = httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=15.0)

    async def get_video_details(self, youtube_id: str) -> VideoDetails | None:
        """Title, description, duration and thumbnail, or None if YouTube has no such video."""
        if self._cache is not None:
            cached = self._cache.get(youtube_id)
            if cached is not None:
                return cached

        if not self._api_key:
            raise UpstreamError("YouTube API key not configured")

        try:
            resp = await self._client.get(
                "/videos",
                params={"id": youtube_id, "key": self._api_key, "part": "snippet,contentDetails"},
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"YouTube API error for {youtube_id}: {e.response.status_code}")
            raise UpstreamError(f"YouTube API error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"YouTube API request failed for {youtube_id}: {e}")
            raise UpstreamError("YouTube API request failed") from e

        items = resp.json().get("items") or []
        if not items:
            return None

        snippet = items[0].get("snippet", {})
        content_details = items[0].get("contentDetails", {})
        thumbnails = snippet.get("thumbnails", {})
        thumbnail = next(
            (thumbnails[k]["url"] for k in ("maxres", "high", "medium") if k in thumbnails),
            "",
        )
        details = VideoDetails(
            id=youtube_id,
            title=snippet.get("title", ""),
            description=snippet.get("description") or "",
            duration=parse_iso_duration(content_details.get("duration", "")),
            thumbnail_url=thumbnail,
        )
        if self._cache is not None:
            self._cache.set(youtube_id, details)
        return details

    async def close(self) -> None:
        await self._client.aclose()
