"""In-memory TTL cache for YouTube video details."""

from cachetools import TTLCache

from transcript_hub.models import VideoDetails


class VideoDetailsCache:
    def __init__(self, max_size: int = 500, ttl: int = 3600):
        self._cache: TTLCache = TTLCache(maxsize=max_size, ttl=ttl)
        self._hits = 0
        self._misses = 0

    def get(self, youtube_id: str) -> VideoDetails | None:
        result = self._cache.get(youtube_id)
        if result is not None:
            self._hits += 1
        else:
            self._misses += 1
        return result

    def set(self, youtube_id: str, details: VideoDetails) -> None:
        self._cache[youtube_id] = details

    def invalidate(self, youtube_id: str) -> None:
        self._cache.pop(youtube_id, None)

    def stats(self) -> dict:
        return {
            "size": len(self._cache),
            "max_size": self._cache.maxsize,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / max(self._hits + self._misses, 1) * 100, 1),
        }
