"""Tests for the video details cache."""

from transcript_hub.cache import VideoDetailsCache
from transcript_hub.models import VideoDetails


def _details(video_id: str) -> VideoDetails:
    return VideoDetails(id=video_id, title="Title", duration="1:00")


class TestVideoDetailsCache:
    def test_set_and_get(self):
        cache = VideoDetailsCache(max_size=10, ttl=3600)
        cache.set("abc", _details("abc"))
        assert cache.get("abc") == _details("abc")

    def test_miss(self):
        cache = VideoDetailsCache(max_size=10, ttl=3600)
        assert cache.get("nonexistent") is None

    def test_invalidate(self):
        cache = VideoDetailsCache(max_size=10, ttl=3600)
        cache.set("abc", _details("abc"))
        cache.invalidate("abc")
        cache.invalidate("never-set")
        assert cache.get("abc") is None

    def test_max_size(self):
        cache = VideoDetailsCache(max_size=2, ttl=3600)
        for video_id in ("a", "b", "c"):
            cache.set(video_id, _details(video_id))
        assert cache.stats()["size"] == 2

    def test_stats_initial(self):
        stats = VideoDetailsCache(max_size=10, ttl=3600).stats()
        assert stats["size"] == 0
        assert stats["max_size"] == 10
        assert stats["hits"] == 0
        assert stats["misses"] == 0
        assert stats["hit_rate"] == 0

    def test_stats_after_operations(self):
        cache = VideoDetailsCache(max_size=10, ttl=3600)
        cache.set("abc", _details("abc"))
        cache.get("abc")  # hit
        cache.get("xyz")  # miss
        stats = cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 50.0
