"""Abstract base for caption providers."""

from abc import ABC, abstractmethod

from transcript_hub.models import Segment


class CaptionProvider(ABC):
    @abstractmethod
    async def fetch_segments(self, youtube_id: str, language: str) -> list[Segment]:
        """Fetch captions of a video as transcript segments."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Clean up resources."""
        ...
