"""External services: YouTube Data API, YouTube captions and the LLM assistant."""

from .assistant import AssistantClient
from .base import CaptionProvider
from .captions import YouTubeCaptionProvider
from .youtube import YouTubeClient

__all__ = ["AssistantClient", "CaptionProvider", "YouTubeCaptionProvider", "YouTubeClient"]
