"""Caption provider using youtube-transcript-api directly."""

import asyncio
import logging
from functools import partial

from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    NotTranslatable,
    TranscriptsDisabled,
    TranslationLanguageNotAvailable,
    YouTubeTranscriptApi,
)

from transcript_hub.errors import NotFoundError, UpstreamError
from transcript_hub.models import Segment
from transcript_hub.utils import format_timestamp
from .base import CaptionProvider

logger = logging.getLogger(__name__)


class YouTubeCaptionProvider(CaptionProvider):
    """Fetches captions in the requested language.

    When the video has no captions in that language, captions in
    ``fallback_language`` are machine-translated by YouTube instead.
    """

    def __init__(self, fallback_language: str = "en"):
        self._api = YouTubeTranscriptApi()
        self._fallback_language = fallback_language

    async def fetch_segments(self, youtube_id: str, language: str) -> list[Segment]:
        loop = asyncio.get_running_loop()
        try:
            fetched = await loop.run_in_executor(
                None,
                partial(self._fetch, youtube_id, language),
            )
        except (
            TranscriptsDisabled,
            NoTranscriptFound,
            NotTranslatable,
            TranslationLanguageNotAvailable,
        ) as e:
            raise NotFoundError(f"No {language} captions available for {youtube_id}") from e
        except CouldNotRetrieveTranscript as e:
            logger.error(f"Caption fetch failed for {youtube_id}: {e}")
            raise UpstreamError(f"Could not retrieve captions for {youtube_id}") from e

        segments = [
            Segment(time=format_timestamp(s.start), text=s.text.strip())
            for s in fetched
            if s.text and s.text.strip()
        ]
        logger.info(f"Fetched {len(segments)} {language} caption segments for {youtube_id}")
        return segments

    def _fetch(self, youtube_id: str, language: str):
        """Synchronous fetch in executor."""
        transcripts = self._api.list(youtube_id)
        try:
            transcript = transcripts.find_transcript([language])
        except NoTranscriptFound:
            if language == self._fallback_language:
                raise
            source = transcripts.find_transcript([self._fallback_language])
            transcript = source.translate(language)
        return transcript.fetch()

    async def close(self) -> None:
        pass
