"""Tests for the caption provider with mocked youtube-transcript-api."""

from unittest.mock import MagicMock, patch

import pytest
from youtube_transcript_api import CouldNotRetrieveTranscript, NoTranscriptFound, TranscriptsDisabled

from transcript_hub.errors import NotFoundError, UpstreamError
from transcript_hub.models import Segment
from transcript_hub.providers import YouTubeCaptionProvider


class MockSnippet:
    def __init__(self, text, start, duration):
        self.text = text
        self.start = start
        self.duration = duration


@pytest.fixture
def mock_snippets():
    return [
        MockSnippet("Hello", 0.0, 2.0),
        MockSnippet("  ", 2.0, 1.0),
        MockSnippet("World ", 65.4, 3.0),
    ]


class TestYouTubeCaptionProvider:
    @pytest.mark.asyncio
    async def test_fetch_segments(self, mock_snippets):
        provider = YouTubeCaptionProvider()
        with patch.object(provider, "_fetch", return_value=mock_snippets):
            segments = await provider.fetch_segments("dQw4w9WgXcQ", "en")
        assert segments == [Segment(time="0:00", text="Hello"), Segment(time="1:05", text="World")]

    @pytest.mark.asyncio
    async def test_captions_disabled(self):
        provider = YouTubeCaptionProvider()
        with patch.object(provider, "_fetch", side_effect=TranscriptsDisabled("vid")):
            with pytest.raises(NotFoundError, match="No en captions"):
                await provider.fetch_segments("vid12345678", "en")

    @pytest.mark.asyncio
    async def test_retrieval_failure(self):
        provider = YouTubeCaptionProvider()
        with patch.object(provider, "_fetch", side_effect=CouldNotRetrieveTranscript("vid")):
            with pytest.raises(UpstreamError):
                await provider.fetch_segments("vid12345678", "en")

    def test_fetch_requested_language(self, mock_snippets):
        provider = YouTubeCaptionProvider()
        provider._api = MagicMock()
        transcript = provider._api.list.return_value.find_transcript.return_value
        transcript.fetch.return_value = mock_snippets
        assert provider._fetch("vid12345678", "ar") == mock_snippets
        provider._api.list.return_value.find_transcript.assert_called_once_with(["ar"])

    def test_fetch_translates_fallback(self, mock_snippets):
        provider = YouTubeCaptionProvider(fallback_language="en")
        provider._api = MagicMock()
        transcripts = provider._api.list.return_value
        source = MagicMock()
        source.translate.return_value.fetch.return_value = mock_snippets
        transcripts.find_transcript.side_effect = [
            NoTranscriptFound("vid12345678", ["fr"], MagicMock()),
            source,
        ]
        assert provider._fetch("vid12345678", "fr") == mock_snippets
        source.translate.assert_called_once_with("fr")

    def test_fetch_no_fallback_for_fallback_language(self):
        provider = YouTubeCaptionProvider(fallback_language="en")
        provider._api = MagicMock()
        provider._api.list.return_value.find_transcript.side_effect = NoTranscriptFound(
            "vid12345678", ["en"], MagicMock()
        )
        with pytest.raises(NoTranscriptFound):
            provider._fetch("vid12345678", "en")

    @pytest.mark.asyncio
    async def test_close(self):
        provider = YouTubeCaptionProvider()
        await provider.close()  # Should not raise
