"""Transcript Hub: transcripts, translations and playlists for YouTube videos."""

__version__ = "1.0.0"
