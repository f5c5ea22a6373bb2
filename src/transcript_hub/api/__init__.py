"""REST endpoints."""

from fastapi import APIRouter

from . import assistant, issues, playlists, tasks, transcripts, users, videos

api_router = APIRouter()
for module in (users, playlists, videos, transcripts, tasks, issues, assistant):
    api_router.include_router(module.router)

__all__ = ["api_router"]
