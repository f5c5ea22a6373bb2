"""Playlist endpoints. Listing is public for the landing page."""

from fastapi import APIRouter, Depends

from transcript_hub.db import User
from transcript_hub.models import (
    Message,
    PlaylistBrief,
    PlaylistCreate,
    PlaylistOut,
    PlaylistUpdate,
    Role,
    VideoOut,
)
from transcript_hub.storage import Storage
from .deps import current_user, get_storage, optional_user, require_role

router = APIRouter(prefix="/api/playlists", tags=["playlists"])


@router.get("", response_model=list[PlaylistOut])
def list_playlists(
    user: User | None = Depends(optional_user),
    storage: Storage = Depends(get_storage),
):
    playlists = [PlaylistOut.model_validate(p) for p in storage.list_playlists()]
    if user is None:
        for playlist in playlists:
            playlist.videos = [v for v in playlist.videos if v.is_public]
    return playlists


@router.get("/{playlist_id}/videos", response_model=list[VideoOut])
def list_playlist_videos(
    playlist_id: int,
    user: User | None = Depends(optional_user),
    storage: Storage = Depends(get_storage),
):
    videos = storage.list_playlist_videos(playlist_id)
    return [VideoOut.model_validate(v) for v in videos if user is not None or v.is_public]


@router.get("/{playlist_id}", response_model=PlaylistOut)
def get_playlist(
    playlist_id: int,
    user: User = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    return PlaylistOut.model_validate(storage.get_playlist(playlist_id))


@router.post("", response_model=PlaylistBrief)
def create_playlist(
    body: PlaylistCreate,
    user: User = Depends(require_role(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
):
    return PlaylistBrief.model_validate(storage.create_playlist(body.name, body.description))


@router.put("/{playlist_id}", response_model=PlaylistBrief)
def update_playlist(
    playlist_id: int,
    body: PlaylistUpdate,
    user: User = Depends(require_role(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
):
    changes = body.model_dump(exclude_unset=True)
    if changes.get("name") is None:
        changes.pop("name", None)
    return PlaylistBrief.model_validate(storage.update_playlist(playlist_id, changes))


@router.delete("/{playlist_id}", response_model=Message)
def delete_playlist(
    playlist_id: int,
    user: User = Depends(require_role(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
):
    storage.delete_playlist(playlist_id)
    return Message(message="Playlist deleted successfully")


@router.delete("/{playlist_id}/videos/{video_id}", response_model=Message)
def remove_video_from_playlist(
    playlist_id: int,
    video_id: int,
    user: User = Depends(require_role(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
):
    storage.remove_video_from_playlist(playlist_id, video_id)
    return Message(message="Video removed from playlist")
