"""Video endpoints, including transcripts addressed through their video."""

import logging
import re

from fastapi import APIRouter, Depends, Query, Request

from transcript_hub.db import User
from transcript_hub.errors import ConflictError, InvalidRequestError, NotFoundError
from transcript_hub.models import (
    LANGUAGE_PATTERN,
    AutoTranscriptIn,
    Message,
    Role,
    TranscriptCreate,
    TranscriptOut,
    TranscriptUpdate,
    VideoCreate,
    VideoDetailOut,
    VideoOut,
    VideoStatus,
    VideoUpdate,
)
from transcript_hub.storage import Storage
from transcript_hub.utils import extract_video_id, watch_url
from .deps import (
    EDITOR_ROLES,
    check_draft_access,
    check_language_access,
    current_user,
    get_storage,
    optional_user,
    require_role,
    run_blocking,
)
from .transcripts import transcript_changes

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/videos", tags=["videos"])

# Columns that reject NULL; an explicit null in an update means "leave as is"
_REQUIRED_VIDEO_FIELDS = {"title", "playlist_order", "status", "is_public"}


@router.get("", response_model=list[VideoDetailOut])
def list_videos(
    limit: int = Query(100, ge=1, le=1000),
    user: User = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    return [VideoDetailOut.model_validate(v) for v in storage.list_videos(limit)]


@router.post("", response_model=VideoOut)
async def create_video(
    body: VideoCreate,
    request: Request,
    user: User = Depends(require_role(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
):
    youtube_url = body.youtube_url.strip()
    if not youtube_url:
        raise InvalidRequestError("YouTube URL is required")

    youtube_id = extract_video_id(youtube_url)
    if not youtube_id:
        raise InvalidRequestError("Invalid YouTube URL")

    languages = list(dict.fromkeys(lang.strip() for lang in body.languages))
    if any(len(lang) > 5 or not re.match(LANGUAGE_PATTERN, lang) for lang in languages):
        raise InvalidRequestError("Invalid language code")

    if await run_blocking(storage.get_video_by_youtube_id, youtube_id) is not None:
        raise ConflictError("Video already exists")

    details = await request.app.state.youtube.get_video_details(youtube_id)
    if details is None:
        raise NotFoundError("Video not found on YouTube")

    def persist() -> VideoOut:
        video = storage.create_video(
            youtube_id=youtube_id,
            title=details.title,
            description=details.description,
            duration=details.duration,
            thumbnail_url=details.thumbnail_url,
            youtube_url=youtube_url,
            playlist_id=body.playlist_id,
            status=VideoStatus.COMPLETE,
        )
        for language in languages:
            storage.create_transcript(video.id, language)
        return VideoOut.model_validate(video)

    out = await run_blocking(persist)
    logger.info(f"Added video {youtube_id} with transcripts {languages}")
    return out


@router.get("/{video_id}", response_model=VideoDetailOut)
def get_video(
    video_id: int,
    user: User = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    return VideoDetailOut.model_validate(storage.get_video(video_id))


@router.put("/{video_id}", response_model=VideoOut)
async def update_video(
    video_id: int,
    body: VideoUpdate,
    request: Request,
    user: User = Depends(require_role(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
):
    changes = body.model_dump(exclude_unset=True)
    video = await run_blocking(storage.get_video, video_id)

    new_youtube_id = changes.pop("youtube_id", None)
    if new_youtube_id and new_youtube_id != video.youtube_id:
        if extract_video_id(new_youtube_id) != new_youtube_id:
            raise InvalidRequestError("Invalid YouTube ID")
        existing = await run_blocking(storage.get_video_by_youtube_id, new_youtube_id)
        if existing is not None and existing.id != video_id:
            raise ConflictError("Another video already uses this YouTube ID")

        details = await request.app.state.youtube.get_video_details(new_youtube_id)
        if details is None:
            raise NotFoundError("Video not found on YouTube")

        changes.update(
            youtube_id=new_youtube_id,
            title=details.title,
            description=details.description,
            duration=details.duration,
            thumbnail_url=details.thumbnail_url,
            youtube_url=watch_url(new_youtube_id),
            status=VideoStatus.COMPLETE,
        )
        logger.info(f"Video {video_id} now points at {new_youtube_id}")

    changes = {
        k: v for k, v in changes.items() if v is not None or k not in _REQUIRED_VIDEO_FIELDS
    }
    updated = await run_blocking(storage.update_video, video_id, changes)
    return VideoOut.model_validate(updated)


@router.delete("/{video_id}", response_model=Message)
def delete_video(
    video_id: int,
    user: User = Depends(require_role(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
):
    storage.delete_video(video_id)
    return Message(message="Video deleted successfully")


# -- Transcripts of a video --


@router.get("/{video_id}/transcripts", response_model=list[TranscriptOut])
def list_video_transcripts(
    video_id: int,
    user: User | None = Depends(optional_user),
    storage: Storage = Depends(get_storage),
):
    """Public for the viewer page: anonymous callers get published content of public videos."""
    video = storage.get_video(video_id)
    if user is None and not video.is_public:
        raise NotFoundError("Video not found")

    transcripts = [TranscriptOut.model_validate(t) for t in storage.list_transcripts(video_id)]
    if user is None:
        for transcript in transcripts:
            transcript.draft_content = None
    return transcripts


@router.get("/{video_id}/transcripts/lang/{language}", response_model=TranscriptOut)
def get_video_transcript_by_language(
    video_id: int,
    language: str,
    user: User = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    transcript = storage.get_transcript_by_language(video_id, language)
    if transcript is None:
        raise NotFoundError("Transcript not found")
    return TranscriptOut.model_validate(transcript)


@router.post("/{video_id}/transcripts", response_model=TranscriptOut)
def create_video_transcript(
    video_id: int,
    body: TranscriptCreate,
    user: User = Depends(require_role(*EDITOR_ROLES)),
    storage: Storage = Depends(get_storage),
):
    check_language_access(user, body.language)
    transcript = storage.create_transcript(
        video_id,
        body.language,
        content=body.content,
        is_auto_generated=body.is_auto_generated,
    )
    return TranscriptOut.model_validate(transcript)


@router.patch("/{video_id}/transcripts/{transcript_id}", response_model=TranscriptOut)
def update_video_transcript(
    video_id: int,
    transcript_id: int,
    body: TranscriptUpdate,
    user: User = Depends(require_role(*EDITOR_ROLES)),
    storage: Storage = Depends(get_storage),
):
    transcript = storage.get_transcript(transcript_id)
    if transcript.video_id != video_id:
        raise NotFoundError("Transcript not found")
    check_language_access(user, transcript.language)
    changes = transcript_changes(body)
    if "draft_content" in changes:
        check_draft_access(user)
    updated = storage.update_transcript(transcript_id, changes)
    return TranscriptOut.model_validate(updated)


@router.post("/{video_id}/transcripts/auto", response_model=TranscriptOut)
async def create_transcript_from_captions(
    video_id: int,
    body: AutoTranscriptIn,
    request: Request,
    user: User = Depends(require_role(*EDITOR_ROLES)),
    storage: Storage = Depends(get_storage),
):
    """Seed a transcript from the video's YouTube captions."""
    check_language_access(user, body.language)
    video = await run_blocking(storage.get_video, video_id)
    existing = await run_blocking(storage.get_transcript_by_language, video_id, body.language)
    if existing is not None:
        raise ConflictError(f"A {body.language} transcript already exists for this video")

    segments = await request.app.state.captions.fetch_segments(video.youtube_id, body.language)
    if not segments:
        raise NotFoundError(f"No {body.language} captions available for {video.youtube_id}")

    transcript = await run_blocking(
        storage.create_transcript,
        video_id,
        body.language,
        content=segments,
        is_auto_generated=True,
    )
    return TranscriptOut.model_validate(transcript)
