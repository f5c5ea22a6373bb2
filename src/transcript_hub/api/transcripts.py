"""Transcript endpoints: editing, drafts, approval, SRT import and export."""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from transcript_hub.db import User
from transcript_hub.errors import InvalidRequestError, NotFoundError
from transcript_hub.models import (
    ApprovalStatusIn,
    DraftIn,
    DraftOut,
    Message,
    Role,
    Segment,
    ImportOut,
    SrtImportIn,
    TextImportIn,
    TranscriptOut,
    TranscriptUpdate,
)
from transcript_hub.srt import (
    format_srt,
    format_timestamped_text,
    out_of_order_indices,
    parse_srt,
    parse_timestamped_text,
    validate_srt,
)
from transcript_hub.storage import Storage
from transcript_hub.utils import safe_filename
from .deps import (
    DRAFT_ROLES,
    EDITOR_ROLES,
    check_draft_access,
    check_language_access,
    current_user,
    get_storage,
    require_role,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transcripts", tags=["transcripts"])


def transcript_changes(body: TranscriptUpdate) -> dict:
    """Fields explicitly sent; draftContent may be null to discard the draft."""
    changes = body.model_dump(exclude_unset=True)
    return {k: v for k, v in changes.items() if v is not None or k == "draft_content"}


def _editable_transcript(storage: Storage, user: User, transcript_id: int, draft: bool = False):
    transcript = storage.get_transcript(transcript_id)
    check_language_access(user, transcript.language)
    if draft:
        check_draft_access(user)
    return transcript


@router.get("/{transcript_id}", response_model=TranscriptOut)
def get_transcript(
    transcript_id: int,
    user: User = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    return TranscriptOut.model_validate(storage.get_transcript(transcript_id))


@router.put("/{transcript_id}", response_model=TranscriptOut)
def update_transcript(
    transcript_id: int,
    body: TranscriptUpdate,
    user: User = Depends(require_role(*EDITOR_ROLES)),
    storage: Storage = Depends(get_storage),
):
    changes = transcript_changes(body)
    _editable_transcript(storage, user, transcript_id, draft="draft_content" in changes)
    updated = storage.update_transcript(transcript_id, changes)
    return TranscriptOut.model_validate(updated)


@router.delete("/{transcript_id}", response_model=Message)
def delete_transcript(
    transcript_id: int,
    user: User = Depends(require_role(Role.ADMIN)),
    storage: Storage = Depends(get_storage),
):
    storage.delete_transcript(transcript_id)
    return Message(message="Transcript deleted successfully")


# -- Draft workflow --


@router.put("/{transcript_id}/draft", response_model=DraftOut)
def save_draft(
    transcript_id: int,
    body: DraftIn,
    user: User = Depends(require_role(*DRAFT_ROLES)),
    storage: Storage = Depends(get_storage),
):
    """Store unpublished edits. Out-of-order times are reported, not rejected."""
    _editable_transcript(storage, user, transcript_id)
    transcript = storage.save_draft(transcript_id, body.content)
    out = DraftOut.model_validate(transcript)
    out.out_of_order = out_of_order_indices(body.content)
    return out


@router.delete("/{transcript_id}/draft", response_model=TranscriptOut)
def discard_draft(
    transcript_id: int,
    user: User = Depends(require_role(*DRAFT_ROLES)),
    storage: Storage = Depends(get_storage),
):
    _editable_transcript(storage, user, transcript_id)
    return TranscriptOut.model_validate(storage.discard_draft(transcript_id))


@router.post("/{transcript_id}/publish", response_model=TranscriptOut)
def publish_draft(
    transcript_id: int,
    user: User = Depends(require_role(*DRAFT_ROLES)),
    storage: Storage = Depends(get_storage),
):
    _editable_transcript(storage, user, transcript_id)
    return TranscriptOut.model_validate(storage.publish_draft(transcript_id))


@router.put("/{transcript_id}/approval-status", response_model=TranscriptOut)
def set_approval_status(
    transcript_id: int,
    body: ApprovalStatusIn,
    user: User = Depends(require_role(*EDITOR_ROLES)),
    storage: Storage = Depends(get_storage),
):
    _editable_transcript(storage, user, transcript_id)
    transcript = storage.set_approval_status(transcript_id, body.approval_status)
    logger.info(f"Transcript {transcript_id} marked {body.approval_status.value} by {user.id}")
    return TranscriptOut.model_validate(transcript)


# -- SRT and timestamped text --


def _import_segments(
    storage: Storage, transcript_id: int, segments: list[Segment], target: str, kind: str
) -> ImportOut:
    field = "content" if target == "content" else "draft_content"
    transcript = storage.update_transcript(transcript_id, {field: segments})
    logger.info(f"Imported {len(segments)} {kind} segments into transcript {transcript_id} ({field})")
    return ImportOut(
        message=f"{kind} file imported successfully",
        segments_count=len(segments),
        transcript=TranscriptOut.model_validate(transcript),
    )


def _segments_for_export(transcript, source: str) -> list[Segment]:
    raw = transcript.content if source == "published" else transcript.draft_content
    if raw is None:
        raise NotFoundError("No draft content")
    return [Segment.model_validate(s) for s in raw]


@router.post("/{transcript_id}/import-srt", response_model=ImportOut)
def import_srt(
    transcript_id: int,
    body: SrtImportIn,
    user: User = Depends(require_role(*EDITOR_ROLES)),
    storage: Storage = Depends(get_storage),
):
    _editable_transcript(storage, user, transcript_id, draft=body.target == "draft")
    validate_srt(body.srt_content)

    segments = parse_srt(body.srt_content, clean=True)
    if not segments:
        raise InvalidRequestError("No valid subtitle segments found in SRT file")
    return _import_segments(storage, transcript_id, segments, body.target, "SRT")


@router.post("/{transcript_id}/import-text", response_model=ImportOut)
def import_timestamped_text(
    transcript_id: int,
    body: TextImportIn,
    user: User = Depends(require_role(*EDITOR_ROLES)),
    storage: Storage = Depends(get_storage),
):
    """Import the editor's inline "(0:02) text (0:22) more text" form."""
    _editable_transcript(storage, user, transcript_id, draft=body.target == "draft")
    segments = parse_timestamped_text(body.text)
    if not segments:
        raise InvalidRequestError("No timestamped segments found in text")
    return _import_segments(storage, transcript_id, segments, body.target, "Timestamped text")


@router.get("/{transcript_id}/srt", response_class=PlainTextResponse)
def export_srt(
    transcript_id: int,
    source: Literal["published", "draft"] = Query("published"),
    user: User = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    transcript = storage.get_transcript(transcript_id)
    segments = _segments_for_export(transcript, source)
    filename = safe_filename(transcript.video.title, transcript.language)
    return PlainTextResponse(
        format_srt(segments),
        media_type="application/x-subrip; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{transcript_id}/text", response_class=PlainTextResponse)
def export_timestamped_text(
    transcript_id: int,
    source: Literal["published", "draft"] = Query("published"),
    user: User = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    transcript = storage.get_transcript(transcript_id)
    segments = _segments_for_export(transcript, source)
    filename = safe_filename(transcript.video.title, transcript.language, extension="txt")
    return PlainTextResponse(
        format_timestamped_text(segments),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
