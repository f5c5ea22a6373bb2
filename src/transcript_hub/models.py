"""Request and response models."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    ADMIN = "admin"
    ARABIC_EDITOR = "arabic_transcripts_editor"
    TRANSLATIONS_EDITOR = "translations_editor"
    VIEWER = "viewer"


class VideoStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETE = "complete"
    FAILED = "failed"


class ApprovalStatus(str, Enum):
    UNCHECKED = "unchecked"
    APPROVED = "approved"


class TaskStatus(str, Enum):
    IN_PROGRESS = "In-Progress"
    COMPLETE = "Complete"


class IssueStatus(str, Enum):
    PENDING = "Pending"
    COMPLETE = "Complete"


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ISO 639 code with an optional region, e.g. "ar" or "ar-EG"
LANGUAGE_PATTERN = r"^[A-Za-z]{2,3}(-[A-Za-z0-9]{2})?$"


class Segment(BaseModel):
    time: str
    text: str


class VideoDetails(BaseModel):
    id: str
    title: str
    description: str = ""
    duration: str = "0:00"
    thumbnail_url: str = ""


class Message(ApiModel):
    message: str


# -- Users --


class UserBrief(ApiModel):
    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class UserOut(UserBrief):
    profile_image_url: str | None = None
    role: Role = Role.VIEWER
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RoleUpdate(ApiModel):
    role: Role


# -- Playlists and videos --


class PlaylistCreate(ApiModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None


class PlaylistUpdate(ApiModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None


class PlaylistBrief(ApiModel):
    id: int
    name: str
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class VideoOut(ApiModel):
    id: int
    youtube_id: str
    title: str
    description: str | None = None
    duration: str | None = None
    thumbnail_url: str | None = None
    youtube_url: str
    playlist_id: int | None = None
    playlist_order: int = 0
    vocabulary: str | None = None
    status: VideoStatus = VideoStatus.PROCESSING
    is_public: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PlaylistOut(PlaylistBrief):
    videos: list[VideoOut] = []


class VideoCreate(ApiModel):
    youtube_url: str = ""
    playlist_id: int | None = None
    languages: list[str] = []


class VideoUpdate(ApiModel):
    youtube_id: str | None = None
    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    duration: str | None = None
    thumbnail_url: str | None = None
    playlist_id: int | None = None
    playlist_order: int | None = None
    vocabulary: str | None = None
    status: VideoStatus | None = None
    is_public: bool | None = None


# -- Transcripts --


class TranscriptOut(ApiModel):
    id: int
    video_id: int
    language: str
    content: list[Segment] = []
    draft_content: list[Segment] | None = None
    is_auto_generated: bool = False
    approval_status: ApprovalStatus = ApprovalStatus.UNCHECKED
    created_at: datetime | None = None
    updated_at: datetime | None = None


class VideoDetailOut(VideoOut):
    playlist: PlaylistBrief | None = None
    transcripts: list[TranscriptOut] = []


class TranscriptCreate(ApiModel):
    language: str = Field(min_length=2, max_length=5, pattern=LANGUAGE_PATTERN)
    content: list[Segment] = []
    is_auto_generated: bool = False


class TranscriptUpdate(ApiModel):
    content: list[Segment] | None = None
    draft_content: list[Segment] | None = None
    is_auto_generated: bool | None = None
    approval_status: ApprovalStatus | None = None


class DraftIn(ApiModel):
    content: list[Segment]


class DraftOut(TranscriptOut):
    out_of_order: list[int] = []


class ApprovalStatusIn(ApiModel):
    approval_status: ApprovalStatus


class SrtImportIn(ApiModel):
    srt_content: str = ""
    target: Literal["content", "draft"] = "content"


class TextImportIn(ApiModel):
    text: str = ""
    target: Literal["content", "draft"] = "content"


class ImportOut(ApiModel):
    message: str
    segments_count: int
    transcript: TranscriptOut


class AutoTranscriptIn(ApiModel):
    language: str = Field(min_length=2, max_length=5, pattern=LANGUAGE_PATTERN)


# -- Tasks --


class TaskCreate(ApiModel):
    description: str = Field(min_length=1, max_length=1000)
    assigned_to_user_id: str
    task_link: str | None = Field(default=None, max_length=500)
    status: TaskStatus = TaskStatus.IN_PROGRESS


class TaskUpdate(ApiModel):
    description: str | None = Field(default=None, min_length=1, max_length=1000)
    assigned_to_user_id: str | None = None
    task_link: str | None = Field(default=None, max_length=500)
    status: TaskStatus | None = None


class TaskOut(ApiModel):
    id: int
    description: str
    status: TaskStatus
    assigned_to_user_id: str
    task_link: str | None = None
    created_by_user_id: str
    assigned_to: UserBrief | None = None
    created_by: UserBrief | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# -- Reported issues --


class IssueCreate(ApiModel):
    playlist_id: int | None = None
    video_id: int | None = None
    segment_index: int | None = Field(default=None, ge=0)
    description: str = Field(min_length=1)
    contact_name: str | None = Field(default=None, max_length=255)
    contact_email: str | None = Field(default=None, max_length=255)
    contact_mobile: str | None = Field(default=None, max_length=50)


class IssueUpdate(ApiModel):
    status: IssueStatus | None = None
    admin_note: str | None = None


class IssueOut(ApiModel):
    id: int
    playlist_id: int | None = None
    video_id: int | None = None
    segment_index: int | None = None
    description: str
    status: IssueStatus = IssueStatus.PENDING
    admin_note: str | None = None
    reported_by_user_id: str | None = None
    contact_name: str | None = None
    contact_email: str | None = None
    contact_mobile: str | None = None
    playlist: PlaylistBrief | None = None
    video: VideoOut | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DashboardStats(ApiModel):
    total_videos: int
    total_transcripts: int
    total_languages: int
    total_playlists: int
    pending_issues: int
    open_tasks: int


# -- Assistant --


class ChatMessage(ApiModel):
    role: Literal["user", "model"]
    content: str
    created_at: str | None = None


class ConversationCreate(ApiModel):
    title: str = Field(min_length=1, max_length=255)
    model: str | None = None
    system_prompt: str | None = None


class ConversationUpdate(ApiModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    model: str | None = None
    system_prompt: str | None = None


class ConversationOut(ApiModel):
    id: int
    user_id: str
    title: str
    model: str
    system_prompt: str | None = None
    messages: list[ChatMessage] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MessageIn(ApiModel):
    message: str = Field(min_length=1)
