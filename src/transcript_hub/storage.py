"""Database operations for every resource, one method per operation."""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from transcript_hub.db import (
    AssistantConversation,
    Playlist,
    ReportedIssue,
    Task,
    Transcript,
    User,
    Video,
    utcnow,
)
from transcript_hub.errors import ConflictError, InvalidRequestError, NotFoundError
from transcript_hub.models import (
    ApprovalStatus,
    IssueStatus,
    Role,
    Segment,
    TaskStatus,
)

logger = logging.getLogger(__name__)


def _dump_segments(segments: list[Segment] | None) -> list[dict] | None:
    if segments is None:
        return None
    return [seg.model_dump() if isinstance(seg, Segment) else dict(seg) for seg in segments]


def _enum_value(value):
    return getattr(value, "value", value)


class Storage:
    def __init__(self, session: Session):
        self.session = session

    def _commit(self, obj=None):
        self.session.commit()
        if obj is not None:
            self.session.refresh(obj)
        return obj

    def _apply(self, obj, changes: dict) -> None:
        for key, value in changes.items():
            setattr(obj, key, _enum_value(value))
        obj.updated_at = utcnow()

    # -- Users --

    def get_user(self, user_id: str) -> User | None:
        return self.session.get(User, user_id)

    def upsert_user(
        self,
        user_id: str,
        email: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
        profile_image_url: str | None = None,
        role: Role | None = None,
    ) -> User:
        """Create the user on first login; refresh profile fields afterwards.

        An existing user's role is only replaced when ``role`` is given.
        """
        user = self.get_user(user_id)
        profile = {
            "email": email,
            "first_name": first_name,
            "last_name": last_name,
            "profile_image_url": profile_image_url,
        }
        if user is None:
            user = User(id=user_id, role=_enum_value(role or Role.VIEWER), **profile)
            self.session.add(user)
            logger.info(f"Created user {user_id} with role {user.role}")
        else:
            changed = {k: v for k, v in profile.items() if v is not None and getattr(user, k) != v}
            if role is not None:
                changed["role"] = role
            if not changed:
                return user
            self._apply(user, changed)
        try:
            return self._commit(user)
        except IntegrityError:
            self.session.rollback()
            raise ConflictError(f"Email {email} is already used by another user")

    def list_users(self) -> list[User]:
        return list(self.session.scalars(select(User).order_by(User.created_at.desc())))

    def update_user_role(self, user_id: str, role: Role) -> User:
        user = self.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        self._apply(user, {"role": role})
        return self._commit(user)

    # -- Playlists --

    def create_playlist(self, name: str, description: str | None = None) -> Playlist:
        playlist = Playlist(name=name, description=description)
        self.session.add(playlist)
        return self._commit(playlist)

    def list_playlists(self) -> list[Playlist]:
        stmt = (
            select(Playlist)
            .options(selectinload(Playlist.videos))
            .order_by(Playlist.created_at.desc(), Playlist.id.desc())
        )
        return list(self.session.scalars(stmt))

    def get_playlist(self, playlist_id: int) -> Playlist:
        playlist = self.session.get(Playlist, playlist_id)
        if playlist is None:
            raise NotFoundError("Playlist not found")
        return playlist

    def update_playlist(self, playlist_id: int, changes: dict) -> Playlist:
        playlist = self.get_playlist(playlist_id)
        self._apply(playlist, changes)
        return self._commit(playlist)

    def delete_playlist(self, playlist_id: int) -> None:
        playlist = self.get_playlist(playlist_id)
        for video in list(playlist.videos):
            video.playlist_id = None
        self.session.delete(playlist)
        self.session.commit()

    def remove_video_from_playlist(self, playlist_id: int, video_id: int) -> Video:
        video = self.get_video(video_id)
        if video.playlist_id != playlist_id:
            raise NotFoundError("Video is not in this playlist")
        self._apply(video, {"playlist_id": None, "playlist_order": 0})
        return self._commit(video)

    # -- Videos --

    def create_video(self, **fields) -> Video:
        if fields.get("playlist_id") is not None:
            self.get_playlist(fields["playlist_id"])
        video = Video(**{k: _enum_value(v) for k, v in fields.items()})
        self.session.add(video)
        try:
            return self._commit(video)
        except IntegrityError:
            self.session.rollback()
            raise ConflictError("Video already exists")

    def list_videos(self, limit: int = 100) -> list[Video]:
        stmt = (
            select(Video)
            .options(selectinload(Video.playlist), selectinload(Video.transcripts))
            .order_by(Video.created_at.desc(), Video.id.desc())
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def get_video(self, video_id: int) -> Video:
        video = self.session.get(Video, video_id)
        if video is None:
            raise NotFoundError("Video not found")
        return video

    def get_video_by_youtube_id(self, youtube_id: str) -> Video | None:
        return self.session.scalar(select(Video).where(Video.youtube_id == youtube_id))

    def list_playlist_videos(self, playlist_id: int) -> list[Video]:
        stmt = (
            select(Video)
            .where(Video.playlist_id == playlist_id)
            .order_by(Video.playlist_order.asc(), Video.created_at.desc(), Video.id.desc())
        )
        return list(self.session.scalars(stmt))

    def update_video(self, video_id: int, changes: dict) -> Video:
        video = self.get_video(video_id)
        if changes.get("playlist_id") is not None:
            self.get_playlist(changes["playlist_id"])
        self._apply(video, changes)
        try:
            return self._commit(video)
        except IntegrityError:
            self.session.rollback()
            raise ConflictError("Another video already uses this YouTube ID")

    def update_video_order(self, video_id: int, playlist_order: int) -> Video:
        return self.update_video(video_id, {"playlist_order": playlist_order})

    def delete_video(self, video_id: int) -> None:
        video = self.get_video(video_id)
        self.session.delete(video)
        self.session.commit()

    # -- Transcripts --

    def create_transcript(
        self,
        video_id: int,
        language: str,
        content: list[Segment] | None = None,
        is_auto_generated: bool = False,
    ) -> Transcript:
        self.get_video(video_id)
        if self.get_transcript_by_language(video_id, language) is not None:
            raise ConflictError(f"A {language} transcript already exists for this video")
        transcript = Transcript(
            video_id=video_id,
            language=language,
            content=_dump_segments(content) or [],
            is_auto_generated=is_auto_generated,
            approval_status=ApprovalStatus.UNCHECKED.value,
        )
        self.session.add(transcript)
        try:
            return self._commit(transcript)
        except IntegrityError:
            self.session.rollback()
            raise ConflictError(f"A {language} transcript already exists for this video")

    def list_transcripts(self, video_id: int) -> list[Transcript]:
        stmt = (
            select(Transcript)
            .where(Transcript.video_id == video_id)
            .order_by(Transcript.language)
        )
        return list(self.session.scalars(stmt))

    def get_transcript(self, transcript_id: int) -> Transcript:
        transcript = self.session.get(Transcript, transcript_id)
        if transcript is None:
            raise NotFoundError("Transcript not found")
        return transcript

    def get_transcript_by_language(self, video_id: int, language: str) -> Transcript | None:
        stmt = select(Transcript).where(
            Transcript.video_id == video_id, Transcript.language == language
        )
        return self.session.scalar(stmt)

    def update_transcript(self, transcript_id: int, changes: dict) -> Transcript:
        transcript = self.get_transcript(transcript_id)
        for key in ("content", "draft_content"):
            if key in changes:
                changes[key] = _dump_segments(changes[key])
        if changes.get("content") is None:
            changes.pop("content", None)
        self._apply(transcript, changes)
        return self._commit(transcript)

    def save_draft(self, transcript_id: int, segments: list[Segment]) -> Transcript:
        return self.update_transcript(transcript_id, {"draft_content": segments})

    def discard_draft(self, transcript_id: int) -> Transcript:
        return self.update_transcript(transcript_id, {"draft_content": None})

    def publish_draft(self, transcript_id: int) -> Transcript:
        """Replace published content with the draft and clear the draft."""
        transcript = self.get_transcript(transcript_id)
        if transcript.draft_content is None:
            raise InvalidRequestError("No draft content found to publish")
        self._apply(
            transcript,
            {"content": list(transcript.draft_content), "draft_content": None},
        )
        self._commit(transcript)
        logger.info(
            f"Published draft of transcript {transcript_id} "
            f"({len(transcript.content)} segments)"
        )
        return transcript

    def set_approval_status(self, transcript_id: int, status: ApprovalStatus) -> Transcript:
        transcript = self.get_transcript(transcript_id)
        self._apply(transcript, {"approval_status": status})
        return self._commit(transcript)

    def delete_transcript(self, transcript_id: int) -> None:
        transcript = self.get_transcript(transcript_id)
        self.session.delete(transcript)
        self.session.commit()

    # -- Tasks --

    def list_tasks(self, user_id: str | None = None, status: str | None = None) -> list[Task]:
        stmt = select(Task).options(
            selectinload(Task.assigned_to), selectinload(Task.created_by)
        )
        if user_id:
            stmt = stmt.where(Task.assigned_to_user_id == user_id)
        if status:
            stmt = stmt.where(Task.status == status)
        return list(self.session.scalars(stmt.order_by(Task.created_at.desc(), Task.id.desc())))

    def get_task(self, task_id: int) -> Task:
        task = self.session.get(Task, task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    def create_task(
        self,
        description: str,
        assigned_to_user_id: str,
        created_by_user_id: str,
        task_link: str | None = None,
        status: TaskStatus = TaskStatus.IN_PROGRESS,
    ) -> Task:
        if self.get_user(assigned_to_user_id) is None:
            raise InvalidRequestError("Assigned user does not exist")
        task = Task(
            description=description,
            assigned_to_user_id=assigned_to_user_id,
            created_by_user_id=created_by_user_id,
            task_link=task_link,
            status=_enum_value(status),
        )
        self.session.add(task)
        return self._commit(task)

    def update_task(self, task_id: int, changes: dict) -> Task:
        task = self.get_task(task_id)
        assignee = changes.get("assigned_to_user_id")
        if assignee is not None and self.get_user(assignee) is None:
            raise InvalidRequestError("Assigned user does not exist")
        self._apply(task, changes)
        return self._commit(task)

    def delete_task(self, task_id: int) -> None:
        task = self.get_task(task_id)
        self.session.delete(task)
        self.session.commit()

    # -- Reported issues --

    def create_issue(self, reported_by_user_id: str | None = None, **fields) -> ReportedIssue:
        issue = ReportedIssue(
            reported_by_user_id=reported_by_user_id,
            status=IssueStatus.PENDING.value,
            **fields,
        )
        if issue.playlist_id is not None and self.session.get(Playlist, issue.playlist_id) is None:
            raise InvalidRequestError("Playlist does not exist")
        if issue.video_id is not None and self.session.get(Video, issue.video_id) is None:
            raise InvalidRequestError("Video does not exist")
        self.session.add(issue)
        return self._commit(issue)

    def list_issues(self) -> list[ReportedIssue]:
        stmt = (
            select(ReportedIssue)
            .options(selectinload(ReportedIssue.playlist), selectinload(ReportedIssue.video))
            .order_by(ReportedIssue.created_at.desc(), ReportedIssue.id.desc())
        )
        return list(self.session.scalars(stmt))

    def get_issue(self, issue_id: int) -> ReportedIssue:
        issue = self.session.get(ReportedIssue, issue_id)
        if issue is None:
            raise NotFoundError("Issue not found")
        return issue

    def update_issue(self, issue_id: int, changes: dict) -> ReportedIssue:
        issue = self.get_issue(issue_id)
        self._apply(issue, changes)
        return self._commit(issue)

    def delete_issue(self, issue_id: int) -> None:
        issue = self.get_issue(issue_id)
        self.session.delete(issue)
        self.session.commit()

    # -- Assistant conversations --

    def list_conversations(self, user_id: str) -> list[AssistantConversation]:
        stmt = (
            select(AssistantConversation)
            .where(AssistantConversation.user_id == user_id)
            .order_by(AssistantConversation.updated_at.desc(), AssistantConversation.id.desc())
        )
        return list(self.session.scalars(stmt))

    def get_conversation(self, conversation_id: int, user_id: str) -> AssistantConversation:
        conversation = self.session.get(AssistantConversation, conversation_id)
        if conversation is None or conversation.user_id != user_id:
            raise NotFoundError("Conversation not found")
        return conversation

    def create_conversation(
        self, user_id: str, title: str, model: str, system_prompt: str | None = None
    ) -> AssistantConversation:
        conversation = AssistantConversation(
            user_id=user_id,
            title=title,
            model=model,
            system_prompt=system_prompt,
            messages=[],
        )
        self.session.add(conversation)
        return self._commit(conversation)

    def update_conversation(
        self, conversation_id: int, user_id: str, changes: dict
    ) -> AssistantConversation:
        conversation = self.get_conversation(conversation_id, user_id)
        self._apply(conversation, changes)
        return self._commit(conversation)

    def append_messages(
        self, conversation_id: int, user_id: str, messages: list[dict]
    ) -> AssistantConversation:
        conversation = self.get_conversation(conversation_id, user_id)
        # JSON columns are not mutation-tracked; assign a new list
        self._apply(conversation, {"messages": list(conversation.messages or []) + messages})
        return self._commit(conversation)

    def delete_conversation(self, conversation_id: int, user_id: str) -> None:
        conversation = self.get_conversation(conversation_id, user_id)
        self.session.delete(conversation)
        self.session.commit()

    # -- Dashboard --

    def dashboard_stats(self) -> dict:
        def count(stmt) -> int:
            return int(self.session.scalar(stmt) or 0)

        return {
            "total_videos": count(select(func.count()).select_from(Video)),
            "total_transcripts": count(select(func.count()).select_from(Transcript)),
            "total_languages": count(select(func.count(func.distinct(Transcript.language)))),
            "total_playlists": count(select(func.count()).select_from(Playlist)),
            "pending_issues": count(
                select(func.count())
                .select_from(ReportedIssue)
                .where(ReportedIssue.status == IssueStatus.PENDING.value)
            ),
            "open_tasks": count(
                select(func.count())
                .select_from(Task)
                .where(Task.status == TaskStatus.IN_PROGRESS.value)
            ),
        }
