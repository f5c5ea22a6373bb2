"""SQLAlchemy schema and engine setup."""

import logging
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, relationship, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """A person known to the identity provider."""

    __tablename__ = "users"

    id = Column(String, primary_key=True)  # identity provider subject
    email = Column(String, unique=True, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)
    role = Column(String(40), nullable=False, default="viewer")
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<User {self.id} ({self.role})>"


class Playlist(Base):
    __tablename__ = "playlists"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    videos = relationship(
        "Video",
        back_populates="playlist",
        order_by="Video.playlist_order",
    )

    def __repr__(self) -> str:
        return f"<Playlist {self.id}: {self.name}>"


class Video(Base):
    """YouTube video registered for transcription."""

    __tablename__ = "videos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    youtube_id = Column(String(20), unique=True, nullable=False)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(String(20), nullable=True)
    thumbnail_url = Column(String(500), nullable=True)
    youtube_url = Column(String(500), nullable=False)
    playlist_id = Column(
        Integer, ForeignKey("playlists.id", ondelete="SET NULL"), nullable=True
    )
    playlist_order = Column(Integer, default=0)
    vocabulary = Column(Text, nullable=True)
    status = Column(String(20), default="processing")  # processing, complete, failed
    is_public = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    playlist = relationship("Playlist", back_populates="videos")
    transcripts = relationship(
        "Transcript",
        back_populates="video",
        cascade="all, delete-orphan",
        order_by="Transcript.language",
    )

    def __repr__(self) -> str:
        return f"<Video {self.id}: {self.youtube_id}>"


class Transcript(Base):
    """Per-language transcript of a video, with an optional unpublished draft."""

    __tablename__ = "transcripts"
    __table_args__ = (
        UniqueConstraint("video_id", "language", name="uq_transcripts_video_language"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    video_id = Column(
        Integer, ForeignKey("videos.id", ondelete="CASCADE"), nullable=False
    )
    language = Column(String(5), nullable=False)
    content = Column(JSON, nullable=False, default=list)  # [{time, text}, ...]
    draft_content = Column(JSON, nullable=True)
    is_auto_generated = Column(Boolean, default=False)
    approval_status = Column(String(20), default="unchecked")
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    video = relationship("Video", back_populates="transcripts")

    def __repr__(self) -> str:
        return f"<Transcript {self.id} for video {self.video_id} ({self.language})>"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    description = Column(String(1000), nullable=False)
    status = Column(String(20), nullable=False, default="In-Progress")
    assigned_to_user_id = Column(String, ForeignKey("users.id"), nullable=False)
    task_link = Column(String(500), nullable=True)
    created_by_user_id = Column(String, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    assigned_to = relationship("User", foreign_keys=[assigned_to_user_id])
    created_by = relationship("User", foreign_keys=[created_by_user_id])


class ReportedIssue(Base):
    __tablename__ = "reported_issues"

    id = Column(Integer, primary_key=True, autoincrement=True)
    playlist_id = Column(
        Integer, ForeignKey("playlists.id", ondelete="SET NULL"), nullable=True
    )
    video_id = Column(
        Integer, ForeignKey("videos.id", ondelete="SET NULL"), nullable=True
    )
    segment_index = Column(Integer, nullable=True)
    description = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="Pending")
    admin_note = Column(Text, nullable=True)
    reported_by_user_id = Column(String, ForeignKey("users.id"), nullable=True)
    contact_name = Column(String(255), nullable=True)
    contact_email = Column(String(255), nullable=True)
    contact_mobile = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    playlist = relationship("Playlist")
    video = relationship("Video")


class AssistantConversation(Base):
    """Admin chat history with the LLM assistant."""

    __tablename__ = "assistant_conversations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    title = Column(String(255), nullable=False)
    model = Column(String(100), nullable=False)
    system_prompt = Column(Text, nullable=True)
    messages = Column(JSON, nullable=False, default=list)  # [{role, content, createdAt}]
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class Database:
    """Engine and session factory for one database URL."""

    def __init__(self, url: str):
        kwargs = {}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # One shared connection, or every session sees an empty database
                kwargs["poolclass"] = StaticPool
        self.url = url
        self.engine = create_engine(url, **kwargs)
        self._sessionmaker = sessionmaker(
            bind=self.engine, autoflush=False, expire_on_commit=False
        )

    def create_all(self) -> None:
        Base.metadata.create_all(self.engine)
        logger.info(f"Schema ready on {self.engine.url.render_as_string(hide_password=True)}")

    def session(self) -> Session:
        return self._sessionmaker()

    def dispose(self) -> None:
        self.engine.dispose()
