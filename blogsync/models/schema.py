import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from blogsync.core.db import Base
from blogsync.models.contracts import ArticleStatus, TaskStatus


def _new_document_id() -> str:
    return uuid.uuid4().hex


class Asset(Base):
    """Uploaded binary asset; bytes live in the media directory."""

    __tablename__ = "assets"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    file_name = Column(String(300), nullable=False, unique=True)
    mime_type = Column(String(100), nullable=False)
    size = Column(Integer, nullable=False, default=0)
    url = Column(String(500), nullable=False)
    alternative_text = Column(String(500), nullable=True)
    caption = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Article(Base):
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True)
    document_id = Column(String(32), nullable=False, unique=True, default=_new_document_id)
    title = Column(String(500), nullable=False)
    slug = Column(String(300), nullable=False, unique=True)

    image_id = Column(Integer, ForeignKey("assets.id"), nullable=True)
    image = relationship(Asset, lazy="joined")

    # Display labels, e.g. "Mar 4, 2025" and "6 min read"
    date = Column(String(50), nullable=True)
    read_time = Column(String(50), nullable=True)

    content = Column(Text, nullable=False, default="")
    blocks = Column(JSON, default=list, nullable=False)

    status = Column(String(20), default=ArticleStatus.DRAFT.value, nullable=False, index=True)
    published_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (Index("idx_article_status_created", "status", "created_at"),)


class SyncSetting(Base):
    """Single-row toggle for the scheduled dev.to sync."""

    __tablename__ = "sync_settings"

    id = Column(Integer, primary_key=True)
    sync_enabled = Column(Boolean, default=False, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class ProcessingTask(Base):
    """Database-backed task queue row."""

    __tablename__ = "processing_tasks"

    id = Column(Integer, primary_key=True)
    task_type = Column(String(50), nullable=False, index=True)
    content_id = Column(Integer, nullable=True, index=True)
    payload = Column(JSON, default=dict)
    status = Column(String(20), default=TaskStatus.PENDING.value, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    error_message = Column(Text, nullable=True)
    retry_count = Column(Integer, default=0)

    __table_args__ = (Index("idx_task_status_created", "status", "created_at"),)
