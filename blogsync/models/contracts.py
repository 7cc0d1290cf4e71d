"""Canonical enums shared across storage, services and API surfaces."""

from __future__ import annotations

from enum import StrEnum


class ArticleStatus(StrEnum):
    """Publication state of a stored article."""

    DRAFT = "draft"
    PUBLISHED = "published"


class TaskType(StrEnum):
    """Queue task types."""

    POST_TO_LINKEDIN = "post_to_linkedin"


class TaskStatus(StrEnum):
    """Task execution status values."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class RejectionReason(StrEnum):
    """Why an ingested article was not admitted into the store."""

    TOO_SHORT = "too-short"
    LOW_DENSITY = "low-density"
    FIRST_PERSON_TITLE = "first-person-title"


class PostStatus(StrEnum):
    """Outcome of a social post attempt."""

    POSTED = "posted"
    SKIPPED = "skipped"
    FAILED = "failed"


class DocumentAction(StrEnum):
    """Store actions that emit document events."""

    CREATE = "create"
    UPDATE = "update"
    PUBLISH = "publish"


ARTICLE_UID = "article"
