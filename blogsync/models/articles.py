"""Models for articles fetched from dev.to and the outcome of a sync run."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blogsync.models.contracts import RejectionReason


class ArticleSummary(BaseModel):
    """Entry from a dev.to article list page."""

    model_config = ConfigDict(extra="ignore")

    id: int
    slug: str
    title: str = ""


class ArticleDetail(BaseModel):
    """Full dev.to article payload."""

    model_config = ConfigDict(extra="ignore")

    id: int
    title: str = ""
    slug: str
    body_markdown: str = ""
    cover_image: str | None = None
    tag_list: list[str] | str | None = None
    published_at: str | None = None
    reading_time_minutes: int | None = None

    @field_validator("body_markdown", "title", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class ValidationResult(BaseModel):
    """Accept/reject verdict for a fetched article."""

    accepted: bool
    reason: RejectionReason | None = None
    detail: str | None = None

    @classmethod
    def accept(cls) -> ValidationResult:
        return cls(accepted=True)

    @classmethod
    def reject(cls, reason: RejectionReason, detail: str) -> ValidationResult:
        return cls(accepted=False, reason=reason, detail=detail)


@dataclass
class SyncOutcome:
    """Counters for one sync run. Exactly one counter moves per summary."""

    created: int = 0
    skipped: int = 0
    rejected: int = 0

    def record_created(self) -> None:
        self.created += 1

    def record_skipped(self) -> None:
        self.skipped += 1

    def record_rejected(self) -> None:
        self.rejected += 1

    @property
    def processed(self) -> int:
        return self.created + self.skipped + self.rejected

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class SyncResponse(BaseModel):
    """Response body of the sync endpoint."""

    message: str = Field(default="Dev.to sync completed")
    created: int
    skipped: int
    rejected: int


class ArticleResponse(BaseModel):
    """Stored article as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    document_id: str
    title: str
    slug: str
    status: str
    date: str | None = None
    read_time: str | None = None
    published_at: datetime | None = None


class SyncSettingsPayload(BaseModel):
    sync_enabled: bool
