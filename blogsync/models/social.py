"""Models for the publish-to-LinkedIn flow."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from blogsync.models.contracts import PostStatus


class PublishEvent(BaseModel):
    """Document event emitted by the article store."""

    model_config = ConfigDict(frozen=True)

    uid: str
    action: str
    document_id: str


class SocialPostRequest(BaseModel):
    """Content for one LinkedIn post, built from a just-published article."""

    title: str
    content: str = ""
    slug: str | None = None
    image_url: str | None = None


class SocialPostResult(BaseModel):
    """Outcome of a LinkedIn post attempt."""

    status: PostStatus
    post_id: str | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.status == PostStatus.POSTED

    @classmethod
    def posted(cls, post_id: str | None) -> SocialPostResult:
        return cls(status=PostStatus.POSTED, post_id=post_id)

    @classmethod
    def skipped(cls, reason: str) -> SocialPostResult:
        return cls(status=PostStatus.SKIPPED, error=reason)

    @classmethod
    def failed(cls, error: str) -> SocialPostResult:
        return cls(status=PostStatus.FAILED, error=error)
