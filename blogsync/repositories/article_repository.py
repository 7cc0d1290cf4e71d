"""Article store: lookups, creation with lifecycle defaults, and publishing."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.orm import Session

from blogsync.core.logging import get_logger
from blogsync.models.contracts import ARTICLE_UID, ArticleStatus, DocumentAction
from blogsync.models.schema import Article, SyncSetting
from blogsync.models.social import PublishEvent
from blogsync.services.publish_events import DocumentEventBus
from blogsync.utils.dates import calculate_read_time, format_date_label

RICH_TEXT_COMPONENT = "shared.rich-text"


def rich_text_block(body: str) -> dict[str, Any]:
    return {"__component": RICH_TEXT_COMPONENT, "body": body}


class ArticleRepository:
    """Persistence for articles; emits document events to the event bus."""

    def __init__(
        self,
        db: Session,
        events: DocumentEventBus | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.db = db
        self.events = events
        self.logger = logger or get_logger(__name__)

    def find_by_slug(self, slug: str) -> Article | None:
        return self.db.query(Article).filter(Article.slug == slug).first()

    def get(self, document_id: str) -> Article | None:
        return self.db.query(Article).filter(Article.document_id == document_id).first()

    def find_one_with_image(self, document_id: str) -> Article | None:
        """Fetch an article with its image asset loaded."""
        article = self.get(document_id)
        if article is not None:
            # Touch the relationship while the session is open
            _ = article.image
        return article

    def create(
        self,
        *,
        title: str,
        slug: str,
        content: str = "",
        image_id: int | None = None,
        date: str | None = None,
        read_time: str | None = None,
        blocks: list[dict[str, Any]] | None = None,
    ) -> Article:
        """Create a draft article, filling in the date and read-time labels."""
        article = Article(
            title=title,
            slug=slug,
            content=content or "",
            image_id=image_id,
            date=date or format_date_label(datetime.now(UTC)),
            read_time=read_time or calculate_read_time(content),
            blocks=blocks if blocks is not None else [],
            status=ArticleStatus.DRAFT.value,
        )
        self.db.add(article)
        self.db.commit()
        self.db.refresh(article)
        self._emit(DocumentAction.CREATE, article)
        return article

    def update(self, document_id: str, **fields: Any) -> Article | None:
        """Update article fields; read time follows content changes."""
        article = self.get(document_id)
        if article is None:
            return None
        for key, value in fields.items():
            if not hasattr(Article, key):
                raise ValueError(f"Unknown article field: {key}")
            setattr(article, key, value)
        if "content" in fields:
            article.read_time = calculate_read_time(fields["content"])
        self.db.commit()
        self.db.refresh(article)
        self._emit(DocumentAction.UPDATE, article)
        return article

    def publish(self, document_id: str) -> Article | None:
        """Mark an article as published and notify listeners."""
        article = self.get(document_id)
        if article is None:
            return None
        article.status = ArticleStatus.PUBLISHED.value
        article.published_at = datetime.now(UTC).replace(tzinfo=None)
        self.db.commit()
        self.db.refresh(article)
        self.logger.info(
            "Published article %s",
            document_id,
            extra={"component": "article_repository", "operation": "publish"},
        )
        self._emit(DocumentAction.PUBLISH, article)
        return article

    def _emit(self, action: DocumentAction, article: Article) -> None:
        if self.events is None:
            return
        self.events.emit(
            PublishEvent(uid=ARTICLE_UID, action=action.value, document_id=article.document_id)
        )


class SyncSettingsRepository:
    """Read and write the scheduled-sync toggle."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self) -> SyncSetting:
        setting = self.db.query(SyncSetting).order_by(SyncSetting.id).first()
        if setting is None:
            setting = SyncSetting(sync_enabled=False)
            self.db.add(setting)
            self.db.commit()
            self.db.refresh(setting)
        return setting

    def is_sync_enabled(self) -> bool:
        setting = self.db.query(SyncSetting).order_by(SyncSetting.id).first()
        return bool(setting and setting.sync_enabled)

    def set_sync_enabled(self, enabled: bool) -> SyncSetting:
        setting = self.get()
        setting.sync_enabled = enabled
        self.db.commit()
        self.db.refresh(setting)
        return setting
