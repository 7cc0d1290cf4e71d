"""Queue a LinkedIn post whenever an article is published."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import AbstractContextManager
from functools import lru_cache

from sqlalchemy.orm import Session

from blogsync.core.db import get_db
from blogsync.core.logging import get_logger
from blogsync.core.settings import Settings, get_settings
from blogsync.models.contracts import ARTICLE_UID, DocumentAction, TaskType
from blogsync.models.schema import Article
from blogsync.models.social import PublishEvent, SocialPostRequest
from blogsync.repositories.article_repository import ArticleRepository
from blogsync.services.publish_events import DocumentEventBus
from blogsync.services.queue import QueueService, get_queue_service


def resolve_image_url(article: Article, blog_base_url: str | None) -> str | None:
    """Absolute URL for remote images, base-prefixed path for local uploads."""
    if article.image is None or not article.image.url:
        return None
    url = article.image.url
    if url.startswith("http"):
        return url
    return f"{(blog_base_url or '').rstrip('/')}{url}"


def build_post_request(article: Article, blog_base_url: str | None) -> SocialPostRequest:
    return SocialPostRequest(
        title=article.title,
        content=article.content or "",
        slug=article.slug,
        image_url=resolve_image_url(article, blog_base_url),
    )


class LinkedInPublishListener:
    """Turn article publish events into ``post_to_linkedin`` tasks.

    Only enqueues; the worker performs the post and owns its failures.
    """

    def __init__(
        self,
        queue: QueueService,
        db_factory: Callable[[], AbstractContextManager[Session]] = get_db,
        settings: Settings | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.queue = queue
        self.db_factory = db_factory
        self.settings = settings or get_settings()
        self.logger = logger or get_logger(__name__)

    def __call__(self, event: PublishEvent) -> None:
        if event.uid != ARTICLE_UID or event.action != DocumentAction.PUBLISH:
            return

        self.logger.info(f"[LinkedIn] Publish detected for article {event.document_id}")
        with self.db_factory() as db:
            article = ArticleRepository(db).find_one_with_image(event.document_id)
            if article is None:
                self.logger.warning(f"[LinkedIn] Could not find article {event.document_id}")
                return
            request = build_post_request(article, self.settings.blog_base_url)
            article_id = article.id

        task_id = self.queue.enqueue(
            TaskType.POST_TO_LINKEDIN,
            content_id=article_id,
            payload=request.model_dump(),
        )
        self.logger.info(
            "Queued LinkedIn post",
            extra={
                "component": "publish_listener",
                "operation": "enqueue_post",
                "item_id": event.document_id,
                "context_data": {"task_id": task_id, "title": request.title},
            },
        )


@lru_cache
def get_event_bus() -> DocumentEventBus:
    """Process-wide event bus with the LinkedIn listener attached."""
    bus = DocumentEventBus()
    bus.subscribe(LinkedInPublishListener(queue=get_queue_service()))
    return bus
