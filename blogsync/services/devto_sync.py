"""Import new dev.to articles into the article store as drafts."""

from __future__ import annotations

import logging
import re
from pathlib import PurePosixPath
from urllib.parse import urlparse

from sqlalchemy.orm import Session

from blogsync.core.errors import TransportError
from blogsync.core.logging import get_logger
from blogsync.core.settings import Settings, get_settings
from blogsync.models.articles import ArticleDetail, ArticleSummary, SyncOutcome
from blogsync.repositories.article_repository import ArticleRepository, rich_text_block
from blogsync.services.article_validation import validate_article
from blogsync.services.asset_store import AssetStore, guess_extension
from blogsync.services.devto_api import DevToClient
from blogsync.services.fallback_image import get_fallback_image_url
from blogsync.utils.dates import format_date_label, read_time_label

_EXTENSION_RE = re.compile(r"^\.[A-Za-z0-9]{1,5}$")


class DevToSyncService:
    """Page through dev.to, skip known slugs, validate, and create drafts.

    Runs strictly sequentially. A transport error on a page or detail fetch
    aborts the rest of the run; articles created before it stay created.
    """

    def __init__(
        self,
        client: DevToClient,
        articles: ArticleRepository,
        assets: AssetStore | None = None,
        settings: Settings | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.client = client
        self.articles = articles
        self.assets = assets
        self.settings = settings or get_settings()
        self.logger = logger or get_logger(__name__)

    def sync_articles(self) -> SyncOutcome:
        per_page = self.settings.devto_per_page
        max_pages = self.settings.devto_max_pages
        outcome = SyncOutcome()

        self.logger.info("[DevTo] Starting article sync...")
        for page in range(1, max_pages + 1):
            summaries = self.client.fetch_articles_page(page, per_page)
            if not summaries:
                self.logger.info(f"[DevTo] No more articles on page {page}, stopping.")
                break

            self.logger.info(f"[DevTo] Processing page {page} ({len(summaries)} articles)...")
            for summary in summaries:
                self._process_summary(summary, outcome)

            # A short page is the last one
            if len(summaries) < per_page:
                break

        self.logger.info(
            f"[DevTo] Sync complete - created: {outcome.created}, "
            f"skipped: {outcome.skipped}, rejected: {outcome.rejected}",
            extra={
                "component": "devto_sync",
                "operation": "sync_articles",
                "context_data": outcome.as_dict(),
            },
        )
        return outcome

    def _process_summary(self, summary: ArticleSummary, outcome: SyncOutcome) -> None:
        if self.articles.find_by_slug(summary.slug) is not None:
            outcome.record_skipped()
            return

        detail = self.client.fetch_article(summary.id)

        validation = validate_article(detail.title, detail.body_markdown)
        if not validation.accepted:
            outcome.record_rejected()
            self.logger.info(
                f'[DevTo] Rejected "{detail.title}": {validation.detail}',
                extra={
                    "component": "devto_sync",
                    "operation": "validate",
                    "item_id": detail.slug,
                    "context_data": {"reason": str(validation.reason)},
                },
            )
            return

        image_url = detail.cover_image or get_fallback_image_url(detail.tag_list)
        image_id = self._import_image(image_url, detail)

        self.articles.create(
            title=detail.title,
            slug=detail.slug,
            content=detail.body_markdown,
            image_id=image_id,
            date=format_date_label(detail.published_at),
            read_time=read_time_label(detail.reading_time_minutes),
            blocks=[rich_text_block(detail.body_markdown)],
        )
        outcome.record_created()
        self.logger.info(f'[DevTo] Created draft article: "{detail.title}"')

    def _import_image(self, image_url: str, detail: ArticleDetail) -> int | None:
        """Copy a remote image into the asset store; None when that fails."""
        if self.assets is None or not image_url:
            return None
        try:
            data, content_type = self.client.download(image_url)
            suffix = PurePosixPath(urlparse(image_url).path).suffix
            if not _EXTENSION_RE.match(suffix):
                suffix = ""
            asset = self.assets.upload(
                data,
                name=detail.slug,
                extension=suffix or guess_extension(content_type),
                mime_type=content_type.split(";")[0].strip() if content_type else None,
                alternative_text=f"Cover image for {detail.slug}",
                caption=detail.slug,
            )
        except (TransportError, OSError) as exc:
            self.logger.warning(f"[DevTo] Image upload failed for {detail.slug}: {exc}")
            return None
        return asset.id


def run_devto_sync(
    db: Session,
    *,
    settings: Settings | None = None,
    client: DevToClient | None = None,
) -> SyncOutcome:
    """Entry point shared by the HTTP action and the scheduler."""
    settings = settings or get_settings()
    owns_client = client is None
    client = client or DevToClient(settings=settings)
    try:
        service = DevToSyncService(
            client=client,
            articles=ArticleRepository(db),
            assets=AssetStore(db, settings.media_dir),
            settings=settings,
        )
        return service.sync_articles()
    finally:
        if owns_client:
            client.close()
