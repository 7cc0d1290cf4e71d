"""Compose and submit LinkedIn posts for published articles."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from blogsync.core.errors import ConfigurationMissing, TransportError
from blogsync.core.logging import get_logger
from blogsync.core.settings import Settings, get_settings
from blogsync.models.social import SocialPostRequest, SocialPostResult
from blogsync.services.asset_store import resolve_local_asset
from blogsync.services.linkedin_api import LinkedInClient, person_urn
from blogsync.services.markdown_rewriter import MarkdownRewriter, get_markdown_rewriter
from blogsync.services.styled_text import to_bold
from blogsync.services.truncation import article_url, build_read_more, truncate_to_limit

UNAUTHORIZED = 401

ClientFactory = Callable[[str], LinkedInClient]


class LinkedInPostService:
    """Build commentary from an article and publish it as a LinkedIn post.

    ``create_post`` never raises: missing credentials are a skip, and every
    transport failure becomes a failed :class:`SocialPostResult`.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        rewriter: MarkdownRewriter | None = None,
        client_factory: ClientFactory | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.rewriter = rewriter or get_markdown_rewriter(self.settings.linkedin_post_format)
        self.logger = logger or get_logger(__name__)
        self._client_factory = client_factory or (
            lambda token: LinkedInClient(token, settings=self.settings, logger=self.logger)
        )

    def build_commentary(self, title: str, content: str, slug: str | None) -> str:
        """Bold title, rewritten body, cut to the post length budget."""
        formatted = self.rewriter.rewrite(content)
        full = f"{to_bold(title)}\n\n{formatted}" if formatted else to_bold(title)
        read_more = build_read_more(slug, self.settings.blog_base_url, self.settings.site_url)
        return truncate_to_limit(full, self.settings.linkedin_max_length, read_more)

    def create_post(self, request: SocialPostRequest) -> SocialPostResult:
        try:
            access_token, author_id = self._require_credentials()
        except ConfigurationMissing as exc:
            self.logger.warning(f"[LinkedIn] {exc}. Skipping post.")
            return SocialPostResult.skipped(str(exc))

        client = self._client_factory(access_token)
        try:
            return self._submit(client, author_id, request)
        finally:
            client.close()

    def _require_credentials(self) -> tuple[str, str]:
        token = (self.settings.linkedin_access_token or "").strip()
        author_id = (self.settings.linkedin_person_urn or "").strip()
        if not token or not author_id:
            raise ConfigurationMissing("Missing LINKEDIN_ACCESS_TOKEN or LINKEDIN_PERSON_URN")
        return token, author_id

    def _submit(
        self, client: LinkedInClient, author_id: str, request: SocialPostRequest
    ) -> SocialPostResult:
        commentary = self.build_commentary(request.title, request.content, request.slug)
        self.logger.info(f"[LinkedIn] Commentary length: {len(commentary)}")

        author = person_urn(author_id)
        body: dict[str, Any] = {
            "author": author,
            "commentary": commentary,
            "visibility": "PUBLIC",
            "distribution": {"feedDistribution": "MAIN_FEED"},
            "lifecycleState": "PUBLISHED",
        }

        if request.image_url:
            image_urn = self._upload_image(client, author, request.image_url)
            if image_urn:
                body["content"] = {"media": {"id": image_urn}}

        # Link card only when there is no image to override
        if "content" not in body and self.settings.blog_base_url and request.slug:
            body["content"] = {
                "article": {
                    "source": article_url(
                        request.slug, self.settings.blog_base_url, self.settings.site_url
                    ),
                    "title": request.title,
                }
            }

        self.logger.debug(f"[LinkedIn] Request body: {json.dumps(body, ensure_ascii=False)}")

        try:
            post_id = client.create_post(body)
        except TransportError as exc:
            if exc.status_code == UNAUTHORIZED:
                self.logger.error(
                    "[LinkedIn] Access token expired or invalid (401). "
                    "Visit /api/linkedin/auth to re-authenticate."
                )
            else:
                self.logger.error(
                    f"[LinkedIn] Failed to create post: {exc}",
                    extra={
                        "component": "linkedin_posts",
                        "operation": "create_post",
                        "item_id": request.slug,
                        "context_data": {"status_code": exc.status_code},
                    },
                )
            return SocialPostResult.failed(str(exc))

        self.logger.info(f"[LinkedIn] Post created successfully. ID: {post_id or 'unknown'}")
        return SocialPostResult.posted(post_id)

    def _upload_image(self, client: LinkedInClient, owner: str, image_url: str) -> str | None:
        """Initialize, fetch bytes, transfer. Any failure means no image."""
        try:
            upload_url, image_urn = client.initialize_image_upload(owner)
            data = self._read_image(client, image_url)
            client.upload_image_bytes(upload_url, data)
        except (TransportError, OSError) as exc:
            self.logger.error(f"[LinkedIn] Image upload error: {exc}")
            return None

        self.logger.info(f"[LinkedIn] Image uploaded successfully: {image_urn}")
        return image_urn

    def _read_image(self, client: LinkedInClient, image_url: str) -> bytes:
        if image_url.startswith("http"):
            return client.fetch_bytes(image_url)

        path = resolve_local_asset(self.settings.media_dir, image_url)
        if path is None or not path.is_file():
            raise FileNotFoundError(f"Local image not found: {image_url}")
        return path.read_bytes()


_post_service: LinkedInPostService | None = None


def get_linkedin_post_service() -> LinkedInPostService:
    """Return a cached post service."""
    global _post_service
    if _post_service is None:
        _post_service = LinkedInPostService()
    return _post_service
