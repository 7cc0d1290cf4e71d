"""dev.to public API client."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from blogsync.core.errors import TransportError
from blogsync.core.logging import get_logger
from blogsync.core.settings import Settings, get_settings
from blogsync.models.articles import ArticleDetail, ArticleSummary

USER_AGENT = "blogsync/1.0 (+https://dev.to)"


def _is_transient(exc: BaseException) -> bool:
    """Network failures and 5xx responses are worth another attempt."""
    if not isinstance(exc, TransportError):
        return False
    return exc.status_code is None or exc.status_code >= 500


class DevToClient:
    """Read-only access to dev.to article listings and details."""

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.Client | None = None,
        logger: logging.Logger | None = None,
        retry_wait: wait_base | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.logger = logger or get_logger(__name__)
        self._client = http_client or httpx.Client(
            timeout=self.settings.http_timeout_seconds,
            follow_redirects=True,
            headers={"accept": "application/json", "user-agent": USER_AGENT},
        )
        self._retry_wait = retry_wait or wait_exponential(multiplier=1, min=2, max=8)

    @property
    def api_base(self) -> str:
        return self.settings.devto_api_base.rstrip("/")

    def fetch_articles_page(self, page: int = 1, per_page: int = 20) -> list[ArticleSummary]:
        """Fetch one page of the latest articles."""
        payload = self._get_json(
            f"{self.api_base}/articles/latest",
            params={"per_page": per_page, "page": page},
            what=f"articles page {page}",
        )
        if not isinstance(payload, list):
            raise TransportError(f"[DevTo] Unexpected payload for articles page {page}")
        return [ArticleSummary.model_validate(item) for item in payload if isinstance(item, dict)]

    def fetch_article(self, article_id: int) -> ArticleDetail:
        """Fetch a full article including its markdown body."""
        payload = self._get_json(
            f"{self.api_base}/articles/{article_id}",
            params=None,
            what=f"article {article_id}",
        )
        if not isinstance(payload, dict):
            raise TransportError(f"[DevTo] Unexpected payload for article {article_id}")
        return ArticleDetail.model_validate(payload)

    def download(self, url: str) -> tuple[bytes, str | None]:
        """Download a binary resource, returning its bytes and content type."""
        try:
            response = self._client.get(url)
        except httpx.HTTPError as exc:
            raise TransportError(f"Failed to download {url}: {exc}", url=url) from exc
        if response.status_code >= 400:
            raise TransportError(
                f"Failed to download {url}: {response.status_code}",
                status_code=response.status_code,
                url=url,
            )
        return response.content, response.headers.get("content-type")

    def close(self) -> None:
        self._client.close()

    def _get_json(self, url: str, *, params: dict[str, Any] | None, what: str) -> Any:
        retrying = Retrying(
            stop=stop_after_attempt(max(1, self.settings.http_max_retries)),
            wait=self._retry_wait,
            retry=retry_if_exception(_is_transient),
            reraise=True,
        )
        return retrying(self._get_json_once, url, params=params, what=what)

    def _get_json_once(self, url: str, *, params: dict[str, Any] | None, what: str) -> Any:
        try:
            response = self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            self.logger.warning(f"[DevTo] Request for {what} failed: {exc}")
            raise TransportError(f"[DevTo] Failed to fetch {what}: {exc}", url=url) from exc

        if response.status_code >= 400:
            self.logger.error(
                "dev.to request failed",
                extra={
                    "component": "devto_api",
                    "operation": "get",
                    "context_data": {
                        "url": url,
                        "params": params,
                        "status_code": response.status_code,
                    },
                },
            )
            raise TransportError(
                f"[DevTo] Failed to fetch {what}: {response.status_code}",
                status_code=response.status_code,
                url=url,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"[DevTo] Invalid JSON for {what}: {exc}", url=url) from exc
