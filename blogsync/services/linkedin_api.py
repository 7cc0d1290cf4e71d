"""LinkedIn REST API helpers for OAuth, image uploads and posts."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import httpx

from blogsync.core.errors import TransportError
from blogsync.core.logging import get_logger
from blogsync.core.settings import Settings, get_settings

LINKEDIN_AUTH_URL = "https://www.linkedin.com/oauth/v2/authorization"
LINKEDIN_TOKEN_URL = "https://www.linkedin.com/oauth/v2/accessToken"
LINKEDIN_USERINFO_URL = "https://api.linkedin.com/v2/userinfo"
LINKEDIN_SCOPES = "openid profile w_member_social"
RESTLI_PROTOCOL_VERSION = "2.0.0"


def person_urn(person_id: str) -> str:
    if person_id.startswith("urn:li:person:"):
        return person_id
    return f"urn:li:person:{person_id}"


class LinkedInClient:
    """Authenticated calls against the versioned LinkedIn REST API."""

    def __init__(
        self,
        access_token: str,
        settings: Settings | None = None,
        http_client: httpx.Client | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.access_token = access_token
        self.settings = settings or get_settings()
        self.logger = logger or get_logger(__name__)
        self._client = http_client or httpx.Client(
            timeout=self.settings.http_timeout_seconds,
            follow_redirects=True,
        )

    @property
    def api_base(self) -> str:
        return self.settings.linkedin_api_base.rstrip("/")

    def headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "LinkedIn-Version": self.settings.linkedin_version,
            "X-Restli-Protocol-Version": RESTLI_PROTOCOL_VERSION,
        }
        if extra:
            headers.update(extra)
        return headers

    def initialize_image_upload(self, owner_urn: str) -> tuple[str, str]:
        """Register an image upload; returns ``(upload_url, image_urn)``."""
        response = self._send(
            "POST",
            f"{self.api_base}/images",
            operation="initialize_image_upload",
            params={"action": "initializeUpload"},
            headers=self.headers({"Content-Type": "application/json"}),
            json={"initializeUploadRequest": {"owner": owner_urn}},
        )
        value = _json_object(response).get("value")
        if not isinstance(value, dict) or not value.get("uploadUrl") or not value.get("image"):
            raise TransportError("LinkedIn image upload init returned no upload URL")
        return str(value["uploadUrl"]), str(value["image"])

    def upload_image_bytes(self, upload_url: str, data: bytes) -> None:
        self._send(
            "PUT",
            upload_url,
            operation="upload_image",
            headers={
                "Authorization": f"Bearer {self.access_token}",
                "Content-Type": "application/octet-stream",
            },
            content=data,
        )

    def fetch_bytes(self, url: str) -> bytes:
        """Download a public resource (no auth headers)."""
        response = self._send("GET", url, operation="fetch_image")
        return response.content

    def create_post(self, body: dict[str, Any]) -> str | None:
        """Create a post; returns the id from the ``x-restli-id`` header."""
        response = self._send(
            "POST",
            f"{self.api_base}/posts",
            operation="create_post",
            headers=self.headers({"Content-Type": "application/json"}),
            json=body,
        )
        return response.headers.get("x-restli-id")

    def close(self) -> None:
        self._client.close()

    def _send(self, method: str, url: str, *, operation: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise TransportError(f"LinkedIn {operation} failed: {exc}", url=url) from exc

        if response.status_code >= 400:
            detail = _extract_error_text(response)
            raise TransportError(
                f"LinkedIn {operation} failed {response.status_code}: {detail}",
                status_code=response.status_code,
                url=url,
            )
        return response


def build_oauth_authorize_url(*, client_id: str, redirect_uri: str, state: str) -> str:
    params = {
        "response_type": "code",
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "state": state,
        "scope": LINKEDIN_SCOPES,
    }
    return f"{LINKEDIN_AUTH_URL}?{urlencode(params)}"


def exchange_oauth_code(
    *,
    code: str,
    redirect_uri: str,
    client_id: str,
    client_secret: str,
    http_client: httpx.Client | None = None,
) -> dict[str, Any]:
    """Exchange an authorization code for an access token payload."""
    client = http_client or httpx.Client(timeout=20.0)
    try:
        response = client.post(
            LINKEDIN_TOKEN_URL,
            data={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": redirect_uri,
                "client_id": client_id,
                "client_secret": client_secret,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
    except httpx.HTTPError as exc:
        raise TransportError(f"Token exchange failed: {exc}", url=LINKEDIN_TOKEN_URL) from exc
    finally:
        if http_client is None:
            client.close()

    if response.status_code >= 400:
        raise TransportError(
            f"Token exchange failed: {response.text}",
            status_code=response.status_code,
            url=LINKEDIN_TOKEN_URL,
        )
    payload = _json_object(response)
    if not payload.get("access_token"):
        raise TransportError("Token exchange response missing access_token")
    return payload


def fetch_person_id(access_token: str, http_client: httpx.Client | None = None) -> str:
    """Return the member id (``sub``) of the token's owner."""
    client = http_client or httpx.Client(timeout=20.0)
    try:
        response = client.get(
            LINKEDIN_USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
    except httpx.HTTPError as exc:
        raise TransportError(f"Profile lookup failed: {exc}", url=LINKEDIN_USERINFO_URL) from exc
    finally:
        if http_client is None:
            client.close()

    if response.status_code >= 400:
        raise TransportError(
            f"Profile lookup failed: {response.status_code}",
            status_code=response.status_code,
            url=LINKEDIN_USERINFO_URL,
        )
    return str(_json_object(response).get("sub") or "")


def _json_object(response: httpx.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError as exc:
        raise TransportError(f"Failed to parse LinkedIn response JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise TransportError("Unexpected non-object JSON payload from LinkedIn")
    return payload


def _extract_error_text(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        text = response.text.strip()
        return text[:300] if text else "Unknown error"
    if isinstance(payload, dict):
        for key in ("message", "error_description", "error"):
            if isinstance(payload.get(key), str):
                return payload[key]
    return str(payload)[:300]
