"""Binary asset storage backed by the media directory and the assets table."""

from __future__ import annotations

import logging
import mimetypes
import re
import uuid
from pathlib import Path

from sqlalchemy.orm import Session

from blogsync.core.logging import get_logger
from blogsync.models.schema import Asset

UPLOADS_URL_PREFIX = "/uploads/"

_UNSAFE_NAME_RE = re.compile(r"[^a-zA-Z0-9._-]+")


def guess_extension(mime_type: str | None, fallback: str = ".jpg") -> str:
    if not mime_type:
        return fallback
    return mimetypes.guess_extension(mime_type.split(";")[0].strip()) or fallback


class AssetStore:
    """Store uploaded bytes on disk and record them as :class:`Asset` rows."""

    def __init__(self, db: Session, media_dir: Path, logger: logging.Logger | None = None):
        self.db = db
        self.media_dir = Path(media_dir)
        self.logger = logger or get_logger(__name__)

    def upload(
        self,
        data: bytes,
        *,
        name: str,
        extension: str = ".jpg",
        mime_type: str | None = None,
        alternative_text: str | None = None,
        caption: str | None = None,
    ) -> Asset:
        """
        Write ``data`` to the media directory and create its asset row.

        Args:
            data: Raw file bytes.
            name: Display name; also the base of the stored file name.
            extension: File extension including the dot.
            mime_type: Content type; guessed from ``extension`` when omitted.
            alternative_text: Alt text for the image.
            caption: Caption for the image.

        Returns:
            The persisted asset.
        """
        safe_name = _UNSAFE_NAME_RE.sub("_", name).strip("._-") or "asset"
        file_name = f"{safe_name}_{uuid.uuid4().hex[:8]}{extension}"
        resolved_mime = mime_type or mimetypes.guess_type(file_name)[0] or "image/jpeg"

        self.media_dir.mkdir(parents=True, exist_ok=True)
        (self.media_dir / file_name).write_bytes(data)

        asset = Asset(
            name=name,
            file_name=file_name,
            mime_type=resolved_mime,
            size=len(data),
            url=f"{UPLOADS_URL_PREFIX}{file_name}",
            alternative_text=alternative_text,
            caption=caption,
        )
        self.db.add(asset)
        self.db.commit()
        self.db.refresh(asset)

        self.logger.info(
            "Stored asset %s (%d bytes)",
            file_name,
            len(data),
            extra={"component": "asset_store", "operation": "upload", "item_id": asset.id},
        )
        return asset


def resolve_local_asset(media_dir: Path, url: str) -> Path | None:
    """Map an ``/uploads/...`` URL to a file inside ``media_dir``.

    Returns None for URLs outside the uploads prefix or paths escaping the
    media directory.
    """
    if not url.startswith(UPLOADS_URL_PREFIX):
        return None
    root = Path(media_dir).resolve()
    candidate = (root / url[len(UPLOADS_URL_PREFIX) :]).resolve()
    if root != candidate and root not in candidate.parents:
        return None
    return candidate
