"""Endpoints for the dev.to import."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from blogsync.core.db import get_db_session
from blogsync.core.logging import get_logger
from blogsync.models.articles import SyncResponse, SyncSettingsPayload
from blogsync.repositories.article_repository import SyncSettingsRepository
from blogsync.services.devto_sync import run_devto_sync

logger = get_logger(__name__)

router = APIRouter(prefix="/api/devto", tags=["devto"])


@router.post("/sync", response_model=SyncResponse)
def sync_devto(db: Annotated[Session, Depends(get_db_session)]) -> SyncResponse:
    """Import new dev.to articles as drafts."""
    try:
        outcome = run_devto_sync(db)
    except Exception as exc:
        logger.error(
            f"[DevTo] Sync failed: {exc}",
            exc_info=True,
            extra={"component": "devto_router", "operation": "sync"},
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"Sync failed: {exc}"
        ) from exc
    return SyncResponse(**outcome.as_dict())


@router.get("/settings", response_model=SyncSettingsPayload)
def get_sync_settings(db: Annotated[Session, Depends(get_db_session)]) -> SyncSettingsPayload:
    return SyncSettingsPayload(sync_enabled=SyncSettingsRepository(db).is_sync_enabled())


@router.put("/settings", response_model=SyncSettingsPayload)
def update_sync_settings(
    payload: SyncSettingsPayload,
    db: Annotated[Session, Depends(get_db_session)],
) -> SyncSettingsPayload:
    """Turn the scheduled sync on or off."""
    setting = SyncSettingsRepository(db).set_sync_enabled(payload.sync_enabled)
    logger.info(f"[DevTo] Scheduled sync {'enabled' if setting.sync_enabled else 'disabled'}")
    return SyncSettingsPayload(sync_enabled=setting.sync_enabled)
