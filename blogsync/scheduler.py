"""
Scheduled dev.to sync.

Runs the import every ``DEVTO_SYNC_INTERVAL_MINUTES`` while the stored sync
toggle is on. Start with ``python -m blogsync.scheduler``.
"""

import time
from collections.abc import Callable
from contextlib import AbstractContextManager

import schedule
from sqlalchemy.orm import Session

from blogsync.core.db import get_db, init_db
from blogsync.core.logging import get_logger, setup_logging
from blogsync.core.settings import Settings, get_settings
from blogsync.models.articles import SyncOutcome
from blogsync.repositories.article_repository import SyncSettingsRepository
from blogsync.services.devto_api import DevToClient
from blogsync.services.devto_sync import run_devto_sync

logger = get_logger(__name__)


def run_scheduled_sync(
    db_factory: Callable[[], AbstractContextManager[Session]] = get_db,
    settings: Settings | None = None,
    client: DevToClient | None = None,
) -> SyncOutcome | None:
    """Run one sync if enabled. Errors are logged, never raised."""
    settings = settings or get_settings()
    try:
        with db_factory() as db:
            if not SyncSettingsRepository(db).is_sync_enabled():
                logger.debug("[DevTo] Scheduled sync disabled, skipping")
                return None
            logger.info("[DevTo] Running scheduled sync")
            return run_devto_sync(db, settings=settings, client=client)
    except Exception as e:
        logger.error(
            f"[DevTo] Scheduled sync failed: {e}",
            exc_info=True,
            extra={"component": "scheduler", "operation": "run_scheduled_sync"},
        )
        return None


def register_jobs(scheduler: schedule.Scheduler, settings: Settings) -> schedule.Job:
    return scheduler.every(settings.devto_sync_interval_minutes).minutes.do(
        run_scheduled_sync, settings=settings
    )


def run_scheduled_mode(poll_seconds: int = 30) -> None:
    settings = get_settings()
    scheduler = schedule.Scheduler()
    register_jobs(scheduler, settings)

    logger.info(
        f"Starting scheduler (dev.to sync every {settings.devto_sync_interval_minutes} minutes)"
    )
    while True:
        try:
            scheduler.run_pending()
            time.sleep(poll_seconds)
        except KeyboardInterrupt:
            logger.info("Received interrupt signal, shutting down")
            break
        except Exception as e:
            logger.error(f"Error in scheduler loop: {e}", exc_info=True)
            time.sleep(60)


def main() -> None:
    setup_logging()
    init_db()
    run_scheduled_mode()


if __name__ == "__main__":
    main()
