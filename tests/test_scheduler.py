"""Tests for the scheduled dev.to sync."""

from unittest.mock import Mock

import schedule

from blogsync import scheduler
from blogsync.models.articles import SyncOutcome
from blogsync.repositories.article_repository import SyncSettingsRepository


def test_disabled_toggle_skips_sync(monkeypatch, db_factory, settings):
    run = Mock()
    monkeypatch.setattr(scheduler, "run_devto_sync", run)

    assert scheduler.run_scheduled_sync(db_factory, settings=settings) is None
    run.assert_not_called()


def test_enabled_toggle_runs_sync(monkeypatch, db_factory, db_session, settings):
    SyncSettingsRepository(db_session).set_sync_enabled(True)
    outcome = SyncOutcome(created=2)
    run = Mock(return_value=outcome)
    monkeypatch.setattr(scheduler, "run_devto_sync", run)

    assert scheduler.run_scheduled_sync(db_factory, settings=settings) is outcome
    run.assert_called_once()
    assert run.call_args.kwargs["settings"] is settings


def test_sync_errors_are_logged_not_raised(monkeypatch, db_factory, db_session, settings):
    SyncSettingsRepository(db_session).set_sync_enabled(True)
    monkeypatch.setattr(scheduler, "run_devto_sync", Mock(side_effect=RuntimeError("dev.to down")))
    mock_logger = Mock()
    monkeypatch.setattr(scheduler, "logger", mock_logger)

    assert scheduler.run_scheduled_sync(db_factory, settings=settings) is None
    assert "dev.to down" in mock_logger.error.call_args.args[0]


def test_register_jobs_uses_interval(settings):
    settings.devto_sync_interval_minutes = 15
    jobs = schedule.Scheduler()

    job = scheduler.register_jobs(jobs, settings)

    assert job.interval == 15
    assert job.unit == "minutes"
    assert jobs.jobs == [job]
