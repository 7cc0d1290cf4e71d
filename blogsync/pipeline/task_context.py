"""Shared dependencies for task handlers."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from blogsync.core.settings import Settings
from blogsync.services.linkedin_posts import LinkedInPostService
from blogsync.services.queue import QueueService


@dataclass(frozen=True)
class TaskContext:
    """Container for shared task processing dependencies."""

    queue_service: QueueService
    settings: Settings
    post_service: LinkedInPostService
    logger: logging.Logger
    worker_id: str
