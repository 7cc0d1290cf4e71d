from collections.abc import Callable
from contextlib import AbstractContextManager
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from blogsync.core.db import get_db
from blogsync.core.logging import get_logger
from blogsync.models.contracts import TaskStatus, TaskType
from blogsync.models.schema import ProcessingTask

logger = get_logger(__name__)


def _utcnow() -> datetime:
    # Columns are naive UTC
    return datetime.now(UTC).replace(tzinfo=None)


class QueueService:
    """Simple database-backed task queue."""

    def __init__(self, db_factory: Callable[[], AbstractContextManager[Session]] = get_db):
        self._db_factory = db_factory

    def enqueue(
        self,
        task_type: TaskType,
        content_id: int | None = None,
        payload: dict[str, Any] | None = None,
    ) -> int:
        """
        Add a task to the queue.

        Returns:
            Task ID
        """
        with self._db_factory() as db:
            task = ProcessingTask(
                task_type=task_type.value,
                content_id=content_id,
                payload=payload or {},
                status=TaskStatus.PENDING.value,
            )
            db.add(task)
            db.commit()
            db.refresh(task)

            logger.info(f"Enqueued task {task.id} of type {task_type}")
            return task.id

    def dequeue(
        self, task_type: TaskType | None = None, worker_id: str = "worker"
    ) -> dict[str, Any] | None:
        """
        Claim the next pending task whose scheduled time has passed.

        Args:
            task_type: Filter by task type (optional)
            worker_id: ID of the worker claiming the task

        Returns:
            Task data as dictionary or None if queue is empty
        """
        with self._db_factory() as db:
            query = db.query(ProcessingTask).filter(
                ProcessingTask.status == TaskStatus.PENDING.value,
                ProcessingTask.created_at <= _utcnow(),
            )
            if task_type:
                query = query.filter(ProcessingTask.task_type == task_type.value)

            query = query.order_by(ProcessingTask.retry_count, ProcessingTask.created_at)
            task = query.with_for_update(skip_locked=True).first()
            if not task:
                return None

            task.status = TaskStatus.PROCESSING.value
            task.started_at = _utcnow()
            db.commit()

            # Copy out so callers never touch a detached instance
            task_data = {
                "id": task.id,
                "task_type": task.task_type,
                "content_id": task.content_id,
                "payload": task.payload,
                "retry_count": task.retry_count,
                "status": task.status,
                "created_at": task.created_at,
                "started_at": task.started_at,
            }
            logger.debug(f"Dequeued task {task_data['id']} for {worker_id}")
            return task_data

    def complete_task(self, task_id: int, success: bool = True, error_message: str | None = None):
        """Mark a task as completed or failed."""
        with self._db_factory() as db:
            task = db.query(ProcessingTask).filter(ProcessingTask.id == task_id).first()
            if not task:
                logger.error(f"Task {task_id} not found")
                return

            task.completed_at = _utcnow()
            if success:
                task.status = TaskStatus.COMPLETED.value
                logger.info(f"Task {task_id} completed successfully")
            else:
                task.status = TaskStatus.FAILED.value
                task.error_message = error_message
                logger.error(f"Task {task_id} failed: {error_message}")
            db.commit()

    def retry_task(self, task_id: int, delay_seconds: int = 60):
        """Put a task back in the queue after a delay."""
        with self._db_factory() as db:
            task = db.query(ProcessingTask).filter(ProcessingTask.id == task_id).first()
            if not task:
                logger.error(f"Task {task_id} not found")
                return

            task.status = TaskStatus.PENDING.value
            task.retry_count = (task.retry_count or 0) + 1
            task.started_at = None
            task.completed_at = None
            task.created_at = _utcnow() + timedelta(seconds=delay_seconds)
            db.commit()
            logger.info(f"Task {task_id} scheduled for retry (attempt {task.retry_count})")

    def get_queue_stats(self) -> dict[str, Any]:
        """Count tasks by status and pending tasks by type."""
        with self._db_factory() as db:
            status_counts = (
                db.query(ProcessingTask.status, func.count(ProcessingTask.id))
                .group_by(ProcessingTask.status)
                .all()
            )
            type_counts = (
                db.query(ProcessingTask.task_type, func.count(ProcessingTask.id))
                .filter(ProcessingTask.status == TaskStatus.PENDING.value)
                .group_by(ProcessingTask.task_type)
                .all()
            )
            return {
                "by_status": dict(status_counts),
                "pending_by_type": dict(type_counts),
            }


# Global instance
_queue_service = None


def get_queue_service() -> QueueService:
    """Get the global queue service instance."""
    global _queue_service
    if _queue_service is None:
        _queue_service = QueueService()
    return _queue_service
