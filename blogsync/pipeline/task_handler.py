"""Handler protocol for task processing."""

from __future__ import annotations

from typing import Protocol

from blogsync.models.contracts import TaskType
from blogsync.pipeline.task_context import TaskContext
from blogsync.pipeline.task_models import QueuedTask, TaskResult


class TaskHandler(Protocol):
    """Protocol for task handlers."""

    task_type: TaskType

    def handle(self, task: QueuedTask, context: TaskContext) -> TaskResult:
        """Handle a task and return a TaskResult."""
