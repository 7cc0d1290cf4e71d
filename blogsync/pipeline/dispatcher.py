"""Route queued tasks to the handler registered for their type."""

from __future__ import annotations

from collections.abc import Iterable

from blogsync.models.contracts import TaskType
from blogsync.pipeline.task_context import TaskContext
from blogsync.pipeline.task_handler import TaskHandler
from blogsync.pipeline.task_models import QueuedTask, TaskResult


class TaskDispatcher:
    """One handler per task type; a task with no handler fails for good."""

    def __init__(self, handlers: Iterable[TaskHandler]) -> None:
        self._handlers: dict[TaskType, TaskHandler] = {}
        for handler in handlers:
            if handler.task_type in self._handlers:
                raise ValueError(f"Duplicate handler for task type {handler.task_type}")
            self._handlers[handler.task_type] = handler

    @property
    def task_types(self) -> frozenset[TaskType]:
        return frozenset(self._handlers)

    def dispatch(self, task: QueuedTask, context: TaskContext) -> TaskResult:
        handler = self._handlers.get(task.task_type)
        if handler is not None:
            return handler.handle(task, context)

        context.logger.error(
            "No handler for task %s (%s)",
            task.id,
            task.task_type.value,
            extra={
                "component": "task_dispatcher",
                "operation": "dispatch",
                "item_id": task.id,
                "context_data": {"task_type": task.task_type.value, "worker": context.worker_id},
            },
        )
        return TaskResult.fail(f"No handler for task type {task.task_type.value}", retryable=False)
