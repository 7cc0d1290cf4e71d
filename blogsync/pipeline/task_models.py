"""Task models for the sequential pipeline processor."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blogsync.models.contracts import TaskType


class QueuedTask(BaseModel):
    """A dequeued task as handlers see it.

    ``content_id`` is the article the task belongs to. Queue bookkeeping
    (status, timestamps) stays with the queue service.
    """

    model_config = ConfigDict(extra="ignore")

    id: int
    task_type: TaskType
    content_id: int | None = None
    payload: dict[str, Any] = Field(default_factory=dict)
    retry_count: int = 0

    @field_validator("payload", mode="before")
    @classmethod
    def payload_or_empty(cls, value: Any) -> dict[str, Any]:
        return value if isinstance(value, dict) else {}


class TaskResult(BaseModel):
    """Outcome of one handler run; ``retryable`` feeds the worker's retry policy."""

    success: bool
    error_message: str | None = None
    retryable: bool = True

    @classmethod
    def ok(cls) -> TaskResult:
        return cls(success=True)

    @classmethod
    def fail(cls, error_message: str | None = None, retryable: bool = True) -> TaskResult:
        return cls(success=False, error_message=error_message, retryable=retryable)
