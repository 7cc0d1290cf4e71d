"""Task handler that submits a queued LinkedIn post."""

from __future__ import annotations

from pydantic import ValidationError

from blogsync.models.contracts import PostStatus, TaskType
from blogsync.models.social import SocialPostRequest
from blogsync.pipeline.task_context import TaskContext
from blogsync.pipeline.task_models import QueuedTask, TaskResult


class PostToLinkedInHandler:
    """Post one published article to LinkedIn.

    Failed posts are not retried: a retry after a timeout could publish the
    same article twice.
    """

    task_type = TaskType.POST_TO_LINKEDIN

    def handle(self, task: QueuedTask, context: TaskContext) -> TaskResult:
        try:
            request = SocialPostRequest.model_validate(task.payload)
        except ValidationError as exc:
            context.logger.error(
                "Invalid LinkedIn post payload",
                extra={
                    "component": "post_to_linkedin",
                    "operation": "parse_payload",
                    "item_id": task.id,
                    "context_data": {"error": str(exc)},
                },
            )
            return TaskResult.fail(f"Invalid payload: {exc}", retryable=False)

        result = context.post_service.create_post(request)
        context.logger.info(
            "LinkedIn post task finished",
            extra={
                "component": "post_to_linkedin",
                "operation": "create_post",
                "item_id": task.content_id,
                "context_data": {
                    "status": result.status.value,
                    "post_id": result.post_id,
                    "slug": request.slug,
                },
            },
        )
        if result.status == PostStatus.FAILED:
            return TaskResult.fail(result.error, retryable=False)
        return TaskResult.ok()
