"""Tests for the sequential task processor."""

from unittest.mock import Mock

import pytest

from blogsync.models.contracts import TaskStatus, TaskType
from blogsync.models.schema import ProcessingTask
from blogsync.models.social import SocialPostRequest, SocialPostResult
from blogsync.pipeline.sequential_task_processor import SequentialTaskProcessor
from blogsync.services.queue import QueueService


@pytest.fixture
def post_service():
    service = Mock()
    service.create_post.return_value = SocialPostResult.posted("urn:li:share:1")
    return service


@pytest.fixture
def processor(settings, post_service):
    """Create a processor instance for testing."""
    return SequentialTaskProcessor(queue_service=Mock(), settings=settings, post_service=post_service)


def _post_task(**payload):
    return {
        "id": 1,
        "task_type": TaskType.POST_TO_LINKEDIN.value,
        "content_id": 7,
        "retry_count": 0,
        "payload": {"title": "Hello", "content": "Body", "slug": "hello", **payload},
    }


class TestSequentialTaskProcessor:
    """Test cases for SequentialTaskProcessor."""

    def test_init(self, processor):
        assert processor.running is True
        assert processor.worker_id == "sequential-processor"
        assert processor.context.worker_id == "sequential-processor"

    def test_process_task_unknown_type(self, processor):
        result = processor.process_task({"id": 1, "task_type": "UNKNOWN_TYPE", "retry_count": 0})
        assert result.success is False

    def test_process_post_task(self, processor, post_service):
        result = processor.process_task(_post_task())

        assert result.success is True
        post_service.create_post.assert_called_once_with(
            SocialPostRequest(title="Hello", content="Body", slug="hello")
        )

    def test_failed_post_is_not_retryable(self, processor, post_service):
        post_service.create_post.return_value = SocialPostResult.failed("401 expired")

        result = processor.process_task(_post_task())

        assert result.success is False
        assert result.retryable is False
        assert result.error_message == "401 expired"

    def test_skipped_post_completes(self, processor, post_service):
        post_service.create_post.return_value = SocialPostResult.skipped("no token")
        assert processor.process_task(_post_task()).success is True

    def test_invalid_payload_fails_without_retry(self, processor, post_service):
        task = _post_task()
        task["payload"] = {"content": "missing title"}

        result = processor.process_task(task)

        assert result.success is False
        assert result.retryable is False
        post_service.create_post.assert_not_called()

    def test_unexpected_exception_is_retryable(self, processor, post_service):
        post_service.create_post.side_effect = RuntimeError("boom")

        result = processor.process_task(_post_task())

        assert result.success is False
        assert result.retryable is True
        assert result.error_message == "boom"

    def test_run_processes_until_max_tasks(self, settings, post_service, db_factory, db_session):
        queue = QueueService(db_factory=db_factory)
        task_id = queue.enqueue(TaskType.POST_TO_LINKEDIN, payload={"title": "Hello"})
        processor = SequentialTaskProcessor(
            queue_service=queue, settings=settings, post_service=post_service
        )

        processor.run(max_tasks=1)

        assert db_session.get(ProcessingTask, task_id).status == TaskStatus.COMPLETED.value
        post_service.create_post.assert_called_once()
