"""Sequential task processor for queued outbound work."""

import signal
import sys
import time
from typing import Any

from blogsync.core.logging import get_logger
from blogsync.core.settings import Settings, get_settings
from blogsync.pipeline.dispatcher import TaskDispatcher
from blogsync.pipeline.handlers.post_to_linkedin import PostToLinkedInHandler
from blogsync.pipeline.task_context import TaskContext
from blogsync.pipeline.task_models import QueuedTask, TaskResult
from blogsync.services.linkedin_posts import LinkedInPostService, get_linkedin_post_service
from blogsync.services.queue import QueueService, get_queue_service

logger = get_logger(__name__)

MAX_RETRY_DELAY_SECONDS = 3600


def retry_delay_seconds(retry_count: int) -> int:
    return min(60 * (2**retry_count), MAX_RETRY_DELAY_SECONDS)


class SequentialTaskProcessor:
    """Sequential task processor - processes tasks one at a time."""

    def __init__(
        self,
        queue_service: QueueService | None = None,
        settings: Settings | None = None,
        post_service: LinkedInPostService | None = None,
    ):
        self.queue_service = queue_service or get_queue_service()
        self.settings = settings or get_settings()
        self.running = True
        self.worker_id = "sequential-processor"
        self.context = TaskContext(
            queue_service=self.queue_service,
            settings=self.settings,
            post_service=post_service or get_linkedin_post_service(),
            logger=logger,
            worker_id=self.worker_id,
        )
        self.dispatcher = TaskDispatcher([PostToLinkedInHandler()])
        handled = ", ".join(sorted(t.value for t in self.dispatcher.task_types))
        logger.debug(f"Worker {self.worker_id} handles: {handled}")

    def process_task(self, task_data: dict[str, Any]) -> TaskResult:
        """Process a single task."""
        task_id = task_data.get("id", "unknown")
        start_time = time.time()

        try:
            task = QueuedTask.model_validate(task_data)
            logger.info(f"Processing task {task_id} of type {task.task_type}")
            result = self.dispatcher.dispatch(task, self.context)
        except Exception as e:
            elapsed = time.time() - start_time
            logger.error(
                f"Error processing task {task_id} after {elapsed:.2f}s: {e}",
                exc_info=True,
                extra={
                    "component": "sequential_task_processor",
                    "operation": "process_task",
                    "item_id": task_id,
                },
            )
            return TaskResult.fail(str(e))

        elapsed = time.time() - start_time
        logger.info(f"Task {task_id} finished in {elapsed:.2f}s (success={result.success})")
        return result

    def _finalize(self, task_data: dict[str, Any], result: TaskResult) -> None:
        task_id = task_data["id"]
        retry_count = task_data.get("retry_count", 0)

        self.queue_service.complete_task(
            task_id, success=result.success, error_message=result.error_message
        )
        if result.success or not result.retryable:
            return

        max_retries = self.settings.worker_max_retries
        if retry_count < max_retries:
            delay_seconds = retry_delay_seconds(retry_count)
            self.queue_service.retry_task(task_id, delay_seconds=delay_seconds)
            logger.info(
                f"Task {task_id} scheduled for retry "
                f"{retry_count + 1}/{max_retries} in {delay_seconds}s"
            )
        else:
            logger.error(f"Task {task_id} exceeded max retries ({max_retries})")

    def _wait(self, seconds: float) -> None:
        # Sleep in short slices so shutdown stays responsive
        deadline = time.monotonic() + seconds
        while self.running and time.monotonic() < deadline:
            time.sleep(min(0.1, max(0.0, deadline - time.monotonic())))

    def run(self, max_tasks: int | None = None):
        """
        Run the task processor.

        Args:
            max_tasks: Maximum number of tasks to process. None for unlimited.
        """
        logger.info(f"Starting sequential task processor (worker_id: {self.worker_id})")

        self._shutdown_requested = False

        def signal_handler(signum, frame):
            if not self._shutdown_requested:
                logger.info("Received shutdown signal - stopping gracefully...")
                self._shutdown_requested = True
                self.running = False
            else:
                logger.warning("Force shutdown requested - exiting immediately")
                sys.exit(1)

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        processed_count = 0
        consecutive_empty_polls = 0
        max_empty_polls = 5
        poll_seconds = self.settings.worker_poll_seconds

        while self.running:
            try:
                task_data = self.queue_service.dequeue(worker_id=self.worker_id)

                if not task_data:
                    consecutive_empty_polls += 1
                    if consecutive_empty_polls >= max_empty_polls:
                        logger.debug("Queue empty, backing off...")
                        self._wait(poll_seconds * 5)
                    else:
                        self._wait(poll_seconds)
                    continue

                consecutive_empty_polls = 0
                result = self.process_task(task_data)
                self._finalize(task_data, result)
                processed_count += 1

                if max_tasks and processed_count >= max_tasks:
                    logger.info(f"Reached max tasks limit ({max_tasks}), stopping")
                    break

            except Exception as e:
                logger.error(f"Error in main loop: {e}", exc_info=True)
                self._wait(5)

        logger.info(f"Processor shutting down (processed {processed_count} tasks)")

    def run_single_task(self, task_data: dict[str, Any]) -> bool:
        """
        Process a single task without the main loop.
        Useful for testing or one-off processing.
        """
        result = self.process_task(task_data)
        self._finalize(task_data, result)
        return result.success
