"""In-process document event bus for the article store."""

from __future__ import annotations

import logging
from collections.abc import Callable

from blogsync.core.logging import get_logger
from blogsync.models.social import PublishEvent

DocumentListener = Callable[[PublishEvent], None]


class DocumentEventBus:
    """Fan document events out to listeners.

    A failing listener is logged and never propagates into the store
    operation that emitted the event.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._listeners: list[DocumentListener] = []
        self.logger = logger or get_logger(__name__)

    def subscribe(self, listener: DocumentListener) -> None:
        self._listeners.append(listener)

    def emit(self, event: PublishEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:  # noqa: BLE001
                self.logger.exception(
                    "Document listener failed",
                    extra={
                        "component": "document_events",
                        "operation": event.action,
                        "item_id": event.document_id,
                        "context_data": {"uid": event.uid, "listener": repr(listener)},
                    },
                )
