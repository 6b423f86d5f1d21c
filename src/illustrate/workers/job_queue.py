"""Cancellable in-process job queue for generation requests.

``submit`` records a QueueItem synchronously and starts one asyncio task
per job. Tasks compute the adapter response off to the side; the item
itself is only mutated from task done-callbacks, which the event loop runs
on its own thread, so every mutation of the item collection happens in a
single execution context.

Cancellation is optimistic: ``cancel`` marks the item failed at once and
cancels the task, but an HTTP call already in flight may still finish. A
result that arrives for an item that is already terminal is discarded.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from functools import partial
from typing import Callable, Optional
from uuid import UUID

import structlog

from illustrate.core.config import Settings
from illustrate.models.enums import ProviderCode
from illustrate.models.generation import GenerationRequest, GenerationResponse
from illustrate.models.queue_item import QueueItem, QueueItemStatus
from illustrate.services.adapters.registry import AdapterRegistry, build_default_registry
from illustrate.services.exceptions import UnknownModelError
from illustrate.services.transport import Transport

logger = structlog.get_logger(__name__)

CANCELLED_MESSAGE = "Cancelled by user"
SHUTDOWN_MESSAGE = "Cancelled by shutdown"
DEFAULT_FAILED_ITEM_TTL_SECONDS = 300

SecretLookup = Callable[[ProviderCode], Optional[str]]
UsageSink = Callable[[QueueItem, GenerationResponse], None]
Listener = Callable[[QueueItem], None]


class JobQueue:
    """Newest-first collection of queue items with their running tasks."""

    def __init__(
        self,
        registry: AdapterRegistry,
        secret_lookup: SecretLookup,
        usage_sink: Optional[UsageSink] = None,
        failed_item_ttl_seconds: int = DEFAULT_FAILED_ITEM_TTL_SECONDS,
    ):
        """Initialize job queue.

        Args:
            registry: Adapters keyed by model code
            secret_lookup: Returns the credential for a provider, None when unset;
                consulted only when a request carries no secret of its own
            usage_sink: Called once per successful job with the item and its response
            failed_item_ttl_seconds: Default age after which ``prune_failed`` drops
                failed items
        """
        self.registry = registry
        self._secret_lookup = secret_lookup
        self._usage_sink = usage_sink
        self.failed_item_ttl = timedelta(seconds=failed_item_ttl_seconds)
        self._items: list[QueueItem] = []
        self._listeners: list[Listener] = []

    # Views

    @property
    def items(self) -> list[QueueItem]:
        """All items, newest submission first."""
        return list(self._items)

    @property
    def in_progress_items(self) -> list[QueueItem]:
        return [item for item in self._items if item.status == QueueItemStatus.IN_PROGRESS]

    @property
    def successful_items(self) -> list[QueueItem]:
        return [item for item in self._items if item.status == QueueItemStatus.SUCCESSFUL]

    @property
    def failed_items(self) -> list[QueueItem]:
        return [item for item in self._items if item.status == QueueItemStatus.FAILED]

    @property
    def has_active_items(self) -> bool:
        return any(not item.is_terminal for item in self._items)

    @property
    def total_count(self) -> int:
        return len(self._items)

    def get(self, item_id: UUID) -> Optional[QueueItem]:
        return next((item for item in self._items if item.id == item_id), None)

    # Listeners

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback invoked after every item change.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, item: QueueItem) -> None:
        for listener in list(self._listeners):
            try:
                listener(item)
            except Exception as e:
                logger.error(
                    "job.listener_failed",
                    item_id=str(item.id),
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=e,
                )

    # Submission and completion

    def submit(self, request: GenerationRequest) -> QueueItem:
        """Record a new in-progress item and start its generation task.

        Must be called from within the running event loop.

        Returns:
            The new QueueItem, already in ``in_progress``
        """
        item = QueueItem(
            prompt=request.prompt or "",
            model_code=request.model_code,
            is_video=request.is_video,
        )
        self._items.insert(0, item)

        try:
            adapter = self.registry.get(request.model_code)
        except UnknownModelError as e:
            logger.warning("job.rejected", item_id=str(item.id), error=str(e))
            item.mark_failed(str(e))
            self._notify(item)
            return item

        secret = request.connection_secret or self._secret_lookup(adapter.model.provider)
        task = asyncio.get_running_loop().create_task(
            adapter.generate(request.with_secret(secret)),
            name=f"generate-{item.id}",
        )
        item.task = task
        task.add_done_callback(partial(self._complete, item))

        logger.info(
            "job.submitted",
            item_id=str(item.id),
            model=request.model_code.value,
            is_video=item.is_video,
            count=request.count,
        )
        self._notify(item)
        return item

    def _complete(self, item: QueueItem, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        if item.is_terminal:
            logger.info(
                "job.result_discarded",
                item_id=str(item.id),
                status=item.status.value,
            )
            return

        error = task.exception()
        if error is not None:
            logger.error(
                "job.crashed",
                item_id=str(item.id),
                error=str(error),
                error_type=type(error).__name__,
                exc_info=error,
            )
            item.mark_failed(f"Failed with error: {error}")
            self._notify(item)
            return

        response: GenerationResponse = task.result()
        if response.is_generated:
            item.mark_successful(str(response.generation_id), response)
            logger.info(
                "job.completed",
                item_id=str(item.id),
                result_id=item.result_id,
                cost=response.cost,
                payloads=len(response.payloads),
            )
            if self._usage_sink is not None:
                try:
                    self._usage_sink(item, response)
                except Exception as e:
                    logger.error(
                        "job.usage_sink_failed",
                        item_id=str(item.id),
                        error=str(e),
                        error_type=type(e).__name__,
                        exc_info=e,
                    )
        else:
            default = "Video generation failed" if item.is_video else "Generation failed"
            item.mark_failed(response.error_message or default, response)
            logger.warning(
                "job.failed",
                item_id=str(item.id),
                error_code=response.error_code.value if response.error_code else None,
                error=item.error_message,
            )
        self._notify(item)

    # Cancellation and removal

    def cancel(self, item: QueueItem, message: str = CANCELLED_MESSAGE) -> bool:
        """Cancel an in-progress item and mark it failed immediately.

        Returns:
            True if the item was in progress, False if it was already terminal
        """
        if item.is_terminal:
            return False
        if item.task is not None and not item.task.done():
            item.task.cancel()
        item.mark_failed(message)
        logger.info("job.cancelled", item_id=str(item.id))
        self._notify(item)
        return True

    def cancel_by_id(self, item_id: UUID) -> bool:
        item = self.get(item_id)
        return item is not None and self.cancel(item)

    def remove(self, item: QueueItem) -> None:
        """Drop an item, cancelling its task first if it is still running."""
        if not item.is_terminal:
            self.cancel(item)
        if item in self._items:
            self._items.remove(item)
            self._notify(item)

    def remove_by_id(self, item_id: UUID) -> bool:
        item = self.get(item_id)
        if item is None:
            return False
        self.remove(item)
        return True

    def _drop(self, predicate: Callable[[QueueItem], bool]) -> int:
        dropped = [item for item in self._items if predicate(item)]
        for item in dropped:
            self._items.remove(item)
            self._notify(item)
        return len(dropped)

    def clear_failed(self) -> int:
        return self._drop(lambda item: item.status == QueueItemStatus.FAILED)

    def clear_completed(self) -> int:
        return self._drop(lambda item: item.status == QueueItemStatus.SUCCESSFUL)

    def prune_failed(
        self,
        older_than: Optional[timedelta] = None,
        now: Optional[datetime] = None,
    ) -> int:
        """Drop failed items submitted more than ``older_than`` ago.

        Args:
            older_than: Age threshold; defaults to the configured failed item TTL
            now: Reference time; defaults to the current UTC time

        Returns:
            Number of items removed
        """
        threshold = self.failed_item_ttl if older_than is None else older_than
        cutoff = (now or datetime.now(timezone.utc)) - threshold
        return self._drop(
            lambda item: item.status == QueueItemStatus.FAILED and item.created_at < cutoff
        )

    async def shutdown(self) -> None:
        """Cancel every in-flight job and wait for the tasks to unwind."""
        tasks = [item.task for item in self.in_progress_items if item.task is not None]
        for item in self.in_progress_items:
            self.cancel(item, SHUTDOWN_MESSAGE)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("job_queue.shutdown", cancelled=len(tasks))


def build_job_queue(
    settings: Settings,
    usage_sink: Optional[UsageSink] = None,
    transport: Optional[Transport] = None,
) -> JobQueue:
    """Wire a JobQueue from settings: one shared transport and the default registry."""
    transport = transport or Transport(timeout=settings.http_timeout_seconds)
    return JobQueue(
        registry=build_default_registry(transport),
        secret_lookup=settings.secret_for,
        usage_sink=usage_sink,
        failed_item_ttl_seconds=settings.failed_item_ttl_seconds,
    )
