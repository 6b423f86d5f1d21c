"""Queue item entity - one submitted generation job with lifecycle status."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from illustrate.models.enums import ModelCode
from illustrate.models.generation import GenerationResponse


class QueueItemStatus(str, Enum):
    """Queue item lifecycle status."""

    IN_PROGRESS = "in_progress"
    SUCCESSFUL = "successful"
    FAILED = "failed"


class InvalidStateTransition(Exception):
    """Raised when attempting an invalid queue item state transition."""

    pass


@dataclass(eq=False)
class QueueItem:
    """QueueItem tracks one submitted job from submission to a terminal state.

    Items compare by identity: two items with equal fields are still
    different submissions.
    """

    prompt: str
    model_code: ModelCode
    is_video: bool = False
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    status: QueueItemStatus = QueueItemStatus.IN_PROGRESS
    result_id: Optional[str] = None
    error_message: Optional[str] = None
    response: Optional[GenerationResponse] = field(default=None, repr=False)
    task: Optional[asyncio.Task] = field(default=None, repr=False)

    @property
    def is_terminal(self) -> bool:
        return self.status != QueueItemStatus.IN_PROGRESS

    def mark_successful(self, result_id: str, response: GenerationResponse) -> None:
        """Transition from in_progress to successful.

        Args:
            result_id: Identifier of the generated result set
            response: GENERATED response produced by the adapter

        Raises:
            InvalidStateTransition: If current status is not in_progress
            ValueError: If result_id is empty
        """
        if self.status != QueueItemStatus.IN_PROGRESS:
            raise InvalidStateTransition(
                f"Cannot mark successful from {self.status.value}. "
                "Item must be in in_progress state."
            )
        if not result_id:
            raise ValueError("result_id is required")
        self.result_id = result_id
        self.response = response
        self.status = QueueItemStatus.SUCCESSFUL

    def mark_failed(
        self, error_message: str, response: Optional[GenerationResponse] = None
    ) -> None:
        """Transition from in_progress to failed.

        Args:
            error_message: Message surfaced to the user
            response: FAILED response produced by the adapter, if any

        Raises:
            InvalidStateTransition: If current status is already terminal
        """
        if self.status != QueueItemStatus.IN_PROGRESS:
            raise InvalidStateTransition(
                f"Cannot mark failed from terminal state {self.status.value}."
            )
        self.error_message = error_message
        self.response = response
        self.status = QueueItemStatus.FAILED
