"""State transition tests for QueueItem.

Tests focus on validating the queue item lifecycle state machine:
- in_progress -> successful and in_progress -> failed are the only transitions
- Terminal states reject every further transition with a clear message
"""

import pytest

from illustrate.models.enums import ErrorCode, ModelCode
from illustrate.models.generation import GenerationResponse
from illustrate.models.queue_item import InvalidStateTransition, QueueItem, QueueItemStatus


def new_item() -> QueueItem:
    return QueueItem(prompt="a fox", model_code=ModelCode.FAL_FLUX_DEV)


def test_valid_success_transition():
    """Test the happy path: in_progress -> successful."""
    item = new_item()
    response = GenerationResponse.generated(["YQ=="], cost=0.025)
    assert item.status == QueueItemStatus.IN_PROGRESS
    assert not item.is_terminal

    item.mark_successful(result_id=str(response.generation_id), response=response)

    assert item.status == QueueItemStatus.SUCCESSFUL
    assert item.result_id == str(response.generation_id)
    assert item.response is response
    assert item.is_terminal


def test_valid_failure_transition():
    item = new_item()
    response = GenerationResponse.failed(ErrorCode.MODEL_ERROR, "rate limited")

    item.mark_failed("rate limited", response)

    assert item.status == QueueItemStatus.FAILED
    assert item.error_message == "rate limited"
    assert item.result_id is None


def test_terminal_states_reject_transitions():
    """Test that terminal states cannot transition again."""
    succeeded = new_item()
    succeeded.mark_successful("result-1", GenerationResponse.generated(["YQ=="], cost=0))

    with pytest.raises(InvalidStateTransition) as exc_info:
        succeeded.mark_failed("Cancelled by user")
    assert "Cannot mark failed from terminal state successful" in str(exc_info.value)

    failed = new_item()
    failed.mark_failed("Cancelled by user")

    with pytest.raises(InvalidStateTransition):
        failed.mark_successful("result-2", GenerationResponse.generated(["YQ=="], cost=0))
    with pytest.raises(InvalidStateTransition):
        failed.mark_failed("again")
    assert failed.error_message == "Cancelled by user"


def test_success_requires_result_id():
    item = new_item()

    with pytest.raises(ValueError, match="result_id is required"):
        item.mark_successful("", GenerationResponse.generated(["YQ=="], cost=0))
    assert item.status == QueueItemStatus.IN_PROGRESS


def test_items_compare_by_identity():
    assert new_item() != new_item()
