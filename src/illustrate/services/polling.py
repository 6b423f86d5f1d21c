"""Status polling for asynchronous providers.

Asynchronous providers accept a job, hand back an identifier, and expose a
status endpoint. ``poll_until`` waits one interval, checks the status, and
stops on the first terminal answer. Each adapter supplies its own
``PollingPolicy``: a Replicate FLUX job settles within seconds while a Veo
video can take ten minutes.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

import structlog

from illustrate.services.exceptions import PollingTimeoutError

logger = structlog.get_logger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class PollingPolicy:
    """Interval between status checks and the number of checks allowed."""

    interval_seconds: float
    max_attempts: int

    def __post_init__(self) -> None:
        if self.interval_seconds < 0:
            raise ValueError(f"interval_seconds cannot be negative (got {self.interval_seconds})")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1 (got {self.max_attempts})")

    @property
    def budget_seconds(self) -> float:
        """Upper bound on wallclock spent sleeping."""
        return self.interval_seconds * self.max_attempts


async def poll_until(
    check: Callable[[], Awaitable[T]],
    is_terminal: Callable[[T], bool],
    policy: PollingPolicy,
    sleep: Sleep = asyncio.sleep,
    job_id: Optional[str] = None,
) -> T:
    """Repeat ``check`` until ``is_terminal`` accepts its result.

    Args:
        check: Issues one status request and returns its result
        is_terminal: Decides whether a status result ends the job
        policy: Interval and attempt budget
        sleep: Awaitable sleep, replaced in tests
        job_id: Remote job identifier, for logging only

    Returns:
        The first terminal status result

    Raises:
        PollingTimeoutError: If ``max_attempts`` checks pass without a terminal result
        Exception: Whatever ``check`` raises propagates unchanged
    """
    for attempt in range(1, policy.max_attempts + 1):
        await sleep(policy.interval_seconds)
        result = await check()
        if is_terminal(result):
            logger.info("polling.completed", job_id=job_id, attempts=attempt)
            return result
        logger.debug(
            "polling.attempt",
            job_id=job_id,
            attempt=attempt,
            max_attempts=policy.max_attempts,
        )

    logger.warning(
        "polling.timeout",
        job_id=job_id,
        attempts=policy.max_attempts,
        interval_seconds=policy.interval_seconds,
    )
    raise PollingTimeoutError(
        f"Generation timed out after {policy.max_attempts} status checks",
        attempts=policy.max_attempts,
    )
