"""Background job execution for generation requests."""

from illustrate.workers.job_queue import JobQueue, build_job_queue

__all__ = [
    "JobQueue",
    "build_job_queue",
]
