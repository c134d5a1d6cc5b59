"""Failure taxonomy for the CambAI job lifecycle.

Every lifecycle either completes with an artifact or raises exactly one of
these. Nothing here is retried internally; callers decide on retry policy
using ``error_code``. Transport failures (``httpx.HTTPError``) are not wrapped
and propagate as raised by httpx.
"""

from __future__ import annotations

from typing import Optional, Union

TaskId = Union[str, int]


class JobLifecycleError(Exception):
    """Base class for CambAI job lifecycle errors."""

    error_code = "job_error"

    def __init__(
        self,
        message: str,
        *,
        job_type: Optional[str] = None,
        task_id: Optional[TaskId] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.job_type = job_type
        self.task_id = task_id

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.error_code}: {self.message}"


class MissingTaskIdentifier(JobLifecycleError):
    error_code = "missing_task_id"

    def __init__(self, job_type: str) -> None:
        super().__init__(
            f"No task_id received from {job_type} creation request",
            job_type=job_type,
        )


class MissingRunIdentifier(JobLifecycleError):
    error_code = "missing_run_id"

    def __init__(self, job_type: str, task_id: TaskId) -> None:
        super().__init__(
            f"{job_type} task {task_id} reported SUCCESS without a run_id",
            job_type=job_type,
            task_id=task_id,
        )


class RemoteJobFailed(JobLifecycleError):
    error_code = "remote_error"

    def __init__(self, job_type: str, task_id: TaskId) -> None:
        super().__init__(
            f"{job_type} task {task_id} failed with error status",
            job_type=job_type,
            task_id=task_id,
        )


class RemoteJobTimedOut(JobLifecycleError):
    """The server itself declared the task timed out."""

    error_code = "remote_timeout"

    def __init__(self, job_type: str, task_id: TaskId) -> None:
        super().__init__(
            f"{job_type} task {task_id} timed out on server",
            job_type=job_type,
            task_id=task_id,
        )


class InsufficientCredits(JobLifecycleError):
    error_code = "payment_required"

    def __init__(self, job_type: str, task_id: TaskId) -> None:
        super().__init__(
            f"{job_type} task {task_id} failed: payment required - insufficient credits",
            job_type=job_type,
            task_id=task_id,
        )


class PollingDeadlineExceeded(JobLifecycleError):
    """The client-side wait budget ran out before a terminal status arrived.

    Distinct from :class:`RemoteJobTimedOut`; retrying with a larger timeout
    may succeed.
    """

    error_code = "polling_deadline"

    def __init__(
        self,
        job_type: str,
        task_id: TaskId,
        *,
        timeout: float,
        elapsed: float,
        attempts: int,
    ) -> None:
        super().__init__(
            f"{job_type} task {task_id} did not complete within {timeout:g} seconds "
            f"(waited {elapsed:.1f}s over {attempts} status checks)",
            job_type=job_type,
            task_id=task_id,
        )
        self.timeout = timeout
        self.elapsed = elapsed
        self.attempts = attempts


class UnsupportedOutputType(JobLifecycleError):
    error_code = "unsupported_output_type"

    def __init__(self, job_type: str, output_type: str) -> None:
        super().__init__(
            f"{job_type} results cannot be retrieved as {output_type}",
            job_type=job_type,
        )
        self.output_type = output_type


class InvalidPollingSettings(JobLifecycleError):
    error_code = "invalid_polling_settings"

    def __init__(self, job_type: str, message: str) -> None:
        super().__init__(message, job_type=job_type)
