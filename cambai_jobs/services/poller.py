"""Status polling for submitted CambAI tasks."""
from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Mapping

from ..exceptions import (
    InsufficientCredits,
    MissingRunIdentifier,
    PollingDeadlineExceeded,
    RemoteJobFailed,
    RemoteJobTimedOut,
)
from ..models.jobs import JobType, PollOutcome, TaskId, TaskStatus
from .job_types import get_descriptor
from .transport import CambAIClient

logger = logging.getLogger(__name__)

_FAILURES = {
    TaskStatus.ERROR: RemoteJobFailed,
    TaskStatus.TIMEOUT: RemoteJobTimedOut,
    TaskStatus.PAYMENT_REQUIRED: InsufficientCredits,
}


class StatusPoller:
    """Waits for a task to reach a terminal status.

    The poller enforces whatever interval and timeout it is given; bounds are
    checked by the caller. ``sleep`` and ``clock`` are injectable so tests can
    drive the loop without real waiting.
    """

    def __init__(
        self,
        client: CambAIClient,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._client = client
        self._sleep = sleep
        self._clock = clock

    async def check_status(self, job_type: JobType | str, task_id: TaskId) -> PollOutcome:
        """Issue a single status request and classify the answer."""

        descriptor = get_descriptor(job_type)
        data = await self._client.request("GET", descriptor.status_url(task_id))
        raw_status = data.get("status") if isinstance(data, Mapping) else None
        status = TaskStatus.parse(raw_status)
        run_id = data.get("run_id") if status is TaskStatus.SUCCESS else None
        return PollOutcome(
            status=status,
            run_id=run_id,
            raw_status=None if raw_status is None else str(raw_status),
        )

    async def poll(
        self,
        job_type: JobType | str,
        task_id: TaskId,
        *,
        interval: float,
        timeout: float,
    ) -> PollOutcome:
        """Poll until SUCCESS and return that outcome; every other ending raises."""

        descriptor = get_descriptor(job_type)
        name = descriptor.job_type.value
        started = self._clock()
        deadline = started + timeout
        attempts = 0

        while self._clock() < deadline:
            outcome = await self.check_status(descriptor.job_type, task_id)
            attempts += 1

            if outcome.status is TaskStatus.SUCCESS:
                if outcome.run_id is None or outcome.run_id == "":
                    raise MissingRunIdentifier(name, task_id)
                logger.info(
                    "%s task %s succeeded with run %s after %d checks",
                    descriptor.label,
                    task_id,
                    outcome.run_id,
                    attempts,
                )
                return outcome

            if outcome.status.is_terminal:
                logger.warning("%s task %s ended with status %s", descriptor.label, task_id, outcome.status.value)
                raise _FAILURES[outcome.status](name, task_id)

            logger.debug("%s task %s still %s", descriptor.label, task_id, outcome.raw_status)
            if self._clock() >= deadline:
                break
            await self._sleep(interval)

        elapsed = self._clock() - started
        logger.warning(
            "%s task %s gave up after %.1fs (%d checks)", descriptor.label, task_id, elapsed, attempts
        )
        raise PollingDeadlineExceeded(name, task_id, timeout=timeout, elapsed=elapsed, attempts=attempts)
