"""Job lifecycle orchestration: submit, poll, then retrieve."""
from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Optional

from ..models.jobs import (
    BinaryArtifact,
    DubbingRequest,
    JobRequestBase,
    JobType,
    NormalizedResult,
    OutputType,
    TextToSoundRequest,
    TextToSpeechRequest,
    TextToVoiceRequest,
)
from .job_types import get_descriptor
from .poller import StatusPoller
from .retriever import ResultRetriever
from .submitter import TaskSubmitter, coerce_request
from .transport import CambAIClient

logger = logging.getLogger(__name__)

BinaryWrapper = Callable[[bytes, str, str], Any]


def prepare_binary_data(data: bytes, filename: str, mime_type: str) -> BinaryArtifact:
    """Default binary wrapper; hosts with their own attachment type pass another."""

    return BinaryArtifact(data=data, filename=filename, mime_type=mime_type)


class JobOrchestrator:
    """Runs one complete job lifecycle per :meth:`run` call.

    Holds no per-job state, so a single instance can drive many lifecycles
    concurrently.
    """

    def __init__(
        self,
        client: Optional[CambAIClient] = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._client = client or CambAIClient()
        self.submitter = TaskSubmitter(self._client)
        self.poller = StatusPoller(self._client, sleep=sleep, clock=clock)
        self.retriever = ResultRetriever(self._client)

    async def run(
        self,
        job_type: JobType | str,
        request: JobRequestBase | Mapping[str, Any],
        *,
        interval: Optional[float] = None,
        timeout: Optional[float] = None,
        output_type: Optional[OutputType | str] = None,
        binary_wrapper: BinaryWrapper = prepare_binary_data,
    ) -> NormalizedResult:
        descriptor = get_descriptor(job_type)
        # Reject bad settings before anything is sent.
        request = coerce_request(descriptor, request)
        interval, timeout = descriptor.polling.resolve(descriptor.job_type, interval, timeout)
        mode = descriptor.resolve_output_type(output_type)

        task = await self.submitter.submit(descriptor.job_type, request)
        outcome = await self.poller.poll(
            descriptor.job_type, task.task_id, interval=interval, timeout=timeout
        )
        artifact = await self.retriever.retrieve(
            descriptor.job_type, outcome.run_id, mode, task_id=task.task_id
        )

        payload: dict[str, Any] = {}
        if descriptor.supports_binary:
            payload["outputType"] = mode.value
        binary = None
        if isinstance(artifact, BinaryArtifact):
            binary = binary_wrapper(artifact.data, artifact.filename, artifact.mime_type)
        else:
            payload.update(artifact.details)

        return NormalizedResult(
            job_type=descriptor.job_type,
            task_id=task.task_id,
            run_id=outcome.run_id,
            payload=payload,
            artifact=artifact,
            binary=binary,
        )


async def text_to_speech(
    request: TextToSpeechRequest | Mapping[str, Any],
    *,
    orchestrator: Optional[JobOrchestrator] = None,
    **options: Any,
) -> NormalizedResult:
    """Convert text to speech and wait for the audio."""

    return await (orchestrator or JobOrchestrator()).run(JobType.TEXT_TO_SPEECH, request, **options)


async def text_to_sound(
    request: TextToSoundRequest | Mapping[str, Any],
    *,
    orchestrator: Optional[JobOrchestrator] = None,
    **options: Any,
) -> NormalizedResult:
    """Generate a sound effect from a prompt."""

    return await (orchestrator or JobOrchestrator()).run(JobType.TEXT_TO_SOUND, request, **options)


async def text_to_voice(
    request: TextToVoiceRequest | Mapping[str, Any],
    *,
    orchestrator: Optional[JobOrchestrator] = None,
    **options: Any,
) -> NormalizedResult:
    """Design a voice from a description and return its preview URLs."""

    return await (orchestrator or JobOrchestrator()).run(JobType.TEXT_TO_VOICE, request, **options)


async def end_to_end_dubbing(
    request: DubbingRequest | Mapping[str, Any],
    *,
    orchestrator: Optional[JobOrchestrator] = None,
    **options: Any,
) -> NormalizedResult:
    """Dub a video into the target languages."""

    return await (orchestrator or JobOrchestrator()).run(JobType.DUBBING, request, **options)
