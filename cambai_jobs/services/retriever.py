"""Result retrieval for finished CambAI runs."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional, Union

from ..models.jobs import BinaryArtifact, JobType, OutputType, RunId, TaskId, UrlArtifact
from .job_types import get_descriptor
from .transport import BinaryPayload, CambAIClient

logger = logging.getLogger(__name__)


class ResultRetriever:
    """Fetches the final artifact of a successful run with exactly one request."""

    def __init__(self, client: CambAIClient):
        self._client = client

    async def retrieve(
        self,
        job_type: JobType | str,
        run_id: RunId,
        output_type: Optional[OutputType | str] = None,
        *,
        task_id: Optional[TaskId] = None,
    ) -> Union[UrlArtifact, BinaryArtifact]:
        descriptor = get_descriptor(job_type)
        mode = descriptor.resolve_output_type(output_type)
        url = descriptor.result_url(run_id)

        if mode is OutputType.RAW_BYTES:
            if task_id is None:
                raise ValueError("task_id is required to name a raw_bytes result")
            payload: BinaryPayload = await self._client.request("GET", url, binary=True)
            filename = descriptor.binary_filename(task_id)
            logger.info("Retrieved %d bytes for %s run %s", len(payload.content), descriptor.label, run_id)
            return BinaryArtifact(
                data=payload.content,
                mime_type=descriptor.binary_mime_type,
                filename=filename,
            )

        data = await self._client.request("GET", url, params=dict(descriptor.url_query) or None)
        if not isinstance(data, Mapping):
            data = {}
        reference = data.get(descriptor.reference_field) if descriptor.reference_field else None
        logger.info("Retrieved %s result for run %s", descriptor.label, run_id)
        return UrlArtifact(reference=reference, details=descriptor.extract_result(data))
