"""Task submission: the first phase of a CambAI job lifecycle."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from ..exceptions import MissingTaskIdentifier
from ..models.jobs import JobRequestBase, JobType, Task
from .job_types import JobTypeDescriptor, get_descriptor
from .transport import CambAIClient

logger = logging.getLogger(__name__)


def coerce_request(descriptor: JobTypeDescriptor, request: JobRequestBase | Mapping[str, Any]) -> JobRequestBase:
    """Return ``request`` as the descriptor's request model, validating mappings."""

    if isinstance(request, descriptor.request_model):
        return request
    if isinstance(request, BaseModel):
        raise TypeError(
            f"{descriptor.job_type.value} expects {descriptor.request_model.__name__}, "
            f"got {type(request).__name__}"
        )
    return descriptor.request_model.model_validate(request)


class TaskSubmitter:
    """Creates a remote task and hands back its identifier."""

    def __init__(self, client: CambAIClient):
        self._client = client

    async def submit(self, job_type: JobType | str, request: JobRequestBase | Mapping[str, Any]) -> Task:
        descriptor = get_descriptor(job_type)
        body = descriptor.build_request(coerce_request(descriptor, request))
        data = await self._client.request("POST", descriptor.create_path, json=body)

        task_id = data.get("task_id") if isinstance(data, Mapping) else None
        if task_id is None or task_id == "":
            logger.warning("%s creation response carried no task_id: %s", descriptor.label, data)
            raise MissingTaskIdentifier(descriptor.job_type.value)

        logger.info("Submitted %s task %s", descriptor.label, task_id)
        return Task(task_id=task_id, job_type=descriptor.job_type)
