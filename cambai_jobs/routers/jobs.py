"""Job lifecycle endpoints."""
from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, List

import httpx
from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..exceptions import (
    InsufficientCredits,
    InvalidPollingSettings,
    JobLifecycleError,
    PollingDeadlineExceeded,
    RemoteJobTimedOut,
    UnsupportedOutputType,
)
from ..models import schemas
from ..models.jobs import BinaryArtifact, JobType
from ..services.job_types import JOB_TYPES
from ..services.orchestration import JobOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"])

_STATUS_CODES = {
    InsufficientCredits: 402,
    RemoteJobTimedOut: 504,
    PollingDeadlineExceeded: 504,
    UnsupportedOutputType: 400,
    InvalidPollingSettings: 422,
}


def get_orchestrator() -> JobOrchestrator:
    """Dependency hook; tests override it with a faked transport."""

    return JobOrchestrator()


def _error_response(exc: JobLifecycleError) -> JSONResponse:
    status_code = _STATUS_CODES.get(type(exc), 502)
    body = schemas.ErrorResponse(
        error_code=exc.error_code,
        detail=exc.message,
        task_id=None if exc.task_id is None else str(exc.task_id),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.get("/types", response_model=List[schemas.JobTypeResponse])
async def list_job_types() -> List[schemas.JobTypeResponse]:
    """List the supported job types with their polling defaults and bounds."""

    return [
        schemas.JobTypeResponse(
            job_type=descriptor.job_type.value,
            output_types=list(descriptor.output_types),
            default_output_type=descriptor.default_output_type,
            polling=schemas.PollingPolicyResponse(**asdict(descriptor.polling)),
        )
        for descriptor in JOB_TYPES.values()
    ]


@router.post("/{job_type}")
async def run_job(
    job_type: JobType,
    payload: schemas.JobSubmissionRequest,
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
) -> Any:
    """Run one job to completion.

    URL-shaped results come back as JSON; raw audio is streamed back as the
    response body with the task and run ids in headers.
    """

    try:
        result = await orchestrator.run(
            job_type,
            payload.params,
            interval=payload.polling_interval,
            timeout=payload.polling_timeout,
            output_type=payload.output_type,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False)) from exc
    except JobLifecycleError as exc:
        return _error_response(exc)
    except httpx.HTTPStatusError as exc:
        logger.warning("CambAI returned %s for %s", exc.response.status_code, exc.request.url)
        raise HTTPException(
            status_code=502,
            detail=f"CambAI request failed with status {exc.response.status_code}",
        ) from exc
    except httpx.HTTPError as exc:
        logger.warning("CambAI request failed: %r", exc)
        raise HTTPException(status_code=502, detail=f"CambAI request failed: {type(exc).__name__}") from exc

    if isinstance(result.artifact, BinaryArtifact):
        artifact = result.artifact
        return Response(
            content=artifact.data,
            media_type=artifact.mime_type,
            headers={
                "Content-Disposition": f'attachment; filename="{artifact.filename}"',
                "X-Task-Id": str(result.task_id),
                "X-Run-Id": str(result.run_id),
            },
        )
    return result.to_output()
