"""Pydantic models describing API request and response payloads."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .jobs import OutputType


class JobSubmissionRequest(BaseModel):
    """Incoming payload for running a job lifecycle."""

    params: Dict[str, Any] = Field(..., description="Job-type specific request parameters")
    output_type: Optional[OutputType] = Field(default=None, description="file_url or raw_bytes")
    polling_interval: Optional[float] = Field(default=None, description="Seconds between status checks")
    polling_timeout: Optional[float] = Field(default=None, description="Maximum seconds to wait")


class PollingPolicyResponse(BaseModel):
    interval: float
    timeout: float
    min_interval: float
    max_interval: float
    min_timeout: float
    max_timeout: float


class JobTypeResponse(BaseModel):
    """Describes a supported job type."""

    job_type: str
    output_types: List[OutputType]
    default_output_type: OutputType
    polling: PollingPolicyResponse


class ErrorResponse(BaseModel):
    error_code: str
    detail: str
    task_id: Optional[str] = None
