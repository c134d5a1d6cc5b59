"""Pydantic models for CambAI job requests, task state and results."""
from __future__ import annotations

from collections.abc import Mapping
from enum import Enum, IntEnum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

TaskId = Union[str, int]
RunId = Union[str, int]


class JobType(str, Enum):
    TEXT_TO_SPEECH = "text_to_speech"
    TEXT_TO_SOUND = "text_to_sound"
    TEXT_TO_VOICE = "text_to_voice"
    DUBBING = "dubbing"


class OutputType(str, Enum):
    """How the final artifact is fetched from the result endpoint."""

    FILE_URL = "file_url"
    RAW_BYTES = "raw_bytes"


class TaskStatus(str, Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    TIMEOUT = "TIMEOUT"
    PAYMENT_REQUIRED = "PAYMENT_REQUIRED"

    @classmethod
    def parse(cls, value: Any) -> "TaskStatus":
        """Map a raw status value; anything unrecognized counts as still pending."""

        try:
            return cls(value)
        except ValueError:
            return cls.PENDING

    @property
    def is_terminal(self) -> bool:
        return self is not TaskStatus.PENDING


class Gender(IntEnum):
    MALE = 1
    FEMALE = 2


def coerce_locator(value: Any) -> Any:
    """Unwrap a resource-locator style input into its numeric id.

    Accepts ``{"mode": "list", "value": 20303}``, ``{"__rl": True, "value": "5"}``,
    numeric strings and plain ints.
    """

    if isinstance(value, Mapping):
        value = value.get("value")
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.lstrip("-").isdigit():
            return int(stripped)
    return value


class JobRequestBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class TextToSpeechRequest(JobRequestBase):
    text: str
    voice_id: int = 20303
    language: int = 1
    gender: Optional[Gender] = None
    age: Optional[int] = Field(default=None, ge=18, le=80)
    project_name: Optional[str] = None
    project_description: Optional[str] = None

    @field_validator("voice_id", "language", mode="before")
    @classmethod
    def _unwrap_locator(cls, value: Any) -> Any:
        return coerce_locator(value)


class TextToSoundRequest(JobRequestBase):
    prompt: str
    duration: float = Field(default=5, gt=0, description="Seconds of audio to generate")


class TextToVoiceRequest(JobRequestBase):
    text: str
    voice_description: str = Field(
        ..., description="Detailed description of the desired voice (100+ characters works best)"
    )


class DubbingRequest(JobRequestBase):
    video_url: str = Field(..., description="YouTube, Google Drive or direct media URL")
    source_language: int = 1
    target_languages: list[int] = Field(default_factory=list)

    @field_validator("source_language", mode="before")
    @classmethod
    def _unwrap_source(cls, value: Any) -> Any:
        return coerce_locator(value)

    @field_validator("target_languages", mode="before")
    @classmethod
    def _unwrap_targets(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, Mapping):
            value = value.get("value")
            if value is None:
                return []
        if not isinstance(value, (list, tuple)):
            value = [value]
        return [coerce_locator(item) for item in value]


class Task(BaseModel):
    """A submitted job, correlated with the remote service by ``task_id``."""

    model_config = ConfigDict(frozen=True)

    task_id: TaskId
    job_type: JobType


class PollOutcome(BaseModel):
    """Result of a single status check."""

    model_config = ConfigDict(frozen=True)

    status: TaskStatus
    run_id: Optional[RunId] = None
    raw_status: Optional[str] = None


class UrlArtifact(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["url"] = "url"
    reference: Optional[str] = None
    details: dict[str, Any] = Field(default_factory=dict)


class BinaryArtifact(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["binary"] = "binary"
    data: bytes
    mime_type: str
    filename: str


Artifact = Annotated[Union[UrlArtifact, BinaryArtifact], Field(discriminator="kind")]


class NormalizedResult(BaseModel):
    """Outcome of a completed lifecycle. Only successful lifecycles produce one."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    job_type: JobType
    task_id: TaskId
    run_id: RunId
    status: Literal["SUCCESS"] = "SUCCESS"
    payload: dict[str, Any] = Field(default_factory=dict)
    artifact: Artifact
    # Host representation of a binary artifact, produced by the binary wrapper.
    binary: Any = None

    def to_output(self) -> dict[str, Any]:
        """Flatten into the camelCase record handed to downstream consumers."""

        output: dict[str, Any] = {"taskId": self.task_id, "runId": self.run_id}
        output.update(self.payload)
        output["status"] = self.status
        return output
