"""Static definitions of the four CambAI job types.

Each descriptor carries everything that differs between job types: how the
creation body is built, which endpoints to hit, how results are shaped and
the polling defaults. The submit/poll/retrieve code is shared and only ever
looks a descriptor up by :class:`JobType`.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from ..exceptions import InvalidPollingSettings, UnsupportedOutputType
from ..models.jobs import (
    DubbingRequest,
    JobRequestBase,
    JobType,
    OutputType,
    RunId,
    TaskId,
    TextToSoundRequest,
    TextToSpeechRequest,
    TextToVoiceRequest,
)

FLAC_MIME_TYPE = "audio/flac"


@dataclass(frozen=True)
class PollingPolicy:
    """Default polling interval/timeout for a job type and the accepted bounds."""

    interval: float
    timeout: float
    min_interval: float
    max_interval: float
    min_timeout: float
    max_timeout: float

    def resolve(
        self,
        job_type: JobType,
        interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> tuple[float, float]:
        interval = self.interval if interval is None else float(interval)
        timeout = self.timeout if timeout is None else float(timeout)
        if not self.min_interval <= interval <= self.max_interval:
            raise InvalidPollingSettings(
                job_type.value,
                f"Polling interval {interval:g}s outside {self.min_interval:g}-{self.max_interval:g}s",
            )
        if not self.min_timeout <= timeout <= self.max_timeout:
            raise InvalidPollingSettings(
                job_type.value,
                f"Polling timeout {timeout:g}s outside {self.min_timeout:g}-{self.max_timeout:g}s",
            )
        return interval, timeout


@dataclass(frozen=True)
class JobTypeDescriptor:
    job_type: JobType
    label: str
    request_model: type[JobRequestBase]
    build_request: Callable[[Any], dict[str, Any]]
    create_path: str
    status_path: str
    result_path: str
    extract_result: Callable[[Mapping[str, Any]], dict[str, Any]]
    polling: PollingPolicy
    default_output_type: OutputType = OutputType.FILE_URL
    # Result field holding the primary reference URL, if the result has one.
    reference_field: Optional[str] = None
    # Query sent when asking for a URL-shaped result.
    url_query: Mapping[str, str] = field(default_factory=dict)
    # Set only for audio-producing job types; enables raw_bytes retrieval.
    binary_mime_type: Optional[str] = None
    file_stem: Optional[str] = None

    @property
    def supports_binary(self) -> bool:
        return self.binary_mime_type is not None

    @property
    def output_types(self) -> tuple[OutputType, ...]:
        if self.supports_binary:
            return (OutputType.RAW_BYTES, OutputType.FILE_URL)
        return (OutputType.FILE_URL,)

    def status_url(self, task_id: TaskId) -> str:
        return self.status_path.format(task_id=task_id)

    def result_url(self, run_id: RunId) -> str:
        return self.result_path.format(run_id=run_id)

    def binary_filename(self, task_id: TaskId) -> str:
        return f"cambai_{self.file_stem}_{task_id}.flac"

    def resolve_output_type(self, output_type: Optional[OutputType | str]) -> OutputType:
        resolved = self.default_output_type if output_type is None else OutputType(output_type)
        if resolved not in self.output_types:
            raise UnsupportedOutputType(self.job_type.value, resolved.value)
        return resolved


def _omit_empty(body: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in body.items() if value not in (None, "", [])}


def _build_tts_body(request: TextToSpeechRequest) -> dict[str, Any]:
    body: dict[str, Any] = {
        "text": request.text,
        "voice_id": request.voice_id,
        "language": request.language,
    }
    optional = _omit_empty(
        {
            "gender": int(request.gender) if request.gender is not None else None,
            "age": request.age,
            "project_name": request.project_name,
            "project_description": request.project_description,
        }
    )
    body.update(optional)
    return body


def _build_sound_body(request: TextToSoundRequest) -> dict[str, Any]:
    duration = request.duration
    return {
        "prompt": request.prompt,
        "duration": int(duration) if float(duration).is_integer() else duration,
    }


def _build_voice_body(request: TextToVoiceRequest) -> dict[str, Any]:
    return {"text": request.text, "voice_description": request.voice_description}


def _build_dub_body(request: DubbingRequest) -> dict[str, Any]:
    body: dict[str, Any] = {
        "video_url": request.video_url,
        "source_language": request.source_language,
    }
    if request.target_languages:
        body["target_languages"] = list(request.target_languages)
    return body


def _extract_audio_url(result: Mapping[str, Any]) -> dict[str, Any]:
    return {"audioUrl": result.get("output_url")}


def _extract_previews(result: Mapping[str, Any]) -> dict[str, Any]:
    previews = result.get("previews") or []
    return {"previews": previews, "previewCount": len(previews)}


def _extract_dubbing(result: Mapping[str, Any]) -> dict[str, Any]:
    transcript = result.get("transcript")
    return {
        "outputVideoUrl": result.get("video_url"),
        "outputAudioUrl": result.get("audio_url"),
        "transcript": transcript,
        "transcriptLength": len(transcript) if transcript else 0,
    }


_AUDIO_POLLING = PollingPolicy(
    interval=5, timeout=120, min_interval=1, max_interval=10, min_timeout=30, max_timeout=600
)

TEXT_TO_SPEECH = JobTypeDescriptor(
    job_type=JobType.TEXT_TO_SPEECH,
    label="TTS",
    request_model=TextToSpeechRequest,
    build_request=_build_tts_body,
    create_path="/tts",
    status_path="/tts/{task_id}",
    result_path="/tts-result/{run_id}",
    extract_result=_extract_audio_url,
    polling=_AUDIO_POLLING,
    default_output_type=OutputType.RAW_BYTES,
    reference_field="output_url",
    url_query={"output_type": OutputType.FILE_URL.value},
    binary_mime_type=FLAC_MIME_TYPE,
    file_stem="tts",
)

TEXT_TO_SOUND = JobTypeDescriptor(
    job_type=JobType.TEXT_TO_SOUND,
    label="Text-to-sound",
    request_model=TextToSoundRequest,
    build_request=_build_sound_body,
    create_path="/text-to-sound",
    status_path="/text-to-sound/{task_id}",
    result_path="/text-to-sound-result/{run_id}",
    extract_result=_extract_audio_url,
    polling=_AUDIO_POLLING,
    default_output_type=OutputType.RAW_BYTES,
    reference_field="output_url",
    url_query={"output_type": OutputType.FILE_URL.value},
    binary_mime_type=FLAC_MIME_TYPE,
    file_stem="sound",
)

TEXT_TO_VOICE = JobTypeDescriptor(
    job_type=JobType.TEXT_TO_VOICE,
    label="Text-to-voice",
    request_model=TextToVoiceRequest,
    build_request=_build_voice_body,
    create_path="/text-to-voice",
    status_path="/text-to-voice/{task_id}",
    result_path="/text-to-voice-result/{run_id}",
    extract_result=_extract_previews,
    polling=PollingPolicy(
        interval=5, timeout=180, min_interval=1, max_interval=10, min_timeout=60, max_timeout=600
    ),
)

DUBBING = JobTypeDescriptor(
    job_type=JobType.DUBBING,
    label="Dubbing",
    request_model=DubbingRequest,
    build_request=_build_dub_body,
    create_path="/dub",
    status_path="/dub/{task_id}",
    result_path="/dub-result/{run_id}",
    extract_result=_extract_dubbing,
    polling=PollingPolicy(
        interval=10, timeout=600, min_interval=5, max_interval=30, min_timeout=300, max_timeout=1800
    ),
    reference_field="video_url",
)

JOB_TYPES: dict[JobType, JobTypeDescriptor] = {
    descriptor.job_type: descriptor
    for descriptor in (TEXT_TO_SPEECH, TEXT_TO_SOUND, TEXT_TO_VOICE, DUBBING)
}


def get_descriptor(job_type: JobType | str) -> JobTypeDescriptor:
    """Look up the descriptor for ``job_type`` (enum member or its value)."""

    return JOB_TYPES[JobType(job_type)]
