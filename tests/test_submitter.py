from __future__ import annotations

import asyncio

import pytest

from cambai_jobs.exceptions import MissingTaskIdentifier
from cambai_jobs.models.jobs import JobType, TextToSoundRequest, TextToSpeechRequest
from cambai_jobs.services.submitter import TaskSubmitter


def _run(coro):  # noqa: ANN001
    return asyncio.run(coro)


def test_submit_posts_body_and_returns_task(client, fake_api):
    fake_api.add("POST", "/tts", {"task_id": "abc"})

    task = _run(
        TaskSubmitter(client).submit(
            JobType.TEXT_TO_SPEECH, TextToSpeechRequest(text="Hello", voice_id=20303, language=1)
        )
    )

    assert task.task_id == "abc"
    assert task.job_type is JobType.TEXT_TO_SPEECH
    (request,) = fake_api.calls("POST", "/tts")
    assert fake_api.body(request) == {"text": "Hello", "voice_id": 20303, "language": 1}
    assert request.headers["x-api-key"] == "test-key"


def test_submit_accepts_mapping_parameters(client, fake_api):
    fake_api.add("POST", "/text-to-sound", {"task_id": 77})

    task = _run(TaskSubmitter(client).submit("text_to_sound", {"prompt": "rain", "duration": 3}))

    assert task.task_id == 77
    assert fake_api.body(fake_api.requests[0]) == {"prompt": "rain", "duration": 3}


def test_submit_without_task_id_fails(client, fake_api):
    fake_api.add("POST", "/text-to-sound", {"message": "queued"})

    with pytest.raises(MissingTaskIdentifier) as excinfo:
        _run(TaskSubmitter(client).submit(JobType.TEXT_TO_SOUND, TextToSoundRequest(prompt="rain")))

    assert excinfo.value.error_code == "missing_task_id"
    assert len(fake_api.requests) == 1


def test_submit_rejects_request_for_another_job_type(client, fake_api):
    with pytest.raises(TypeError):
        _run(TaskSubmitter(client).submit(JobType.DUBBING, TextToSoundRequest(prompt="rain")))

    assert fake_api.requests == []
