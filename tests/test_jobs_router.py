from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from cambai_jobs.main import app
from cambai_jobs.routers.jobs import get_orchestrator


@pytest.fixture
def api(orchestrator):  # noqa: ANN001
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_health(api):
    assert api.get("/health").json() == {"status": "ok"}


def test_list_job_types(api):
    body = api.get("/jobs/types").json()

    by_type = {entry["job_type"]: entry for entry in body}
    assert set(by_type) == {"text_to_speech", "text_to_sound", "text_to_voice", "dubbing"}
    assert by_type["dubbing"]["output_types"] == ["file_url"]
    assert by_type["dubbing"]["polling"]["max_timeout"] == 1800
    assert by_type["text_to_speech"]["default_output_type"] == "raw_bytes"


def test_run_job_returns_normalized_json(api, fake_api):
    fake_api.add("POST", "/dub", {"task_id": "d1"})
    fake_api.add("GET", "/dub/d1", {"status": "SUCCESS", "run_id": "r9"})
    fake_api.add("GET", "/dub-result/r9", {"video_url": "https://cdn/v.mp4", "audio_url": None, "transcript": []})

    response = api.post(
        "/jobs/dubbing",
        json={"params": {"video_url": "https://example.com/v.mp4", "target_languages": [5]}},
    )

    assert response.status_code == 200
    assert response.json() == {
        "taskId": "d1",
        "runId": "r9",
        "outputVideoUrl": "https://cdn/v.mp4",
        "outputAudioUrl": None,
        "transcript": [],
        "transcriptLength": 0,
        "status": "SUCCESS",
    }


def test_run_job_streams_binary_audio(api, fake_api):
    fake_api.add("POST", "/tts", {"task_id": "abc"})
    fake_api.add("GET", "/tts/abc", {"status": "SUCCESS", "run_id": "r1"})
    fake_api.add("GET", "/tts-result/r1", b"fLaC")

    response = api.post("/jobs/text_to_speech", json={"params": {"text": "Hello"}, "output_type": "raw_bytes"})

    assert response.status_code == 200
    assert response.content == b"fLaC"
    assert response.headers["content-type"] == "audio/flac"
    assert 'filename="cambai_tts_abc.flac"' in response.headers["content-disposition"]
    assert response.headers["x-run-id"] == "r1"


def test_insufficient_credits_maps_to_402(api, fake_api):
    fake_api.add("POST", "/text-to-sound", {"task_id": "s1"})
    fake_api.add("GET", "/text-to-sound/s1", {"status": "PAYMENT_REQUIRED"})

    response = api.post("/jobs/text_to_sound", json={"params": {"prompt": "rain"}})

    assert response.status_code == 402
    assert response.json()["error_code"] == "payment_required"
    assert response.json()["task_id"] == "s1"


def test_polling_deadline_maps_to_504(api, fake_api):
    fake_api.add("POST", "/text-to-voice", {"task_id": "v1"})
    fake_api.add("GET", "/text-to-voice/v1", {"status": "PENDING"})

    response = api.post(
        "/jobs/text_to_voice",
        json={
            "params": {"text": "Hi", "voice_description": "a calm narrator"},
            "polling_interval": 10,
            "polling_timeout": 60,
        },
    )

    assert response.status_code == 504
    assert response.json()["error_code"] == "polling_deadline"


def test_invalid_params_and_settings_map_to_422(api, fake_api):
    assert api.post("/jobs/text_to_speech", json={"params": {"txt": "typo"}}).status_code == 422
    assert (
        api.post("/jobs/dubbing", json={"params": {"video_url": "https://x"}, "polling_timeout": 5}).status_code
        == 422
    )
    assert api.post("/jobs/unknown", json={"params": {}}).status_code == 422
    assert fake_api.requests == []


def test_binary_dubbing_maps_to_400(api, fake_api):
    response = api.post("/jobs/dubbing", json={"params": {"video_url": "https://x"}, "output_type": "raw_bytes"})

    assert response.status_code == 400
    assert response.json()["error_code"] == "unsupported_output_type"


def test_upstream_http_error_maps_to_502(api, fake_api):
    fake_api.add("POST", "/tts", (503, {"detail": "down"}))

    response = api.post("/jobs/text_to_speech", json={"params": {"text": "Hello"}})

    assert response.status_code == 502


@pytest.mark.parametrize(
    ("create_response", "status_response", "status_code", "error_code"),
    [
        ({"task_id": "t1"}, {"status": "TIMEOUT"}, 504, "remote_timeout"),
        ({"task_id": "t1"}, {"status": "ERROR"}, 502, "remote_error"),
        ({"queued": True}, {"status": "PENDING"}, 502, "missing_task_id"),
        ({"task_id": "t1"}, {"status": "SUCCESS"}, 502, "missing_run_id"),
    ],
)
def test_lifecycle_failures_map_to_gateway_statuses(
    api, fake_api, create_response, status_response, status_code, error_code
):
    fake_api.add("POST", "/text-to-sound", create_response)
    fake_api.add("GET", "/text-to-sound/t1", status_response)

    response = api.post("/jobs/text_to_sound", json={"params": {"prompt": "rain"}})

    assert response.status_code == status_code
    assert response.json()["error_code"] == error_code
    assert fake_api.calls("GET", "/text-to-sound-result/") == []


def test_connection_failure_maps_to_502(api, fake_api):
    fake_api.add("POST", "/tts", httpx.ConnectError("connection refused"))

    response = api.post("/jobs/text_to_speech", json={"params": {"text": "Hello"}})

    assert response.status_code == 502
    assert "ConnectError" in response.json()["detail"]
